"""CLI command registration and handlers for pkgbench."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from pkgbench.bench.orchestrator import Comparison, Sweep
from pkgbench.bench.repetitions import DEFAULT_REPETITIONS, RepetitionSpec, parse_repetitions
from pkgbench.config import BenchSettings, merge_cli
from pkgbench.contracts.error import BadInputError, Exit
from pkgbench.contracts.schema import REPORT_SCHEMA_ID, validate_report
from pkgbench.report import print_comparison_table, print_results_table


@dataclass(frozen=True)
class CLIContext:
    """Runtime hooks supplied by the top-level CLI entrypoint."""

    emit_success: Callable[..., None]
    load_settings: Callable[[str | None], BenchSettings]
    run_sweep: Callable[..., Sweep]
    run_comparison: Callable[..., Comparison]
    logger: logging.Logger
    guard: Callable[[Callable[[argparse.Namespace], int]], Callable[[argparse.Namespace], int]]


def register_subcommands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ctx: CLIContext,
) -> dict[str, Callable[[argparse.Namespace], int]]:
    """Define CLI subcommands and return their handlers."""

    handlers: dict[str, Callable[[argparse.Namespace], int]] = {}

    def _register(
        name: str,
        help_text: str | None,
        configure: Callable[[argparse.ArgumentParser], Callable[[argparse.Namespace], int]],
    ) -> None:
        parser = subparsers.add_parser(name, help=help_text)
        _add_sweep_arguments(parser)
        handler = configure(parser)
        handlers[name] = ctx.guard(handler)

    _register(
        "measure",
        "Measure execution time of a command across repetition counts.",
        lambda parser: _configure_measure(parser, ctx),
    )
    _register(
        "compare",
        "Measure two commands across the same repetition counts, side by side.",
        lambda parser: _configure_compare(parser, ctx),
    )
    return handlers


def _add_sweep_arguments(parser: argparse.ArgumentParser) -> None:
    # Defaults stay None so values from the defaults file apply only when a flag is omitted.
    parser.add_argument(
        "-r",
        "--repetitions",
        nargs="+",
        default=None,
        help="Positive repetition counts (space or comma separated), or 'I' for one plain run",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Print the full timer metrics of every run",
    )
    parser.add_argument(
        "--time-binary", default=None, help="Timing utility to wrap commands with"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each run before giving up (default: wait indefinitely)",
    )
    parser.add_argument("--json-out", default=None, help="Write the report as a JSON artifact")


def _resolve_spec(settings: BenchSettings) -> RepetitionSpec:
    return parse_repetitions(settings.repetitions or DEFAULT_REPETITIONS)


def _require(value: str | None, flag: str) -> str:
    if not value:
        raise BadInputError(f"{flag} is required", hint=f"pass {flag} or set it in .pkgbench.toml")
    return value


def build_report(kind: str, spec: RepetitionSpec, sweeps: list[Sweep]) -> dict[str, Any]:
    return {
        "schema": REPORT_SCHEMA_ID,
        "kind": kind,
        "repetitions": [repetition.count for repetition in spec],
        "runs": [sweep.to_dict() for sweep in sweeps],
    }


def write_report(path: str, payload: dict[str, Any]) -> Path:
    validate_report(payload)
    out_path = Path(path).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return out_path


def _progress_stream(args: argparse.Namespace) -> TextIO:
    # Keep stdout clean for the JSON document.
    return sys.stderr if getattr(args, "json", False) else sys.stdout


def _finish(
    ctx: CLIContext, args: argparse.Namespace, kind: str, payload: dict[str, Any]
) -> None:
    if getattr(args, "json_out", None):
        out_path = write_report(args.json_out, payload)
        ctx.logger.info("Wrote %s report to %s", kind, out_path)


def _configure_measure(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("-c", "--cmd", default=None, help="Command (package) to benchmark")

    def handler(args: argparse.Namespace) -> int:
        settings = merge_cli(ctx.load_settings(getattr(args, "config", None)), args)
        command = _require(settings.cmd, "--cmd")
        spec = _resolve_spec(settings)

        sweep = ctx.run_sweep(command, spec, settings=settings, out=_progress_stream(args))
        payload = build_report("measure", spec, [sweep])
        _finish(ctx, args, "measure", payload)
        if getattr(args, "json", False):
            ctx.emit_success("measure", data=payload, as_json=True)
        else:
            print_results_table(sweep.results)
        return int(Exit.OK)

    return handler


def _configure_compare(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("-f", "--first", default=None, help="First command to benchmark")
    parser.add_argument("-s", "--second", default=None, help="Second command to benchmark")

    def handler(args: argparse.Namespace) -> int:
        settings = merge_cli(ctx.load_settings(getattr(args, "config", None)), args)
        first = _require(settings.first, "--first")
        second = _require(settings.second, "--second")
        spec = _resolve_spec(settings)

        comparison = ctx.run_comparison(
            first, second, spec, settings=settings, out=_progress_stream(args)
        )
        payload = build_report("compare", spec, [comparison.first, comparison.second])
        _finish(ctx, args, "compare", payload)
        if getattr(args, "json", False):
            payload["rows"] = [
                {
                    "repetitions": row.repetition.display,
                    "first": row.first_total,
                    "second": row.second_total,
                }
                for row in comparison.rows()
            ]
            ctx.emit_success("compare", data=payload, as_json=True)
        else:
            print_comparison_table(comparison)
        return int(Exit.OK)

    return handler


__all__ = ["CLIContext", "build_report", "register_subcommands", "write_report"]
