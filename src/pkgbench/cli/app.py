#!/usr/bin/env python3
"""
app.py

Command-line front end for pkgbench:
- measure: time one command across a list of repetition counts
- compare: time two commands over the same counts and print them side by side
- defaults from .pkgbench.toml (explicit flags always win)
- console or JSON logging with optional rotating log file
- --json success output and --json-out schema-checked report artifacts
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

from pkgbench import __version__
from pkgbench.bench.orchestrator import run_comparison, run_sweep
from pkgbench.cli.commands import CLIContext, register_subcommands
from pkgbench.config import load_settings
from pkgbench.contracts.error import InvariantError, guard_cli

# --------------------------------------------------------------------
# Logging
# --------------------------------------------------------------------
logger = logging.getLogger("pkgbench")
logger.setLevel(logging.INFO)
logger.propagate = False

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"
DEFAULT_LOG_MAX_BYTES = 5_000_000
DEFAULT_LOG_BACKUP_COUNT = 5
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class JsonFormatter(logging.Formatter):
    """Render log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, DEFAULT_LOG_DATEFMT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    use_json: bool = False,
    log_file: str | None = None,
    *,
    level: str = "INFO",
    max_bytes: int = DEFAULT_LOG_MAX_BYTES,
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT,
) -> None:
    """Configure stderr (and optional rotating file) logging for the ``pkgbench`` tree."""

    formatter: logging.Formatter
    if use_json:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATEFMT)

    for handler in list(logger.handlers):
        with contextlib.suppress(Exception):
            handler.close()
        logger.removeHandler(handler)

    logger.setLevel(level)
    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file:
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


configure_logging(level="WARNING")


def emit_success(
    command: str,
    *,
    text: str | None = None,
    data: dict[str, Any] | None = None,
    as_json: bool = False,
) -> None:
    if as_json:
        payload: dict[str, Any] = {"ok": True, "command": command}
        if data:
            payload.update(data)
        if text is not None and "result" not in payload:
            payload["result"] = text
        print(json.dumps(payload, ensure_ascii=False))
    elif text is not None:
        print(text)


def build_parser() -> tuple[argparse.ArgumentParser, dict[str, Any]]:
    p = argparse.ArgumentParser(
        prog="pkgbench",
        description=(
            "Benchmark a command (typically a packaged application) under the system "
            "timing utility across repetition counts, or compare two commands."
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--log-json", action="store_true", help="Emit logs in JSON format")
    p.add_argument(
        "--log-file",
        default=None,
        help="Optional log file path (rotates at 5MB, keeps 5 backups by default)",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=LOG_LEVELS,
        help="Log level for diagnostics on stderr (default: %(default)s)",
    )
    p.add_argument(
        "--log-max-bytes",
        type=int,
        default=DEFAULT_LOG_MAX_BYTES,
        help="Max bytes per log file before rotation (default: %(default)s)",
    )
    p.add_argument(
        "--log-backup-count",
        type=int,
        default=DEFAULT_LOG_BACKUP_COUNT,
        help="Number of rotated log files to keep (default: %(default)s)",
    )
    p.add_argument(
        "--json", action="store_true", help="Emit the final report as JSON on stdout"
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to a TOML defaults file (default: ./.pkgbench.toml when present)",
    )
    sub = p.add_subparsers(dest="cmd_name", required=True)

    ctx = CLIContext(
        emit_success=emit_success,
        load_settings=load_settings,
        run_sweep=run_sweep,
        run_comparison=run_comparison,
        logger=logger,
        guard=guard_cli,
    )
    handlers = register_subcommands(sub, ctx)
    return p, handlers


def main(argv: list[str]) -> int:
    p, handlers = build_parser()
    args = p.parse_args(argv)

    configure_logging(
        args.log_json,
        args.log_file,
        level=args.log_level,
        max_bytes=args.log_max_bytes,
        backup_count=args.log_backup_count,
    )

    handler = handlers.get(args.cmd_name)
    if handler is None:
        raise InvariantError(f"Unknown command {args.cmd_name}")
    return handler(args)


def console_main() -> None:
    """Entry point for console_scripts."""

    try:
        raise SystemExit(main(sys.argv[1:]))
    except SystemExit:
        raise
    except Exception as e:  # noqa: BLE001
        logger.exception("Fatal error: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    console_main()
