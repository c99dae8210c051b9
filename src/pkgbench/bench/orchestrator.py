"""Run sweeps of timed invocations across repetition counts."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

from pkgbench.bench.repetitions import Repetition, RepetitionSpec, needs_probe
from pkgbench.config import BenchSettings
from pkgbench.contracts.error import InvariantError, MeasurementFailure, ProbeFailure
from pkgbench.report import print_metrics_table
from pkgbench.timing.parser import TOTAL_KEY, MetricMap, parse_time_output, with_total
from pkgbench.timing.prober import probe_command
from pkgbench.timing.runner import CommandOutcome, run_timed

logger = logging.getLogger(__name__)

Runner = Callable[..., CommandOutcome]
Prober = Callable[..., bool]


@dataclass(frozen=True, slots=True)
class MeasurementResult:
    repetition: Repetition
    metrics: MetricMap

    @property
    def total(self) -> str:
        return self.metrics.get(TOTAL_KEY, "")

    def to_dict(self) -> dict[str, Any]:
        return {"repetitions": self.repetition.count, "metrics": dict(self.metrics)}


@dataclass(frozen=True, slots=True)
class Sweep:
    command: str
    results: tuple[MeasurementResult, ...]

    def by_repetition(self) -> dict[Repetition, MeasurementResult]:
        return {result.repetition: result for result in self.results}

    def to_dict(self) -> dict[str, Any]:
        return {"command": self.command, "results": [r.to_dict() for r in self.results]}


@dataclass(frozen=True, slots=True)
class ComparisonRow:
    repetition: Repetition
    first_total: str
    second_total: str


@dataclass(frozen=True, slots=True)
class Comparison:
    first: Sweep
    second: Sweep

    def rows(self) -> list[ComparisonRow]:
        """Pair both sweeps by repetition, ordered as in the first sweep."""

        second = self.second.by_repetition()
        rows: list[ComparisonRow] = []
        for result in self.first.results:
            other = second.get(result.repetition)
            if other is None:
                raise InvariantError(
                    f"No result for {result.repetition} repetitions of {self.second.command!r}"
                )
            rows.append(ComparisonRow(result.repetition, result.total, other.total))
        return rows


def _report_failure(outcome: CommandOutcome, stream: TextIO) -> None:
    print("Benchmarking failed", file=stream)
    print(f"Ran '{outcome.command_repr}'", file=stream)
    print("Output:", file=stream)
    print(outcome.stdout, file=stream)
    print(outcome.stderr, file=stream)


def measure_once(
    command: str,
    repetition: Repetition,
    *,
    settings: BenchSettings,
    out: TextIO,
    runner: Runner = run_timed,
) -> MeasurementResult:
    print(f"Collecting data for '{command}' with {repetition} repetitions.", file=out)
    outcome = runner(
        command,
        repetition,
        timer=settings.timer,
        verbose=settings.verbose,
        timeout=settings.timeout,
    )
    if not outcome.success:
        _report_failure(outcome, out)
        raise MeasurementFailure(
            f"'{command}' exited with code {outcome.returncode} at {repetition} repetitions"
        )

    parsed = parse_time_output(outcome.stderr)
    if parsed.error is not None:
        print(parsed.error.describe(), file=out)
        logger.warning("Partial timer output for %r: %s", command, parsed.error.message)
    metrics = with_total(parsed.metrics)

    if settings.verbose:
        print("Benchmarking succeeded", file=out)
        print_metrics_table(metrics, out=out)
    return MeasurementResult(repetition=repetition, metrics=metrics)


def run_sweep(
    command: str,
    spec: RepetitionSpec,
    *,
    settings: BenchSettings,
    out: TextIO | None = None,
    runner: Runner = run_timed,
    prober: Prober = probe_command,
) -> Sweep:
    """Measure ``command`` once per repetition count, ascending.

    The first failed run aborts the sweep; partial results are discarded.
    """

    stream = out if out is not None else sys.stdout
    if not spec:
        raise InvariantError("Repetition list is empty")

    if needs_probe(spec):
        ok = prober(command, shell=settings.timer.shell, timeout=settings.timeout, out=stream)
        if not ok:
            raise ProbeFailure(f"'{command} 1' failed its validity check")

    results: list[MeasurementResult] = []
    for repetition in sorted(spec):
        results.append(
            measure_once(command, repetition, settings=settings, out=stream, runner=runner)
        )
    logger.info("Sweep of %r finished with %d samples", command, len(results))
    return Sweep(command=command, results=tuple(results))


def run_comparison(
    first: str,
    second: str,
    spec: RepetitionSpec,
    *,
    settings: BenchSettings,
    out: TextIO | None = None,
    runner: Runner = run_timed,
    prober: Prober = probe_command,
) -> Comparison:
    first_sweep = run_sweep(first, spec, settings=settings, out=out, runner=runner, prober=prober)
    second_sweep = run_sweep(
        second, spec, settings=settings, out=out, runner=runner, prober=prober
    )
    return Comparison(first=first_sweep, second=second_sweep)


__all__ = [
    "Comparison",
    "ComparisonRow",
    "MeasurementResult",
    "Sweep",
    "measure_once",
    "run_comparison",
    "run_sweep",
]
