"""Fixed-width text tables for metrics, sweeps and comparisons."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from pkgbench.bench.orchestrator import Comparison, MeasurementResult

KEY_WIDTH = 40
VALUE_WIDTH = 20
REPETITIONS_WIDTH = 15
TOTAL_HEADER_WIDTH = 15
TOTAL_ROW_WIDTH = 20


def _with_rule(header: str, rows: Iterable[str]) -> list[str]:
    return [header, "-" * len(header), *rows]


def format_metrics_table(metrics: Mapping[str, str]) -> list[str]:
    header = f"{'Key':<{KEY_WIDTH}} {'Value':<{VALUE_WIDTH}}"
    rows = (f"{key:<{KEY_WIDTH}} {value:<{VALUE_WIDTH}}" for key, value in metrics.items())
    return _with_rule(header, rows)


def format_results_table(results: Iterable[MeasurementResult]) -> list[str]:
    header = f"{'Repetitions':<{REPETITIONS_WIDTH}} {'Total time':<{TOTAL_HEADER_WIDTH}}"
    rows = (
        f"{result.repetition.display:<{REPETITIONS_WIDTH}} {result.total:<{TOTAL_ROW_WIDTH}}"
        for result in results
    )
    return _with_rule(header, rows)


def format_comparison_table(comparison: Comparison) -> list[str]:
    first = comparison.first.command
    second = comparison.second.command
    w1, w2 = len(first), len(second)
    header = f"{'Repetitions':<{REPETITIONS_WIDTH}} {first:<{w1}} {second:<{w2}}"
    subheader = f"{'':<{REPETITIONS_WIDTH}} {first:<{w1}} {second:<{w2}}"
    rows = [
        f"{row.repetition.display:<{REPETITIONS_WIDTH}} "
        f"{row.first_total:<{w1}} {row.second_total:<{w2}}"
        for row in comparison.rows()
    ]
    return [header, subheader, "-" * len(header), *rows]


def _emit(lines: Iterable[str], out: TextIO | None) -> None:
    stream = out if out is not None else sys.stdout
    for line in lines:
        print(line, file=stream)


def print_metrics_table(metrics: Mapping[str, str], *, out: TextIO | None = None) -> None:
    _emit(format_metrics_table(metrics), out)


def print_results_table(
    results: Iterable[MeasurementResult], *, out: TextIO | None = None
) -> None:
    _emit(format_results_table(results), out)


def print_comparison_table(comparison: Comparison, *, out: TextIO | None = None) -> None:
    _emit(format_comparison_table(comparison), out)


__all__ = [
    "format_comparison_table",
    "format_metrics_table",
    "format_results_table",
    "print_comparison_table",
    "print_metrics_table",
    "print_results_table",
]
