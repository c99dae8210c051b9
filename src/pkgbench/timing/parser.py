"""Parse the report written by the timing utility to its error stream.

The first three lines are ``value label`` (``1.50 real``). Every later line is
``label value`` (``maximum resident set size 1024``) where the label may contain
spaces. Parsing stops at the first malformed line; the partial map is kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pkgbench.contracts.error import MetricValueError

logger = logging.getLogger(__name__)

HEADER_LINES = 3
TOTAL_KEY = "total"

MetricMap = dict[str, str]


@dataclass(frozen=True, slots=True)
class TimerParseError:
    """A timer report line that did not split into a label and a value."""

    message: str
    line_number: int
    output: str

    def describe(self) -> str:
        return f"Error parsing time output: {self.message}\nOutput:\n{self.output}"


@dataclass(frozen=True, slots=True)
class ParseOutcome:
    metrics: MetricMap = field(default_factory=dict)
    error: TimerParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_time_output(output: str) -> ParseOutcome:
    metrics: MetricMap = {}
    index = 0
    for line_number, raw_line in enumerate(output.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        if index < HEADER_LINES:
            parts = line.split(None, 1)
            if len(parts) == 2:
                value, key = parts[0], parts[1].strip()
            else:
                value = key = ""
        else:
            parts = line.rsplit(None, 1)
            if len(parts) == 2:
                key, value = parts[0].strip(), parts[1]
            else:
                key = value = ""
        if not key:
            error = TimerParseError(
                message=f"line {line_number} has no value/label pair: {line!r}",
                line_number=line_number,
                output=output,
            )
            logger.warning("Timer output parse stopped at line %d", line_number)
            return ParseOutcome(metrics=metrics, error=error)
        metrics[key] = value
        index += 1
    return ParseOutcome(metrics=metrics)


def metric_as_float(metrics: MetricMap, key: str) -> float:
    raw = metrics.get(key)
    if raw is None:
        raise MetricValueError(f"Timer output has no '{key}' metric")
    try:
        return float(raw)
    except ValueError as exc:
        raise MetricValueError(f"Metric '{key}' is not a number: {raw!r}") from exc


def derive_total(metrics: MetricMap) -> str:
    """Return user + sys CPU time formatted like the timer's own values."""

    total = metric_as_float(metrics, "user") + metric_as_float(metrics, "sys")
    return f"{total:.2f}"


def with_total(metrics: MetricMap) -> MetricMap:
    enriched = dict(metrics)
    enriched[TOTAL_KEY] = derive_total(metrics)
    return enriched


__all__ = [
    "HEADER_LINES",
    "MetricMap",
    "ParseOutcome",
    "TOTAL_KEY",
    "TimerParseError",
    "derive_total",
    "metric_as_float",
    "parse_time_output",
    "with_total",
]
