"""Timing utility invocation and output parsing."""

from .parser import (
    TOTAL_KEY,
    MetricMap,
    ParseOutcome,
    TimerParseError,
    derive_total,
    parse_time_output,
    with_total,
)
from .prober import probe_command
from .runner import CommandOutcome, build_command_line, run_timed, timed_argv

__all__ = [
    "CommandOutcome",
    "MetricMap",
    "ParseOutcome",
    "TOTAL_KEY",
    "TimerParseError",
    "build_command_line",
    "derive_total",
    "parse_time_output",
    "probe_command",
    "run_timed",
    "timed_argv",
    "with_total",
]
