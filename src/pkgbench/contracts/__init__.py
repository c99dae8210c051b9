"""Contract helpers for the pkgbench CLI."""

from .error import (
    BadInputError,
    EnvelopeError,
    ErrorEnvelope,
    Exit,
    InvariantError,
    MeasurementFailure,
    MetricValueError,
    ProbeFailure,
    die,
    guard_cli,
)
from .schema import REPORT_SCHEMA_ID, report_errors, validate_report

__all__ = [
    "Exit",
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
    "ProbeFailure",
    "MeasurementFailure",
    "MetricValueError",
    "guard_cli",
    "die",
    "REPORT_SCHEMA_ID",
    "report_errors",
    "validate_report",
]
