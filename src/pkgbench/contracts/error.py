"""Error types and exit codes for the pkgbench CLI."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from functools import wraps
from typing import Any, NoReturn, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")


class Exit(IntEnum):
    """Exit codes shared across the CLI."""

    OK = 0
    FAILURE = 1


@dataclass(slots=True)
class ErrorEnvelope:
    """Diagnostic emitted when a CLI command fails."""

    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        payload = {"error": self.error, "detail": self.detail}
        if self.hint:
            payload["hint"] = self.hint
        return json.dumps(payload, ensure_ascii=False)

    def to_text(self) -> str:
        text = f"{self.error}: {self.detail}"
        if self.hint:
            text += f" (hint: {self.hint})"
        return text


def die(
    code: Exit, kind: str, detail: str, hint: str | None = None, *, as_json: bool = False
) -> NoReturn:
    """Write a diagnostic to stderr and exit with ``code``."""

    env = ErrorEnvelope(error=kind, detail=detail, hint=hint)
    sys.stderr.write((env.to_json() if as_json else env.to_text()) + "\n")
    try:
        sys.stderr.flush()
    finally:
        sys.exit(int(code))


class EnvelopeError(Exception):
    """Base exception that carries an optional hint for the diagnostic."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class BadInputError(EnvelopeError):
    """Raised for malformed user input (repetitions, config files, flags)."""


class InvariantError(EnvelopeError):
    """Raised when an internal consistency check fails."""


class ProbeFailure(EnvelopeError):
    """Raised when the single-run smoke test of a command fails."""


class MeasurementFailure(EnvelopeError):
    """Raised when a timed run exits non-zero or cannot be spawned."""


class MetricValueError(MeasurementFailure):
    """Raised when a timer metric needed for a derived value is not numeric."""


_EXCEPTION_ORDER: tuple[tuple[type[EnvelopeError], str], ...] = (
    (BadInputError, "BadInput"),
    (ProbeFailure, "ProbeFailure"),
    (MetricValueError, "MetricValue"),
    (MeasurementFailure, "MeasurementFailure"),
    (InvariantError, "Invariant"),
)

def guard_cli(fn: Callable[..., T]) -> Callable[..., T]:
    """Decorate a CLI handler so every failure exits with ``Exit.FAILURE``.

    The diagnostic is JSON when the handler's namespace has ``json`` set.
    """

    @wraps(fn)
    def _wrapped(*args: Any, **kwargs: Any) -> T:
        as_json = bool(args and getattr(args[0], "json", False))
        try:
            return fn(*args, **kwargs)
        except EnvelopeError as exc:
            for exc_type, label in _EXCEPTION_ORDER:
                if isinstance(exc, exc_type):
                    die(Exit.FAILURE, label, str(exc), hint=exc.hint, as_json=as_json)
            die(Exit.FAILURE, "UnhandledEnvelope", str(exc), hint=exc.hint, as_json=as_json)
        except FileNotFoundError as exc:
            die(Exit.FAILURE, "FileNotFound", str(exc), as_json=as_json)
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unhandled CLI exception")
            die(Exit.FAILURE, "Unhandled", f"{type(exc).__name__}: {exc}", as_json=as_json)

    return _wrapped


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
]
