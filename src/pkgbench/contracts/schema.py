"""JSON Schema validation for report artifacts."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any

from jsonschema import Draft202012Validator

from .error import InvariantError

REPORT_SCHEMA_ID = "pkgbench.report.v1"


@lru_cache(maxsize=1)
def _report_validator() -> Draft202012Validator:
    schema_resource = resources.files("pkgbench.contracts") / "report_schema.json"
    with schema_resource.open(encoding="utf-8") as stream:
        schema = json.load(stream)
    return Draft202012Validator(schema)


def report_errors(payload: Any) -> list[str]:
    """Return human-readable schema violations for ``payload`` (empty when valid)."""

    validator = _report_validator()
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.path))
    return [f"{err.message} @ {list(err.path)}" for err in errors]


def validate_report(payload: Any) -> None:
    errors = report_errors(payload)
    if errors:
        raise InvariantError(
            "Report payload does not match schema: " + "; ".join(errors),
            hint=f"expected {REPORT_SCHEMA_ID}",
        )


__all__ = ["REPORT_SCHEMA_ID", "report_errors", "validate_report"]
