"""Repetition handling and sweep orchestration.

The orchestrator lives in :mod:`pkgbench.bench.orchestrator` and is imported
from there; this package only re-exports the repetition model.
"""

from .repetitions import (
    DEFAULT_REPETITIONS,
    TRIVIAL_TOKEN,
    Repetition,
    RepetitionSpec,
    needs_probe,
    parse_repetitions,
    split_tokens,
)

__all__ = [
    "DEFAULT_REPETITIONS",
    "Repetition",
    "RepetitionSpec",
    "TRIVIAL_TOKEN",
    "needs_probe",
    "parse_repetitions",
    "split_tokens",
]
