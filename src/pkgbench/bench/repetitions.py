"""Repetition counts accepted by ``measure`` and ``compare``."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pkgbench.contracts.error import BadInputError

TRIVIAL_TOKEN = "I"
DEFAULT_REPETITIONS: tuple[str, ...] = ("10",)


@dataclass(frozen=True, order=True, slots=True)
class Repetition:
    """One sample of a sweep.

    ``count == 0`` is the trivial run: the command is invoked without a
    repetition argument and reported as ``1``.
    """

    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise BadInputError(f"Repetition count cannot be negative: {self.count}")

    @classmethod
    def trivial(cls) -> Repetition:
        return cls(0)

    @property
    def is_trivial(self) -> bool:
        return self.count == 0

    @property
    def display(self) -> int:
        return 1 if self.is_trivial else self.count

    def __str__(self) -> str:
        return str(self.display)


RepetitionSpec = tuple[Repetition, ...]


def _coerce(token: str) -> int:
    # Non-numeric tokens become 0 and are rejected by the positivity check.
    try:
        return int(token.strip())
    except ValueError:
        return 0


def split_tokens(raw: Iterable[str | int]) -> list[str]:
    """Flatten ``["1,10", "100"]`` style input into individual tokens."""

    tokens: list[str] = []
    for item in raw:
        for part in str(item).split(","):
            part = part.strip()
            if part:
                tokens.append(part)
    return tokens


def parse_repetitions(raw: Iterable[str | int]) -> RepetitionSpec:
    """Validate repetition tokens and return them sorted ascending.

    The single token ``I`` selects one trivial run. Every other token must be a
    positive integer.
    """

    tokens = split_tokens(raw)
    if not tokens:
        raise BadInputError("At least one repetition count is required")
    if tokens == [TRIVIAL_TOKEN]:
        return (Repetition.trivial(),)

    counts = sorted(_coerce(token) for token in tokens)
    if counts[0] < 1:
        raise BadInputError(
            "Repetitions must be positive integers",
            hint=f"got {' '.join(tokens)}; use '{TRIVIAL_TOKEN}' for a single plain run",
        )
    return tuple(Repetition(count) for count in counts)


def needs_probe(spec: RepetitionSpec) -> bool:
    """A sweep whose smallest sample is more than one run is probed first."""

    return bool(spec) and spec[0].count > 1


__all__ = [
    "DEFAULT_REPETITIONS",
    "Repetition",
    "RepetitionSpec",
    "TRIVIAL_TOKEN",
    "needs_probe",
    "parse_repetitions",
    "split_tokens",
]
