from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pkgbench.bench.repetitions import (
    DEFAULT_REPETITIONS,
    Repetition,
    needs_probe,
    parse_repetitions,
    split_tokens,
)
from pkgbench.contracts.error import BadInputError


def test_trivial_token_is_single_sentinel() -> None:
    spec = parse_repetitions(["I"])
    assert spec == (Repetition.trivial(),)
    assert spec[0].is_trivial
    assert spec[0].count == 0
    assert spec[0].display == 1
    assert str(spec[0]) == "1"


def test_sorted_ascending() -> None:
    spec = parse_repetitions(["100", "1", "10"])
    assert [r.count for r in spec] == [1, 10, 100]


def test_comma_separated_tokens() -> None:
    assert split_tokens(["1,10", " 100 ", 5]) == ["1", "10", "100", "5"]
    assert [r.count for r in parse_repetitions(["10,1"])] == [1, 10]


@pytest.mark.parametrize(
    "tokens",
    [["0"], ["5", "-1"], ["abc"], ["3", "x"], ["I", "5"], []],
)
def test_rejects_non_positive(tokens: list[str]) -> None:
    with pytest.raises(BadInputError):
        parse_repetitions(tokens)


def test_default_repetitions_are_valid() -> None:
    assert [r.count for r in parse_repetitions(DEFAULT_REPETITIONS)] == [10]


def test_negative_repetition_rejected() -> None:
    with pytest.raises(BadInputError):
        Repetition(-3)


def test_probe_only_for_non_trivial_minimum() -> None:
    assert not needs_probe(parse_repetitions(["I"]))
    assert not needs_probe(parse_repetitions(["1", "50"]))
    assert needs_probe(parse_repetitions(["2", "50"]))
    assert not needs_probe(())


@given(st.lists(st.integers(min_value=1, max_value=10_000), min_size=1, max_size=20))
def test_positive_lists_accepted_sorted(values: list[int]) -> None:
    spec = parse_repetitions([str(v) for v in values])
    assert [r.count for r in spec] == sorted(values)


@given(
    st.lists(st.integers(min_value=1, max_value=10_000), max_size=10),
    st.integers(max_value=0),
)
def test_any_non_positive_rejected(values: list[int], bad: int) -> None:
    with pytest.raises(BadInputError):
        parse_repetitions([str(v) for v in [*values, bad]])
