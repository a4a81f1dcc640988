from __future__ import annotations

import pytest

from samstate.normalize import coerce_number, to_index, to_number


@pytest.mark.parametrize(
    ("value", "expected"),
    [("5", 5), ("-3", -3), ("+2", 2), ("0.5", 0.5), (".5", 0.5), ("1e3", 1000.0), (" 7 ", 7)],
)
def test_to_number_accepts_decimal_literals(value: str, expected: float) -> None:
    assert to_number(value) == expected


@pytest.mark.parametrize("value", ["", "abc", "1_000", "0x10", "NaN", "Infinity", "1e999", True, None])
def test_to_number_rejects_everything_else(value: object) -> None:
    assert to_number(value) is None


def test_integer_literals_stay_int() -> None:
    assert isinstance(to_number("42"), int)
    assert isinstance(to_number("42.0"), float)


def test_coerce_number_passes_through_text() -> None:
    assert coerce_number("ten") == "ten"
    assert coerce_number("10") == 10
    assert coerce_number(["a"]) == ["a"]


def test_to_index_is_strict() -> None:
    assert to_index("2") == 2
    assert to_index("2.0") is None
    assert to_index("two") is None
