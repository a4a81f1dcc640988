from __future__ import annotations

import logging

import pytest

from samstate.commands.interpreter import CommandInterpreter
from samstate.commands.parser import CommandParser
from samstate.models.commands import CancelSetCommand, SetCommand
from samstate.models.state import State, VolatileEntry


def _run(text: str, state: State | None = None, *, current_round: int = 0) -> State:
    state = state if state is not None else State.initial()
    return CommandInterpreter().apply(CommandParser().parse(text), state, current_round=current_round)


def test_set_coerces_numbers_and_allows_type_overwrite() -> None:
    state = _run("<SET :: a.b :: 5>")
    assert state.static == {"a": {"b": 5}}

    _run("<SET :: a.b :: x>", state)
    assert state.static["a"]["b"] == "x"


def test_set_keeps_decimal_and_text_values() -> None:
    state = _run("<SET :: ratio :: 0.5><SET :: name :: Ava Stone><SET :: flag :: true>")

    assert state.static == {"ratio": 0.5, "name": "Ava Stone", "flag": "true"}


def test_add_on_absent_counter_accumulates() -> None:
    state = _run("<ADD :: counter :: 3>")
    assert state.static["counter"] == 3

    _run("<ADD :: counter :: 3>", state)
    assert state.static["counter"] == 6


def test_add_to_numeric_string() -> None:
    state = State(static={"gold": "10"})

    _run("<ADD :: gold :: -2.5>", state)

    assert state.static["gold"] == 7.5


def test_add_appends_string_to_arrays() -> None:
    state = State(static={"tags": ["old"]})

    _run("<ADD :: tags :: new><ADD :: tags :: 5>", state)

    assert state.static["tags"] == ["old", "new", "5"]


def test_add_skips_non_numeric_operands() -> None:
    state = State(static={"name": "Ava", "hp": 3})

    _run("<ADD :: name :: 1><ADD :: hp :: lots>", state)

    assert state.static == {"name": "Ava", "hp": 3}


def test_timed_set_round_mode_targets_current_round_plus_units() -> None:
    state = _run("<TIMED_SET :: x :: 1 :: reason :: false :: 2>", current_round=4)

    assert state.volatile == [VolatileEntry(var_name="x", value=1, is_game_time=False, target_time=6, reason="reason")]


def test_timed_set_game_time_mode_stores_iso_timestamp() -> None:
    state = _run("<TIMED_SET :: weather :: rain :: storm :: true :: 2030-05-01T12:00:00Z>")

    entry = state.volatile[0]
    assert entry.is_game_time is True
    assert entry.target_time == "2030-05-01T12:00:00.000Z"
    assert entry.value == "rain"


@pytest.mark.parametrize(
    "text",
    [
        "<TIMED_SET :: x :: 1 :: false :: 2>",
        "<TIMED_SET :: x :: 1 ::  :: false :: 2>",
        "<TIMED_SET :: x :: 1 :: reason :: false :: soon>",
        "<TIMED_SET :: x :: 1 :: reason :: true :: not-a-date>",
    ],
)
def test_malformed_timed_set_is_noop(text: str) -> None:
    state = State(volatile=[VolatileEntry(var_name="y", value=2, target_time=9, reason="keep")])

    _run(text, state)

    assert len(state.volatile) == 1


def _scheduled() -> State:
    return State(
        volatile=[
            VolatileEntry(var_name="a", value=1, target_time=5, reason="reason"),
            VolatileEntry(var_name="reason", value=2, target_time=5, reason="other"),
            VolatileEntry(var_name="c", value=3, target_time=5, reason="keep"),
        ]
    )


def test_cancel_by_index_removes_only_that_entry() -> None:
    state = _run("<CANCEL_SET :: 0>", _scheduled())

    assert [e.var_name for e in state.volatile] == ["reason", "c"]


def test_cancel_by_name_or_reason_removes_all_matches() -> None:
    state = _run("<CANCEL_SET :: reason>", _scheduled())

    assert [e.var_name for e in state.volatile] == ["c"]


def test_cancel_out_of_range_index_falls_back_to_name_match() -> None:
    state = _run("<CANCEL_SET :: 7>", _scheduled())

    assert len(state.volatile) == 3


def test_cancel_with_non_integer_identifier_matches_by_name() -> None:
    state = _scheduled()
    state.volatile.append(VolatileEntry(var_name="1abc", value=4, target_time=5, reason="x"))

    _run("<CANCEL_SET :: 1abc>", state)
    assert [e.var_name for e in state.volatile] == ["a", "reason", "c"]

    _run("<CANCEL_SET :: 1.5>", state)
    assert len(state.volatile) == 3


def test_cancel_on_empty_schedule_is_noop() -> None:
    state = _run("<CANCEL_SET :: 0>")

    assert state.volatile == []


def test_response_summary_appends_raw_text() -> None:
    state = State(response_summary=["first"])

    _run("<RESPONSE_SUMMARY ::  Ava met :: the guard  >", state)

    assert state.response_summary == ["first", "Ava met :: the guard"]


def test_failures_are_isolated(caplog: pytest.LogCaptureFixture) -> None:
    text = "<SET :: hp> <SET :: a..b :: 1> <SET :: hp :: 4> <ADD :: hp :: 1>"

    with caplog.at_level(logging.WARNING):
        state = _run(text)

    assert state.static == {"hp": 5}
    assert "Skipping command" in caplog.text


def test_typed_commands_are_applied_in_list_order() -> None:
    state = State(volatile=[VolatileEntry(var_name="x", value=1, target_time=0, reason="r")])
    commands = [SetCommand(path="x", value=1), CancelSetCommand(identifier="r"), SetCommand(path="x", value="2")]

    CommandInterpreter().apply(commands, state)

    assert state.static["x"] == 2
    assert state.volatile == []
