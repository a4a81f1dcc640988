from __future__ import annotations

import logging

import pytest

from samstate.models.state import State, VolatileEntry
from samstate.state.codec import StateBlockCodec

START = "<!--<|state|>"
END = "</|state|>-->"


def _state() -> State:
    return State(
        static={"hp": 7, "player": {"name": "Ava", "tags": ["brave"]}},
        volatile=[VolatileEntry(var_name="door", value="open", is_game_time=False, target_time=5, reason="timer")],
        response_summary=["Ava entered the hall."],
    )


def test_render_then_parse_round_trips() -> None:
    codec = StateBlockCodec()
    state = _state()

    parsed = codec.parse(codec.render(state))

    assert parsed is not None
    assert parsed.to_store() == state.to_store()


def test_render_uses_markers_and_camel_case_keys() -> None:
    rendered = StateBlockCodec().render(_state())

    assert rendered.startswith(f"{START}\n")
    assert rendered.endswith(f"\n{END}")
    assert '"responseSummary"' in rendered
    assert '"varName": "door"' in rendered


def test_parse_returns_none_without_block() -> None:
    assert StateBlockCodec().parse("Just narrative.") is None
    assert StateBlockCodec().parse("") is None
    assert StateBlockCodec().parse(None) is None


def test_parse_malformed_json_logs_and_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    text = f"story\n{START}\n{{not json\n{END}"

    with caplog.at_level(logging.WARNING):
        assert StateBlockCodec().parse(text) is None

    assert "Failed to parse state block" in caplog.text


def test_parse_rejects_non_object_payload() -> None:
    assert StateBlockCodec().parse(f"{START}\n[1, 2]\n{END}") is None


def test_parse_reads_only_first_block() -> None:
    text = f'a {START}{{"static": {{"n": 1}}}}{END} b {START}{{"static": {{"n": 2}}}}{END}'

    parsed = StateBlockCodec().parse(text)

    assert parsed is not None
    assert parsed.static == {"n": 1}


def test_parse_fills_missing_sections_with_defaults() -> None:
    parsed = StateBlockCodec().parse(f'{START}\n{{"static": {{"gold": 3}}}}\n{END}')

    assert parsed is not None
    assert parsed.volatile == []
    assert parsed.response_summary == []


def test_parse_accepts_positional_volatile_entries() -> None:
    text = f'{START}\n{{"static": {{}}, "volatile": [["x", 1, false, 4, "why"]], "responseSummary": []}}\n{END}'

    parsed = StateBlockCodec().parse(text)

    assert parsed is not None
    entry = parsed.volatile[0]
    assert entry.var_name == "x"
    assert entry.target_time == 4
    assert entry.reason == "why"


def test_parse_drops_invalid_volatile_entry_and_keeps_the_rest(caplog: pytest.LogCaptureFixture) -> None:
    text = (
        f'{START}\n{{"static": {{"hp": 42, "gold": 7}}, '
        f'"volatile": [["door", "open", false, null, "timer"], ["x", 1, false, 3, "ok"]], '
        f'"responseSummary": []}}\n{END}'
    )

    with caplog.at_level(logging.WARNING):
        parsed = StateBlockCodec().parse(text)

    assert parsed is not None
    assert parsed.static == {"hp": 42, "gold": 7}
    assert [entry.var_name for entry in parsed.volatile] == ["x"]
    assert "Dropping invalid scheduled entry 0" in caplog.text


def test_strip_removes_everything_between_first_start_and_last_end() -> None:
    text = f"before {START}one{END} middle {START}two{END} after"

    assert StateBlockCodec().strip(text) == "before  after"


def test_strip_is_idempotent() -> None:
    codec = StateBlockCodec()
    text = f"story {START}x{END} tail {END}"

    once = codec.strip(text)

    assert codec.strip(once) == once
    assert START not in once


def test_embed_replaces_old_block_after_clean_narrative() -> None:
    codec = StateBlockCodec()
    old = f"Hello\n\n{START}\n{{}}\n{END}"

    embedded = codec.embed(old, _state())

    assert embedded.startswith(f"Hello\n\n{START}\n")
    assert embedded.count(START) == 1
    parsed = codec.parse(embedded)
    assert parsed is not None
    assert parsed.static["hp"] == 7


def test_custom_markers() -> None:
    codec = StateBlockCodec(start_marker="[[state]]", end_marker="[[/state]]", indent=0)
    rendered = codec.render(State.initial())

    assert rendered.startswith("[[state]]")
    assert codec.parse(f"x {rendered}") is not None
    assert codec.contains_block(rendered)
    assert not codec.contains_block("x")
