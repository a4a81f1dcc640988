from __future__ import annotations

import pytest

from samstate.config import SamConfig
from samstate.exceptions import SamConfigError


def test_defaults() -> None:
    config = SamConfig()

    assert config.start_marker == "<!--<|state|>"
    assert config.end_marker == "</|state|>-->"
    assert config.keep_command_tags is False
    assert config.swipe_defer_ticks == 1


def test_from_env_reads_sam_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAM_START_MARKER", "[[s]]")
    monkeypatch.setenv("SAM_KEEP_COMMAND_TAGS", "yes")
    monkeypatch.setenv("SAM_SWIPE_DEFER_TICKS", "3")

    config = SamConfig.from_env()

    assert config.start_marker == "[[s]]"
    assert config.keep_command_tags is True
    assert config.swipe_defer_ticks == 3


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAM_KEEP_COMMAND_TAGS", "1")
    monkeypatch.setenv("SAM_JSON_INDENT", "4")

    config = SamConfig.from_env(keep_command_tags=False, json_indent=0)

    assert config.keep_command_tags is False
    assert config.json_indent == 0


def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(SamConfigError):
        SamConfig(start_marker="")
    with pytest.raises(SamConfigError):
        SamConfig(swipe_defer_ticks=-1)

    monkeypatch.setenv("SAM_SWIPE_DEFER_TICKS", "soon")
    with pytest.raises(SamConfigError):
        SamConfig.from_env()
