"""Runtime configuration for samstate."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from samstate._constants import STATE_BLOCK_END_MARKER, STATE_BLOCK_START_MARKER
from samstate.exceptions import SamConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class SamConfig:
    """Reconciliation configuration.

    Parameters
    ----------
    start_marker : str
        Literal text opening an embedded state block.
    end_marker : str
        Literal text closing an embedded state block.
    keep_command_tags : bool
        Keep ``<SET :: ...>`` style tags in the narrative when a message
        is rewritten.  By default they are removed so only the clean
        narrative and the fresh state block remain.
    swipe_defer_ticks : int
        Event-loop ticks the swipe handler yields before reading the
        chat, giving the host time to finish replacing the message.
    json_indent : int
        Indentation used when rendering the state block.
    """

    start_marker: str = STATE_BLOCK_START_MARKER
    end_marker: str = STATE_BLOCK_END_MARKER
    keep_command_tags: bool = False
    swipe_defer_ticks: int = 1
    json_indent: int = 2

    def __post_init__(self) -> None:
        if not self.start_marker or not self.end_marker:
            raise SamConfigError("State block markers must be non-empty")
        if self.swipe_defer_ticks < 0:
            raise SamConfigError("swipe_defer_ticks must be >= 0")
        if self.json_indent < 0:
            raise SamConfigError("json_indent must be >= 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> SamConfig:
        """Create configuration from ``SAM_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_CONFIG_MAP = {
            "SAM_START_MARKER": "start_marker",
            "SAM_END_MARKER": "end_marker",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "keep_command_tags" not in overrides:
            config_kwargs["keep_command_tags"] = _env_bool(env.get("SAM_KEEP_COMMAND_TAGS"), False)

        ticks_env = env.get("SAM_SWIPE_DEFER_TICKS")
        if ticks_env is not None and "swipe_defer_ticks" not in overrides:
            try:
                config_kwargs["swipe_defer_ticks"] = int(ticks_env)
            except ValueError as exc:
                raise SamConfigError(f"SAM_SWIPE_DEFER_TICKS is not an integer: {ticks_env!r}") from exc

        indent_env = env.get("SAM_JSON_INDENT")
        if indent_env is not None and "json_indent" not in overrides:
            try:
                config_kwargs["json_indent"] = int(indent_env)
            except ValueError as exc:
                raise SamConfigError(f"SAM_JSON_INDENT is not an integer: {indent_env!r}") from exc

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
