"""World state models."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ConfigDict, Field, ValidationError, field_validator, model_validator

from samstate.models._base import SamBaseModel, ensure_json_safe

_logger = logging.getLogger(__name__)

_ENTRY_FIELDS = ("varName", "value", "isGameTime", "targetTime", "reason")
_STATE_KEYS = frozenset({"static", "volatile", "responseSummary", "response_summary"})


def parse_game_time(value: Any) -> datetime:
    """Read an ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"not a timestamp: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def format_game_time(value: datetime) -> str:
    """Render a timestamp the way it is stored in ``targetTime``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class VolatileEntry(SamBaseModel):
    """A scheduled ``SET`` waiting for a round index or a timestamp.

    ``target_time`` is an ISO-8601 string when ``is_game_time`` is true,
    otherwise the round index at which the entry becomes due.
    """

    model_config = ConfigDict(frozen=True)

    var_name: str
    value: Any = None
    is_game_time: bool = False
    target_time: int | float | str
    reason: str = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_positional(cls, values: Any) -> Any:
        """Accept the legacy ``[varName, value, isGameTime, targetTime, reason]`` form."""
        if isinstance(values, (list, tuple)):
            if len(values) < 4:
                raise ValueError("volatile entry needs at least 4 positional fields")
            return dict(zip(_ENTRY_FIELDS, values, strict=False))
        return values

    @field_validator("value")
    @classmethod
    def _json_value(cls, value: Any) -> Any:
        return ensure_json_safe(value)

    @model_validator(mode="after")
    def _check_target(self) -> VolatileEntry:
        if self.is_game_time:
            parse_game_time(self.target_time)
        elif isinstance(self.target_time, str):
            raise ValueError("round-based entries need a numeric targetTime")
        return self


class State(SamBaseModel):
    """Canonical world snapshot.

    Mutated in place by the interpreter and the schedule manager during a
    reconciliation pass.  Every boundary crossing goes through
    :meth:`from_store` / :meth:`to_store`, which always produce fresh,
    independent objects.
    """

    static: dict[str, Any] = Field(default_factory=dict)
    volatile: list[VolatileEntry] = Field(default_factory=list)
    response_summary: list[str] = Field(default_factory=list)

    @field_validator("static")
    @classmethod
    def _json_static(cls, value: dict[str, Any]) -> dict[str, Any]:
        return ensure_json_safe(value)

    @field_validator("volatile", mode="before")
    @classmethod
    def _valid_entries(cls, value: Any) -> Any:
        """Drop malformed scheduled entries instead of rejecting the snapshot."""
        if not isinstance(value, list):
            return value
        entries: list[VolatileEntry] = []
        for position, item in enumerate(value):
            if isinstance(item, VolatileEntry):
                entries.append(item)
                continue
            try:
                entries.append(VolatileEntry.model_validate(item))
            except ValidationError as exc:
                _logger.warning("Dropping invalid scheduled entry %d: %s", position, exc.errors(include_url=False))
        return entries

    @field_validator("response_summary", mode="before")
    @classmethod
    def _summary_strings(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [item if isinstance(item, str) else str(item) for item in value]
        return value

    @classmethod
    def initial(cls) -> State:
        return cls()

    @classmethod
    def from_store(cls, data: Mapping[str, Any] | None) -> State:
        """Validate a store/message payload into an independent ``State``."""
        if not data:
            return cls.initial()
        return cls.model_validate(dict(data)).copy_deep()

    def to_store(self) -> dict[str, Any]:
        """Whole-snapshot payload for the variable store or a state block."""
        return self.to_json_dict()

    def merged_into(self, store: Mapping[str, Any] | None) -> dict[str, Any]:
        """Store payload that keeps keys this model does not own."""
        merged = {key: copy.deepcopy(value) for key, value in (store or {}).items() if key not in _STATE_KEYS}
        merged.update(self.to_store())
        return merged

    def copy_deep(self) -> State:
        return self.model_copy(deep=True)
