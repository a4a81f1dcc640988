"""Base model for samstate data.

Every model that crosses the message-text or variable-store boundary
inherits from :class:`SamBaseModel`, which maps the camelCase keys used
in the embedded JSON (``varName``, ``responseSummary``) onto snake_case
fields while still accepting either spelling on input.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def ensure_json_safe(value: Any) -> Any:
    """Raise ``ValueError`` unless *value* is plain, finite, acyclic JSON."""
    try:
        json.dumps(value, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"value is not JSON-serializable: {exc}") from exc
    return value


class SamBaseModel(BaseModel):
    """Base for serialized samstate models."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using wire (camelCase) keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)
