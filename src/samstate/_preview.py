"""Helpers for compact debug logging.

Narrative messages and state snapshots can be long.  This module trims
them before they reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def preview_for_log(value: Any, *, max_string: int = 200, max_items: int = 20, _depth: int = 0) -> Any:
    """Return a truncated copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated {len(value) - max_string} chars>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, Mapping):
        preview: dict[str, Any] = {}
        for i, (k, v) in enumerate(value.items()):
            if i >= max_items:
                preview["…"] = f"<{len(value) - max_items} more keys>"
                break
            preview[str(k)] = preview_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
        return preview

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        items = [
            preview_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
            for v in list(value)[:max_items]
        ]
        if len(value) > max_items:
            items.append(f"<{len(value) - max_items} more items>")
        return items

    return repr(value)
