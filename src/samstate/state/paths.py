"""Dotted-path access over a JSON value tree.

Paths look like ``player.stats.hp`` or ``party[0].name``.  Bracketed
integers address list positions; a plain segment addresses a mapping key
(or a list position when the container already is a list and the
segment is all digits).
"""

from __future__ import annotations

import re
from typing import Any

_SEGMENT_RE = re.compile(r"([^.\[\]]+)|\[(\d+)\]")

_MISSING = object()

PathSegment = str | int


def split_path(path: str) -> list[PathSegment]:
    """Split *path* into key and index segments.

    Raises ``ValueError`` for empty paths or empty segments (``a..b``).
    """
    text = path.strip()
    if not text:
        raise ValueError("empty path")
    segments: list[PathSegment] = []
    pos = 0
    expect_key = True
    while pos < len(text):
        if text[pos] == ".":
            if expect_key:
                raise ValueError(f"empty segment in path {path!r}")
            expect_key = True
            pos += 1
            continue
        match = _SEGMENT_RE.match(text, pos)
        if match is None:
            raise ValueError(f"malformed path {path!r}")
        key, index = match.groups()
        if key is not None:
            if not expect_key:
                raise ValueError(f"malformed path {path!r}")
            segments.append(key.strip())
        else:
            segments.append(int(index))
        expect_key = False
        pos = match.end()
    if expect_key:
        raise ValueError(f"path {path!r} ends with a separator")
    return segments


def _child(container: Any, segment: PathSegment) -> Any:
    if isinstance(container, dict):
        return container.get(str(segment), _MISSING)
    if isinstance(container, list):
        if isinstance(segment, str):
            if not segment.isdigit():
                return _MISSING
            segment = int(segment)
        if 0 <= segment < len(container):
            return container[segment]
    return _MISSING


def get_path(tree: Any, path: str, default: Any = None) -> Any:
    node = tree
    for segment in split_path(path):
        node = _child(node, segment)
        if node is _MISSING:
            return default
    return node


def has_path(tree: Any, path: str) -> bool:
    return get_path(tree, path, _MISSING) is not _MISSING


def _assign(container: dict[str, Any] | list[Any], segment: PathSegment, value: Any) -> None:
    if isinstance(container, list):
        index = int(segment)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[str(segment)] = value


def set_path(tree: dict[str, Any], path: str, value: Any) -> None:
    """Set *value* at *path*, creating intermediate containers.

    Intermediates that are missing or hold a scalar are replaced by a
    list when the next segment is an index and by a dict otherwise.
    """
    segments = split_path(path)
    node: dict[str, Any] | list[Any] = tree
    for segment, next_segment in zip(segments, segments[1:], strict=False):
        if isinstance(node, list) and isinstance(segment, str) and not segment.isdigit():
            raise ValueError(f"cannot use key {segment!r} on a list in path {path!r}")
        child = _child(node, segment)
        if not isinstance(child, (dict, list)):
            child = [] if isinstance(next_segment, int) else {}
            _assign(node, segment, child)
        node = child
    last = segments[-1]
    if isinstance(node, list) and isinstance(last, str) and not last.isdigit():
        raise ValueError(f"cannot use key {last!r} on a list in path {path!r}")
    _assign(node, last, value)
