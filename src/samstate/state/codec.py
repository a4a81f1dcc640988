"""Embedded state block encoding.

A block is ``START_MARKER\\n<pretty JSON>\\nEND_MARKER`` appended to the
narrative.  :meth:`StateBlockCodec.parse` reads the *first* block with a
non-greedy match, while :meth:`StateBlockCodec.strip` removes everything
from the first start marker to the last end marker with a greedy match,
so stray duplicate blocks never survive a rewrite.
"""

from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError

from samstate._constants import STATE_BLOCK_END_MARKER, STATE_BLOCK_START_MARKER
from samstate._preview import preview_for_log
from samstate.exceptions import StateBlockError
from samstate.models.state import State

_logger = logging.getLogger(__name__)


class StateBlockCodec:
    """Parse, strip and render embedded state blocks."""

    def __init__(
        self,
        *,
        start_marker: str = STATE_BLOCK_START_MARKER,
        end_marker: str = STATE_BLOCK_END_MARKER,
        indent: int = 2,
    ) -> None:
        self._start = start_marker
        self._end = end_marker
        self._indent = indent
        start = re.escape(start_marker)
        end = re.escape(end_marker)
        self._parse_re = re.compile(f"{start}(.*?){end}", re.DOTALL)
        self._strip_re = re.compile(f"{start}(.*){end}", re.DOTALL)

    def decode(self, text: str | None) -> State | None:
        """Like :meth:`parse` but raises :class:`StateBlockError` on a malformed block."""
        if not text:
            return None
        match = self._parse_re.search(text)
        if match is None:
            return None
        body = match.group(1).strip()
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            raise StateBlockError(f"State block is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise StateBlockError(f"State block must hold a JSON object, got {type(payload).__name__}")
        try:
            return State.from_store(payload)
        except ValidationError as exc:
            raise StateBlockError(f"State block does not describe a state: {exc}") from exc

    def parse(self, text: str | None) -> State | None:
        """Return the state held in the first block of *text*, or ``None``.

        Never raises: malformed blocks are logged and treated as absent.
        """
        try:
            return self.decode(text)
        except StateBlockError as exc:
            _logger.warning("Failed to parse state block: %s", exc)
            _logger.debug("Offending text: %r", preview_for_log(text))
            return None

    def contains_block(self, text: str | None) -> bool:
        if not text:
            return False
        return self._parse_re.search(text) is not None

    def strip(self, text: str) -> str:
        """Remove every block (first start marker through last end marker)."""
        return self._strip_re.sub("", text)

    def render(self, state: State) -> str:
        body = json.dumps(state.to_store(), indent=self._indent, ensure_ascii=False)
        return f"{self._start}\n{body}\n{self._end}"

    def embed(self, narrative: str, state: State) -> str:
        """Replace any existing block in *narrative* with a freshly rendered one."""
        clean = self.strip(narrative).strip()
        block = self.render(state)
        if not clean:
            return block
        return f"{clean}\n\n{block}"
