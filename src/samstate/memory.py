"""In-process chat host.

Implements :class:`samstate.host.ChatHost` over plain lists and dicts.
Used by the test-suite and by ``scripts/replay_chat.py``; the round
counter is the index of the newest message.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from samstate.exceptions import HostLookupError
from samstate.host import ChatEvent, EventHandler
from samstate.models.message import ChatMessage

_logger = logging.getLogger(__name__)


class InMemoryChat:
    def __init__(
        self,
        messages: Iterable[Mapping[str, Any]] = (),
        *,
        chat_id: str = "chat-0",
        variables: Mapping[str, Any] | None = None,
    ) -> None:
        self.chat_id = chat_id
        self._messages: list[dict[str, Any]] = []
        self._variables: dict[str, Any] = copy.deepcopy(dict(variables or {}))
        self._handlers: dict[ChatEvent, list[EventHandler]] = {}
        for message in messages:
            self.add_message(message.get("role", "assistant"), message.get("message", ""), swipes=message.get("swipes"))

    # ------------------------------------------------------------------
    # ChatHost
    # ------------------------------------------------------------------

    async def get_chat_id(self) -> str:
        return self.chat_id

    async def get_messages(self, start: int, end: int | None = None) -> list[ChatMessage]:
        stop = start if end is None else end
        if start < 0 or start >= len(self._messages) or stop < start:
            raise HostLookupError(f"No message at index {start}", index=start)
        stop = min(stop, len(self._messages) - 1)
        return [ChatMessage.model_validate(copy.deepcopy(m)) for m in self._messages[start : stop + 1]]

    async def get_last_message_id(self) -> int:
        return len(self._messages) - 1

    async def get_variables(self) -> dict[str, Any]:
        return copy.deepcopy(self._variables)

    async def replace_variables(self, variables: dict[str, Any]) -> None:
        self._variables = copy.deepcopy(variables)

    async def set_message(self, message_id: int, text: str) -> None:
        message = self._message(message_id)
        message["message"] = text
        swipes = message.get("swipes")
        if swipes:
            swipes[message.get("swipe_id") or 0] = text

    async def get_round_counter(self) -> int:
        return len(self._messages) - 1

    def subscribe(self, event: ChatEvent, handler: EventHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    # ------------------------------------------------------------------
    # Driving the chat
    # ------------------------------------------------------------------

    @property
    def variables(self) -> dict[str, Any]:
        return copy.deepcopy(self._variables)

    def text(self, message_id: int) -> str:
        return str(self._message(message_id)["message"])

    def add_message(self, role: str, text: str, *, swipes: list[str] | None = None) -> int:
        message_id = len(self._messages)
        entry: dict[str, Any] = {"message_id": message_id, "role": role, "message": text}
        if swipes:
            entry["swipes"] = list(swipes)
            entry["swipe_id"] = entry["swipes"].index(text) if text in swipes else 0
            entry["message"] = entry["swipes"][entry["swipe_id"]]
        self._messages.append(entry)
        return message_id

    def add_swipe(self, message_id: int, text: str) -> None:
        """Append an alternate generation and make it the active one."""
        message = self._message(message_id)
        swipes = message.setdefault("swipes", [message["message"]])
        swipes.append(text)
        message["swipe_id"] = len(swipes) - 1
        message["message"] = text

    def select_swipe(self, message_id: int, swipe_id: int) -> None:
        message = self._message(message_id)
        swipes = message.get("swipes") or [message["message"]]
        message["swipe_id"] = swipe_id
        message["message"] = swipes[swipe_id]

    def edit_message(self, message_id: int, text: str) -> None:
        message = self._message(message_id)
        message["message"] = text
        swipes = message.get("swipes")
        if swipes:
            swipes[message.get("swipe_id") or 0] = text

    def delete_last(self) -> None:
        if self._messages:
            self._messages.pop()

    def load_chat(
        self,
        chat_id: str,
        messages: Iterable[Mapping[str, Any]] = (),
        *,
        variables: Mapping[str, Any] | None = None,
    ) -> None:
        """Switch to another conversation (handlers stay subscribed)."""
        self.chat_id = chat_id
        self._messages = []
        self._variables = copy.deepcopy(dict(variables or {}))
        for message in messages:
            self.add_message(message.get("role", "assistant"), message.get("message", ""), swipes=message.get("swipes"))

    async def emit(self, event: ChatEvent, *args: Any) -> None:
        """Deliver *event* to every subscribed handler, one after another."""
        for handler in list(self._handlers.get(event, [])):
            _logger.debug("Dispatching %s to %r", event, handler)
            await handler(*args)

    def _message(self, message_id: int) -> dict[str, Any]:
        if message_id < 0 or message_id >= len(self._messages):
            raise HostLookupError(f"No message at index {message_id}", index=message_id)
        return self._messages[message_id]
