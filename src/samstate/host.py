"""Interface to the chat host.

The host owns message storage, the per-chat variable store and event
delivery.  samstate only consumes it through :class:`ChatHost`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Protocol

from samstate.models.message import ChatMessage

EventHandler = Callable[..., Awaitable[None]]


class ChatEvent(StrEnum):
    GENERATION_STARTED = "generation_started"
    GENERATION_ENDED = "generation_ended"
    GENERATION_STOPPED = "generation_stopped"
    MESSAGE_SWIPED = "message_swiped"
    MESSAGE_EDITED = "message_edited"
    CHAT_CHANGED = "chat_changed"


class ChatHost(Protocol):
    """Collaborator API required from the host application.

    Every coroutine is a suspension point; nothing else in a
    reconciliation pass blocks.
    """

    async def get_chat_id(self) -> str:
        """Identifier of the active conversation."""
        ...

    async def get_messages(self, start: int, end: int | None = None) -> list[ChatMessage]:
        """Messages ``start..end`` inclusive (just ``start`` when *end* is ``None``).

        Raises :class:`samstate.exceptions.HostLookupError` for indices
        outside the chat.
        """
        ...

    async def get_last_message_id(self) -> int:
        """Index of the newest message, ``-1`` for an empty chat."""
        ...

    async def get_variables(self) -> dict[str, Any]: ...

    async def replace_variables(self, variables: dict[str, Any]) -> None: ...

    async def set_message(self, message_id: int, text: str) -> None: ...

    async def get_round_counter(self) -> int:
        """Current narrative round used for round-based scheduling."""
        ...

    def subscribe(self, event: ChatEvent, handler: EventHandler) -> None: ...
