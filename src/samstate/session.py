"""Per-conversation reconciliation bookkeeping."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field


@dataclass(slots=True)
class ConversationSession:
    """Mutable state the controller keeps for one chat.

    Parameters
    ----------
    chat_id : str
        Conversation identifier reported by the host.
    generation_watermark : int
        Message index recorded at the start of the most recent generation
        (or at chat load).  Messages at or below it have already been
        seen.
    lock : asyncio.Lock
        Serializes every handler touching this chat's state.
    """

    chat_id: str
    generation_watermark: int = -1
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def mark_generation_started(self, last_message_id: int) -> None:
        self.generation_watermark = last_message_id

    def reset(self, last_message_id: int) -> None:
        self.generation_watermark = last_message_id

    def should_process(self, index: int, *, has_block: bool) -> bool:
        """Decide whether a generation-end event for *index* needs processing.

        A message is new when it sits above the watermark or has not been
        stamped with a state block yet.  Anything else is either a repeat
        event or a failed generation that left the chat as it was.
        """
        if index > self.generation_watermark:
            return True
        return not has_block

    def mark_processed(self, index: int) -> None:
        self.generation_watermark = max(self.generation_watermark, index)
