"""Chat message model as exposed by the host."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from samstate._constants import USER_ROLE


class ChatMessage(BaseModel):
    """A single message read from the host's chat history."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    message_id: int
    role: str
    message: str = ""
    swipes: list[str] | None = None
    swipe_id: int | None = None

    @property
    def is_user(self) -> bool:
        return self.role == USER_ROLE

    @property
    def content(self) -> str:
        """Text of the active swipe, falling back to ``message``."""
        if self.swipes:
            idx = self.swipe_id or 0
            if 0 <= idx < len(self.swipes):
                return self.swipes[idx]
        return self.message
