"""Reconciliation of world state with the chat's lifecycle events.

The canonical variable store *is* the state; this module decides, per
host event, whether to reprocess the newest message (generation end),
reload an embedded snapshot (swipe, edit) or reinitialize from history
(chat change).  Handlers never raise: failures are logged and the store
keeps its last successful write.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from samstate._constants import SCRIPT_NAME
from samstate._preview import preview_for_log
from samstate.commands.interpreter import CommandInterpreter
from samstate.commands.parser import CommandParser
from samstate.config import SamConfig
from samstate.exceptions import HostLookupError
from samstate.host import ChatEvent, ChatHost
from samstate.models.message import ChatMessage
from samstate.models.state import State
from samstate.session import ConversationSession
from samstate.state.codec import StateBlockCodec
from samstate.state.schedule import ScheduleManager

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ReconciliationController:
    """Keeps the variable store and embedded state blocks consistent.

    Usage::

        controller = ReconciliationController(host)
        controller.bind()
        await controller.initialize()
    """

    def __init__(
        self,
        host: ChatHost,
        config: SamConfig | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        parser: CommandParser | None = None,
        schedule: ScheduleManager | None = None,
        interpreter: CommandInterpreter | None = None,
        codec: StateBlockCodec | None = None,
    ) -> None:
        self._host = host
        self._config = config or SamConfig()
        self._clock = clock
        self._parser = parser or CommandParser()
        self._schedule = schedule or ScheduleManager()
        self._interpreter = interpreter or CommandInterpreter(self._schedule)
        self._codec = codec or StateBlockCodec(
            start_marker=self._config.start_marker,
            end_marker=self._config.end_marker,
            indent=self._config.json_indent,
        )
        self._sessions: dict[str, ConversationSession] = {}

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def _handlers(self) -> dict[ChatEvent, Callable[..., Awaitable[None]]]:
        return {
            ChatEvent.GENERATION_STARTED: self.on_generation_started,
            ChatEvent.GENERATION_ENDED: self.on_generation_ended,
            ChatEvent.GENERATION_STOPPED: self.on_generation_stopped,
            ChatEvent.MESSAGE_SWIPED: self.on_message_swiped,
            ChatEvent.MESSAGE_EDITED: self.on_message_edited,
            ChatEvent.CHAT_CHANGED: self.on_chat_changed,
        }

    def bind(self) -> None:
        """Subscribe every handler with the host."""
        for event, handler in self._handlers().items():
            self._host.subscribe(event, handler)
        _logger.info("[%s] State management loaded.", SCRIPT_NAME)

    async def initialize(self) -> None:
        """Load state for whatever chat is active at startup."""
        await self.on_chat_changed()

    async def dispatch(self, event: ChatEvent, *args: Any) -> None:
        handler = self._handlers()[ChatEvent(event)]
        await handler(*args)

    def session_for(self, chat_id: str) -> ConversationSession:
        session = self._sessions.get(chat_id)
        if session is None:
            session = ConversationSession(chat_id=chat_id)
            self._sessions[chat_id] = session
        return session

    async def _current_session(self) -> ConversationSession:
        return self.session_for(await self._host.get_chat_id())

    async def _guarded(self, name: str, fn: Callable[[], Awaitable[None]]) -> None:
        try:
            await fn()
        except HostLookupError as exc:
            _logger.info("%s handler: %s; keeping previous state", name, exc)
        except Exception:
            _logger.error("[%s] Error in %s handler", SCRIPT_NAME, name, exc_info=True)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    async def on_generation_started(self, *_: Any) -> None:
        async def _run() -> None:
            session = await self._current_session()
            async with session.lock:
                session.mark_generation_started(await self._host.get_last_message_id())
                _logger.debug("Generation started at watermark %d", session.generation_watermark)

        await self._guarded("GENERATION_STARTED", _run)

    async def on_generation_ended(self, *_: Any) -> None:
        await self._guarded("GENERATION_ENDED", self._on_generation_finished)

    async def on_generation_stopped(self, *_: Any) -> None:
        await self._guarded("GENERATION_STOPPED", self._on_generation_finished)

    async def _on_generation_finished(self) -> None:
        session = await self._current_session()
        async with session.lock:
            index = await self._host.get_last_message_id()
            if index < 0:
                return
            message = await self._read_message(index)
            if message is None or message.is_user:
                return
            has_block = self._codec.contains_block(message.message)
            if not session.should_process(index, has_block=has_block):
                _logger.debug(
                    "Message %d already processed (watermark %d); skipping",
                    index,
                    session.generation_watermark,
                )
                return
            if await self._process_message(message):
                session.mark_processed(index)

    async def on_message_swiped(self, *_: Any) -> None:
        # Let the host finish replacing the swiped message before reading it.
        for _tick in range(self._config.swipe_defer_ticks):
            await asyncio.sleep(0)

        async def _run() -> None:
            session = await self._current_session()
            async with session.lock:
                if await self._host.get_last_message_id() < 0:
                    return
                await self.load_state_from_message(await self.find_last_ai_message_index())

        await self._guarded("MESSAGE_SWIPED", _run)

    async def on_message_edited(self, *_: Any) -> None:
        async def _run() -> None:
            session = await self._current_session()
            async with session.lock:
                last_id = await self._host.get_last_message_id()
                if last_id < 0:
                    return
                message = await self._read_message(last_id)
                if message is None or message.is_user:
                    return
                # Reload only: manual edits to the embedded JSON take effect as-is.
                await self.load_state_from_message(await self.find_last_ai_message_index())

        await self._guarded("MESSAGE_EDITED", _run)

    async def on_chat_changed(self, *_: Any) -> None:
        async def _run() -> None:
            session = await self._current_session()
            async with session.lock:
                _logger.info("[%s] Loading state for chat %s", SCRIPT_NAME, session.chat_id)
                last_ai_index = await self.find_last_ai_message_index()
                session.reset(await self._host.get_last_message_id())
                if last_ai_index < 0:
                    _logger.info("No AI message in chat %s; keeping current variables", session.chat_id)
                    return
                await self.load_state_from_message(last_ai_index)

        await self._guarded("CHAT_CHANGED", _run)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def process_message_state(self, index: int) -> bool:
        """Promote, parse and apply commands for the message at *index*.

        Returns ``False`` without touching state when the index is invalid
        or the message is the user's.
        """
        message = await self._read_message(index)
        if message is None or message.is_user:
            return False
        return await self._process_message(message)

    async def _process_message(self, message: ChatMessage) -> bool:
        raw = await self._host.get_variables()
        state = State.from_store(raw)
        current_round = await self._host.get_round_counter()

        promoted = self._schedule.promote(state, current_round, self._clock())
        narrative = self._codec.strip(message.message)
        parsed = self._parser.parse(narrative)
        self._interpreter.apply([*promoted, *parsed], state, current_round=current_round)

        await self._host.replace_variables(state.merged_into(raw))
        stored = State.from_store(await self._host.get_variables())

        if not self._config.keep_command_tags:
            narrative = self._parser.remove_commands(narrative)
        final_text = self._codec.embed(narrative, stored)
        _logger.debug("Rewriting message %d: %r", message.message_id, preview_for_log(final_text))
        await self._host.set_message(message.message_id, final_text)
        return True

    async def load_state_from_message(self, index: int) -> bool:
        """Replace the canonical store with the snapshot embedded at *index*.

        Falls back to the newest snapshot in ``0..index`` (or the initial
        state) when the message carries none.  Returns ``False`` when the
        message cannot be read, leaving the store untouched.
        """
        message = await self._read_message(index)
        if message is None:
            return False

        state = self._codec.parse(message.message)
        if state is not None:
            _logger.info("[%s] State loaded from message at index %d.", SCRIPT_NAME, index)
        else:
            history = await self._host.get_messages(0, index)
            state = self.find_latest_state(history)
        await self._host.replace_variables(state.to_store())
        return True

    async def find_last_ai_message_index(self, before: int = -1) -> int:
        """Index of the newest non-user message before *before* (``-1`` = whole chat)."""
        last_id = await self._host.get_last_message_id()
        if last_id < 0:
            return -1
        chat = await self._host.get_messages(0, last_id)
        if before == -1:
            before = len(chat)
        for i in range(min(before, len(chat)) - 1, -1, -1):
            if not chat[i].is_user:
                return i
        return -1

    def find_latest_state(self, history: Sequence[ChatMessage]) -> State:
        """Newest embedded snapshot in *history*, or the initial state."""
        for i in range(len(history) - 1, -1, -1):
            message = history[i]
            if message.is_user:
                continue
            state = self._codec.parse(message.content)
            if state is not None:
                _logger.info("[%s] State loaded from message at index %d.", SCRIPT_NAME, i)
                return state.copy_deep()
        _logger.info("[%s] No previous state found. Using initial state.", SCRIPT_NAME)
        return State.initial()

    async def _read_message(self, index: int) -> ChatMessage | None:
        try:
            messages = await self._host.get_messages(index)
        except HostLookupError:
            _logger.info("Invalid message index %d", index)
            return None
        return messages[0] if messages else None
