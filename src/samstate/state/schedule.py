"""Scheduled ("volatile") mutations.

Entries wait in ``State.volatile`` until the narrative round counter or
the game clock reaches their target, then come back out as plain ``SET``
commands.  Every entry leaves the list exactly once: promoted or
canceled.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from samstate.models.commands import SetCommand
from samstate.models.state import State, VolatileEntry, parse_game_time
from samstate.normalize import to_index

_logger = logging.getLogger(__name__)


def is_due(entry: VolatileEntry, *, current_round: int, current_time: datetime) -> bool:
    """Game-time entries compare against the clock, the rest against the round counter."""
    if entry.is_game_time:
        if current_time.tzinfo is None:
            current_time = current_time.replace(tzinfo=UTC)
        return current_time >= parse_game_time(entry.target_time)
    return current_round >= entry.target_time  # type: ignore[operator]


class ScheduleManager:
    """Owns the volatile list of a :class:`State`."""

    def schedule(self, state: State, entry: VolatileEntry) -> None:
        state.volatile.append(entry)
        _logger.debug("Scheduled %s=%r at %s (%s)", entry.var_name, entry.value, entry.target_time, entry.reason)

    def promote(self, state: State, current_round: int, current_time: datetime) -> list[SetCommand]:
        """Pop due entries and return them as ``SET`` commands, in list order."""
        if not state.volatile:
            return []
        promoted: list[SetCommand] = []
        remaining: list[VolatileEntry] = []
        for entry in state.volatile:
            if is_due(entry, current_round=current_round, current_time=current_time):
                promoted.append(SetCommand(path=entry.var_name, value=entry.value))
            else:
                remaining.append(entry)
        state.volatile = remaining

        if promoted:
            _logger.info(
                "Promoted %d scheduled update(s) at round %d: %s",
                len(promoted),
                current_round,
                ", ".join(cmd.path for cmd in promoted),
            )
        return promoted

    def cancel(self, state: State, identifier: str) -> int:
        """Remove scheduled entries by index, or by ``varName``/``reason``.

        An identifier that reads as an integer inside the list bounds removes
        only that position.  Anything else removes every entry whose
        ``varName`` or ``reason`` equals it.  Returns the number removed.
        """
        if not state.volatile:
            return 0

        index = to_index(identifier)
        if index is not None and 0 <= index < len(state.volatile):
            entry = state.volatile.pop(index)
            _logger.info("Canceled timed set at index %d (%s)", index, entry.var_name)
            return 1

        before = len(state.volatile)
        state.volatile = [
            entry for entry in state.volatile if entry.var_name != identifier and entry.reason != identifier
        ]
        removed = before - len(state.volatile)
        if removed:
            _logger.info('Canceled %d timed set(s) matching identifier "%s"', removed, identifier)
        return removed
