"""Command interpreter.

Applies a batch of commands to a :class:`State` strictly in order.  Each
command is isolated: a failure is logged and the rest of the batch still
runs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from samstate.commands.parser import build_command
from samstate.exceptions import CommandError, SamError
from samstate.models.commands import (
    AddCommand,
    CancelSetCommand,
    Command,
    RawCommand,
    ResponseSummaryCommand,
    SetCommand,
    TimedSetCommand,
)
from samstate.models.state import State, VolatileEntry, format_game_time, parse_game_time
from samstate.normalize import coerce_number, to_number
from samstate.state.paths import get_path, set_path
from samstate.state.schedule import ScheduleManager

_logger = logging.getLogger(__name__)


class CommandInterpreter:
    def __init__(self, schedule: ScheduleManager | None = None) -> None:
        self._schedule = schedule or ScheduleManager()

    def apply(
        self,
        commands: Iterable[RawCommand | Command],
        state: State,
        *,
        current_round: int = 0,
    ) -> State:
        """Apply *commands* to *state* in order; mutates and returns *state*.

        ``current_round`` is the base for round-scheduled ``TIMED_SET``
        commands.
        """
        for item in commands:
            try:
                command = build_command(item) if isinstance(item, RawCommand) else item
                self._execute(command, state, current_round)
            except (SamError, ValueError) as exc:
                _logger.warning("Skipping command %s: %s", _describe(item), exc)
            except Exception:
                _logger.error("Error processing command %s", _describe(item), exc_info=True)
        return state

    def _execute(self, command: Command, state: State, current_round: int) -> None:
        _logger.debug("Applying %r", command)
        if isinstance(command, SetCommand):
            set_path(state.static, command.path, coerce_number(command.value))
        elif isinstance(command, AddCommand):
            self._add(command, state)
        elif isinstance(command, TimedSetCommand):
            self._schedule.schedule(state, _volatile_entry(command, current_round))
        elif isinstance(command, CancelSetCommand):
            self._schedule.cancel(state, command.identifier)
        elif isinstance(command, ResponseSummaryCommand):
            state.response_summary.append(command.text)
        else:
            raise CommandError(f"Unsupported command {command!r}")

    def _add(self, command: AddCommand, state: State) -> None:
        existing = get_path(state.static, command.path, 0)
        if isinstance(existing, list):
            existing.append(command.delta)
            return
        base = 0 if existing is None else to_number(existing)
        increment = to_number(command.delta)
        if base is None or increment is None:
            _logger.debug("ADD %s skipped: non-numeric operand (%r + %r)", command.path, existing, command.delta)
            return
        set_path(state.static, command.path, base + increment)


def _volatile_entry(command: TimedSetCommand, current_round: int) -> VolatileEntry:
    if command.is_game_time:
        target: int | float | str = format_game_time(parse_game_time(command.time_units))
    else:
        units = to_number(command.time_units)
        if units is None:
            raise CommandError(
                f"TIMED_SET time units must be numeric, got {command.time_units!r}",
                command_type=command.kind,
            )
        target = current_round + units
    return VolatileEntry(
        var_name=command.path,
        value=coerce_number(command.value),
        is_game_time=command.is_game_time,
        target_time=target,
        reason=command.reason,
    )


def _describe(item: RawCommand | Command) -> str:
    if isinstance(item, RawCommand):
        return f"<{item.type} :: {item.params}>"
    return repr(item)
