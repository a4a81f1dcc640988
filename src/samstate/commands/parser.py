"""Inline command tokenizer.

Commands are written inside narrative text as ``<TYPE :: field :: ...>``
where ``TYPE`` is one of the five keywords.  Scanning is global and
non-overlapping; brackets that do not start with a known keyword are
plain narrative and are ignored.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from samstate._constants import COMMAND_TYPES, FIELD_SEPARATOR
from samstate.exceptions import CommandSyntaxError
from samstate.models.commands import (
    AddCommand,
    CancelSetCommand,
    Command,
    CommandType,
    RawCommand,
    ResponseSummaryCommand,
    SetCommand,
    TimedSetCommand,
)

COMMAND_RE = re.compile(
    r"<(?P<type>" + "|".join(COMMAND_TYPES) + r")\s*::\s*(?P<params>.*?)>",
    re.DOTALL,
)


class CommandStream:
    """Lazy, restartable sequence of :class:`RawCommand` tokens for one text."""

    def __init__(self, text: str) -> None:
        self._text = text

    def __iter__(self) -> Iterator[RawCommand]:
        for match in COMMAND_RE.finditer(self._text):
            yield RawCommand(type=match.group("type"), params=match.group("params"), span=match.span())


class CommandParser:
    def parse(self, text: str | None) -> CommandStream:
        return CommandStream(text or "")

    def remove_commands(self, text: str) -> str:
        """Drop every command tag from *text*, leaving the surrounding narrative."""
        return COMMAND_RE.sub("", text)


def split_params(params: str) -> list[str]:
    return [field.strip() for field in params.split(FIELD_SEPARATOR)]


def _required(fields: list[str], count: int, command_type: CommandType, *, allow_empty_last: bool = False) -> None:
    if len(fields) < count:
        raise CommandSyntaxError(
            f"{command_type} needs {count} field(s), got {len(fields)}",
            command_type=command_type,
        )
    for position, value in enumerate(fields[:count]):
        if value:
            continue
        if allow_empty_last and position == count - 1:
            continue
        raise CommandSyntaxError(
            f"{command_type} field {position + 1} is empty",
            command_type=command_type,
        )


def build_command(raw: RawCommand) -> Command:
    """Split and trim a raw token into its typed command.

    Raises :class:`CommandSyntaxError` when required fields are missing.
    """
    fields = split_params(raw.params)
    kind = raw.type

    if kind == CommandType.SET:
        _required(fields, 2, kind, allow_empty_last=True)
        return SetCommand(path=fields[0], value=fields[1])

    if kind == CommandType.ADD:
        _required(fields, 2, kind, allow_empty_last=True)
        return AddCommand(path=fields[0], delta=fields[1])

    if kind == CommandType.TIMED_SET:
        _required(fields, 5, kind)
        path, value, reason, game_time_flag, time_units = fields[:5]
        return TimedSetCommand(
            path=path,
            value=value,
            reason=reason,
            is_game_time=game_time_flag.lower() == "true",
            time_units=time_units,
        )

    if kind == CommandType.CANCEL_SET:
        _required(fields, 1, kind)
        return CancelSetCommand(identifier=fields[0])

    if kind == CommandType.RESPONSE_SUMMARY:
        return ResponseSummaryCommand(text=raw.params.strip())

    raise CommandSyntaxError(f"Unknown command type {kind!r}", command_type=str(kind))
