"""Typed inline commands.

The parser yields :class:`RawCommand` tokens straight from the text.
:func:`samstate.commands.parser.build_command` turns a token into one of
the typed variants below; the interpreter only ever executes typed
commands.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class CommandType(StrEnum):
    SET = "SET"
    ADD = "ADD"
    TIMED_SET = "TIMED_SET"
    RESPONSE_SUMMARY = "RESPONSE_SUMMARY"
    CANCEL_SET = "CANCEL_SET"


class RawCommand(BaseModel):
    """A ``<TYPE :: params>`` occurrence; ``params`` is left unsplit."""

    model_config = ConfigDict(frozen=True)

    type: CommandType
    params: str
    span: tuple[int, int] | None = None


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True)


class SetCommand(_Command):
    kind: Literal["SET"] = "SET"
    path: str
    value: Any


class AddCommand(_Command):
    kind: Literal["ADD"] = "ADD"
    path: str
    delta: str


class TimedSetCommand(_Command):
    kind: Literal["TIMED_SET"] = "TIMED_SET"
    path: str
    value: Any
    reason: str
    is_game_time: bool
    time_units: str


class ResponseSummaryCommand(_Command):
    kind: Literal["RESPONSE_SUMMARY"] = "RESPONSE_SUMMARY"
    text: str


class CancelSetCommand(_Command):
    kind: Literal["CANCEL_SET"] = "CANCEL_SET"
    identifier: str


Command = Annotated[
    SetCommand | AddCommand | TimedSetCommand | ResponseSummaryCommand | CancelSetCommand,
    Field(discriminator="kind"),
]
