"""Typed models for state snapshots, chat messages and commands."""

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
from samstate.models.message import ChatMessage
from samstate.models.state import State, VolatileEntry, format_game_time, parse_game_time

__all__ = [
    "AddCommand",
    "CancelSetCommand",
    "ChatMessage",
    "Command",
    "CommandType",
    "RawCommand",
    "ResponseSummaryCommand",
    "SetCommand",
    "State",
    "TimedSetCommand",
    "VolatileEntry",
    "format_game_time",
    "parse_game_time",
]
