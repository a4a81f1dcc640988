"""Inline command parsing and interpretation."""

from samstate.commands.interpreter import CommandInterpreter
from samstate.commands.parser import CommandParser, CommandStream, build_command, split_params

__all__ = ["CommandInterpreter", "CommandParser", "CommandStream", "build_command", "split_params"]
