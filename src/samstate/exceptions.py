"""Custom exception hierarchy for samstate."""

from __future__ import annotations


class SamError(Exception):
    """Base exception for all samstate errors."""


class SamConfigError(SamError):
    """Invalid or missing configuration."""


class StateBlockError(SamError):
    """Embedded state block could not be decoded."""


class CommandError(SamError):
    """An inline command could not be applied."""

    def __init__(self, message: str, *, command_type: str = "") -> None:
        self.command_type = command_type
        super().__init__(message)


class CommandSyntaxError(CommandError):
    """Required command fields are missing, empty, or malformed.

    Raised while turning a raw ``<TYPE :: ...>`` token into a typed
    command.  The interpreter logs it and moves on to the next command.
    """


class HostError(SamError):
    """The chat host failed to serve a request."""


class HostLookupError(HostError):
    """Message index out of range or message not found."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        self.index = index
        super().__init__(message)
