"""samstate - world-state tracking threaded through narrative chat messages."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("samstate")
except PackageNotFoundError:
    __version__ = "0+local"
from samstate.commands import CommandInterpreter, CommandParser, build_command
from samstate.config import SamConfig
from samstate.controller import ReconciliationController
from samstate.exceptions import (
    CommandError,
    CommandSyntaxError,
    HostError,
    HostLookupError,
    SamConfigError,
    SamError,
    StateBlockError,
)
from samstate.host import ChatEvent, ChatHost
from samstate.memory import InMemoryChat
from samstate.models import (
    AddCommand,
    CancelSetCommand,
    ChatMessage,
    Command,
    CommandType,
    RawCommand,
    ResponseSummaryCommand,
    SetCommand,
    State,
    TimedSetCommand,
    VolatileEntry,
)
from samstate.session import ConversationSession
from samstate.state.codec import StateBlockCodec
from samstate.state.schedule import ScheduleManager

__all__ = [
    "__version__",
    "AddCommand",
    "CancelSetCommand",
    "ChatEvent",
    "ChatHost",
    "ChatMessage",
    "Command",
    "CommandError",
    "CommandInterpreter",
    "CommandParser",
    "CommandSyntaxError",
    "CommandType",
    "ConversationSession",
    "HostError",
    "HostLookupError",
    "InMemoryChat",
    "RawCommand",
    "ReconciliationController",
    "ResponseSummaryCommand",
    "SamConfig",
    "SamConfigError",
    "SamError",
    "ScheduleManager",
    "SetCommand",
    "State",
    "StateBlockCodec",
    "StateBlockError",
    "TimedSetCommand",
    "VolatileEntry",
    "build_command",
]
