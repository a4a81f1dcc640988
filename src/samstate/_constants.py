"""Constants shared across samstate modules."""

from __future__ import annotations

SCRIPT_NAME = "Situational Awareness Manager"

#: Literal markers wrapping the embedded state block inside message text.
STATE_BLOCK_START_MARKER = "<!--<|state|>"
STATE_BLOCK_END_MARKER = "</|state|>-->"

#: Inline command keywords recognised by the parser.
COMMAND_TYPES: tuple[str, ...] = (
    "SET",
    "ADD",
    "TIMED_SET",
    "RESPONSE_SUMMARY",
    "CANCEL_SET",
)

#: Field separator inside ``<TYPE :: field :: field>`` tags.
FIELD_SEPARATOR = "::"

USER_ROLE = "user"
