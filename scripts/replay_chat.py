#!/usr/bin/env python3
"""Replay a chat export through the state reconciler.

Every assistant message is treated as a fresh generation: the
``GENERATION_STARTED`` / ``GENERATION_ENDED`` pair is fired around it,
so inline commands are applied and each message is stamped with its
state block, exactly as in a live chat.

Usage
-----
::

    python scripts/replay_chat.py chat.json
    python scripts/replay_chat.py chat.json --messages --output replayed.json

The input is either a JSON list of ``{"role": ..., "message": ...}``
objects or an object with such a list under ``"messages"``.

Options::

    --messages          Also print the rewritten messages
    --keep-tags         Keep inline command tags in rewritten messages
    --output FILE       Write the JSON result to FILE instead of stdout
    --verbose, -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from samstate import ChatEvent, InMemoryChat, ReconciliationController, SamConfig  # noqa: E402


def _load_messages(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("messages", [])
    if not isinstance(data, list):
        raise SystemExit(f"{path}: expected a list of messages")
    messages: list[dict[str, Any]] = []
    for item in data:
        if isinstance(item, dict):
            messages.append({"role": str(item.get("role", "assistant")), "message": str(item.get("message", ""))})
    return messages


async def replay(messages: list[dict[str, Any]], config: SamConfig) -> InMemoryChat:
    chat = InMemoryChat(chat_id="replay")
    controller = ReconciliationController(chat, config)
    controller.bind()
    await controller.initialize()

    for item in messages:
        if item["role"] == "user":
            chat.add_message("user", item["message"])
            continue
        await chat.emit(ChatEvent.GENERATION_STARTED)
        chat.add_message(item["role"], item["message"])
        await chat.emit(ChatEvent.GENERATION_ENDED)
    return chat


async def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a chat export and print the resulting state.")
    parser.add_argument("chat", type=Path, help="Chat export (JSON)")
    parser.add_argument("--messages", action="store_true", help="Also print the rewritten messages")
    parser.add_argument("--keep-tags", action="store_true", help="Keep inline command tags in messages")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = SamConfig.from_env(keep_command_tags=args.keep_tags)
    messages = _load_messages(args.chat)
    chat = await replay(messages, config)

    result: dict[str, Any] = {"state": chat.variables}
    if args.messages:
        last_id = await chat.get_last_message_id()
        result["messages"] = [m.model_dump() for m in await chat.get_messages(0, last_id)] if last_id >= 0 else []

    payload = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    else:
        print(payload)


if __name__ == "__main__":
    asyncio.run(main())
