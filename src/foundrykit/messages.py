"""Translate foundrykit messages into chat completion wire messages.

Wire messages are plain dicts in the shape ``chat.completions.create`` accepts.
Tool calls have no ids on the foundrykit side, so correlation ids are derived
from the tool name (see ``tool_call_id``). Two calls to the same tool in one
turn therefore share an id.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from foundrykit.models import (
    MediaPart,
    Message,
    Role,
    TextPart,
    ToolRequestPart,
    ToolResponsePart,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)


def tool_call_id(name: str) -> str:
    """Return the correlation id used for tool calls and their results."""
    return f"call_{name}"


def _to_json(value: Any) -> str | None:
    """Serialize to JSON text, or None when the value has no JSON form."""
    try:
        return json.dumps(value, allow_nan=False)
    except (TypeError, ValueError):
        return None


def _first_text(message: Message) -> str:
    for part in message.content:
        if isinstance(part, TextPart):
            return part.text
    return ""


def _assistant_message(message: Message) -> dict[str, Any]:
    text = ""
    tool_calls: list[dict[str, Any]] = []
    for part in message.content:
        match part:
            case TextPart(text=chunk):
                text += chunk
            case ToolRequestPart(name=name, input=tool_input):
                arguments = _to_json(tool_input)
                if arguments is None:
                    log.debug("Dropping tool request %r: input is not JSON-serializable", name)
                    continue
                tool_calls.append(
                    {
                        "id": tool_call_id(name),
                        "type": "function",
                        "function": {"name": name, "arguments": arguments},
                    }
                )
            case ToolResponsePart() | MediaPart():
                continue

    wire: dict[str, Any] = {"role": "assistant", "content": text}
    if tool_calls:
        wire["tool_calls"] = tool_calls
    return wire


def _tool_messages(message: Message) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for part in message.content:
        match part:
            case ToolResponsePart(name=name, output=output):
                content = _to_json(output)
                if content is None:
                    log.debug("Dropping tool response %r: output is not JSON-serializable", name)
                    continue
                out.append(
                    {
                        "role": "tool",
                        "tool_call_id": tool_call_id(name),
                        "content": content,
                    }
                )
            case TextPart() | ToolRequestPart() | MediaPart():
                continue
    return out


def to_wire_messages(messages: Iterable[Message]) -> list[dict[str, Any]]:
    """Convert messages to wire messages, preserving order.

    System and user messages carry only their first text part; model messages
    join all text and collect tool calls; tool messages fan out into one wire
    message per tool response. Messages with no parts are skipped.
    """
    wire: list[dict[str, Any]] = []
    for message in messages:
        if not message.content:
            continue

        match message.role:
            case Role.SYSTEM:
                wire.append({"role": "system", "content": _first_text(message)})
            case Role.USER:
                wire.append({"role": "user", "content": _first_text(message)})
            case Role.MODEL:
                wire.append(_assistant_message(message))
            case Role.TOOL:
                wire.extend(_tool_messages(message))
    return wire
