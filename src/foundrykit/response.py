"""Assemble a complete (non-streaming) chat completion into a ModelResponse."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from foundrykit.finish import map_finish_reason
from foundrykit.models import (
    FinishReason,
    Message,
    ModelResponse,
    Part,
    Role,
    TextPart,
    ToolRequestPart,
    Usage,
)

if TYPE_CHECKING:
    from foundrykit.models import ModelRequest

log = logging.getLogger(__name__)


def decode_tool_arguments(raw: str) -> dict[str, Any]:
    """Decode a tool-call argument string into a JSON object.

    ``null`` decodes to an empty object. Raises ValueError for invalid JSON or
    for JSON that is not an object.
    """
    value = json.loads(raw)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def _usage_from(raw: Any) -> Usage:
    # Zero prompt tokens is read as "usage not reported".
    prompt_tokens = getattr(raw, "prompt_tokens", None) if raw is not None else None
    if not isinstance(prompt_tokens, int) or prompt_tokens <= 0:
        return Usage()
    return Usage(
        input_tokens=prompt_tokens,
        output_tokens=int(getattr(raw, "completion_tokens", 0) or 0),
        total_tokens=int(getattr(raw, "total_tokens", 0) or 0),
    )


def _tool_request_parts(tool_calls: Any) -> list[Part]:
    parts: list[Part] = []
    for call in tool_calls or []:
        if getattr(call, "type", None) != "function":
            continue
        if not getattr(call, "id", None):
            continue
        function = getattr(call, "function", None)
        name = getattr(function, "name", "") or ""
        raw_args = getattr(function, "arguments", "") or ""
        try:
            args = decode_tool_arguments(raw_args)
        except ValueError as e:
            log.warning("Dropping tool call %r with undecodable arguments: %s", name, e)
            continue
        parts.append(ToolRequestPart(name=name, input=args, ref=call.id))
    return parts


def assemble_response(
    completion: Any, request: ModelRequest | None = None
) -> ModelResponse:
    """Convert a chat completion into a ModelResponse.

    Only the first choice is read. Tool calls whose arguments fail to decode
    are dropped individually; the rest of the response is kept.

    Args:
        completion: A ``ChatCompletion`` or any object with the same attributes.
        request: The originating request, attached to the response.

    Returns:
        The assembled response. With no choices, the message is empty and the
        finish reason is ``UNKNOWN``.
    """
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ModelResponse(
            message=Message(role=Role.MODEL),
            finish_reason=FinishReason.UNKNOWN,
            request=request,
        )

    choice = choices[0]
    wire_message = getattr(choice, "message", None)
    content: list[Part] = []

    text = getattr(wire_message, "content", None)
    if text:
        content.append(TextPart(text))
    content.extend(_tool_request_parts(getattr(wire_message, "tool_calls", None)))

    return ModelResponse(
        message=Message(role=Role.MODEL, content=tuple(content)),
        finish_reason=map_finish_reason(getattr(choice, "finish_reason", None)),
        usage=_usage_from(getattr(completion, "usage", None)),
        request=request,
    )
