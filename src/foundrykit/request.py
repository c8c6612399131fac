"""Build ``chat.completions.create`` keyword arguments from a ModelRequest."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from foundrykit.messages import to_wire_messages
from foundrykit.sampling import ToolChoice, extract_sampling_config

if TYPE_CHECKING:
    from foundrykit.models import ModelRequest, ToolDefinition

log = logging.getLogger(__name__)


def to_wire_tool(tool: ToolDefinition) -> dict[str, Any]:
    """Convert a tool definition to a function-type tool descriptor.

    Description and parameters are omitted entirely when absent rather than
    sent as empty values.
    """
    function: dict[str, Any] = {"name": tool.name}
    if tool.description:
        function["description"] = tool.description
    if tool.input_schema is not None:
        function["parameters"] = tool.input_schema
    return {"type": "function", "function": function}


def build_chat_request(model: str, request: ModelRequest) -> dict[str, Any]:
    """Compose the wire request for *model*.

    Args:
        model: Deployment name on the Foundry endpoint.
        request: Messages, tools and the untyped config bag.

    Returns:
        Keyword arguments for ``chat.completions.create`` (without ``stream``).
    """
    create_kwargs: dict[str, Any] = {
        "model": model,
        "messages": to_wire_messages(request.messages),
    }

    config = extract_sampling_config(request.config)
    if config.max_output_tokens is not None:
        create_kwargs["max_tokens"] = config.max_output_tokens
    if config.temperature is not None:
        create_kwargs["temperature"] = config.temperature
    if config.top_p is not None:
        create_kwargs["top_p"] = config.top_p

    if request.tools:
        create_kwargs["tools"] = [to_wire_tool(t) for t in request.tools]
        if config.tool_choice is not ToolChoice.UNSET:
            create_kwargs["tool_choice"] = config.tool_choice.value

    log.debug(
        "Built chat request for %s: %d messages, %d tools",
        model,
        len(create_kwargs["messages"]),
        len(request.tools),
    )
    return create_kwargs
