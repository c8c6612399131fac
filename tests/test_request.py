"""Wire request composition (characterization)."""

from __future__ import annotations

import pytest

from foundrykit.models import Message, ModelRequest, Role, TextPart, ToolDefinition
from foundrykit.request import build_chat_request, to_wire_tool
from foundrykit.sampling import SamplingConfig, ToolChoice

pytestmark = pytest.mark.contract

_SCHEMA = {
    "type": "object",
    "properties": {"city": {"type": "string"}},
    "required": ["city"],
}


def _request(**kwargs: object) -> ModelRequest:
    return ModelRequest(messages=[Message(Role.USER, [TextPart("Hi")])], **kwargs)


def test_minimal_request_has_only_model_and_messages(model_name: str) -> None:
    params = build_chat_request(model_name, _request())

    assert params == {
        "model": model_name,
        "messages": [{"role": "user", "content": "Hi"}],
    }


def test_sampling_config_maps_to_wire_fields(model_name: str) -> None:
    params = build_chat_request(
        model_name,
        _request(config={"maxOutputTokens": 64, "temperature": 0.3, "topP": 0.8}),
    )

    assert params["max_tokens"] == 64
    assert params["temperature"] == 0.3
    assert params["top_p"] == 0.8


def test_typed_sampling_config_is_accepted(model_name: str) -> None:
    params = build_chat_request(
        model_name, _request(config=SamplingConfig(max_output_tokens=5))
    )
    assert params["max_tokens"] == 5


def test_tool_descriptor_includes_description_and_schema() -> None:
    tool = ToolDefinition("get_weather", "Current weather", _SCHEMA)

    assert to_wire_tool(tool) == {
        "type": "function",
        "function": {
            "name": "get_weather",
            "description": "Current weather",
            "parameters": _SCHEMA,
        },
    }


def test_tool_descriptor_omits_absent_fields() -> None:
    assert to_wire_tool(ToolDefinition("ping")) == {
        "type": "function",
        "function": {"name": "ping"},
    }


def test_input_schema_is_passed_through_verbatim(model_name: str) -> None:
    params = build_chat_request(
        model_name, _request(tools=[ToolDefinition("get_weather", input_schema=_SCHEMA)])
    )
    assert params["tools"][0]["function"]["parameters"] is _SCHEMA


@pytest.mark.parametrize("choice", ["auto", "required", "none"])
def test_tool_choice_attached_with_tools(model_name: str, choice: str) -> None:
    params = build_chat_request(
        model_name,
        _request(tools=[ToolDefinition("ping")], config={"toolChoice": choice}),
    )
    assert params["tool_choice"] == choice


def test_tool_choice_ignored_without_tools(model_name: str) -> None:
    params = build_chat_request(model_name, _request(config={"toolChoice": "required"}))

    assert "tools" not in params
    assert "tool_choice" not in params


def test_unrecognized_tool_choice_falls_back_to_provider_default(
    model_name: str,
) -> None:
    params = build_chat_request(
        model_name,
        _request(tools=[ToolDefinition("ping")], config={"toolChoice": "always"}),
    )

    assert len(params["tools"]) == 1
    assert "tool_choice" not in params


def test_unset_tool_choice_is_not_sent(model_name: str) -> None:
    params = build_chat_request(
        model_name,
        _request(
            tools=[ToolDefinition("ping")],
            config=SamplingConfig(tool_choice=ToolChoice.UNSET),
        ),
    )
    assert "tool_choice" not in params
