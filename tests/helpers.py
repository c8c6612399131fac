"""Test helpers (small, reusable doubles and wire builders).

Keep this file tiny and purpose-built: wire objects are built from the real
``openai`` types so tests exercise the same attribute shapes as production.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from openai.types.chat import ChatCompletion, ChatCompletionChunk

_CREATED = 1_700_000_000


def tool_delta(
    index: int,
    *,
    id: str | None = None,  # noqa: A002
    name: str | None = None,
    arguments: str | None = None,
) -> dict[str, Any]:
    """Build one streamed tool-call fragment (wire dict form)."""
    delta: dict[str, Any] = {"index": index}
    if id is not None:
        delta["id"] = id
        delta["type"] = "function"
    function: dict[str, Any] = {}
    if name is not None:
        function["name"] = name
    if arguments is not None:
        function["arguments"] = arguments
    if function:
        delta["function"] = function
    return delta


def make_chunk(
    content: str | None = None,
    tool_calls: list[dict[str, Any]] | None = None,
    *,
    finish_reason: str | None = None,
) -> ChatCompletionChunk:
    """Build a streamed chunk with a single choice."""
    delta: dict[str, Any] = {}
    if content is not None:
        delta["content"] = content
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    return ChatCompletionChunk.model_validate(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion.chunk",
            "created": _CREATED,
            "model": "gpt-4o-mini",
            "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
        }
    )


def make_empty_chunk() -> ChatCompletionChunk:
    """Build a chunk with no choices (content-filter preamble / usage tail)."""
    return ChatCompletionChunk.model_validate(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion.chunk",
            "created": _CREATED,
            "model": "gpt-4o-mini",
            "choices": [],
        }
    )


def make_completion(
    content: str | None = None,
    tool_calls: list[dict[str, Any]] | None = None,
    *,
    finish_reason: str = "stop",
    usage: dict[str, int] | None = None,
    choices: bool = True,
) -> ChatCompletion:
    """Build a complete chat completion with at most one choice."""
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls is not None:
        message["tool_calls"] = tool_calls
    payload: dict[str, Any] = {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": _CREATED,
        "model": "gpt-4o-mini",
        "choices": (
            [{"index": 0, "message": message, "finish_reason": finish_reason}]
            if choices
            else []
        ),
    }
    if usage is not None:
        payload["usage"] = usage
    return ChatCompletion.model_validate(payload)


def function_call(call_id: str, name: str, arguments: str) -> dict[str, Any]:
    """Build a complete (non-streamed) function tool call."""
    return {
        "id": call_id,
        "type": "function",
        "function": {"name": name, "arguments": arguments},
    }


@dataclass
class ScriptedStream:
    """Async chunk stream that replays a script and records ``close()``.

    An exception in the script is raised at that point of the iteration,
    the way the SDK surfaces a transport failure mid-stream.
    """

    script: list[Any] = field(default_factory=list)
    close_calls: int = 0
    consumed: int = 0
    close_error: BaseException | None = None

    def __aiter__(self) -> ScriptedStream:
        return self

    async def __anext__(self) -> Any:
        if self.consumed >= len(self.script):
            raise StopAsyncIteration
        item = self.script[self.consumed]
        self.consumed += 1
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


@dataclass
class FakeCompletions:
    """Captures kwargs passed to chat.completions.create()."""

    result: Any = None
    error: BaseException | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    @property
    def last_kwargs(self) -> dict[str, Any] | None:
        return self.calls[-1] if self.calls else None

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


@dataclass
class FakeEmbeddings:
    vectors: list[list[float]] = field(default_factory=list)
    error: BaseException | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        vector = self.vectors[len(self.calls) - 1] if self.vectors else [0.0]
        item = type("EmbeddingItem", (), {"embedding": vector})()
        return type("EmbeddingResponse", (), {"data": [item]})()


class FakeSDK:
    """Stand-in for ``AsyncOpenAI`` exposing only what foundrykit calls."""

    def __init__(
        self,
        completions: FakeCompletions | None = None,
        embeddings: FakeEmbeddings | None = None,
    ) -> None:
        self.completions = completions or FakeCompletions()
        self.chat = type("Chat", (), {"completions": self.completions})()
        self.embeddings = embeddings or FakeEmbeddings()
        self.close_calls = 0

    async def close(self) -> None:
        self.close_calls += 1
