"""Mock transport for running without API calls.

Responses are built from the real ``openai`` types, so everything downstream
of the transport runs exactly as it would against an endpoint.
"""

from __future__ import annotations

import hashlib
import time
from typing import TYPE_CHECKING, Any

from openai.types import CreateEmbeddingResponse
from openai.types.chat import ChatCompletion, ChatCompletionChunk

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

_EMBEDDING_DIMENSIONS = 8


def _echo_text(messages: list[dict[str, Any]]) -> str:
    """Echo the most recent user message."""
    for message in reversed(messages):
        if message.get("role") == "user" and isinstance(message.get("content"), str):
            return f"echo: {message['content'][:100]}"
    return "echo: "


class MockStream:
    """Async chunk iterator with the ``close()`` contract of ``AsyncStream``."""

    def __init__(self, chunks: list[ChatCompletionChunk]) -> None:
        self._chunks = list(chunks)
        self.closed = False

    def __aiter__(self) -> AsyncIterator[ChatCompletionChunk]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[ChatCompletionChunk]:
        for chunk in self._chunks:
            if self.closed:
                return
            yield chunk

    async def close(self) -> None:
        self.closed = True


class _MockCompletions:
    async def create(self, *, stream: bool = False, **kwargs: Any) -> Any:
        model = kwargs.get("model", "mock")
        text = _echo_text(kwargs.get("messages", []))
        created = int(time.time())
        if stream:
            # Split on spaces but keep them, so the pieces re-join exactly.
            pieces = [word + " " for word in text.split(" ")]
            pieces[-1] = pieces[-1][:-1]
            chunks = [
                ChatCompletionChunk.model_validate(
                    {
                        "id": "chatcmpl-mock",
                        "object": "chat.completion.chunk",
                        "created": created,
                        "model": model,
                        "choices": [
                            {"index": 0, "delta": {"content": piece}, "finish_reason": None}
                        ],
                    }
                )
                for piece in pieces
                if piece
            ]
            return MockStream(chunks)

        return ChatCompletion.model_validate(
            {
                "id": "chatcmpl-mock",
                "object": "chat.completion",
                "created": created,
                "model": model,
                "choices": [
                    {
                        "index": 0,
                        "message": {"role": "assistant", "content": text},
                        "finish_reason": "stop",
                    }
                ],
                "usage": {"prompt_tokens": 10, "completion_tokens": 10, "total_tokens": 20},
            }
        )


class _MockChat:
    def __init__(self) -> None:
        self.completions = _MockCompletions()


class _MockEmbeddings:
    async def create(self, *, model: str, input: str, **_kwargs: Any) -> Any:  # noqa: A002
        digest = hashlib.sha256(input.encode("utf-8")).digest()
        vector = [b / 255.0 for b in digest[:_EMBEDDING_DIMENSIONS]]
        return CreateEmbeddingResponse.model_validate(
            {
                "object": "list",
                "model": model,
                "data": [{"object": "embedding", "index": 0, "embedding": vector}],
                "usage": {"prompt_tokens": 1, "total_tokens": 1},
            }
        )


class MockChatClient:
    """Mock transport for testing without API calls.

    Echoes the latest user message, streaming it word by word when asked to.
    """

    def __init__(self) -> None:
        self.chat = _MockChat()
        self.embeddings = _MockEmbeddings()
        self.closed = False

    async def close(self) -> None:
        self.closed = True
