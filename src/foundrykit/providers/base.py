"""Transport protocol: the slice of the ``openai`` client foundrykit relies on."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias, runtime_checkable

from foundrykit.models import ModelResponseChunk

#: Receives each streamed text delta, as a plain or async callable. Raising aborts
#: the stream.
ChunkSink: TypeAlias = Callable[[ModelResponseChunk], Awaitable[None] | None]


class _Completions(Protocol):
    async def create(self, **kwargs: Any) -> Any: ...


class _Chat(Protocol):
    @property
    def completions(self) -> _Completions: ...


class _Embeddings(Protocol):
    async def create(self, **kwargs: Any) -> Any: ...


@runtime_checkable
class ChatTransport(Protocol):
    """Minimal transport protocol: chat completions, embeddings, close.

    ``chat.completions.create(**params)`` returns a complete response;
    ``chat.completions.create(**params, stream=True)`` returns an async
    iterable of chunks with a ``close()`` method.
    """

    @property
    def chat(self) -> _Chat:
        """Chat namespace exposing ``completions.create``."""
        ...

    @property
    def embeddings(self) -> _Embeddings:
        """Embeddings namespace exposing ``create``."""
        ...

    async def close(self) -> None:
        """Release connection resources."""
        ...
