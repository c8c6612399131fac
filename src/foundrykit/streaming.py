"""Reassemble streamed chat completion chunks into one ModelResponse.

The wire protocol sends text and tool-call arguments as small deltas. Tool-call
fragments are keyed by their ``index`` and may interleave across calls, so each
index gets its own buffer. Text deltas are forwarded to the caller's sink as
they arrive.

The sink is called in line from the accumulation loop; ``assemble_stream``
awaits it when it is a coroutine function. If it raises, the stream is aborted;
that is the only way to stop a stream midway short of cancelling the task.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import inspect
import logging
from typing import TYPE_CHECKING, Any

from foundrykit.errors import (
    FoundryError,
    InternalError,
    StreamingCallbackError,
    ToolCallDecodeError,
)
from foundrykit.models import (
    FinishReason,
    Message,
    ModelResponse,
    ModelResponseChunk,
    Part,
    Role,
    TextPart,
    ToolRequestPart,
)
from foundrykit.providers._errors import wrap_provider_error
from foundrykit.response import decode_tool_arguments

if TYPE_CHECKING:
    from collections.abc import AsyncIterable

    from foundrykit.models import ModelRequest
    from foundrykit.providers.base import ChunkSink

log = logging.getLogger(__name__)

PROVIDER = "azureaifoundry"


class StreamState(str, Enum):
    OPEN = "open"
    ASSEMBLED = "assembled"
    FAILED = "failed"


@dataclass
class ToolCallFragment:
    """Accumulated state for the tool call at one stream index."""

    index: int
    id: str = ""
    name: str = ""
    arguments: list[str] = field(default_factory=list)

    def merge(self, delta: Any) -> None:
        """Fold one wire tool-call delta into this fragment."""
        call_id = getattr(delta, "id", None)
        if call_id and not self.id:
            self.id = call_id
        function = getattr(delta, "function", None)
        if function is None:
            return
        name = getattr(function, "name", None)
        if name:
            self.name = name
        arguments = getattr(function, "arguments", None)
        if arguments:
            self.arguments.append(arguments)

    @property
    def argument_text(self) -> str:
        return "".join(self.arguments)


class StreamAccumulator:
    """Fold chat completion chunks into a single model response.

    Feed chunks in arrival order with ``feed()``, then call ``build()`` once the
    stream has ended cleanly.
    """

    def __init__(
        self,
        on_chunk: ChunkSink | None = None,
        *,
        model: str | None = None,
        request: ModelRequest | None = None,
    ) -> None:
        self._on_chunk = on_chunk
        self._model = model
        self._request = request
        self._text: list[str] = []
        self._fragments: dict[int, ToolCallFragment] = {}
        self.state = StreamState.OPEN

    @property
    def text(self) -> str:
        """Text accumulated so far."""
        return "".join(self._text)

    @property
    def fragments(self) -> dict[int, ToolCallFragment]:
        return dict(self._fragments)

    def _ensure_open(self) -> None:
        if self.state is not StreamState.OPEN:
            raise InternalError(f"StreamAccumulator is {self.state.value}, not open")

    def fail(self) -> None:
        """Discard everything accumulated and refuse further input."""
        self._text.clear()
        self._fragments.clear()
        self.state = StreamState.FAILED

    def feed(self, chunk: Any) -> None:
        """Process one wire chunk, calling a synchronous sink.

        Use :meth:`afeed` when the sink is a coroutine function.

        Raises:
            StreamingCallbackError: The sink raised while handling a text delta,
                or returned an awaitable.
        """
        content = self._apply(chunk)
        if not content or self._on_chunk is None:
            return
        result = self._emit(self._on_chunk, content)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            self.fail()
            raise StreamingCallbackError(
                f"streaming callback for model {self._model!r} returned an awaitable",
                hint="Use afeed() or assemble_stream() with async sinks.",
                model=self._model,
            )

    async def afeed(self, chunk: Any) -> None:
        """Process one wire chunk, awaiting the sink when it is async.

        Raises:
            StreamingCallbackError: The sink raised while handling a text delta.
        """
        content = self._apply(chunk)
        if not content or self._on_chunk is None:
            return
        result = self._emit(self._on_chunk, content)
        if inspect.isawaitable(result):
            try:
                await result
            except Exception as e:
                raise self._sink_failed(e) from e

    def _apply(self, chunk: Any) -> str | None:
        """Fold *chunk* into the buffers and return its text delta, if any."""
        self._ensure_open()
        choices = getattr(chunk, "choices", None)
        if not choices:
            # Content-filter preambles and usage-only tails carry no choices.
            return None
        delta = getattr(choices[0], "delta", None)
        if delta is None:
            return None

        content = getattr(delta, "content", None) or None
        if content:
            self._text.append(content)

        for tool_delta in getattr(delta, "tool_calls", None) or []:
            index = tool_delta.index
            fragment = self._fragments.get(index)
            if fragment is None:
                fragment = self._fragments[index] = ToolCallFragment(index=index)
            fragment.merge(tool_delta)
        return content

    def _emit(self, sink: ChunkSink, text: str) -> Any:
        try:
            return sink(ModelResponseChunk(content=(TextPart(text),)))
        except Exception as e:
            raise self._sink_failed(e) from e

    def _sink_failed(self, exc: Exception) -> StreamingCallbackError:
        self.fail()
        return StreamingCallbackError(
            f"streaming callback error for model {self._model!r}: {exc}",
            model=self._model,
        )

    def build(self) -> ModelResponse:
        """Assemble the final response.

        Text comes first, then one tool request per named fragment in ascending
        index order. Callers should not depend on that order.

        Raises:
            ToolCallDecodeError: A fragment's arguments are not a JSON object.
                Unlike the non-streaming path, this fails the whole response.
        """
        self._ensure_open()
        content: list[Part] = []
        text = self.text
        if text:
            content.append(TextPart(text))

        for index in sorted(self._fragments):
            fragment = self._fragments[index]
            if not fragment.name:
                log.debug("Skipping tool call fragment %d: no name received", index)
                continue
            raw = fragment.argument_text
            try:
                args = decode_tool_arguments(raw) if raw else {}
            except ValueError as e:
                self.fail()
                raise ToolCallDecodeError(
                    f"failed to decode tool arguments for {fragment.name!r}: {e}",
                    tool_name=fragment.name,
                    model=self._model,
                ) from e
            content.append(
                ToolRequestPart(name=fragment.name, input=args, ref=fragment.id or None)
            )

        self.state = StreamState.ASSEMBLED
        return ModelResponse(
            message=Message(role=Role.MODEL, content=tuple(content)),
            finish_reason=FinishReason.STOP,
            request=self._request,
        )


async def _release(stream: Any, model: str | None) -> None:
    close = getattr(stream, "close", None)
    if close is None:
        return
    try:
        result = close()
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        # Never let a close failure mask the call's outcome.
        log.debug("Ignoring error while closing stream for %s: %s", model, e)


async def assemble_stream(
    stream: AsyncIterable[Any],
    *,
    on_chunk: ChunkSink | None = None,
    model: str | None = None,
    request: ModelRequest | None = None,
) -> ModelResponse:
    """Consume *stream* to completion and return the assembled response.

    The stream is closed exactly once whatever the outcome. A failed stream
    never yields a partial response.

    Args:
        stream: Async iterable of chat completion chunks, typically an
            ``openai.AsyncStream``.
        on_chunk: Optional sink called with each text delta; awaited when it
            returns an awaitable.
        model: Model name attached to errors.
        request: Originating request, attached to the response.

    Raises:
        StreamingCallbackError: The sink raised.
        StreamError: The transport failed while streaming.
        ToolCallDecodeError: Accumulated tool arguments are not valid JSON.
    """
    accumulator = StreamAccumulator(on_chunk, model=model, request=request)
    try:
        try:
            async for chunk in stream:
                await accumulator.afeed(chunk)
        except FoundryError:
            raise
        except Exception as e:
            accumulator.fail()
            raise wrap_provider_error(
                e,
                provider=PROVIDER,
                phase="stream",
                allow_network_errors=True,
                message=f"stream error for model {model!r}",
                model=model,
            ) from e
    finally:
        await _release(stream, model)

    return accumulator.build()
