"""Exception hierarchy for foundrykit."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class FoundryError(Exception):
    """Base exception for all foundrykit errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(FoundryError):
    """Configuration validation or resolution failed."""


class InternalError(FoundryError):
    """A foundrykit internal error (bug) or invariant violation."""


class APIError(FoundryError):
    """API call failed.

    ``retryable`` and ``retry_after_s`` are informational: foundrykit never
    retries, but callers that own the transport can act on them.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        retryable: bool | None = None,
        status_code: int | None = None,
        retry_after_s: float | None = None,
        provider: str | None = None,
        phase: str | None = None,
        model: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.retryable = retryable
        self.status_code = status_code
        self.retry_after_s = retry_after_s
        self.provider = provider
        self.phase = phase
        self.model = model


class RateLimitError(APIError):
    """Rate limit exceeded (HTTP 429)."""


class StreamError(APIError):
    """The transport reported an error while a response was streaming."""


class StreamingCallbackError(FoundryError):
    """The caller's chunk sink raised; the stream was aborted.

    Chunks delivered before the failure are not rolled back.
    """

    def __init__(
        self, message: str, *, hint: str | None = None, model: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.model = model


class ToolCallDecodeError(FoundryError):
    """Accumulated tool-call arguments from a stream are not a JSON object."""

    def __init__(
        self,
        message: str,
        *,
        tool_name: str,
        hint: str | None = None,
        model: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.tool_name = tool_name
        self.model = model


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
