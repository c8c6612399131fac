"""Map ``openai`` SDK exceptions into foundrykit errors.

Every fatal transport failure leaves foundrykit as an APIError carrying the
provider, phase and model it came from.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from foundrykit.errors import (
    APIError,
    RateLimitError,
    StreamError,
    _walk_exception_chain,
)

# Status codes a caller-owned retry layer may treat as transient.
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 409, 429, 500, 502, 503, 504})

# Azure OpenAI sends millisecond hints alongside (or instead of) Retry-After.
_RETRY_AFTER_MS_HEADERS = ("retry-after-ms", "x-ms-retry-after-ms")


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        for attr in ("status_code", "status"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and 100 <= value <= 599:
                return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def _header_seconds(headers: Any, name: str, *, scale: float = 1.0) -> float | None:
    raw: Any = None
    try:
        raw = headers.get(name)
    except Exception:
        raw = None
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        seconds = float(raw) * scale
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def extract_retry_after_s(exc: BaseException) -> float | None:
    """Walk the exception chain to find a retry-after delay in seconds."""
    for e in _walk_exception_chain(exc):
        value = getattr(e, "retry_after", None)
        if isinstance(value, (int, float)) and value >= 0:
            return float(value)

        response = getattr(e, "response", None)
        headers: Any = getattr(response, "headers", None)
        if headers is None:
            continue
        for name in _RETRY_AFTER_MS_HEADERS:
            seconds = _header_seconds(headers, name, scale=0.001)
            if seconds is not None:
                return seconds
        seconds = _header_seconds(headers, "Retry-After")
        if seconds is not None:
            return seconds
    return None


def _auth_hint(status_code: int | None, cause_message: str) -> str | None:
    """Generate a hint for auth errors where naming the env var is useful."""
    cause_lower = cause_message.lower()
    if status_code in {401, 403} or (
        status_code == 400 and ("api key" in cause_lower or "api-key" in cause_lower)
    ):
        return (
            "Check credentials/permissions "
            "(try setting AZURE_OPENAI_API_KEY or Config.api_key)."
        )
    if status_code == 404:
        return (
            "Check that the model name matches a deployment on this endpoint "
            "(AZURE_OPENAI_ENDPOINT)."
        )
    return None


def wrap_provider_error(
    exc: BaseException,
    *,
    provider: str,
    phase: str,
    allow_network_errors: bool,
    message: str | None = None,
    hint: str | None = None,
    model: str | None = None,
) -> APIError:
    """Map provider SDK exceptions into APIError with stable metadata."""
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    # Already wrapped: fill in missing context only.
    if isinstance(exc, APIError):
        if exc.provider is None:
            exc.provider = provider
        if exc.phase is None:
            exc.phase = phase
        if exc.model is None:
            exc.model = model
        if hint is not None and exc.hint is None:
            exc.hint = hint
        return exc

    status_code = extract_status_code(exc)
    retry_after_s = extract_retry_after_s(exc)

    retryable = retry_after_s is not None
    if isinstance(status_code, int) and status_code in RETRYABLE_STATUS_CODES:
        retryable = True
    elif allow_network_errors:
        for e in _walk_exception_chain(exc):
            if isinstance(e, (httpx.TimeoutException, httpx.RequestError)):
                retryable = True
                break

    derived_hint = hint if hint is not None else _auth_hint(status_code, str(exc))

    msg = message or f"{provider} {phase} failed"

    err_cls: type[APIError] = APIError
    if phase == "stream":
        err_cls = StreamError
    elif status_code == 429:
        err_cls = RateLimitError

    status_note = f" (status={status_code})" if isinstance(status_code, int) else ""
    cause = str(exc)
    return err_cls(
        f"{msg}{status_note}: {cause}" if cause else f"{msg}{status_note}",
        hint=derived_hint,
        retryable=retryable,
        status_code=status_code,
        retry_after_s=retry_after_s,
        provider=provider,
        phase=phase,
        model=model,
    )
