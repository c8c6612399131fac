"""Finish reason mapping shared by the sync and streaming paths."""

from __future__ import annotations

from foundrykit.models import FinishReason

_FINISH_REASONS: dict[str, FinishReason] = {
    "stop": FinishReason.STOP,
    "length": FinishReason.LENGTH,
    "content_filter": FinishReason.BLOCKED,
    # The model stopped to let the caller run tools.
    "tool_calls": FinishReason.STOP,
    "function_call": FinishReason.STOP,
}


def map_finish_reason(reason: str | None) -> FinishReason:
    """Map a wire finish reason; anything unrecognized is ``OTHER``.

    Never returns ``UNKNOWN``, which is reserved for responses without choices.
    """
    if reason is None:
        return FinishReason.OTHER
    return _FINISH_REASONS.get(reason, FinishReason.OTHER)
