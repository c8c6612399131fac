"""Sampling parameters parsed from a request's untyped config bag.

Parsing is best-effort: a field with the wrong type is treated as absent and
never raises, so a half-valid config still yields the fields it got right.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

log = logging.getLogger(__name__)


class ToolChoice(str, Enum):
    """Tool-choice policy. ``UNSET`` leaves the provider default in place."""

    AUTO = "auto"
    REQUIRED = "required"
    NONE = "none"
    UNSET = "unset"


_KNOWN_KEYS = frozenset({"maxOutputTokens", "temperature", "topP", "toolChoice"})
_TOOL_CHOICE_LITERALS = {
    "auto": ToolChoice.AUTO,
    "required": ToolChoice.REQUIRED,
    "none": ToolChoice.NONE,
}


def _as_int(value: Any) -> int | None:
    # bool is an int subclass; a flag is never a token count.
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


@dataclass(frozen=True)
class SamplingConfig:
    """Typed sampling parameters; ``None`` means unset."""

    max_output_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    tool_choice: ToolChoice = ToolChoice.UNSET

    @classmethod
    def from_config(cls, value: Any) -> SamplingConfig:
        """Parse a config bag into a SamplingConfig.

        Recognized keys are ``maxOutputTokens``, ``temperature``, ``topP`` and
        ``toolChoice``. Unknown keys and mistyped values are ignored.

        Args:
            value: A mapping, an existing SamplingConfig, or anything else
                (treated as empty).

        Returns:
            A SamplingConfig with every unusable field left unset.
        """
        if isinstance(value, SamplingConfig):
            return value
        if not isinstance(value, Mapping):
            if value is not None:
                log.debug("Ignoring non-mapping config of type %s", type(value).__name__)
            return cls()

        unknown = [k for k in value if k not in _KNOWN_KEYS]
        if unknown:
            log.debug("Ignoring unrecognized config keys: %s", sorted(map(str, unknown)))

        raw_choice = value.get("toolChoice")
        tool_choice = ToolChoice.UNSET
        if isinstance(raw_choice, str):
            tool_choice = _TOOL_CHOICE_LITERALS.get(raw_choice, ToolChoice.UNSET)

        return cls(
            max_output_tokens=_as_int(value.get("maxOutputTokens")),
            temperature=_as_float(value.get("temperature")),
            top_p=_as_float(value.get("topP")),
            tool_choice=tool_choice,
        )


def extract_sampling_config(value: Any) -> SamplingConfig:
    """Functional alias for :meth:`SamplingConfig.from_config`."""
    return SamplingConfig.from_config(value)
