"""Capability flags inferred from a deployment's model name."""

from __future__ import annotations

from dataclasses import dataclass

# Substrings of model families known to accept function tools.
_TOOL_MODEL_MARKERS = ("gpt-4", "gpt-35-turbo", "gpt-3.5-turbo")


@dataclass(frozen=True)
class ModelSupports:
    """Feature flags exposed by a model."""

    multiturn: bool
    tools: bool
    system_role: bool
    media: bool = False


@dataclass(frozen=True)
class ModelInfo:
    label: str
    supports: ModelSupports


def infer_model_info(name: str, *, supports_vision: bool = False) -> ModelInfo:
    """Infer capabilities from *name*.

    Tool support is detected by name only; vision cannot be inferred and must
    be declared by the caller.
    """
    lowered = name.lower()
    return ModelInfo(
        label=name,
        supports=ModelSupports(
            multiturn=True,
            tools=any(marker in lowered for marker in _TOOL_MODEL_MARKERS),
            system_role=True,
            media=supports_vision,
        ),
    )
