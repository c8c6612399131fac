"""foundrykit: chat and tool calling against Azure AI Foundry deployments.

Public API:
    - connect(): Build an immutable FoundryClient from a Config
    - FoundryClient.generate(): One model turn, optionally streamed to a sink
    - build_chat_request() / assemble_response() / assemble_stream(): the
      translation layer, usable with any OpenAI-compatible transport
"""

from __future__ import annotations

import logging

from foundrykit.capabilities import ModelInfo, ModelSupports, infer_model_info
from foundrykit.config import Config
from foundrykit.errors import (
    APIError,
    ConfigurationError,
    FoundryError,
    InternalError,
    RateLimitError,
    StreamError,
    StreamingCallbackError,
    ToolCallDecodeError,
)
from foundrykit.finish import map_finish_reason
from foundrykit.messages import to_wire_messages
from foundrykit.models import (
    Document,
    EmbedRequest,
    EmbedResponse,
    Embedding,
    FinishReason,
    MediaPart,
    Message,
    ModelRequest,
    ModelResponse,
    ModelResponseChunk,
    Part,
    Role,
    TextPart,
    ToolDefinition,
    ToolRequestPart,
    ToolResponsePart,
    Usage,
)
from foundrykit.providers.foundry import FoundryClient, connect
from foundrykit.request import build_chat_request
from foundrykit.response import assemble_response
from foundrykit.sampling import SamplingConfig, ToolChoice, extract_sampling_config
from foundrykit.streaming import StreamAccumulator, assemble_stream

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("foundrykit")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("foundrykit").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Client
    "Config",
    "connect",
    "FoundryClient",
    # Models
    "Role",
    "Part",
    "TextPart",
    "ToolRequestPart",
    "ToolResponsePart",
    "MediaPart",
    "Message",
    "ToolDefinition",
    "ModelRequest",
    "ModelResponse",
    "ModelResponseChunk",
    "FinishReason",
    "Usage",
    "Document",
    "EmbedRequest",
    "EmbedResponse",
    "Embedding",
    "ModelInfo",
    "ModelSupports",
    "infer_model_info",
    # Translation
    "SamplingConfig",
    "ToolChoice",
    "extract_sampling_config",
    "to_wire_messages",
    "build_chat_request",
    "assemble_response",
    "map_finish_reason",
    "StreamAccumulator",
    "assemble_stream",
    # Errors
    "FoundryError",
    "ConfigurationError",
    "InternalError",
    "APIError",
    "RateLimitError",
    "StreamError",
    "StreamingCallbackError",
    "ToolCallDecodeError",
    "__version__",
]
