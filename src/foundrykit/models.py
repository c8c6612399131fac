"""Provider-agnostic chat and tool-calling models.

Content parts form a closed union (``Part``). Translation code matches on the
concrete part classes rather than dispatching through methods on them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from foundrykit.errors import ConfigurationError


class Role(str, Enum):
    """Author of a message."""

    SYSTEM = "system"
    USER = "user"
    MODEL = "model"
    TOOL = "tool"


class FinishReason(str, Enum):
    """Why the model stopped generating."""

    STOP = "stop"
    LENGTH = "length"
    BLOCKED = "blocked"
    OTHER = "other"
    #: Only produced when the provider returned no choices at all.
    UNKNOWN = "unknown"


_ROLE_ALIASES = {"assistant": Role.MODEL}


@dataclass(frozen=True)
class TextPart:
    """Plain text content."""

    text: str


@dataclass(frozen=True)
class ToolRequestPart:
    """A request from the model to call a tool."""

    name: str
    input: Any = None
    ref: str | None = None


@dataclass(frozen=True)
class ToolResponsePart:
    """The result of a tool call, sent back to the model."""

    name: str
    output: Any = None
    ref: str | None = None


@dataclass(frozen=True)
class MediaPart:
    """Opaque media reference. Carried along but never translated."""

    url: str
    content_type: str | None = None


Part = TextPart | ToolRequestPart | ToolResponsePart | MediaPart


@dataclass(frozen=True)
class Message:
    """One conversational turn made of ordered parts."""

    role: Role
    content: tuple[Part, ...] = ()

    def __post_init__(self) -> None:
        """Normalize role aliases and freeze the part sequence."""
        role = self.role
        if not isinstance(role, Role):
            try:
                role = _ROLE_ALIASES.get(role) or Role(role)
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown message role: {self.role!r}",
                    hint="Use one of 'system', 'user', 'model' ('assistant'), 'tool'.",
                ) from e
            object.__setattr__(self, "role", role)
        if not isinstance(self.content, tuple):
            object.__setattr__(self, "content", tuple(self.content))

    @property
    def text(self) -> str:
        """Concatenated text of every TextPart, in order."""
        return "".join(p.text for p in self.content if isinstance(p, TextPart))

    @property
    def tool_requests(self) -> list[ToolRequestPart]:
        return [p for p in self.content if isinstance(p, ToolRequestPart)]


@dataclass(frozen=True)
class ToolDefinition:
    """A tool the model may call. ``input_schema`` is passed through verbatim."""

    name: str
    description: str = ""
    input_schema: dict[str, Any] | None = None


@dataclass(frozen=True)
class ModelRequest:
    """Everything needed to ask a model for one response.

    ``config`` is an untyped bag (usually a dict from the host framework) or a
    ``SamplingConfig``; it is parsed leniently when the wire request is built.
    """

    messages: tuple[Message, ...] = ()
    tools: tuple[ToolDefinition, ...] = ()
    config: Any = None

    def __post_init__(self) -> None:
        """Freeze list inputs into tuples."""
        if not isinstance(self.messages, tuple):
            object.__setattr__(self, "messages", tuple(self.messages))
        if not isinstance(self.tools, tuple):
            object.__setattr__(self, "tools", tuple(self.tools or ()))


@dataclass(frozen=True)
class Usage:
    """Token counters. All zero when the provider did not report usage."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class ModelResponse:
    """A complete model turn: message, finish reason and usage."""

    message: Message
    finish_reason: FinishReason
    usage: Usage = field(default_factory=Usage)
    request: ModelRequest | None = None

    @property
    def text(self) -> str:
        return self.message.text

    @property
    def tool_requests(self) -> list[ToolRequestPart]:
        return self.message.tool_requests


@dataclass(frozen=True)
class ModelResponseChunk:
    """An incremental piece of a streamed response, delivered to the sink."""

    content: tuple[Part, ...] = ()

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.content if isinstance(p, TextPart))


# --- Embeddings ---


@dataclass(frozen=True)
class Document:
    """Input to an embedder."""

    content: tuple[Part, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.content, tuple):
            object.__setattr__(self, "content", tuple(self.content))

    @classmethod
    def from_text(cls, text: str) -> Document:
        return cls(content=(TextPart(text),))

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.content if isinstance(p, TextPart))


@dataclass(frozen=True)
class EmbedRequest:
    documents: tuple[Document, ...] = ()

    def __post_init__(self) -> None:
        """Freeze list inputs into a tuple."""
        if not isinstance(self.documents, tuple):
            object.__setattr__(self, "documents", tuple(self.documents))


@dataclass(frozen=True)
class Embedding:
    vector: list[float]


@dataclass(frozen=True)
class EmbedResponse:
    embeddings: list[Embedding] = field(default_factory=list)
