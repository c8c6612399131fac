"""Transport-facing pieces: protocol, error mapping, mock client.

The Foundry client itself lives in ``foundrykit.providers.foundry`` and is
re-exported from the package root.
"""

from .base import ChatTransport, ChunkSink
from .mock import MockChatClient

__all__ = [
    "ChatTransport",
    "ChunkSink",
    "MockChatClient",
]
