"""
Provider abstraction layer for pluggable models.
A single chat provider is chosen at configuration time; the engine only sees
the ChatProvider interface.
"""

from .base import (
    ChatMessage,
    ChatProvider,
    EmbeddingProvider,
    Role,
)

__all__ = [
    "ChatMessage",
    "ChatProvider",
    "EmbeddingProvider",
    "Role",
]
