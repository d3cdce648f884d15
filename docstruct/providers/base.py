"""Base provider interfaces for abstracting model implementations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ChatProvider(ABC):
    """Abstract base class for chat completion models."""

    @abstractmethod
    async def run_chat(
        self,
        system_prompt: str,
        user_text: str,
        model_override: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> ChatMessage:
        """Send one system + user exchange and return the assistant message."""
        pass

    @abstractmethod
    def config_fingerprint(self) -> str:
        """Stable hash of everything in the configuration that affects output."""
        pass

    async def close(self):
        pass


class EmbeddingProvider(ABC):
    """Abstract base class for embedding models."""

    @abstractmethod
    async def get_embedding(
        self,
        text: str,
        model_override: Optional[str] = None,
    ) -> List[float]:
        """Generate embedding for a single text."""
        pass

    @abstractmethod
    def config_fingerprint(self) -> str:
        pass

    async def close(self):
        pass
