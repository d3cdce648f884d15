"""Dependency Injection Container for docstruct."""

from typing import Optional

import httpx

from docstruct.config import config
from docstruct.core.exceptions import ConfigValueError
from docstruct.helper.http_utils import create_http_client
from docstruct.logging import logger
from docstruct.providers.base import ChatProvider, EmbeddingProvider


class Container:
    """Central dependency injection container.

    Manages creation and lifecycle of:
    - HTTP client with connection pooling
    - The chat provider, selected once from config
    - The embedding provider

    Providers can be injected directly, which is how tests swap in fakes.
    """

    def __init__(
        self,
        chat_provider: Optional[ChatProvider] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
    ):
        self._http_client: Optional[httpx.AsyncClient] = None
        self._chat_provider = chat_provider
        self._embedding_provider = embedding_provider

    def get_http_client(self) -> httpx.AsyncClient:
        """Get shared HTTP client; all HTTP providers use this one client."""
        if self._http_client is None:
            self._http_client = create_http_client()
        return self._http_client

    def get_chat_provider(self, provider_type: Optional[str] = None) -> ChatProvider:
        """Get chat provider instance (lazy loaded, singleton).

        Args:
            provider_type: "openai", "ollama" or "gemini".
                           Defaults to config.LLM_PROVIDER_TYPE

        Returns:
            ChatProvider instance
        """
        if self._chat_provider is not None:
            return self._chat_provider

        provider_type = (provider_type or config.LLM_PROVIDER_TYPE).lower()

        if provider_type == "openai":
            from docstruct.providers.openai import OpenAIChatProvider
            self._chat_provider = OpenAIChatProvider(
                temperature=config.LLM_TEMPERATURE,
                http_client=self.get_http_client(),
            )
        elif provider_type == "ollama":
            from docstruct.providers.ollama import OllamaChatProvider
            self._chat_provider = OllamaChatProvider(
                temperature=config.LLM_TEMPERATURE,
                http_client=self.get_http_client(),
            )
        elif provider_type == "gemini":
            from docstruct.providers.gemini import GeminiChatProvider
            self._chat_provider = GeminiChatProvider(temperature=config.LLM_TEMPERATURE)
        else:
            raise ConfigValueError(f"Unknown LLM provider type: {provider_type}")

        logger.info(f"Loaded chat provider: {provider_type}")
        return self._chat_provider

    def get_embedding_provider(self) -> EmbeddingProvider:
        """Get embedding provider instance (lazy loaded, singleton)."""
        if self._embedding_provider is None:
            from docstruct.providers.openai import OpenAIEmbeddingProvider
            self._embedding_provider = OpenAIEmbeddingProvider(
                http_client=self.get_http_client(),
            )
        return self._embedding_provider

    async def shutdown(self):
        """Close providers and the shared HTTP client."""
        if self._chat_provider is not None:
            await self._chat_provider.close()
        if self._embedding_provider is not None:
            await self._embedding_provider.close()

        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

        self._chat_provider = None
        self._embedding_provider = None


# Global container instance
_global_container: Optional[Container] = None


def get_container() -> Container:
    """Get global container instance (singleton)."""
    global _global_container
    if _global_container is None:
        _global_container = Container()
    return _global_container


async def shutdown_container():
    """Shutdown global container instance."""
    global _global_container
    if _global_container:
        await _global_container.shutdown()
        _global_container = None
