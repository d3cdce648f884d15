"""Embedding provider decorator backed by the call cache."""

from typing import List, Optional

from docstruct.cache import CallCache
from docstruct.helper.hashing import build_call_key
from docstruct.logging import logger
from docstruct.providers.base import EmbeddingProvider


class CachedEmbeddingProvider(EmbeddingProvider):
    """Cache-aside wrapper: cache first, provider on miss, then store."""

    def __init__(self, provider: EmbeddingProvider, cache: CallCache):
        self.provider = provider
        self.cache = cache

    async def get_embedding(
        self,
        text: str,
        model_override: Optional[str] = None,
    ) -> List[float]:
        key = build_call_key(
            "get_embedding",
            self.provider.config_fingerprint(),
            model_override or "",
            text,
        )
        cached = await self.cache.get_data(key)
        if cached is not None:
            logger.debug("Using cached embedding")
            return cached

        embedding = await self.provider.get_embedding(text, model_override=model_override)
        await self.cache.put_data(key, embedding)
        return embedding

    def config_fingerprint(self) -> str:
        return self.provider.config_fingerprint()
