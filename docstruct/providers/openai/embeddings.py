from typing import List, Optional

import httpx
from pydantic import ValidationError

from docstruct.config import config
from docstruct.core.exceptions import EmbeddingError
from docstruct.helper.hashing import config_fingerprint
from docstruct.helper.http_utils import create_http_client, http_request_with_retry
from docstruct.providers.base import EmbeddingProvider
from .schemas import EmbeddingsResponse

EMBEDDING_ENDPOINT = "v1/embeddings"


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embeddings from an OpenAI-compatible server."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else config.OPENAI_API_KEY
        self.base_url = (base_url or config.OPENAI_BASE_URL).rstrip("/")
        self.model = model or config.OPENAI_EMBEDDING_MODEL
        self.client = http_client or create_http_client()
        self._owns_client = http_client is None

    async def get_embedding(
        self,
        text: str,
        model_override: Optional[str] = None,
    ) -> List[float]:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        data = await http_request_with_retry(
            self.client,
            f"{self.base_url}/{EMBEDDING_ENDPOINT}",
            {"model": model_override or self.model, "input": text},
            service_name="Embeddings API",
            headers=headers,
        )

        try:
            res = EmbeddingsResponse.model_validate(data)
        except ValidationError as e:
            raise EmbeddingError(f"Failed to parse response from embeddings API: {e}") from e

        if not res.data:
            raise EmbeddingError("Empty response from embeddings API")
        return list(res.data[0].embedding)

    def config_fingerprint(self) -> str:
        return config_fingerprint("openai-embeddings", self.api_key, self.base_url, self.model)

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
