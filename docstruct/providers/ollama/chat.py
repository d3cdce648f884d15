from typing import Any, Dict, Optional

import httpx

from docstruct.config import config
from docstruct.core.exceptions import LLMError
from docstruct.helper.hashing import config_fingerprint
from docstruct.helper.http_utils import create_http_client, http_request_with_retry
from docstruct.logging import logger
from docstruct.providers.base import ChatMessage, ChatProvider, Role


class OllamaChatProvider(ChatProvider):
    """
    Chat completion via the Ollama HTTP API.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model or config.OLLAMA_MODEL
        self.base_url = (base_url or config.OLLAMA_BASE_URL).rstrip("/")
        self.temperature = temperature
        self.client = http_client or create_http_client()
        self._owns_client = http_client is None

    async def run_chat(
        self,
        system_prompt: str,
        user_text: str,
        model_override: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> ChatMessage:
        payload: Dict[str, Any] = {
            "model": model_override or self.model,
            "messages": [
                ChatMessage(Role.SYSTEM, system_prompt).to_dict(),
                ChatMessage(Role.USER, user_text).to_dict(),
            ],
            "stream": False,
        }
        if self.temperature is not None:
            payload["options"] = {"temperature": self.temperature}
        if response_format is not None:
            # Ollama only understands "json" or a JSON schema here
            payload["format"] = response_format.get("json_schema", {}).get("schema", "json")

        logger.info(f"Ollama request to {self.base_url}/api/chat")
        data = await http_request_with_retry(
            self.client,
            f"{self.base_url}/api/chat",
            payload,
            service_name="Ollama",
        )

        message = data.get("message") or {}
        if message.get("role", "assistant") != Role.ASSISTANT.value:
            raise LLMError(f"Unexpected role in Ollama response: {message.get('role')}")
        content = message.get("content")
        if content is None:
            raise LLMError(f"Empty Ollama response: {data}")
        return ChatMessage(Role.ASSISTANT, content)

    def config_fingerprint(self) -> str:
        temperature = None if self.temperature is None else str(self.temperature)
        return config_fingerprint("ollama", self.base_url, self.model, temperature)

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
