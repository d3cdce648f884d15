from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from docstruct.config import config
from docstruct.core.exceptions import LLMError
from docstruct.helper.hashing import config_fingerprint
from docstruct.helper.http_utils import create_http_client, http_request_with_retry
from docstruct.logging import logger
from docstruct.providers.base import ChatMessage, ChatProvider, Role
from .schemas import ChatCompletionsResponse

CHAT_ENDPOINT = "v1/chat/completions"


class OpenAIChatProvider(ChatProvider):
    """Chat completions against any OpenAI-compatible server.

    Can use either a shared HTTP client (via the container) or its own.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else config.OPENAI_API_KEY
        self.base_url = (base_url or config.OPENAI_BASE_URL).rstrip("/")
        self.model = model or config.OPENAI_CHAT_MODEL
        self.temperature = temperature
        self.client = http_client or create_http_client()
        self._owns_client = http_client is None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{CHAT_ENDPOINT}"

    def _headers(self) -> Dict[str, str]:
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}

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
        }
        if response_format is not None:
            payload["response_format"] = response_format
        if self.temperature is not None:
            payload["temperature"] = self.temperature

        logger.debug(f"Calling chat API at {self.endpoint}")
        data = await http_request_with_retry(
            self.client,
            self.endpoint,
            payload,
            service_name="Chat API",
            headers=self._headers(),
        )

        try:
            res = ChatCompletionsResponse.model_validate(data)
        except ValidationError as e:
            raise LLMError(f"Failed to parse response from chat API: {e}") from e

        if not res.choices:
            raise LLMError("Empty response from chat API")

        choice = res.choices[0]
        if choice.message.role != Role.ASSISTANT:
            raise LLMError(f"Unexpected role in response from chat API: {choice.message.role.value}")

        logger.info(
            f"Chat API call completed: model={res.model}, "
            f"finish_reason={choice.finish_reason}, usage={res.usage}"
        )
        return ChatMessage(Role.ASSISTANT, choice.message.content or "")

    def config_fingerprint(self) -> str:
        temperature = None if self.temperature is None else str(self.temperature)
        return config_fingerprint("openai", self.api_key, self.base_url, self.model, temperature)

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
