import asyncio
from typing import Any, Dict, Optional

from google import genai

from docstruct.config import config
from docstruct.core.exceptions import ConfigMissingError, LLMError
from docstruct.helper.hashing import config_fingerprint
from docstruct.providers.base import ChatMessage, ChatProvider, Role


class GeminiChatProvider(ChatProvider):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        self.api_key = api_key or config.GEMINI_API_KEY
        if not self.api_key:
            raise ConfigMissingError("GEMINI_API_KEY is not configured")
        self.model = model or config.GEMINI_MODEL
        self.temperature = temperature
        self.client = genai.Client(api_key=self.api_key)

    async def run_chat(
        self,
        system_prompt: str,
        user_text: str,
        model_override: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> ChatMessage:
        gen_config: Dict[str, Any] = {"system_instruction": system_prompt}
        if self.temperature is not None:
            gen_config["temperature"] = self.temperature
        if response_format is not None:
            gen_config["response_mime_type"] = "application/json"

        # the SDK call is blocking
        try:
            resp = await asyncio.to_thread(
                self.client.models.generate_content,
                model=model_override or self.model,
                contents=user_text,
                config=gen_config,
            )
        except Exception as e:
            raise LLMError(f"Gemini request failed: {e}") from e

        return ChatMessage(Role.ASSISTANT, resp.text or "")

    def config_fingerprint(self) -> str:
        temperature = None if self.temperature is None else str(self.temperature)
        return config_fingerprint("gemini", self.api_key, self.model, temperature)
