"""Wire models for the OpenAI-compatible HTTP API."""

from typing import List, Optional

from pydantic import BaseModel

from docstruct.providers.base import Role


class ChatMessageModel(BaseModel):
    role: Role
    content: Optional[str] = None


class Choice(BaseModel):
    message: ChatMessageModel
    finish_reason: Optional[str] = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionsResponse(BaseModel):
    model: str
    choices: List[Choice]
    usage: Optional[Usage] = None


class EmbeddingData(BaseModel):
    embedding: List[float]
    index: int = 0


class EmbeddingsResponse(BaseModel):
    model: Optional[str] = None
    data: List[EmbeddingData]
