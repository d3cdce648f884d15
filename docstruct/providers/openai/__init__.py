from .chat import OpenAIChatProvider
from .embeddings import OpenAIEmbeddingProvider

__all__ = ["OpenAIChatProvider", "OpenAIEmbeddingProvider"]
