from .chat import GeminiChatProvider

__all__ = ["GeminiChatProvider"]
