from .chat import OllamaChatProvider

__all__ = ["OllamaChatProvider"]
