"""Standardized exception hierarchy for the document restructuring engine."""


class DocstructError(Exception):
    """Base exception for all docstruct errors."""
    pass


# Provider errors
class ProviderError(DocstructError):
    """Base exception for provider-related errors."""
    pass


class LLMError(ProviderError):
    """Error during chat completion."""
    pass


class EmbeddingError(ProviderError):
    """Error during embedding operation."""
    pass


class ProviderConnectionError(ProviderError):
    """Cannot connect to provider service."""
    pass


class ProviderTimeoutError(ProviderError):
    """Provider request timed out."""
    pass


# Cache errors
class CacheError(DocstructError):
    """Error in the call cache."""
    pass


class CacheOpenError(CacheError):
    """Cache store could not be opened or initialized."""
    pass


class CacheReadError(CacheError):
    """Error reading from cache."""
    pass


class CacheWriteError(CacheError):
    """Error writing to cache."""
    pass


# Restructuring errors
class StructifyError(DocstructError):
    """Error while restructuring a document."""
    pass


class EmptyInputError(StructifyError):
    """Source text contains no words."""
    pass


class InsufficientSegmentationError(StructifyError):
    """A non-final chunk came back with fewer than two paragraphs."""
    pass


class ConsistencyError(StructifyError):
    """Section assignment does not cover every paragraph exactly once."""
    pass


# Configuration errors
class ConfigError(DocstructError):
    """Error in configuration."""
    pass


class ConfigValueError(ConfigError):
    """Invalid configuration value."""
    pass


class ConfigMissingError(ConfigError):
    """Required configuration missing."""
    pass
