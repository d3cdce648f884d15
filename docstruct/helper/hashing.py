"""Content hashing for cache keys and provider fingerprints."""

import base64
import hashlib
from typing import Optional, Union


def get_hash_value(data: Union[str, bytes]) -> str:
    """BLAKE2b-256 digest of `data`, base64url encoded without padding."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    digest = hashlib.blake2b(data, digest_size=32).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def config_fingerprint(*parts: Optional[str]) -> str:
    """
    Fingerprint of a provider configuration.

    Missing parts hash as empty strings, so `(key, None, model)` and
    `(key, "", model)` collide while any set value changes the result.
    """
    return get_hash_value(":".join(p or "" for p in parts))


def build_call_key(operation: str, fingerprint: str, prompt: str, payload: str) -> str:
    """Cache key of one model-bound call."""
    return get_hash_value(f"{operation}:\n{fingerprint}\n\n{prompt}\n\n{payload}")
