"""
Segmentation Call
=================

Asks the chat model to insert paragraph breaks into one chunk of text.

The model may reformat but must not rewrite, so every response is compared
against the chunk with a Levenshtein distance over whitespace-normalized text.
Responses that drift too far are retried; after the last attempt the closest
response is used anyway.
"""

from typing import List, Optional, Tuple

from rapidfuzz.distance import Levenshtein

from docstruct.cache import CallCache
from docstruct.config import config
from docstruct.core.exceptions import ConfigValueError
from docstruct.helper.hashing import build_call_key
from docstruct.logging import logger
from docstruct.providers.base import ChatProvider
from docstruct.structify.prompts import STRUCTIFY_PROMPT


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def edit_distance(a: str, b: str) -> int:
    return Levenshtein.distance(a, b)


def parse_paragraphs(content: str) -> List[str]:
    """
    Group contiguous non-blank lines into paragraphs.

    Each line is trimmed and the lines of a group are joined with single
    spaces; blank lines only delimit.
    """
    paragraphs: List[str] = []
    current: List[str] = []

    for line in content.splitlines():
        line = line.strip()
        if line:
            current.append(line)
        elif current:
            paragraphs.append(" ".join(current))
            current = []

    if current:
        paragraphs.append(" ".join(current))
    return paragraphs


def paragraphs_call_key(chat_provider: ChatProvider, text: str) -> str:
    return build_call_key(
        "get_paragraphs",
        chat_provider.config_fingerprint(),
        STRUCTIFY_PROMPT,
        text,
    )


async def get_paragraphs(
    cache: CallCache,
    chat_provider: ChatProvider,
    text: str,
    max_distance: Optional[int] = None,
    max_retries: Optional[int] = None,
) -> List[str]:
    """Split `text` into paragraphs, reusing a cached split when available."""
    max_distance = config.MAX_DISTANCE if max_distance is None else max_distance
    max_retries = config.MAX_RETRIES if max_retries is None else max_retries
    if max_retries < 1:
        raise ConfigValueError(f"MAX_RETRIES must be at least 1, got {max_retries}")

    call_key = paragraphs_call_key(chat_provider, text)
    cached = await cache.get_data(call_key)
    if cached is not None:
        logger.debug("Using cached paragraphs")
        return list(cached)

    expected = normalize_whitespace(text)
    attempts: List[Tuple[int, str]] = []
    content: Optional[str] = None

    for attempt in range(1, max_retries + 1):
        message = await chat_provider.run_chat(STRUCTIFY_PROMPT, text)
        distance = edit_distance(normalize_whitespace(message.content), expected)
        logger.info(
            f"Paragraphs Levenshtein distance: {distance}, "
            f"retry number: {attempt} (of {max_retries})"
        )

        if distance <= max_distance:
            content = message.content
            break

        attempts.append((distance, message.content))
        if attempt < max_retries:
            logger.warning(f"Paragraphs distance too high: {distance}, retrying...")

    if content is None:
        # min() keeps the earliest attempt among equal distances
        best_distance, content = min(attempts, key=lambda a: a[0])
        logger.warning(
            f"Too many changes after {max_retries} attempts. "
            f"Using the best result with distance: {best_distance}"
        )

    paragraphs = parse_paragraphs(content)
    await cache.put_data(call_key, paragraphs)
    return paragraphs
