"""
Chunk Driver
============

Walks the whole word stream one bounded chunk at a time. Each chunk is
segmented; all but the last returned paragraph are accepted, the boundary of
the accepted paragraphs is reconciled against the original words, and the
next chunk starts right after it. The last paragraph of a non-final chunk is
provisional (likely cut by the chunk boundary) and is regenerated next round.

Strictly sequential: chunk k+1 depends on chunk k's boundary.
"""

from typing import Iterable, List, Optional

from docstruct.cache import CallCache
from docstruct.config import config
from docstruct.core.exceptions import EmptyInputError, InsufficientSegmentationError
from docstruct.logging import logger
from docstruct.providers.base import ChatProvider
from docstruct.structify.boundary import get_next_text_words
from docstruct.structify.schemas import WordStream, join_words
from docstruct.structify.segmentation import get_paragraphs


async def words_to_paragraphs(
    chat_provider: ChatProvider,
    cache: CallCache,
    words: Iterable[str],
    chunk_words: Optional[int] = None,
    max_distance: Optional[int] = None,
    max_retries: Optional[int] = None,
) -> List[str]:
    """
    Restructure a word stream into paragraphs.

    Args:
        chat_provider: Chat model used for segmentation calls
        cache: Call cache shared by every call site
        words: Source words, already split on whitespace
        chunk_words: Max words per chunk (defaults to config)
        max_distance: Fidelity threshold (defaults to config)
        max_retries: Fidelity attempts (defaults to config)

    Returns:
        Ordered paragraphs

    Raises:
        EmptyInputError: No words in the input
        InsufficientSegmentationError: A non-final chunk gave fewer than 2 paragraphs
    """
    chunk_words = config.CHUNK_WORDS_THRESHOLD if chunk_words is None else chunk_words

    all_words: WordStream = tuple(words)
    if not all_words:
        raise EmptyInputError("No words found in the input text!")

    result_paragraphs: List[str] = []
    iteration = 0

    while all_words:
        iteration += 1
        llm_text = join_words(all_words[:chunk_words])
        orig_text = join_words(all_words)
        last_chunk = llm_text == orig_text

        logger.info(
            f"Chunk {iteration}: {min(len(all_words), chunk_words)} of "
            f"{len(all_words)} remaining words{' (last)' if last_chunk else ''}"
        )

        paragraphs = await get_paragraphs(
            cache,
            chat_provider,
            llm_text,
            max_distance=max_distance,
            max_retries=max_retries,
        )

        if last_chunk:
            result_paragraphs.extend(paragraphs)
            break

        if len(paragraphs) < 2:
            raise InsufficientSegmentationError(
                "Failed to split text into paragraphs: too few paragraphs returned!"
            )

        accepted_paragraphs = paragraphs[:-1]
        result_paragraphs.extend(accepted_paragraphs)

        boundary = await get_next_text_words(cache, accepted_paragraphs, orig_text)
        logger.debug(
            f"Chunk {iteration}: boundary at word {boundary.skipped_words}, "
            f"distance {boundary.distance}"
        )
        all_words = boundary.remaining_words

    return result_paragraphs
