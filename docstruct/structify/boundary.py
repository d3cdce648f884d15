"""
Boundary Reconciler
===================

Model output rarely tokenizes to exactly the source word count, even when it
kept the wording. To resume at the right place, the accepted paragraphs are
matched against growing prefixes of the original text and the closest prefix
wins.
"""

from typing import List, Optional, Sequence, Tuple

from docstruct.cache import CallCache
from docstruct.config import config
from docstruct.core.exceptions import EmptyInputError
from docstruct.helper.hashing import get_hash_value
from docstruct.structify.schemas import BoundaryResult, join_words
from docstruct.structify.segmentation import edit_distance


def boundary_call_key(accepted_paragraphs: Sequence[str], orig_text: str) -> str:
    return get_hash_value(
        "get_next_text_words:\n"
        + "\n".join(accepted_paragraphs)
        + "\n-----\n"
        + orig_text
    )


def find_boundary(
    accepted_paragraphs: Sequence[str],
    orig_text: str,
    check_words: Optional[int] = None,
) -> BoundaryResult:
    """
    Locate the end of `accepted_paragraphs` inside `orig_text`.

    Every prefix ending at index i, for max(N - check_words, 0) <= i <= N + check_words
    (N = word count of the paragraphs), is scored by edit distance. The first
    index with the minimal distance is the boundary.
    """
    check_words = config.BOUNDARY_CHECK_WORDS if check_words is None else check_words

    accepted_words = [w for p in accepted_paragraphs for w in p.split()]
    accepted_text = join_words(accepted_words)
    n_words = len(accepted_words)

    orig_words = orig_text.split()
    if not orig_words:
        raise EmptyInputError("No original words to reconcile against")

    # clamp so the window always contains at least the last word
    from_idx = min(max(n_words - check_words, 0), len(orig_words) - 1)
    to_idx = n_words + check_words

    distances: List[Tuple[int, int]] = []
    prefix = ""
    for i, word in enumerate(orig_words):
        prefix = f"{prefix} {word}" if prefix else word

        if i >= from_idx:
            distances.append((i, edit_distance(accepted_text, prefix)))

        if i >= to_idx:
            break

    best_idx, best_distance = min(distances, key=lambda d: d[1])

    return BoundaryResult(
        remaining_words=tuple(orig_words[best_idx + 1:]),
        skipped_words=best_idx,
        distance=best_distance,
    )


async def get_next_text_words(
    cache: CallCache,
    accepted_paragraphs: Sequence[str],
    orig_text: str,
    check_words: Optional[int] = None,
) -> BoundaryResult:
    """Cached `find_boundary`."""
    call_key = boundary_call_key(accepted_paragraphs, orig_text)

    cached = await cache.get_data(call_key)
    if cached is not None:
        return BoundaryResult.from_dict(cached)

    result = find_boundary(accepted_paragraphs, orig_text, check_words=check_words)
    await cache.put_data(call_key, result.to_dict())
    return result
