"""
Section Assembler
=================

Groups paragraphs into titled sections by reusing the paragraph machinery on
a second, much shorter document: one-sentence summaries of every paragraph.

1. Summarize each paragraph (cached, no fidelity check)
2. Run the chunk driver over the summary words to get section word-runs
3. Walk the summary words, tagged with their paragraph index, section by
   section; each paragraph goes to the section holding most of its words
4. Check that every paragraph landed in exactly one section
5. Title each group of consecutive paragraphs
"""

import asyncio
import json
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from docstruct.cache import CallCache
from docstruct.config import config
from docstruct.core.exceptions import ConfigValueError, ConsistencyError
from docstruct.helper.hashing import build_call_key
from docstruct.logging import logger
from docstruct.providers.base import ChatProvider
from docstruct.structify.boundary import get_next_text_words
from docstruct.structify.driver import words_to_paragraphs
from docstruct.structify.prompts import GET_SECTION_TITLE_PROMPT, SUMMARIZE_PARAGRAPH_PROMPT
from docstruct.structify.schemas import Section, join_words

# (paragraph index, summary word)
TaggedWord = Tuple[int, str]


async def _cached_chat(
    cache: CallCache,
    chat_provider: ChatProvider,
    operation: str,
    prompt: str,
    payload: str,
    user_text: str,
) -> str:
    call_key = build_call_key(operation, chat_provider.config_fingerprint(), prompt, payload)

    cached = await cache.get_data(call_key)
    if cached is not None:
        logger.debug(f"Using cached {operation} result")
        return cached

    message = await chat_provider.run_chat(prompt, user_text)
    await cache.put_data(call_key, message.content)
    return message.content


async def summarize_paragraph(
    cache: CallCache,
    chat_provider: ChatProvider,
    paragraph: str,
) -> str:
    return await _cached_chat(
        cache, chat_provider, "summarize_paragraphs", SUMMARIZE_PARAGRAPH_PROMPT, paragraph, paragraph
    )


async def summarize_paragraphs(
    cache: CallCache,
    chat_provider: ChatProvider,
    paragraphs: Sequence[str],
    max_parallel: Optional[int] = None,
) -> List[str]:
    """One-sentence summary per paragraph, in paragraph order."""
    max_parallel = config.SUMMARY_MAX_PARALLEL if max_parallel is None else max_parallel
    if max_parallel < 1:
        raise ConfigValueError(f"SUMMARY_MAX_PARALLEL must be at least 1, got {max_parallel}")

    snapshot = tuple(paragraphs)
    semaphore = asyncio.Semaphore(max_parallel)

    async def summarize_with_semaphore(paragraph: str) -> str:
        async with semaphore:
            return await summarize_paragraph(cache, chat_provider, paragraph)

    tasks = [asyncio.ensure_future(summarize_with_semaphore(p)) for p in snapshot]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        # no summary call may outlive the failed run
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def get_section_title(
    cache: CallCache,
    chat_provider: ChatProvider,
    paragraphs: Sequence[str],
) -> str:
    title = await _cached_chat(
        cache,
        chat_provider,
        "get_section_title",
        GET_SECTION_TITLE_PROMPT,
        json.dumps(list(paragraphs), ensure_ascii=False),
        "\n\n".join(paragraphs),
    )
    return title.strip()


def tag_summary_words(summaries: Sequence[str]) -> List[TaggedWord]:
    return [(i, w) for i, s in enumerate(summaries) for w in s.split()]


async def count_section_words(
    cache: CallCache,
    section_runs: Sequence[str],
    tagged_words: Sequence[TaggedWord],
) -> List[Dict[int, int]]:
    """
    For each section run, how many summary words each paragraph contributed.

    The tagged words are consumed in lockstep with the sections; the
    reconciler tells how many of them each section covers.
    """
    section_par_words: List[Dict[int, int]] = [defaultdict(int) for _ in section_runs]

    remaining = tuple(tagged_words)
    for section, par_words in zip(section_runs, section_par_words):
        if not remaining:
            logger.warning("Summary words exhausted before the last section")
            break

        current_text = join_words(w for _, w in remaining)
        boundary = await get_next_text_words(cache, [section], current_text)

        for par_idx, _ in remaining[:boundary.skipped_words + 1]:
            par_words[par_idx] += 1

        remaining = remaining[boundary.skipped_words + 1:]

    return [dict(p) for p in section_par_words]


def assign_paragraphs(section_par_words: Sequence[Dict[int, int]]) -> Dict[int, int]:
    """Paragraph index -> index of the section it contributed most words to."""
    par_in_section: Dict[int, Tuple[int, int]] = {}

    for sec_idx, par_words in enumerate(section_par_words):
        for par_idx, count in par_words.items():
            current = par_in_section.get(par_idx)
            # strict comparison: the earliest section wins ties
            if current is None or count > current[1]:
                par_in_section[par_idx] = (sec_idx, count)

    return {par_idx: sec for par_idx, (sec, _) in par_in_section.items()}


def group_sections(assignment: Dict[int, int], paragraphs: Sequence[str]) -> List[Section]:
    """
    Build sections from consecutive paragraphs sharing a section index.

    Raises:
        ConsistencyError: Some paragraph has no section
    """
    missing = sorted(set(range(len(paragraphs))) - set(assignment))
    extra = sorted(set(assignment) - set(range(len(paragraphs))))
    if missing or extra:
        raise ConsistencyError(
            f"Not all paragraphs were used in the sections! "
            f"missing={missing} unknown={extra}"
        )

    sections: List[Section] = []
    last_sec: Optional[int] = None
    for par_idx in sorted(assignment):
        sec = assignment[par_idx]
        if not sections or sec != last_sec:
            sections.append(Section(paragraph_indices=[], paragraphs=[]))
            last_sec = sec
        sections[-1].paragraph_indices.append(par_idx)
        sections[-1].paragraphs.append(paragraphs[par_idx])

    return sections


async def find_section_runs(
    cache: CallCache,
    chat_provider: ChatProvider,
    summaries: Sequence[str],
    chunk_words: Optional[int] = None,
    max_distance: Optional[int] = None,
    max_retries: Optional[int] = None,
) -> List[str]:
    """Segment the concatenated summaries; each returned run is one section."""
    return await words_to_paragraphs(
        chat_provider,
        cache,
        (w for _, w in tag_summary_words(summaries)),
        chunk_words=chunk_words,
        max_distance=max_distance,
        max_retries=max_retries,
    )


async def assemble_sections(
    cache: CallCache,
    chat_provider: ChatProvider,
    paragraphs: Sequence[str],
    summaries: Sequence[str],
    section_runs: Sequence[str],
) -> List[Section]:
    """Map paragraphs onto section runs and title every resulting section."""
    tagged_words = tag_summary_words(summaries)
    section_par_words = await count_section_words(cache, section_runs, tagged_words)
    assignment = assign_paragraphs(section_par_words)
    sections = group_sections(assignment, paragraphs)

    for section in sections:
        section.title = await get_section_title(cache, chat_provider, section.paragraphs)

    logger.info(f"Assembled {len(sections)} sections from {len(paragraphs)} paragraphs")
    return sections


def render_sections(sections: Sequence[Section]) -> str:
    return "".join(section.to_markdown() for section in sections)
