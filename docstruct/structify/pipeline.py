"""
File-level restructuring run.

Artifacts are written next to the source file, with its suffix replaced:
- <doc>.docstruct.cache       call cache (resumes interrupted runs)
- <doc>.docstruct.text.md     paragraphs separated by one blank line
- <doc>.docstruct.summaries.md one summary per paragraph
- <doc>.docstruct.sections.md section word-runs over the summaries
- <doc>.docstruct.final.md    titled, sectioned document
"""

import time
from pathlib import Path
from typing import Optional, Union

import aiofiles

from docstruct.cache import CallCache
from docstruct.config import config
from docstruct.logging import logger
from docstruct.providers.base import ChatProvider
from docstruct.structify.driver import words_to_paragraphs
from docstruct.structify.schemas import StructifyResult, to_word_stream
from docstruct.structify.sections import (
    assemble_sections,
    find_section_runs,
    render_sections,
    summarize_paragraphs,
)


def artifact_path(source: Path, ext: str) -> Path:
    return source.with_name(f"{source.stem}.{ext}")


async def _write_text(path: Path, text: str):
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(text)


class StructifyPipeline:
    """
    Restructure one text file into paragraphs and titled sections.

    Every model-bound call goes through the call cache, so rerunning after an
    interruption only pays for calls that never completed.
    """

    def __init__(
        self,
        chat_provider: ChatProvider,
        chunk_words: Optional[int] = None,
        max_distance: Optional[int] = None,
        max_retries: Optional[int] = None,
        with_sections: bool = True,
    ):
        self.chat_provider = chat_provider
        self.chunk_words = chunk_words
        self.max_distance = max_distance
        self.max_retries = max_retries
        self.with_sections = with_sections

    async def run(self, filepath: Union[str, Path]) -> StructifyResult:
        source = Path(filepath)
        start_time = time.time()

        async with aiofiles.open(source, "r", encoding="utf-8") as f:
            input_text = await f.read()

        cache = await CallCache.open(artifact_path(source, config.CACHE_FILE_EXT))
        try:
            result = await self._run_with_cache(source, input_text, cache)
        finally:
            await cache.aclose()

        logger.info(f"Restructuring completed in {round(time.time() - start_time, 3)}s")
        return result

    async def _run_with_cache(self, source: Path, input_text: str, cache: CallCache) -> StructifyResult:
        paragraphs = await words_to_paragraphs(
            self.chat_provider,
            cache,
            to_word_stream(input_text),
            chunk_words=self.chunk_words,
            max_distance=self.max_distance,
            max_retries=self.max_retries,
        )

        text_file = artifact_path(source, config.RESULT_FILE_EXT)
        await _write_text(text_file, "\n\n".join(paragraphs))
        logger.info(f"Wrote structified text to: {text_file}")

        result = StructifyResult(paragraphs=paragraphs)
        if not self.with_sections:
            return result

        result.summaries = await summarize_paragraphs(cache, self.chat_provider, paragraphs)
        summaries_file = artifact_path(source, config.SUMMARIES_FILE_EXT)
        await _write_text(summaries_file, "\n\n".join(result.summaries))
        logger.info(f"Wrote summaries to: {summaries_file}")

        result.section_runs = await find_section_runs(
            cache,
            self.chat_provider,
            result.summaries,
            chunk_words=self.chunk_words,
            max_distance=self.max_distance,
            max_retries=self.max_retries,
        )
        sections_file = artifact_path(source, config.SECTIONS_FILE_EXT)
        await _write_text(sections_file, "\n\n".join(result.section_runs))
        logger.info(f"Wrote section runs to: {sections_file}")

        result.sections = await assemble_sections(
            cache,
            self.chat_provider,
            paragraphs,
            result.summaries,
            result.section_runs,
        )
        final_file = artifact_path(source, config.FINAL_FILE_EXT)
        await _write_text(final_file, render_sections(result.sections))
        logger.info(f"Wrote sectioned text to: {final_file}")

        return result


async def run_structify_text(
    filepath: Union[str, Path],
    chat_provider: ChatProvider,
) -> StructifyResult:
    return await StructifyPipeline(chat_provider).run(filepath)
