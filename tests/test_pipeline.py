"""End-to-end tests for the file-level pipeline and the CLI."""

import pytest

from docstruct.config import config
from docstruct.core.container import Container
from docstruct.main import build_parser, main, run_structify_command
from docstruct.structify.pipeline import StructifyPipeline, artifact_path
from docstruct.structify.prompts import STRUCTIFY_PROMPT
from fakes import FakeChatProvider, make_words


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text("\n".join(make_words(30)) + "\n", encoding="utf-8")
    return path


class TestStructifyPipeline:

    def test_artifact_path_replaces_suffix(self, tmp_path):
        path = artifact_path(tmp_path / "book.txt", "docstruct.text.md")

        assert path == tmp_path / "book.docstruct.text.md"

    @pytest.mark.asyncio
    async def test_paragraphs_only(self, source_file):
        chat = FakeChatProvider(paragraph_words=3)
        pipeline = StructifyPipeline(chat, chunk_words=10, with_sections=False)

        result = await pipeline.run(source_file)

        assert len(result.paragraphs) == 10
        assert result.sections == []
        text_file = artifact_path(source_file, config.RESULT_FILE_EXT)
        assert text_file.read_text(encoding="utf-8") == "\n\n".join(result.paragraphs)
        assert artifact_path(source_file, config.CACHE_FILE_EXT).exists()
        assert not artifact_path(source_file, config.SUMMARIES_FILE_EXT).exists()

    @pytest.mark.asyncio
    async def test_full_run_writes_sections(self, source_file):
        chat = FakeChatProvider(paragraph_words=3)
        pipeline = StructifyPipeline(chat, chunk_words=10)

        result = await pipeline.run(source_file)

        assert len(result.summaries) == len(result.paragraphs)
        covered = [i for s in result.sections for i in s.paragraph_indices]
        assert covered == list(range(len(result.paragraphs)))

        final_text = artifact_path(source_file, config.FINAL_FILE_EXT).read_text(encoding="utf-8")
        assert final_text.startswith("###### Title")
        for paragraph in result.paragraphs:
            assert f"{paragraph}\n\n" in final_text
        assert artifact_path(source_file, config.SUMMARIES_FILE_EXT).exists()
        assert artifact_path(source_file, config.SECTIONS_FILE_EXT).exists()

    @pytest.mark.asyncio
    async def test_second_run_resumes_from_cache(self, source_file):
        await StructifyPipeline(FakeChatProvider(), chunk_words=10).run(source_file)
        chat = FakeChatProvider()

        await StructifyPipeline(chat, chunk_words=10).run(source_file)

        assert chat.calls == []

    @pytest.mark.asyncio
    async def test_changed_input_only_pays_for_new_chunks(self, source_file):
        await StructifyPipeline(FakeChatProvider(), chunk_words=10, with_sections=False).run(source_file)
        source_file.write_text(" ".join(make_words(30) + ["extra"]), encoding="utf-8")
        chat = FakeChatProvider()

        await StructifyPipeline(chat, chunk_words=10, with_sections=False).run(source_file)

        # earlier chunks are unchanged and served from cache
        assert chat.calls_for(STRUCTIFY_PROMPT) == ["w27 w28 w29 extra"]


class TestCli:

    def test_parser(self):
        args = build_parser().parse_args(["--verbosity", "2", "structify-text", "-f", "doc.txt"])

        assert args.command == "structify-text"
        assert args.file == "doc.txt"
        assert args.verbosity == 2
        assert args.no_sections is False

    def test_missing_command_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_missing_file_exit_code(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "LLM_PROVIDER_TYPE", "openai")

        code = main(["structify-text", "--file", str(tmp_path / "missing.txt")])

        assert code == 1

    def test_undecodable_file_exit_code(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "LLM_PROVIDER_TYPE", "openai")
        path = tmp_path / "latin1.txt"
        path.write_bytes("caf\xe9 cr\xe8me".encode("latin-1"))

        assert main(["structify-text", "--file", str(path)]) == 1

    def test_unknown_provider_exit_code(self, source_file, monkeypatch):
        monkeypatch.setattr(config, "LLM_PROVIDER_TYPE", "nonexistent")

        assert main(["structify-text", "--file", str(source_file)]) == 1

    @pytest.mark.asyncio
    async def test_command_runs_with_injected_provider(self, source_file):
        args = build_parser().parse_args(["structify-text", "--file", str(source_file), "--no-sections"])
        chat = FakeChatProvider()

        await run_structify_command(args, container=Container(chat_provider=chat))

        assert artifact_path(source_file, config.RESULT_FILE_EXT).exists()
        assert chat.calls
