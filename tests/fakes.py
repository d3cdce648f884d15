"""
Fake providers for docstruct tests.

The fake chat provider answers each fixed prompt deterministically:
- paragraph splitting: groups of `paragraph_words` words, wording untouched
- summaries: "<first word> summary"
- titles: "Title <first word>" padded with whitespace
"""

from typing import Any, Dict, List, Optional, Tuple

from docstruct.providers.base import ChatMessage, ChatProvider, Role
from docstruct.structify.prompts import (
    GET_SECTION_TITLE_PROMPT,
    STRUCTIFY_PROMPT,
    SUMMARIZE_PARAGRAPH_PROMPT,
)


class FakeChatProvider(ChatProvider):
    """Deterministic chat stub with call tracking."""

    def __init__(self, paragraph_words: Optional[int] = 3, fingerprint: str = "fake-config"):
        self.paragraph_words = paragraph_words
        self.fingerprint = fingerprint
        self.calls: List[Tuple[str, str]] = []

    def calls_for(self, prompt: str) -> List[str]:
        return [text for p, text in self.calls if p == prompt]

    async def run_chat(
        self,
        system_prompt: str,
        user_text: str,
        model_override: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> ChatMessage:
        self.calls.append((system_prompt, user_text))

        if system_prompt == STRUCTIFY_PROMPT:
            words = user_text.split()
            if self.paragraph_words is None:
                return ChatMessage(Role.ASSISTANT, user_text)
            n = self.paragraph_words
            paragraphs = [" ".join(words[i:i + n]) for i in range(0, len(words), n)]
            return ChatMessage(Role.ASSISTANT, "\n\n".join(paragraphs))

        if system_prompt == SUMMARIZE_PARAGRAPH_PROMPT:
            return ChatMessage(Role.ASSISTANT, f"{user_text.split()[0]} summary")

        if system_prompt == GET_SECTION_TITLE_PROMPT:
            return ChatMessage(Role.ASSISTANT, f"  Title {user_text.split()[0]}\n")

        raise AssertionError(f"Unexpected prompt: {system_prompt[:40]}")

    def config_fingerprint(self) -> str:
        return self.fingerprint


class ScriptedChatProvider(ChatProvider):
    """Returns the given responses in order, one per call."""

    def __init__(self, responses: List[str], fingerprint: str = "scripted"):
        self.responses = list(responses)
        self.fingerprint = fingerprint
        self.calls: List[Tuple[str, str]] = []

    async def run_chat(
        self,
        system_prompt: str,
        user_text: str,
        model_override: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> ChatMessage:
        self.calls.append((system_prompt, user_text))
        return ChatMessage(Role.ASSISTANT, self.responses[len(self.calls) - 1])

    def config_fingerprint(self) -> str:
        return self.fingerprint


def make_words(count: int, prefix: str = "w") -> List[str]:
    return [f"{prefix}{i}" for i in range(count)]

