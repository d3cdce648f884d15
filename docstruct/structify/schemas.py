from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Tuple

# Immutable word sequence; slicing gives cheap read-only snapshots
WordStream = Tuple[str, ...]


def to_word_stream(text: str) -> WordStream:
    """Split raw text on whitespace into a word stream"""
    return tuple(text.split())


def join_words(words: Iterable[str]) -> str:
    return " ".join(words)


@dataclass(frozen=True)
class BoundaryResult:
    """
    Where a run of accepted paragraphs ends in the original text.

    - remaining_words: original words strictly after the matched prefix
    - skipped_words: index of the last original word covered by the paragraphs
    - distance: edit distance between paragraphs and the matched prefix
    """

    remaining_words: WordStream
    skipped_words: int
    distance: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = asdict(self)
        data["remaining_words"] = list(self.remaining_words)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoundaryResult":
        return cls(
            remaining_words=tuple(data["remaining_words"]),
            skipped_words=int(data["skipped_words"]),
            distance=int(data["distance"]),
        )


@dataclass
class Section:
    """A titled run of consecutive paragraphs."""

    paragraph_indices: List[int]
    paragraphs: List[str]
    title: str = ""

    def to_markdown(self) -> str:
        text = f"###### {self.title.strip()}\n\n"
        for paragraph in self.paragraphs:
            text += f"{paragraph}\n\n"
        return text


@dataclass
class StructifyResult:
    paragraphs: List[str]
    summaries: List[str] = field(default_factory=list)
    section_runs: List[str] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
