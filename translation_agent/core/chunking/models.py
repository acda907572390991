"""
Data models for token-based chunking and the translation pipeline.

Provides the request, chunk and per-chunk state types plus the two split
decisions returned by the chunk sizer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from translation_agent.config import TRANSLATE_THIS_TAG_IN, TRANSLATE_THIS_TAG_OUT


class StageStatus(Enum):
    """Position of a translation unit in the translate/reflect/improve sequence."""
    INITIAL = "initial"
    TRANSLATED = "translated"
    REFLECTED = "reflected"
    IMPROVED = "improved"
    FAILED = "failed"


@dataclass(frozen=True)
class TranslationRequest:
    """A complete translation job. Immutable once constructed."""

    source_lang: str
    target_lang: str
    source_text: str
    country: Optional[str] = None
    token_budget: int = 1000


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of the source text translated as one unit.

    preceding_text and following_text hold the untranslated text of all
    earlier and later chunks; they are prompt context, never translated.
    """

    index: int
    text: str
    preceding_text: str = ""
    following_text: str = ""

    @property
    def tagged_text(self) -> str:
        """Whole source text with this chunk delimited for translation."""
        return (
            f"{self.preceding_text}{TRANSLATE_THIS_TAG_IN}{self.text}"
            f"{TRANSLATE_THIS_TAG_OUT}{self.following_text}"
        )


@dataclass
class ChunkTranslationState:
    """Stage artifacts for one unit during a single translation run."""

    chunk: Chunk
    initial_translation: str = ""
    critique: str = ""
    final_translation: str = ""
    status: StageStatus = StageStatus.INITIAL
    error: Optional[Exception] = None
    failed_stage: Optional[str] = None

    @property
    def index(self) -> int:
        return self.chunk.index

    @property
    def failed(self) -> bool:
        return self.status == StageStatus.FAILED

    @property
    def done(self) -> bool:
        return self.status == StageStatus.IMPROVED

    def fail(self, stage: str, error: Exception) -> None:
        """Mark the unit failed; later stages skip it and its output stays empty."""
        self.status = StageStatus.FAILED
        self.failed_stage = stage
        self.error = error
        self.final_translation = ""


@dataclass(frozen=True)
class NoSplitNeeded:
    """The text fits the token budget and is translated as a single unit."""
    num_tokens: int


@dataclass(frozen=True)
class SplitRequired:
    """The text exceeds the budget and must be split into chunk_size pieces."""
    num_tokens: int
    chunk_size: int
    num_chunks: int


SplitDecision = Union[NoSplitNeeded, SplitRequired]
