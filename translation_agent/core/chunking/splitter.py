"""
Token-bounded text splitting with natural boundary preservation.

Splits text at the coarsest natural boundary available (paragraphs, lines,
sentence ends in CJK and Western scripts, whitespace, single characters) and
greedily packs the pieces into chunks whose token count stays within the
chunk size. Separators stay attached to the piece they terminate and no
overlap is introduced, so joining the chunks gives back the original text.
Surrounding text is carried on each Chunk as context instead.
"""
from typing import Callable, List, Optional, Sequence, Tuple

from translation_agent.config import CHUNK_SEPARATORS
from translation_agent.core.chunking.models import Chunk
from translation_agent.core.exceptions import ConfigurationError


class ContextPreservingSplitter:
    """
    Recursive splitter bounded by a token counter.

    A piece that alone exceeds chunk_size is re-split with the next finer
    separators. A piece that cannot be split any further (a single character
    when "" is the last separator) is emitted as its own oversized chunk.
    """

    def __init__(self, chunk_size: int, counter: Callable[[str], int],
                 separators: Sequence[str] = CHUNK_SEPARATORS):
        """
        Initialize the splitter.

        Args:
            chunk_size: Maximum tokens per chunk
            counter: Token counting function shared with the split decision
            separators: Boundaries in priority order, coarsest first
        """
        if chunk_size < 1:
            raise ConfigurationError(
                "Chunk size must be a positive integer",
                context={'chunk_size': chunk_size}
            )
        self.chunk_size = chunk_size
        self.counter = counter
        self.separators = list(separators)

    def split_text(self, text: str) -> List[str]:
        """
        Split text into ordered chunk strings.

        Returns:
            Chunk texts; "".join(result) == text. Empty text gives [""].
        """
        if not text:
            return [text]
        return self._split(text, self.separators) or [text]

    def split(self, text: str) -> List[Chunk]:
        """Split text into Chunk objects carrying preceding/following context."""
        return build_chunks(self.split_text(text))

    def is_oversized(self, chunk_text: str) -> bool:
        return self.counter(chunk_text) > self.chunk_size

    @staticmethod
    def split_keeping_separator(text: str, separator: str) -> List[str]:
        """
        Cut text after every occurrence of separator.

        The separator stays at the end of the piece it terminates. An empty
        separator splits into single characters.
        """
        if separator == "":
            return list(text)

        pieces = []
        start = 0
        while True:
            pos = text.find(separator, start)
            if pos == -1:
                break
            end = pos + len(separator)
            pieces.append(text[start:end])
            start = end
        if start < len(text):
            pieces.append(text[start:])
        return pieces

    @staticmethod
    def _select_separator(text: str, separators: List[str]) -> Tuple[Optional[str], List[str]]:
        """Return the coarsest separator present in text and the finer ones after it."""
        for i, separator in enumerate(separators):
            if separator == "" or separator in text:
                return separator, separators[i + 1:]
        return None, []

    def _split(self, text: str, separators: List[str]) -> List[str]:
        separator, finer_separators = self._select_separator(text, separators)
        if separator is None:
            return [text]

        chunks = []
        fitting = []

        for piece in self.split_keeping_separator(text, separator):
            if self.counter(piece) <= self.chunk_size:
                fitting.append(piece)
                continue

            # Flush what fits before handling the oversized piece
            if fitting:
                chunks.extend(self._merge_pieces(fitting))
                fitting = []

            if finer_separators:
                chunks.extend(self._split(piece, finer_separators))
            else:
                # Atomic unit larger than the chunk size
                chunks.append(piece)

        if fitting:
            chunks.extend(self._merge_pieces(fitting))

        return chunks

    def _merge_pieces(self, pieces: List[str]) -> List[str]:
        """
        Greedily pack consecutive pieces while the joined text fits chunk_size.

        The joined text is counted as a whole since token counts are not
        additive across piece boundaries.
        """
        chunks = []
        current = ""

        for piece in pieces:
            if not current:
                current = piece
                continue

            candidate = current + piece
            if self.counter(candidate) <= self.chunk_size:
                current = candidate
            else:
                chunks.append(current)
                current = piece

        if current:
            chunks.append(current)

        return chunks


def build_chunks(texts: Sequence[str]) -> List[Chunk]:
    """
    Wrap ordered chunk texts into Chunks with their surrounding context.

    Args:
        texts: Chunk texts in document order

    Returns:
        Chunks where preceding_text/following_text are the concatenation of all
        earlier/later chunk texts
    """
    full_text = "".join(texts)
    chunks = []
    offset = 0

    for index, text in enumerate(texts):
        end = offset + len(text)
        chunks.append(Chunk(
            index=index,
            text=text,
            preceding_text=full_text[:offset],
            following_text=full_text[end:]
        ))
        offset = end

    return chunks
