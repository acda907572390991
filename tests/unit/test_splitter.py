"""
Unit tests for ContextPreservingSplitter.

Tests token-bounded splitting at natural boundaries, lossless reassembly and
the context attached to each chunk.
"""
import pytest

from translation_agent.core.chunking.chunk_sizer import decide_split
from translation_agent.core.chunking.models import SplitRequired
from translation_agent.core.chunking.splitter import ContextPreservingSplitter, build_chunks
from translation_agent.core.exceptions import ConfigurationError


SAMPLE_TEXTS = [
    "aaaa bbbb cccc dddd eeee",
    "First paragraph.\n\nSecond paragraph is a little longer.\n\nThird.",
    "Line one.\nLine two.\nLine three is here.\n",
    "你好。世界！再见。今天天气很好；明天会下雨……",
    "Sentence one. Sentence two! Sentence three? Sentence four.",
    "nospacesatallinthisverylongword",
    "\n\nleading and trailing newlines\n\n",
]


class TestSplitKeepingSeparator:
    """Tests for the separator-preserving cut."""

    def test_separator_stays_with_piece(self):
        pieces = ContextPreservingSplitter.split_keeping_separator("a. b. c", ". ")
        assert pieces == ["a. ", "b. ", "c"]

    def test_trailing_separator(self):
        assert ContextPreservingSplitter.split_keeping_separator("a\n", "\n") == ["a\n"]

    def test_empty_separator_splits_characters(self):
        assert ContextPreservingSplitter.split_keeping_separator("abc", "") == ["a", "b", "c"]

    def test_absent_separator(self):
        assert ContextPreservingSplitter.split_keeping_separator("abc", "\n") == ["abc"]


class TestContextPreservingSplitter:
    """Tests for ContextPreservingSplitter."""

    def test_invalid_chunk_size(self, char_counter):
        """Chunk size must be positive."""
        with pytest.raises(ConfigurationError):
            ContextPreservingSplitter(0, char_counter)

    def test_empty_text(self, char_counter):
        """Empty input gives exactly one empty chunk."""
        splitter = ContextPreservingSplitter(5, char_counter)
        assert splitter.split_text("") == [""]
        chunks = splitter.split("")
        assert len(chunks) == 1
        assert chunks[0].text == ""

    def test_text_that_fits(self, char_counter):
        splitter = ContextPreservingSplitter(100, char_counter)
        assert splitter.split_text("Short text.") == ["Short text."]

    def test_words(self, char_counter):
        """Words are packed greedily and never exceed the chunk size."""
        splitter = ContextPreservingSplitter(9, char_counter)
        assert splitter.split_text("aaaa bbbb cccc dddd eeee") == [
            "aaaa ", "bbbb ", "cccc ", "dddd eeee"
        ]

    def test_packs_small_pieces(self, char_counter):
        splitter = ContextPreservingSplitter(10, char_counter)
        assert splitter.split_text("aa bb cc dd ee") == ["aa bb cc ", "dd ee"]

    def test_paragraphs_preferred(self, char_counter):
        """Paragraph breaks are used before anything finer."""
        splitter = ContextPreservingSplitter(12, char_counter)
        assert splitter.split_text("para one.\n\npara two.") == ["para one.\n\n", "para two."]

    def test_cjk_punctuation(self, char_counter):
        """CJK sentence ends are natural boundaries."""
        splitter = ContextPreservingSplitter(3, char_counter)
        assert splitter.split_text("你好。世界！再见。") == ["你好。", "世界！", "再见。"]

    def test_falls_back_to_characters(self, char_counter):
        splitter = ContextPreservingSplitter(4, char_counter)
        assert splitter.split_text("abcdefghij") == ["abcd", "efgh", "ij"]

    def test_oversized_atomic_unit(self, char_counter):
        """A piece that cannot be split further becomes its own oversized chunk."""
        splitter = ContextPreservingSplitter(4, char_counter, separators=("\n",))
        chunks = splitter.split_text("aaaaaaaaaa\nbb")
        assert chunks == ["aaaaaaaaaa\n", "bb"]
        assert splitter.is_oversized(chunks[0])
        assert not splitter.is_oversized(chunks[1])

    def test_no_separator_present(self, char_counter):
        splitter = ContextPreservingSplitter(2, char_counter, separators=("\n",))
        assert splitter.split_text("abcdef") == ["abcdef"]

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    @pytest.mark.parametrize("chunk_size", [1, 3, 7, 20])
    def test_lossless_and_bounded(self, char_counter, text, chunk_size):
        """Chunks concatenate back to the input and stay within the size."""
        splitter = ContextPreservingSplitter(chunk_size, char_counter)
        chunks = splitter.split_text(text)
        assert "".join(chunks) == text
        assert all(char_counter(chunk) <= chunk_size for chunk in chunks)
        assert all(chunk for chunk in chunks)

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_over_budget_gives_multiple_chunks(self, char_counter, text):
        """Text over the budget always yields at least two chunks."""
        budget = max(1, len(text) // 2)
        decision = decide_split(text, budget, char_counter)
        assert isinstance(decision, SplitRequired)
        chunks = ContextPreservingSplitter(decision.chunk_size, char_counter).split(text)
        assert len(chunks) >= 2
        assert "".join(chunk.text for chunk in chunks) == text

    def test_word_counter(self, word_counter):
        """Works with any counter, not just characters."""
        splitter = ContextPreservingSplitter(2, word_counter)
        chunks = splitter.split_text("one two three four five")
        assert "".join(chunks) == "one two three four five"
        assert all(word_counter(chunk) <= 2 for chunk in chunks)

    def test_real_tokenizer(self, cl100k):
        text = "The quick brown fox jumps over the lazy dog. " * 40
        decision = decide_split(text, 100, cl100k)
        chunks = ContextPreservingSplitter(decision.chunk_size, cl100k).split_text(text)
        assert len(chunks) >= 2
        assert "".join(chunks) == text
        assert all(cl100k(chunk) <= decision.chunk_size for chunk in chunks)


class TestBuildChunks:
    """Tests for the context attached to each chunk."""

    def test_indices_and_context(self):
        chunks = build_chunks(["a", "b", "c"])
        assert [c.index for c in chunks] == [0, 1, 2]
        assert chunks[0].preceding_text == ""
        assert chunks[0].following_text == "bc"
        assert chunks[1].preceding_text == "a"
        assert chunks[1].following_text == "c"
        assert chunks[2].preceding_text == "ab"
        assert chunks[2].following_text == ""

    def test_tagged_text(self):
        """The chunk is delimited inside the whole text."""
        chunks = build_chunks(["Hello. ", "World. ", "Bye."])
        assert chunks[1].tagged_text == "Hello. <TRANSLATE_THIS>World. </TRANSLATE_THIS>Bye."

    def test_tagged_text_first_chunk(self):
        chunks = build_chunks(["Hello. ", "World."])
        assert chunks[0].tagged_text == "<TRANSLATE_THIS>Hello. </TRANSLATE_THIS>World."
