"""
Test suite for the fixed-window chunker.

Covers window sizes, overlap between neighbours, reconstruction of the
source text, and rejection of unusable configurations.

System role: Verification of ingestion text splitting
"""

import string

import pytest

from rag_backend.core.chunker import TextChunker, split_text
from rag_backend.core.exceptions import InvalidConfigurationError


def _reconstruct(chunks: list[str], overlap: int) -> str:
    if not chunks:
        return ""
    return chunks[0] + "".join(chunk[overlap:] for chunk in chunks[1:])


def _sample_text(length: int) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(alphabet[i % len(alphabet)] for i in range(length))


class TestSplitText:
    """Test suite for split_text."""

    def test_empty_text_should_yield_no_chunks(self) -> None:
        assert split_text("", chunk_size=1000, overlap=100) == []

    @pytest.mark.parametrize("length", [1, 10, 999, 1000])
    def test_short_text_should_yield_single_chunk(self, length: int) -> None:
        """Text no longer than chunk_size comes back unchanged as one chunk."""
        # Arrange
        text = _sample_text(length)

        # Act
        chunks = split_text(text, chunk_size=1000, overlap=100)

        # Assert
        assert chunks == [text]

    def test_2500_chars_should_yield_three_overlapping_chunks(self) -> None:
        """Windows start at 0, 900 and 1800; the last one reaches the end."""
        # Arrange
        text = _sample_text(2500)

        # Act
        chunks = split_text(text, chunk_size=1000, overlap=100)

        # Assert
        assert [len(c) for c in chunks] == [1000, 1000, 700]
        for current, following in zip(chunks, chunks[1:]):
            assert current[-100:] == following[:100]

    def test_window_reaching_end_should_stop_splitting(self) -> None:
        """No trailing chunk that only repeats the previous overlap."""
        # Arrange
        text = _sample_text(1900)

        # Act
        chunks = split_text(text, chunk_size=1000, overlap=100)

        # Assert
        assert [len(c) for c in chunks] == [1000, 1000]
        assert chunks[1] == text[900:]

    @pytest.mark.parametrize(
        ("length", "chunk_size", "overlap"),
        [(2500, 1000, 100), (1234, 200, 50), (5000, 1000, 200), (7, 3, 2), (50, 10, 0)],
    )
    def test_chunks_should_reconstruct_text(self, length: int, chunk_size: int, overlap: int) -> None:
        # Arrange
        text = _sample_text(length)

        # Act
        chunks = split_text(text, chunk_size=chunk_size, overlap=overlap)

        # Assert
        assert _reconstruct(chunks, overlap) == text
        assert all(len(c) <= chunk_size for c in chunks)

    def test_zero_overlap_should_partition_text(self) -> None:
        assert split_text("abcdefg", chunk_size=3, overlap=0) == ["abc", "def", "g"]

    def test_overlap_equal_to_chunk_size_should_raise(self) -> None:
        with pytest.raises(InvalidConfigurationError) as exc_info:
            split_text("abc", chunk_size=100, overlap=100)

        assert exc_info.value.details["field"] == "overlap"

    @pytest.mark.parametrize(("chunk_size", "overlap"), [(100, 150), (100, -1), (0, 0), (-5, 0)])
    def test_invalid_configuration_should_raise(self, chunk_size: int, overlap: int) -> None:
        with pytest.raises(InvalidConfigurationError):
            split_text("abc", chunk_size=chunk_size, overlap=overlap)

    def test_invalid_configuration_should_raise_even_for_empty_text(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            split_text("", chunk_size=10, overlap=10)


class TestTextChunker:
    """Test suite for TextChunker."""

    def test_defaults_should_match_retrieval_settings(self) -> None:
        chunker = TextChunker()

        assert chunker.chunk_size == 1000
        assert chunker.overlap == 100

    def test_constructor_should_validate_configuration(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            TextChunker(chunk_size=10, overlap=20)

    def test_split_should_delegate_to_split_text(self) -> None:
        # Arrange
        chunker = TextChunker(chunk_size=4, overlap=1)

        # Act
        chunks = chunker.split("abcdefghij")

        # Assert
        assert chunks == ["abcd", "defg", "ghij"]
