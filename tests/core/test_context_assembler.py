"""
Test suite for prompt context assembly.

System role: Verification of context formatting
"""

from rag_backend.core.context_assembler import (
    CHUNK_DELIMITER,
    NO_CONTEXT_SENTINEL,
    assemble_context,
)
from rag_backend.models.chunk import ScoredChunk


class TestAssembleContext:
    """Test suite for assemble_context."""

    def test_empty_list_should_return_sentinel(self) -> None:
        assert assemble_context([]) == "No relevant context found."
        assert NO_CONTEXT_SENTINEL == "No relevant context found."

    def test_single_chunk_should_be_attributed(self, make_chunk) -> None:
        # Arrange
        scored = ScoredChunk(chunk=make_chunk("Refunds take 5 days.", [1.0]), score=0.9)

        # Act
        context = assemble_context([scored])

        # Assert
        assert context == "Source: handbook.pdf\nContent: Refunds take 5 days."

    def test_chunks_should_keep_ranked_order_with_delimiter(self, make_chunk) -> None:
        # Arrange
        first = ScoredChunk(chunk=make_chunk("alpha", [1.0], file_name="a.txt"), score=0.95)
        second = ScoredChunk(chunk=make_chunk("beta", [1.0], file_name="b.txt"), score=0.7)

        # Act
        context = assemble_context([first, second])

        # Assert
        assert context == (
            "Source: a.txt\nContent: alpha" + CHUNK_DELIMITER + "Source: b.txt\nContent: beta"
        )
        assert CHUNK_DELIMITER == "\n\n---\n\n"

    def test_should_not_filter_low_scores(self, make_chunk) -> None:
        scored = ScoredChunk(chunk=make_chunk("low", [1.0]), score=-0.9)

        assert "Content: low" in assemble_context([scored])
