"""
Context assembler.

Formats ranked chunks into the attributed text block injected into the
generation prompt.

Dependencies: rag_backend.models.chunk
System role: Prompt context formatting
"""

from collections.abc import Sequence

from rag_backend.models.chunk import ScoredChunk

CHUNK_DELIMITER = "\n\n---\n\n"
NO_CONTEXT_SENTINEL = "No relevant context found."


def format_chunk(scored: ScoredChunk) -> str:
    return f"Source: {scored.chunk.file_name}\nContent: {scored.chunk.text}"


def assemble_context(chunks: Sequence[ScoredChunk]) -> str:
    """
    Join ranked chunks into a single context string.

    Args:
        chunks: Ranked chunks, best first

    Returns:
        str: Attributed chunk texts separated by a horizontal rule, or the
            no-context sentinel when nothing was retrieved
    """
    if not chunks:
        return NO_CONTEXT_SENTINEL
    return CHUNK_DELIMITER.join(format_chunk(scored) for scored in chunks)
