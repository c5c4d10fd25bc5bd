"""
Fixed-window text chunker.

Splits document text into overlapping character windows suitable for
embedding. Consecutive windows share exactly `overlap` characters, so the
original text can be rebuilt by dropping each later window's overlap prefix.

Dependencies: rag_backend.core.exceptions
System role: Ingestion text splitting
"""

from rag_backend.core.exceptions import InvalidConfigurationError


def _validate(chunk_size: int, overlap: int) -> None:
    if chunk_size <= 0:
        raise InvalidConfigurationError(
            f"chunk_size must be positive, got {chunk_size}",
            field="chunk_size",
        )
    if overlap < 0 or overlap >= chunk_size:
        raise InvalidConfigurationError(
            f"overlap must satisfy 0 <= overlap < chunk_size, got overlap={overlap}, "
            f"chunk_size={chunk_size}",
            field="overlap",
        )


def split_text(text: str, chunk_size: int = 1000, overlap: int = 100) -> list[str]:
    """
    Split text into overlapping fixed-size windows.

    Args:
        text: Raw document text
        chunk_size: Maximum window length in characters
        overlap: Characters shared between neighbouring windows

    Returns:
        list[str]: Ordered windows; empty for empty text

    Raises:
        InvalidConfigurationError: If chunk_size <= 0 or overlap is out of range
    """
    _validate(chunk_size, overlap)

    step = chunk_size - overlap
    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = start + chunk_size
        chunks.append(text[start:end])
        # A window that reaches the end already covers the tail
        if end >= len(text):
            break
        start += step
    return chunks


class TextChunker:
    """Chunker bound to one validated window configuration."""

    def __init__(self, chunk_size: int = 1000, overlap: int = 100) -> None:
        _validate(chunk_size, overlap)
        self.chunk_size = chunk_size
        self.overlap = overlap

    def split(self, text: str) -> list[str]:
        return split_text(text, self.chunk_size, self.overlap)
