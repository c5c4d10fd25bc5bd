"""
Document parsing task using LangChain document loaders.

Extracts plain text from PDF, Word and text-like files. The same type
check runs at upload time so unsupported files are rejected before they
are stored.

Dependencies: langchain_community.document_loaders, pypdf, docx2txt
System role: Text extraction stage of document ingestion
"""

from enum import Enum
from pathlib import Path

from langchain_community.document_loaders import Docx2txtLoader, PyPDFLoader, TextLoader
from langchain_core.document_loaders import BaseLoader

from rag_backend.core.exceptions import DocumentProcessingError, UnsupportedInputError

PDF_TYPES = {"application/pdf"}
WORD_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
TEXT_SUFFIXES = {".txt", ".md", ".markdown", ".csv"}


class FileKind(str, Enum):
    """Extraction path selected for an input file."""

    PDF = "pdf"
    WORD = "docx"
    TEXT = "text"


class ParsingTask:
    """Extract text from uploaded documents."""

    @staticmethod
    def ensure_supported(file_name: str, content_type: str | None = None) -> FileKind:
        """
        Resolve the extraction path for a file without reading it.

        The file suffix wins over the reported MIME type, which browsers
        often send as application/octet-stream.

        Args:
            file_name: Original file name
            content_type: MIME type reported by the client

        Returns:
            FileKind: Loader family to use

        Raises:
            UnsupportedInputError: When no extraction path exists
        """
        suffix = Path(file_name).suffix.lower()
        mime = (content_type or "").split(";")[0].strip().lower()

        if suffix == ".pdf":
            return FileKind.PDF
        if suffix == ".docx":
            return FileKind.WORD
        if suffix in TEXT_SUFFIXES:
            return FileKind.TEXT
        if mime in PDF_TYPES:
            return FileKind.PDF
        if mime in WORD_TYPES:
            return FileKind.WORD
        if mime.startswith("text/"):
            return FileKind.TEXT

        raise UnsupportedInputError(content_type or suffix or "unknown", file_name=file_name)

    def _loader_for(self, kind: FileKind, local_path: str) -> BaseLoader:
        if kind is FileKind.PDF:
            return PyPDFLoader(local_path)
        if kind is FileKind.WORD:
            return Docx2txtLoader(local_path)
        return TextLoader(local_path, encoding="utf-8")

    def parse(
        self,
        local_path: str,
        file_name: str,
        content_type: str | None = None,
    ) -> str:
        """
        Extract the full text of a document.

        Args:
            local_path: Path to the downloaded file
            file_name: Original file name (drives type detection)
            content_type: MIME type reported at upload

        Returns:
            str: Extracted text, pages separated by blank lines; may be empty

        Raises:
            UnsupportedInputError: When the type has no extraction path
            DocumentProcessingError: When the file is missing or the loader fails
        """
        kind = self.ensure_supported(file_name, content_type)

        if not Path(local_path).exists():
            raise DocumentProcessingError(
                f"File not found: {local_path}",
                stage="parse",
                details={"file_name": file_name},
            )

        try:
            documents = self._loader_for(kind, local_path).load()
        except Exception as e:
            raise DocumentProcessingError(
                f"Failed to extract text from {file_name}: {e}",
                stage="parse",
                details={"file_name": file_name, "kind": kind.value},
            ) from e

        return "\n\n".join(doc.page_content for doc in documents if doc.page_content).strip()
