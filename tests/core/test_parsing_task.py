"""
Test suite for ParsingTask.

Uses real text files on disk; PDF and Word extraction are covered only by
type detection since they need binary fixtures.

System role: Verification of text extraction stage
"""

import pytest

from rag_backend.core.document_processing.tasks.parsing_task import FileKind, ParsingTask
from rag_backend.core.exceptions import DocumentProcessingError, UnsupportedInputError


class TestEnsureSupported:
    """Test suite for file type detection."""

    @pytest.mark.parametrize(
        ("file_name", "content_type", "expected"),
        [
            ("report.pdf", None, FileKind.PDF),
            ("REPORT.PDF", "application/octet-stream", FileKind.PDF),
            ("notes.docx", None, FileKind.WORD),
            ("readme.md", None, FileKind.TEXT),
            ("data.csv", "text/csv", FileKind.TEXT),
            ("upload", "application/pdf", FileKind.PDF),
            (
                "upload",
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                FileKind.WORD,
            ),
            ("upload", "text/plain; charset=utf-8", FileKind.TEXT),
        ],
    )
    def test_supported_types_should_resolve(self, file_name, content_type, expected) -> None:
        assert ParsingTask.ensure_supported(file_name, content_type) is expected

    def test_suffix_should_win_over_mime_type(self) -> None:
        assert ParsingTask.ensure_supported("doc.pdf", "text/plain") is FileKind.PDF

    @pytest.mark.parametrize(
        ("file_name", "content_type"),
        [("photo.png", "image/png"), ("archive.zip", None), ("noext", None)],
    )
    def test_unsupported_types_should_raise(self, file_name, content_type) -> None:
        with pytest.raises(UnsupportedInputError) as exc_info:
            ParsingTask.ensure_supported(file_name, content_type)

        assert exc_info.value.details["file_name"] == file_name


class TestParse:
    """Test suite for ParsingTask.parse."""

    def test_parse_text_file_should_return_content(self, tmp_path) -> None:
        # Arrange
        path = tmp_path / "notes.txt"
        path.write_text("  Refund policy: 30 days.\n", encoding="utf-8")

        # Act
        text = ParsingTask().parse(str(path), "notes.txt", "text/plain")

        # Assert
        assert text == "Refund policy: 30 days."

    def test_parse_markdown_should_use_text_loader(self, tmp_path) -> None:
        path = tmp_path / "guide.md"
        path.write_text("# Guide\n\nStep one.", encoding="utf-8")

        assert ParsingTask().parse(str(path), "guide.md") == "# Guide\n\nStep one."

    def test_parse_empty_file_should_return_empty_string(self, tmp_path) -> None:
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")

        assert ParsingTask().parse(str(path), "empty.txt") == ""

    def test_parse_missing_file_should_raise_processing_error(self, tmp_path) -> None:
        with pytest.raises(DocumentProcessingError) as exc_info:
            ParsingTask().parse(str(tmp_path / "missing.txt"), "missing.txt")

        assert exc_info.value.stage == "parse"

    def test_parse_unsupported_type_should_raise_before_reading(self, tmp_path) -> None:
        with pytest.raises(UnsupportedInputError):
            ParsingTask().parse(str(tmp_path / "image.png"), "image.png", "image/png")

    def test_loader_failure_should_raise_processing_error(self, tmp_path, monkeypatch) -> None:
        # Arrange
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"%PDF-1.4")

        class BrokenLoader:
            def load(self):
                raise ValueError("corrupt xref table")

        task = ParsingTask()
        monkeypatch.setattr(task, "_loader_for", lambda kind, local_path: BrokenLoader())

        # Act / Assert
        with pytest.raises(DocumentProcessingError) as exc_info:
            task.parse(str(path), "broken.pdf", "application/pdf")

        assert exc_info.value.details["kind"] == "pdf"
        assert isinstance(exc_info.value.__cause__, ValueError)
