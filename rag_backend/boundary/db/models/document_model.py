"""
Document ORM model.

Represents uploaded documents with ingestion status and metadata.
The status column is how background ingestion reports completion.

Dependencies: sqlalchemy, rag_backend.boundary.db.base
System role: Document persistence for ingestion tracking
"""

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rag_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin
from rag_backend.models.document import DocumentStatus


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion state.

    Lifecycle: Upload (PENDING) → worker picks it up (PROCESSING) → chunks
    stored (COMPLETED) or failure (FAILED, error_message set).

    Attributes:
        id: UUID primary key (auto-generated)
        owner_id: Knowledge base owner scope
        file_name: Original filename
        content_type: MIME type reported at upload
        storage_key: Key of the raw file in document storage
        status: Current ingestion state
        chunk_count: Chunks stored by the last successful ingestion
        error_message: Human-readable error if FAILED
    """

    __tablename__ = "documents"

    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    file_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Original filename",
    )

    content_type: Mapped[str | None] = mapped_column(String(255), nullable=True)

    storage_key: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="Local path key or S3 object key of the raw document",
    )

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.PENDING,
    )

    chunk_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if processing failed",
    )
