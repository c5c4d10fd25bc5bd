"""
Document API endpoints.

Routes:
- POST /documents - Upload a file for background ingestion
- GET /documents?owner_id= - List an owner's documents
- GET /documents/{doc_id}?owner_id= - Document status
- DELETE /documents/{doc_id}?owner_id= - Delete document, chunks and raw file

Dependencies: rag_backend.application.services, rag_backend.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status

from rag_backend.api.deps import get_document_service
from rag_backend.application.services.document_service import DocumentService
from rag_backend.core.exceptions import (
    DocumentNotFoundError,
    UnsupportedInputError,
    UpstreamFailureError,
    ValidationError,
)
from rag_backend.models.document import (
    DocumentListResponse,
    DocumentResponse,
    DocumentUploadResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "",
    response_model=DocumentUploadResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def upload_document(
    file: UploadFile = File(...),
    owner_id: str = Form(..., min_length=1),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentUploadResponse:
    """
    Upload a document and dispatch it for ingestion.

    The response returns as soon as the file is stored; poll
    GET /documents/{id} for the ingestion status.

    Raises:
        HTTPException(400): Unsupported file type or empty file
        HTTPException(502): Storing the upload or dispatching ingestion failed
    """
    file_name = file.filename or "document"
    data = await file.read()

    try:
        document = await document_service.upload_document(
            owner_id=owner_id,
            file_name=file_name,
            content_type=file.content_type,
            data=data,
        )
    except (UnsupportedInputError, ValidationError) as e:
        logger.info(f"{__name__}:upload_document - Rejected {file_name}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)
    except UpstreamFailureError as e:
        logger.error(f"{__name__}:upload_document - Upstream failure: {e}")
        raise HTTPException(status_code=502, detail=f"Upload failed: {e.message}")

    return DocumentUploadResponse(document_id=document.id, status=document.status)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    owner_id: str = Query(..., min_length=1),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List an owner's documents, newest first."""
    documents = await document_service.list_documents(owner_id)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
        total=len(documents),
    )


@router.get("/{doc_id}", response_model=DocumentResponse)
async def get_document(
    doc_id: UUID,
    owner_id: str = Query(..., min_length=1),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Get one document with its ingestion status."""
    try:
        document = await document_service.get_document(doc_id, owner_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return DocumentResponse.model_validate(document)


@router.delete("/{doc_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    doc_id: UUID,
    owner_id: str = Query(..., min_length=1),
    document_service: DocumentService = Depends(get_document_service),
) -> Response:
    """
    Delete a document owned by owner_id.

    Raises:
        HTTPException(404): Document not found for this owner
        HTTPException(502): Chunk deletion failed
    """
    try:
        await document_service.delete_document(doc_id, owner_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except UpstreamFailureError as e:
        logger.error(f"{__name__}:delete_document - {e}")
        raise HTTPException(status_code=502, detail="Failed to delete document")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
