"""Chat API endpoints.

Routes:
- POST /chat - Answer a question against an owner's documents
- POST /chat/stream - Stream the answer using Server-Sent Events (SSE)
- GET /chat/history?owner_id= - Stored conversation, oldest first
- POST /chat/history/clear - Delete an owner's conversation

Dependencies: rag_backend.application.services.chat_service
System role: Question answering HTTP API with streaming support
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from rag_backend.api.deps import get_chat_service
from rag_backend.application.services.chat_service import ChatService
from rag_backend.core.exceptions import ConfigurationError, UpstreamFailureError
from rag_backend.models.chat import (
    ChatHistoryResponse,
    ChatMessageResponse,
    ChatRequest,
    ChatResponse,
    ClearHistoryRequest,
    ClearHistoryResponse,
)
from rag_backend.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """
    Answer a question in a single response.

    Raises:
        HTTPException(500): Generation failed; details are only logged
    """
    try:
        return await chat_service.answer(request.question, request.owner_id)
    except Exception as e:
        logger.exception(f"{__name__}:chat - {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """Stream an answer using Server-Sent Events (SSE).

    SSE Format:
        event: sources
        data: {"sources": [...]}

        event: token
        data: {"token": "...", "index": 0}

        event: complete
        data: {"full_answer": "..."}

        event: error
        data: {"code": "PROCESSING_ERROR", "message": "..."}

    Returns:
        StreamingResponse: SSE stream of chat events
    """
    logger.info(f"{__name__}:chat_stream - START owner_id={request.owner_id}")

    async def event_generator() -> AsyncGenerator[str, None]:
        """Generate SSE frames from the chat stream."""
        try:
            async for event in chat_service.stream_answer(request.question, request.owner_id):
                yield event.to_sse()
            logger.info(f"{__name__}:chat_stream - Stream completed for owner_id={request.owner_id}")
        except Exception as e:
            logger.exception(f"{__name__}:chat_stream - {type(e).__name__}: {e}")
            yield StreamEvent(
                event=StreamEventType.ERROR,
                data={"code": "PROCESSING_ERROR", "message": GENERIC_ERROR_MESSAGE},
            ).to_sse()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )


@router.get("/history", response_model=ChatHistoryResponse)
async def get_chat_history(
    owner_id: str = Query(..., min_length=1),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatHistoryResponse:
    """
    Return an owner's stored conversation.

    Raises:
        HTTPException(503): No database configured for history
        HTTPException(500): History could not be loaded
    """
    try:
        messages = await chat_service.get_history(owner_id)
    except ConfigurationError as e:
        logger.warning(f"{__name__}:get_chat_history - {e}")
        raise HTTPException(status_code=503, detail="Chat history is not configured")
    except UpstreamFailureError as e:
        logger.error(f"{__name__}:get_chat_history - {e}")
        raise HTTPException(status_code=500, detail="Error fetching history")

    return ChatHistoryResponse(
        messages=[ChatMessageResponse.model_validate(m) for m in messages],
        total=len(messages),
    )


@router.post("/history/clear", response_model=ClearHistoryResponse)
async def clear_chat_history(
    request: ClearHistoryRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ClearHistoryResponse:
    """
    Delete an owner's conversation. Clearing an empty history succeeds.

    Raises:
        HTTPException(503): No database configured for history
        HTTPException(500): History could not be cleared
    """
    try:
        cleared = await chat_service.clear_history(request.owner_id)
    except ConfigurationError as e:
        logger.warning(f"{__name__}:clear_chat_history - {e}")
        raise HTTPException(status_code=503, detail="Chat history is not configured")
    except UpstreamFailureError as e:
        logger.error(f"{__name__}:clear_chat_history - {e}")
        raise HTTPException(status_code=500, detail="Error clearing history")

    return ClearHistoryResponse(cleared=cleared)
