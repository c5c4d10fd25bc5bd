"""
Dependency injection container.

Builds every long-lived collaborator once at startup and exposes FastAPI
dependencies that read them from app.state.

Dependencies: rag_backend.configs, rag_backend.application, rag_backend.boundary
System role: DI container for service injection
"""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass

from fastapi import BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from rag_backend.application.adapters.chat_history_adapter import ChatHistoryAdapter
from rag_backend.application.services.chat_service import ChatService
from rag_backend.application.services.document_service import DocumentService
from rag_backend.application.services.retrieval_service import RetrievalService
from rag_backend.boundary.db.connection import create_engine_from_settings, create_session_factory
from rag_backend.boundary.embeddings.embedding_client import EmbeddingClient, GoogleEmbeddingClient
from rag_backend.boundary.storage.document_storage import DocumentStorage, create_document_storage
from rag_backend.boundary.store.chunk_store import ChunkStore, SqlChunkStore
from rag_backend.configs import Settings
from rag_backend.core.agent.rag_agent import RAGAgent
from rag_backend.core.chunker import TextChunker
from rag_backend.core.document_processing.entrypoint import IngestionPipeline
from rag_backend.core.document_processing.tasks.parsing_task import ParsingTask
from rag_backend.workers.dispatcher import IngestionDispatcher

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Process-wide collaborators shared by all requests."""

    settings: Settings
    engine: AsyncEngine | None
    session_factory: async_sessionmaker[AsyncSession] | None
    chunk_store: ChunkStore
    embedder: EmbeddingClient
    storage: DocumentStorage
    parser: ParsingTask
    ingestion_dispatcher: IngestionDispatcher
    chat_history: ChatHistoryAdapter
    retrieval_service: RetrievalService
    rag_agent: RAGAgent
    chat_service: ChatService

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContainer":
        """
        Wire all services from configuration.

        No network calls happen here; the engine connects lazily and the
        Google clients are built on first use.
        """
        engine = None
        session_factory = None
        if settings.database.is_configured:
            engine = create_engine_from_settings(settings.database)
            session_factory = create_session_factory(engine)
        else:
            logger.warning(f"{__name__}:from_settings - Database not configured")

        chunk_store = SqlChunkStore(session_factory)
        embedder = GoogleEmbeddingClient(settings.embedding)
        storage = create_document_storage(settings.storage)
        parser = ParsingTask()

        pipeline = IngestionPipeline(
            storage=storage,
            embedder=embedder,
            chunk_store=chunk_store,
            chunker=TextChunker(
                chunk_size=settings.retrieval.chunk_size,
                overlap=settings.retrieval.chunk_overlap,
            ),
            parser=parser,
        )
        ingestion_dispatcher = IngestionDispatcher(
            pipeline=pipeline,
            session_factory=session_factory,
            mode=settings.ingestion.dispatcher,
        )

        retrieval_service = RetrievalService(
            store=chunk_store,
            embedder=embedder,
            top_k=settings.retrieval.top_k,
            similarity_threshold=settings.retrieval.similarity_threshold,
        )
        rag_agent = RAGAgent(settings.llm)
        chat_history = ChatHistoryAdapter(
            session_factory, max_messages=settings.llm.history_max_messages
        )

        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            chunk_store=chunk_store,
            embedder=embedder,
            storage=storage,
            parser=parser,
            ingestion_dispatcher=ingestion_dispatcher,
            chat_history=chat_history,
            retrieval_service=retrieval_service,
            rag_agent=rag_agent,
            chat_service=ChatService(retrieval_service, rag_agent, chat_history),
        )

    async def aclose(self) -> None:
        """Release database connections."""
        if self.engine is not None:
            await self.engine.dispose()


def get_container(request: Request) -> ServiceContainer:
    """Return the container built during application startup."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status_code=503, detail="Service is starting up")
    return container


async def get_db_session(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped async database session.

    Yields:
        AsyncSession: Closed automatically after the route completes
    """
    if container.session_factory is None:
        raise HTTPException(status_code=503, detail="Database is not configured")
    async with container.session_factory() as session:
        yield session


def get_document_service(
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    container: ServiceContainer = Depends(get_container),
) -> DocumentService:
    """
    Get document service instance.

    Args:
        background_tasks: Request background tasks, run after the response
        db: Async database session (injected via Depends)
        container: Shared collaborators

    Returns:
        DocumentService: Document service bound to this request's session
    """
    return DocumentService(
        db=db,
        storage=container.storage,
        chunk_store=container.chunk_store,
        dispatcher=container.ingestion_dispatcher,
        background_tasks=background_tasks,
        parser=container.parser,
        max_upload_bytes=container.settings.storage.max_upload_bytes,
    )


def get_chat_service(container: ServiceContainer = Depends(get_container)) -> ChatService:
    """Get the shared chat service."""
    return container.chat_service
