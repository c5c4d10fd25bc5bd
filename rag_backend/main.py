"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures
lifespan.

Dependencies: fastapi, rag_backend.api, rag_backend.observability, rag_backend.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rag_backend.api import api_router
from rag_backend.api.deps.dependencies import ServiceContainer
from rag_backend.boundary.db.connection import create_tables
from rag_backend.configs import Settings, get_settings
from rag_backend.observability.logger import configure_logging
from rag_backend.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Builds the service container and ensures tables exist; releases
    database connections on shutdown.
    """
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    container = ServiceContainer.from_settings(settings)
    try:
        if container.engine is not None:
            await create_tables(container.engine)
    except Exception as e:
        logger.exception(
            "Failed to initialize application resources",
            extra={"error": str(e)},
        )
        await container.aclose()
        raise

    app.state.container = container
    logger.info("Application startup complete: all resources initialized")

    yield

    logger.info("Application shutdown")
    await container.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Optional settings override (defaults to environment)

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Document question answering with retrieval-augmented generation",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Added first = innermost; correlation id is set before request logging runs
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


load_dotenv()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rag_backend.main:app",
        host="0.0.0.0",
        port=8000,
    )
