"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides the cached factory used at process start.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from rag_backend.configs.base import BaseSettings
from rag_backend.configs.celery_config import CelerySettings
from rag_backend.configs.database import DatabaseSettings
from rag_backend.configs.models import EmbeddingSettings, LLMSettings
from rag_backend.configs.retrieval import RetrievalSettings
from rag_backend.configs.storage import IngestionSettings, StorageSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once; call get_settings.cache_clear()
    in tests that change them.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
