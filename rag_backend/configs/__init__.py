"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from rag_backend.configs.celery_config import CelerySettings
from rag_backend.configs.database import DatabaseSettings
from rag_backend.configs.models import EmbeddingSettings, LLMSettings
from rag_backend.configs.retrieval import RetrievalSettings
from rag_backend.configs.settings import Settings, get_settings
from rag_backend.configs.storage import IngestionSettings, StorageSettings

__all__ = [
    "CelerySettings",
    "DatabaseSettings",
    "EmbeddingSettings",
    "IngestionSettings",
    "LLMSettings",
    "RetrievalSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
