"""
Document storage configuration.

Settings for where raw uploaded files live: the local filesystem for
development, or an S3 bucket.

Dependencies: pydantic_settings
System role: Raw document storage configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from rag_backend.configs.base import BaseSettings


class StorageSettings(BaseSettings):
    """Settings for raw document storage."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: Literal["local", "s3"] = Field(
        default="local",
        description="Storage backend: 'local' for development, 's3' for production",
    )
    local_root: str = Field(
        default="./data/uploads",
        description="Root directory for the local backend",
    )
    s3_bucket: str = Field(
        default="knowledge-base-documents",
        description="S3 bucket for raw document storage",
    )
    s3_region: str = Field(
        default="us-east-1",
        description="AWS region for the S3 bucket",
    )
    max_upload_bytes: int = Field(
        default=20 * 1024 * 1024,
        description="Largest accepted upload in bytes",
    )


class IngestionSettings(BaseSettings):
    """Background ingestion settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    dispatcher: Literal["background", "celery"] = Field(
        default="background",
        description=(
            "'background' runs ingestion as a FastAPI background task in the API "
            "process; 'celery' sends it to a Celery worker"
        ),
    )
