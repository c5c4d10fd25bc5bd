"""
Model provider configuration settings.

Google Generative AI settings for the embedding model and the chat model.
Both fall back to the GOOGLE_API_KEY environment variable.

Dependencies: pydantic, pydantic_settings
System role: Embedding and LLM configuration
"""

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from rag_backend.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    model: str = Field(
        default="models/text-embedding-004",
        description="Google embedding model ID",
    )
    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("EMBEDDING_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
        description="API key for Google Generative AI",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts per embedding call before giving up",
    )
    retry_initial_seconds: float = Field(
        default=1.0,
        description="Initial backoff before the first retry",
    )
    retry_max_seconds: float = Field(
        default=10.0,
        description="Upper bound on a single backoff sleep",
    )


class LLMSettings(BaseSettings):
    """Chat model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    model: str = Field(
        default="gemini-1.5-flash",
        description="Google chat model ID",
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LLM_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
        description="API key for Google Generative AI",
    )
    history_max_messages: int = Field(
        default=20,
        ge=0,
        description="Most recent conversation messages sent to the model with each question",
    )
