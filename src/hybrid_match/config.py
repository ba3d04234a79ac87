"""Configuration management for Hybrid Match."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from hybrid_match.llm.base import LLMProvider
    from hybrid_match.llm.embeddings import EmbeddingProvider
    from hybrid_match.scoring.hybrid import HybridScorer

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HYBRID_MATCH_",
        env_file=".env.local",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Keys (no prefix, standard env vars)
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    anthropic_api_key: str | None = Field(default=None, alias="ANTHROPIC_API_KEY")
    google_api_key: str | None = Field(default=None, alias="GOOGLE_API_KEY")

    # Generative-text provider for the semantic analysis
    provider: Literal["openai", "anthropic", "google"] = "openai"
    model: str | None = Field(
        default=None,
        description="Model override (defaults to the provider's default model)",
    )

    # Embedding provider
    embedding_provider: Literal["openai", "google"] = "openai"
    embedding_model: str = "text-embedding-3-small"

    # Remote stage timeouts
    embedding_timeout_seconds: float = Field(
        default=5.0,
        ge=1,
        le=60,
        description="Timeout for the two embedding calls of one scoring request",
    )
    semantic_timeout_seconds: float = Field(
        default=45.0,
        ge=5,
        le=300,
        description="Timeout for the semantic analysis, including its retry",
    )
    embedding_max_chars: int = Field(
        default=8000,
        ge=500,
        le=100000,
        description="Characters kept from each text before embedding",
    )

    # Result cache sizing
    cache_ttl_seconds: int = Field(default=3600, ge=1, le=7 * 24 * 3600)
    cache_max_entries: int = Field(default=1000, ge=1, le=1_000_000)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    def api_key_for(self, provider: str) -> str | None:
        """Return the configured API key for a provider name."""
        return {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "google": self.google_api_key,
        }.get(provider)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def build_llm_provider(settings: Settings) -> LLMProvider | None:
    """Build the generative-text provider, or None when its key is missing."""
    from hybrid_match.llm.base import get_llm_provider

    api_key = settings.api_key_for(settings.provider)
    if not api_key:
        logger.info(f"No API key for {settings.provider}; semantic analysis disabled")
        return None
    return get_llm_provider(settings.provider, model=settings.model, api_key=api_key)


def build_embedding_provider(settings: Settings) -> EmbeddingProvider | None:
    """Build the embedding provider, or None when its key is missing."""
    from hybrid_match.llm.embeddings import get_embedding_provider

    api_key = settings.api_key_for(settings.embedding_provider)
    if not api_key:
        logger.info(f"No API key for {settings.embedding_provider}; embedding signal disabled")
        return None

    # The OpenAI default model name is meaningless for Google
    model = settings.embedding_model
    if settings.embedding_provider == "google" and model == "text-embedding-3-small":
        model = None
    return get_embedding_provider(
        settings.embedding_provider,
        model=model,
        api_key=api_key,
        timeout=settings.embedding_timeout_seconds,
    )


def build_hybrid_scorer(settings: Settings | None = None) -> HybridScorer:
    """Wire a HybridScorer from settings.

    Providers without an API key are left out; the corresponding signals are
    then skipped and their weight redistributed.
    """
    from hybrid_match.cache.result_cache import ResultCache
    from hybrid_match.scoring.hybrid import HybridScorer

    settings = settings or get_settings()
    return HybridScorer(
        llm_provider=build_llm_provider(settings),
        embedding_provider=build_embedding_provider(settings),
        cache=ResultCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        ),
        embedding_timeout=settings.embedding_timeout_seconds,
        semantic_timeout=settings.semantic_timeout_seconds,
        embedding_max_chars=settings.embedding_max_chars,
    )


@lru_cache
def get_hybrid_scorer() -> HybridScorer:
    """Get a process-wide scorer built from the cached settings."""
    return build_hybrid_scorer(get_settings())
