"""LLM and embedding provider abstractions."""

from hybrid_match.llm.base import LLMProvider, get_llm_provider
from hybrid_match.llm.embeddings import EmbeddingProvider, get_embedding_provider

__all__ = ["EmbeddingProvider", "LLMProvider", "get_embedding_provider", "get_llm_provider"]
