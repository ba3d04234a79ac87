"""Dense embedding provider abstraction."""

from abc import ABC, abstractmethod
from typing import Literal

from langchain_core.embeddings import Embeddings


class EmbeddingProvider(ABC):
    """Turns text into a dense vector of fixed dimensionality."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Embed a single text."""
        pass


class LangChainEmbeddingProvider(EmbeddingProvider):
    """Adapter over any langchain ``Embeddings`` implementation."""

    def __init__(self, embeddings: Embeddings, name: str = "embeddings"):
        self.embeddings = embeddings
        self.name = name

    async def embed(self, text: str) -> list[float]:
        """Embed a single text via ``aembed_query``."""
        return await self.embeddings.aembed_query(text)


def get_embedding_provider(
    provider: Literal["openai", "google"],
    model: str | None = None,
    api_key: str | None = None,
    timeout: float | None = None,
) -> EmbeddingProvider:
    """Factory function to get an embedding provider instance."""
    if provider == "openai":
        from langchain_openai import OpenAIEmbeddings

        model_name = model or "text-embedding-3-small"
        return LangChainEmbeddingProvider(
            OpenAIEmbeddings(model=model_name, api_key=api_key, timeout=timeout, max_retries=0),
            name=f"openai:{model_name}",
        )
    elif provider == "google":
        from langchain_google_genai import GoogleGenerativeAIEmbeddings

        model_name = model or "models/text-embedding-004"
        return LangChainEmbeddingProvider(
            GoogleGenerativeAIEmbeddings(model=model_name, google_api_key=api_key),
            name=f"google:{model_name}",
        )
    else:
        raise ValueError(f"Unknown embedding provider: {provider}")
