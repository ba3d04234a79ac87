"""Base LLM provider abstraction."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Literal, TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)

# Default timeout in seconds for one API request
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 1  # transport-level retries inside the client


class LLMProvider(ABC):
    """Abstract base class for generative-text providers.

    The extraction model is created on first access and reused for
    subsequent calls.
    """

    _extraction_model: BaseChatModel | None = None

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self._extraction_model = None

    def get_extraction_model(self) -> BaseChatModel:
        """Get a cached model configured for structured extraction."""
        if self._extraction_model is None:
            self._extraction_model = self._create_extraction_model()
        return self._extraction_model

    @abstractmethod
    def _create_extraction_model(self) -> BaseChatModel:
        """Create a new extraction model instance. Override in subclasses."""
        pass

    async def extract_structured(
        self,
        messages: Sequence[BaseMessage],
        output_schema: type[T],
    ) -> dict[str, Any]:
        """Ask the model for an answer shaped like ``output_schema``.

        The schema is bound as a function-calling tool. Parsing failures are
        returned rather than raised so the caller can decide to retry.

        Returns:
            Dict with ``raw`` (the model message), ``parsed`` (an
            ``output_schema`` instance or None) and ``parsing_error`` (the
            exception raised while parsing, or None).
        """
        model = self.get_extraction_model()
        structured_model = model.with_structured_output(
            output_schema,
            method="function_calling",
            include_raw=True,
        )
        return await structured_model.ainvoke(list(messages))


def get_llm_provider(
    provider: Literal["openai", "anthropic", "google"],
    model: str | None = None,
    api_key: str | None = None,
) -> LLMProvider:
    """Factory function to get an LLM provider instance."""
    if provider == "openai":
        from hybrid_match.llm.openai import OpenAIProvider

        return OpenAIProvider(model=model or "gpt-4o-mini", api_key=api_key)
    elif provider == "anthropic":
        from hybrid_match.llm.anthropic import AnthropicProvider

        return AnthropicProvider(model=model or "claude-sonnet-4-5-20250929", api_key=api_key)
    elif provider == "google":
        from hybrid_match.llm.google import GoogleProvider

        return GoogleProvider(model=model or "gemini-2.5-flash", api_key=api_key)
    else:
        raise ValueError(f"Unknown provider: {provider}")
