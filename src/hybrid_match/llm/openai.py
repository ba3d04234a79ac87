"""OpenAI LLM provider."""

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from hybrid_match.llm.base import LLMProvider


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider."""

    def _create_extraction_model(self) -> BaseChatModel:
        """Create a deterministic GPT model for tool-call extraction."""
        return ChatOpenAI(
            model=self.model,
            temperature=0,
            api_key=self.api_key,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
