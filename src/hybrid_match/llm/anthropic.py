"""Anthropic Claude LLM provider."""

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel

from hybrid_match.llm.base import LLMProvider

# Room for the seven-field assessment, including a multi-sentence justification
MAX_OUTPUT_TOKENS = 2048


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider."""

    def _create_extraction_model(self) -> BaseChatModel:
        """Create a deterministic Claude model for tool-call extraction."""
        return ChatAnthropic(
            model=self.model,
            api_key=self.api_key,
            temperature=0,
            max_tokens=MAX_OUTPUT_TOKENS,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
