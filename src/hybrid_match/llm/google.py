"""Google Gemini LLM provider."""

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from hybrid_match.llm.base import LLMProvider


class GoogleProvider(LLMProvider):
    """Google Gemini provider using langchain-google-genai.

    Without an explicit key the client falls back to ``GOOGLE_API_KEY``.
    """

    def _create_extraction_model(self) -> BaseChatModel:
        """Create a deterministic Gemini model for tool-call extraction."""
        return ChatGoogleGenerativeAI(
            model=self.model,
            temperature=0,
            google_api_key=self.api_key,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
