"""Tests for LLM and embedding provider abstractions."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage
from pydantic import BaseModel

from hybrid_match.llm.base import LLMProvider, get_llm_provider
from hybrid_match.llm.embeddings import (
    EmbeddingProvider,
    LangChainEmbeddingProvider,
    get_embedding_provider,
)


class TestGetLLMProvider:
    """Tests for the get_llm_provider factory function."""

    @patch("hybrid_match.llm.openai.OpenAIProvider")
    def test_openai_provider(self, mock_provider: MagicMock) -> None:
        """Test that openai provider is correctly instantiated."""
        mock_instance = MagicMock()
        mock_provider.return_value = mock_instance

        result = get_llm_provider("openai", model="gpt-4o", api_key="test-key")

        mock_provider.assert_called_once_with(model="gpt-4o", api_key="test-key")
        assert result is mock_instance

    @patch("hybrid_match.llm.anthropic.AnthropicProvider")
    def test_anthropic_provider(self, mock_provider: MagicMock) -> None:
        """Test that anthropic provider is correctly instantiated."""
        get_llm_provider("anthropic", model="claude-sonnet-4-5-20250929", api_key="test-key")
        mock_provider.assert_called_once_with(
            model="claude-sonnet-4-5-20250929", api_key="test-key"
        )

    @patch("hybrid_match.llm.google.GoogleProvider")
    def test_google_provider(self, mock_provider: MagicMock) -> None:
        """Test that google provider is correctly instantiated."""
        get_llm_provider("google", model="gemini-2.5-pro", api_key="test-key")
        mock_provider.assert_called_once_with(model="gemini-2.5-pro", api_key="test-key")

    @patch("hybrid_match.llm.openai.OpenAIProvider")
    def test_openai_default_model(self, mock_provider: MagicMock) -> None:
        """Test that openai uses default model when not specified."""
        get_llm_provider("openai")
        mock_provider.assert_called_once_with(model="gpt-4o-mini", api_key=None)

    @patch("hybrid_match.llm.anthropic.AnthropicProvider")
    def test_anthropic_default_model(self, mock_provider: MagicMock) -> None:
        """Test that anthropic uses default model when not specified."""
        get_llm_provider("anthropic")
        mock_provider.assert_called_once_with(model="claude-sonnet-4-5-20250929", api_key=None)

    @patch("hybrid_match.llm.google.GoogleProvider")
    def test_google_default_model(self, mock_provider: MagicMock) -> None:
        """Test that google uses default model when not specified."""
        get_llm_provider("google")
        mock_provider.assert_called_once_with(model="gemini-2.5-flash", api_key=None)

    def test_unknown_provider_raises(self) -> None:
        """Test that unknown provider raises ValueError."""
        with pytest.raises(ValueError, match="Unknown provider: invalid"):
            get_llm_provider("invalid")  # type: ignore[arg-type]


class TestLLMProviderInterface:
    """Tests for the LLMProvider abstract base class."""

    def test_is_abstract(self) -> None:
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider(model="any")  # type: ignore[abstract]

    def test_extraction_model_is_cached(self) -> None:
        """Test that the extraction model is created once."""

        class CountingProvider(LLMProvider):
            created = 0

            def _create_extraction_model(self):
                self.created += 1
                return MagicMock()

        provider = CountingProvider(model="any")
        assert provider.get_extraction_model() is provider.get_extraction_model()
        assert provider.created == 1


class _Verdict(BaseModel):
    score: int


class TestExtractStructured:
    """Tests for LLMProvider.extract_structured."""

    @pytest.mark.asyncio
    async def test_binds_schema_as_tool(self) -> None:
        """Test that the schema goes through with_structured_output with the raw answer kept."""
        outcome = {"raw": AIMessage(content=""), "parsed": _Verdict(score=80), "parsing_error": None}
        structured = MagicMock()
        structured.ainvoke = AsyncMock(return_value=outcome)
        model = MagicMock()
        model.with_structured_output.return_value = structured

        class StubProvider(LLMProvider):
            def _create_extraction_model(self):
                return model

        messages = [HumanMessage(content="score this")]
        result = await StubProvider(model="stub").extract_structured(messages, _Verdict)

        assert result is outcome
        model.with_structured_output.assert_called_once_with(
            _Verdict, method="function_calling", include_raw=True
        )
        structured.ainvoke.assert_awaited_once_with(messages)

    @pytest.mark.asyncio
    async def test_parsing_error_is_returned(self) -> None:
        """Test that a parsing failure comes back in the result instead of raising."""
        error = ValueError("score: field required")
        structured = MagicMock()
        structured.ainvoke = AsyncMock(
            return_value={"raw": AIMessage(content=""), "parsed": None, "parsing_error": error}
        )
        model = MagicMock()
        model.with_structured_output.return_value = structured

        class StubProvider(LLMProvider):
            def _create_extraction_model(self):
                return model

        result = await StubProvider(model="stub").extract_structured(
            [HumanMessage(content="score this")], _Verdict
        )

        assert result["parsed"] is None
        assert result["parsing_error"] is error


class TestConcreteProviders:
    """Tests for the chat model each provider builds."""

    @patch("hybrid_match.llm.openai.ChatOpenAI")
    def test_openai_model(self, mock_chat: MagicMock) -> None:
        """Test that the OpenAI model is deterministic and uses the provider settings."""
        from hybrid_match.llm.openai import OpenAIProvider

        provider = OpenAIProvider(model="gpt-4o-mini", api_key="sk-test", timeout=10.0)
        provider.get_extraction_model()

        mock_chat.assert_called_once_with(
            model="gpt-4o-mini", temperature=0, api_key="sk-test", timeout=10.0, max_retries=1
        )

    @patch("hybrid_match.llm.anthropic.ChatAnthropic")
    def test_anthropic_model(self, mock_chat: MagicMock) -> None:
        """Test that the Claude model caps output tokens."""
        from hybrid_match.llm.anthropic import MAX_OUTPUT_TOKENS, AnthropicProvider

        AnthropicProvider(model="claude-sonnet-4-5-20250929").get_extraction_model()

        kwargs = mock_chat.call_args.kwargs
        assert kwargs["temperature"] == 0
        assert kwargs["max_tokens"] == MAX_OUTPUT_TOKENS

    @patch("hybrid_match.llm.google.ChatGoogleGenerativeAI")
    def test_google_model(self, mock_chat: MagicMock) -> None:
        """Test that the Gemini model receives the key under its own name."""
        from hybrid_match.llm.google import GoogleProvider

        GoogleProvider(model="gemini-2.5-flash", api_key="g-key").get_extraction_model()

        kwargs = mock_chat.call_args.kwargs
        assert kwargs["google_api_key"] == "g-key"
        assert "response_mime_type" not in kwargs


class TestEmbeddingProviders:
    """Tests for embedding provider wiring."""

    def test_is_abstract(self) -> None:
        """Test that EmbeddingProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            EmbeddingProvider()  # type: ignore[abstract]

    @pytest.mark.asyncio
    async def test_langchain_adapter_uses_aembed_query(self) -> None:
        """Test that the adapter delegates to aembed_query."""
        embeddings = MagicMock()
        embeddings.aembed_query = AsyncMock(return_value=[0.1, 0.2])

        provider = LangChainEmbeddingProvider(embeddings, name="test")

        assert await provider.embed("hello") == [0.1, 0.2]
        embeddings.aembed_query.assert_awaited_once_with("hello")

    @patch("langchain_openai.OpenAIEmbeddings")
    def test_openai_embeddings(self, mock_embeddings: MagicMock) -> None:
        """Test that OpenAI embeddings are built without client retries."""
        provider = get_embedding_provider("openai", api_key="sk-test", timeout=5.0)

        mock_embeddings.assert_called_once_with(
            model="text-embedding-3-small", api_key="sk-test", timeout=5.0, max_retries=0
        )
        assert isinstance(provider, LangChainEmbeddingProvider)
        assert provider.name == "openai:text-embedding-3-small"

    @patch("langchain_google_genai.GoogleGenerativeAIEmbeddings")
    def test_google_embeddings(self, mock_embeddings: MagicMock) -> None:
        """Test that Google embeddings use the Google default model."""
        provider = get_embedding_provider("google", api_key="g-key")

        mock_embeddings.assert_called_once_with(
            model="models/text-embedding-004", google_api_key="g-key"
        )
        assert provider.name == "google:models/text-embedding-004"

    def test_unknown_provider_raises(self) -> None:
        """Test that unknown embedding providers raise ValueError."""
        with pytest.raises(ValueError, match="Unknown embedding provider"):
            get_embedding_provider("anthropic")  # type: ignore[arg-type]
