"""Tests for the embedding scorer."""

from unittest.mock import AsyncMock

import pytest
from conftest import FakeEmbeddingProvider

from hybrid_match.errors import SignalUnavailableError
from hybrid_match.llm.embeddings import EmbeddingProvider
from hybrid_match.scoring.embedding import EmbeddingScorer


def _provider_returning(*vectors: list[float]) -> EmbeddingProvider:
    provider = AsyncMock(spec=EmbeddingProvider)
    provider.embed.side_effect = list(vectors)
    return provider


class TestEmbeddingScorer:
    """Tests for EmbeddingScorer."""

    @pytest.mark.asyncio
    async def test_identical_texts_score_100(self) -> None:
        """Test that identical texts embed identically."""
        scorer = EmbeddingScorer(FakeEmbeddingProvider())
        assert await scorer.score("React developer", "React developer") == 100

    @pytest.mark.asyncio
    async def test_cosine_of_provider_vectors(self) -> None:
        """Test that the score is the scaled cosine of the returned vectors."""
        scorer = EmbeddingScorer(_provider_returning([1.0, 0.0], [1.0, 1.0]))
        # cos = 1 / sqrt(2)
        assert await scorer.score("job", "cv") == 71

    @pytest.mark.asyncio
    async def test_no_provider_is_unavailable(self) -> None:
        """Test that a missing provider reports the signal as unavailable."""
        scorer = EmbeddingScorer(None)
        assert scorer.available is False
        assert await scorer.score("job", "cv") is None
        with pytest.raises(SignalUnavailableError) as exc_info:
            await scorer.compute("job", "cv")
        assert exc_info.value.signal == "embedding"

    @pytest.mark.asyncio
    async def test_provider_error_is_unavailable(self) -> None:
        """Test that provider errors become an unavailable signal, not zero."""
        scorer = EmbeddingScorer(FakeEmbeddingProvider(fail=True))
        assert await scorer.score("job", "cv") is None

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self) -> None:
        """Test that a slow provider times out into an unavailable signal."""
        scorer = EmbeddingScorer(FakeEmbeddingProvider(delay=0.5), timeout=0.05)
        with pytest.raises(SignalUnavailableError, match="timed out"):
            await scorer.compute("job", "cv")

    @pytest.mark.asyncio
    async def test_mismatched_vectors_are_unavailable(self) -> None:
        """Test that vectors of different dimensions are rejected."""
        scorer = EmbeddingScorer(_provider_returning([1.0, 0.0], [1.0, 0.0, 0.0]))
        assert await scorer.score("job", "cv") is None

    @pytest.mark.asyncio
    async def test_texts_are_truncated(self) -> None:
        """Test that long texts are truncated before embedding."""
        provider = FakeEmbeddingProvider()
        scorer = EmbeddingScorer(provider, max_chars=10)
        await scorer.score("a" * 50, "short   text   here")
        assert provider.calls == ["a" * 10, "short text"]

    @pytest.mark.asyncio
    async def test_vectors_are_memoized_per_text(self) -> None:
        """Test that one requirement is embedded once across candidates."""
        provider = FakeEmbeddingProvider()
        scorer = EmbeddingScorer(provider)
        await scorer.score("Python developer", "Candidate one")
        await scorer.score("Python developer", "Candidate two")
        assert provider.calls.count("Python developer") == 1
        assert len(provider.calls) == 3

    @pytest.mark.asyncio
    async def test_memo_is_bounded(self) -> None:
        """Test that the memo evicts old texts beyond its size."""
        provider = FakeEmbeddingProvider()
        scorer = EmbeddingScorer(provider, memo_size=2)
        await scorer.score("one", "two")
        await scorer.score("three", "four")
        await scorer.score("one", "four")
        # "one" was evicted, "four" was still memoized
        assert provider.calls == ["one", "two", "three", "four", "one"]
