"""Dense-embedding semantic similarity scoring."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections import OrderedDict
from typing import TYPE_CHECKING

from hybrid_match.errors import SignalUnavailableError
from hybrid_match.scoring.vector import cosine_similarity, similarity_to_score

if TYPE_CHECKING:
    from hybrid_match.llm.embeddings import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
# Embedding models have an input token limit; truncate long documents
DEFAULT_MAX_CHARS = 8000
DEFAULT_MEMO_SIZE = 256


class EmbeddingScorer:
    """Cosine similarity between provider embeddings of both documents.

    The two embedding calls run concurrently under a single timeout. Provider
    errors and timeouts are reported as an unavailable signal (``None``) so the
    aggregator can redistribute the embedding weight instead of scoring zero.
    Vectors are memoized per text, so a requirement scored against many
    candidates is embedded once.
    """

    def __init__(
        self,
        provider: EmbeddingProvider | None,
        timeout: float = DEFAULT_TIMEOUT,
        max_chars: int = DEFAULT_MAX_CHARS,
        memo_size: int = DEFAULT_MEMO_SIZE,
    ) -> None:
        self.provider = provider
        self.timeout = timeout
        self.max_chars = max_chars
        self.memo_size = memo_size
        self._memo: OrderedDict[str, list[float]] = OrderedDict()

    @property
    def available(self) -> bool:
        """Whether an embedding provider is configured."""
        return self.provider is not None

    async def score(self, requirement_text: str, candidate_text: str) -> int | None:
        """Score semantic similarity, or return None if the signal is unavailable."""
        try:
            return await self.compute(requirement_text, candidate_text)
        except SignalUnavailableError as e:
            logger.warning(str(e))
            return None

    async def compute(self, requirement_text: str, candidate_text: str) -> int:
        """Score semantic similarity.

        Raises:
            SignalUnavailableError: If the provider is missing, fails, times out
                or returns unusable vectors.
        """
        if self.provider is None:
            raise SignalUnavailableError("embedding", "no embedding provider configured")

        try:
            requirement_vector, candidate_vector = await asyncio.wait_for(
                asyncio.gather(self._embed(requirement_text), self._embed(candidate_text)),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise SignalUnavailableError("embedding", f"timed out after {self.timeout}s") from e
        except Exception as e:
            raise SignalUnavailableError("embedding", f"provider error: {e}") from e

        if not requirement_vector or len(requirement_vector) != len(candidate_vector):
            raise SignalUnavailableError("embedding", "provider returned mismatched vectors")

        similarity = cosine_similarity(requirement_vector, candidate_vector)
        score = similarity_to_score(similarity)
        logger.debug(f"Embedding similarity: {similarity:.4f} -> {score}")
        return score

    def _prepare(self, text: str) -> str:
        """Collapse whitespace and truncate to the provider's input budget."""
        return " ".join(text.split())[: self.max_chars]

    async def _embed(self, text: str) -> list[float]:
        prepared = self._prepare(text)
        key = hashlib.sha256(prepared.encode("utf-8")).hexdigest()

        cached = self._memo.get(key)
        if cached is not None:
            self._memo.move_to_end(key)
            return cached

        vector = list(await self.provider.embed(prepared))
        self._memo[key] = vector
        if len(self._memo) > self.memo_size:
            self._memo.popitem(last=False)
        return vector
