"""Pytest configuration and fixtures."""

import asyncio
import hashlib
import math
from collections.abc import Sequence
from typing import Any
from unittest.mock import MagicMock

import pytest
from langchain_core.messages import AIMessage, BaseMessage
from pydantic import BaseModel, ValidationError

from hybrid_match.cache.result_cache import NullCache, ResultCache
from hybrid_match.llm.base import LLMProvider
from hybrid_match.llm.embeddings import EmbeddingProvider
from hybrid_match.scoring.hybrid import HybridScorer
from hybrid_match.utils.text_utils import normalize

REACT_REQUIREMENT = "Recherche Développeur React senior, remote ok"
REACT_CANDIDATE = "5 ans React, Node.js, disponible immédiatement"


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic bag-of-words embeddings hashed into a small vector."""

    def __init__(
        self,
        dimensions: int = 64,
        fail: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.dimensions = dimensions
        self.fail = fail
        self.delay = delay
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ConnectionError("embedding service unreachable")

        vector = [0.0] * self.dimensions
        for term in normalize(text):
            bucket = int(hashlib.md5(term.encode("utf-8")).hexdigest(), 16) % self.dimensions
            vector[bucket] += 1.0
        norm = math.sqrt(sum(value * value for value in vector)) or 1.0
        return [value / norm for value in vector]


class ScriptedLLMProvider(LLMProvider):
    """LLM provider replaying scripted tool-call answers.

    Each script item is a dict (the tool arguments, validated against the
    requested schema), None (a plain-text answer without a tool call) or an
    exception instance (raised). The last item repeats once the script runs out.
    """

    def __init__(self, script: Sequence[Any], delay: float = 0.0) -> None:
        super().__init__(model="scripted")
        self.script = list(script)
        self.delay = delay
        self.calls: list[list[BaseMessage]] = []

    def _create_extraction_model(self) -> Any:
        return MagicMock()

    async def extract_structured(
        self,
        messages: Sequence[BaseMessage],
        output_schema: type[BaseModel],
    ) -> dict[str, Any]:
        self.calls.append(list(messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        index = min(len(self.calls) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, BaseException):
            raise item
        if item is None:
            text = AIMessage(content="Looks like a good fit.")
            return {"raw": text, "parsed": None, "parsing_error": None}
        raw = AIMessage(
            content="",
            tool_calls=[{"name": output_schema.__name__, "args": item, "id": "call_1"}],
        )
        try:
            return {"raw": raw, "parsed": output_schema.model_validate(item), "parsing_error": None}
        except ValidationError as e:
            return {"raw": raw, "parsed": None, "parsing_error": e}


@pytest.fixture
def semantic_payload() -> dict[str, Any]:
    """A valid semantic analysis answer for the React example."""
    return {
        "semantic_score": 72,
        "strengths": ["Hands-on React experience", "Available immediately"],
        "weaknesses": ["Seniority is unverified"],
        "recommendations": ["Confirm years of React in production"],
        "skills_alignment": ["React", "Kubernetes"],
        "missing_competencies": ["remote", "Node.js"],
        "detailed_justification": "The candidate lists React, the core skill requested.",
    }


@pytest.fixture
def fake_embeddings() -> FakeEmbeddingProvider:
    """Working deterministic embedding provider."""
    return FakeEmbeddingProvider()


@pytest.fixture
def failing_embeddings() -> FakeEmbeddingProvider:
    """Embedding provider that always errors."""
    return FakeEmbeddingProvider(fail=True)


@pytest.fixture
def scripted_llm(semantic_payload: dict[str, Any]) -> ScriptedLLMProvider:
    """LLM provider that always answers with a valid payload."""
    return ScriptedLLMProvider([semantic_payload])


@pytest.fixture
def lexical_scorer() -> HybridScorer:
    """Scorer without remote providers and with caching disabled by a null cache."""
    return HybridScorer(cache=NullCache())


@pytest.fixture
def full_scorer(
    scripted_llm: ScriptedLLMProvider,
    fake_embeddings: FakeEmbeddingProvider,
) -> HybridScorer:
    """Scorer with every signal available and a fresh result cache."""
    return HybridScorer(
        llm_provider=scripted_llm,
        embedding_provider=fake_embeddings,
        cache=ResultCache(ttl_seconds=60, max_entries=10),
    )
