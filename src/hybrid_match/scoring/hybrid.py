"""Hybrid scorer combining lexical, vector, embedding and LLM-based signals."""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import Awaitable, Sequence
from typing import TYPE_CHECKING, NamedTuple, TypeVar

from hybrid_match.cache.result_cache import ResultCache, ScoringCache, compute_fingerprint
from hybrid_match.errors import CacheError, InvalidInputError, SemanticAnalysisError
from hybrid_match.scoring.aggregator import Aggregator, compute_confidence
from hybrid_match.scoring.domain import DomainFocusAdjuster, conceptual_matches, detect_profile
from hybrid_match.scoring.embedding import EmbeddingScorer
from hybrid_match.scoring.keyword import KeywordScorer, detect_sector, extract_declared_skills
from hybrid_match.scoring.models import (
    CandidateProfile,
    KeywordResult,
    QualitativeAnalysis,
    ScoringConfig,
    ScoringResult,
    SemanticAssessment,
    Signal,
    SignalBreakdown,
)
from hybrid_match.scoring.semantic import SemanticAnalyzer
from hybrid_match.scoring.vector import VectorScorer
from hybrid_match.utils.text_utils import normalize, unique_sorted

if TYPE_CHECKING:
    from hybrid_match.llm.base import LLMProvider
    from hybrid_match.llm.embeddings import EmbeddingProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SEMANTIC_TIMEOUT = 45.0
DEFAULT_BATCH_CONCURRENCY = 5


class _LexicalOutcome(NamedTuple):
    """Output of the synchronous, in-process stage."""

    keyword: KeywordResult
    vector_score: int
    sector: str
    concepts: list[str]
    profile: CandidateProfile


def _require_text(value: object, name: str) -> str:
    """Reject missing or empty raw text.

    Text that is only whitespace or punctuation is accepted; it normalizes to no
    terms and scores neutrally.
    """
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"{name} must be a non-empty string")
    return value


async def _timed(awaitable: Awaitable[T]) -> tuple[T, float]:
    """Await and return (result, elapsed milliseconds)."""
    started = time.perf_counter()
    result = await awaitable
    return result, round((time.perf_counter() - started) * 1000, 1)


async def _skipped() -> None:
    return None


class HybridScorer:
    """Public entry point of the scoring engine.

    Flow:
    1. Validate raw inputs and consult the result cache
    2. Run the lexical stage (keyword + vector), the embedding scorer and the
       semantic analyzer concurrently; the mode decides which remote stages run
    3. Apply the domain focus adjuster: keyword boost and, for a known
       candidate context, context-specific signal weights
    4. Aggregate the present signals into the final score
    5. Merge qualitative output, or derive it from the numbers when the
       semantic analysis is unavailable

    Remote stage failures degrade the result instead of failing the call. Only
    ``InvalidInputError`` reaches the caller.
    """

    def __init__(
        self,
        llm_provider: LLMProvider | None = None,
        embedding_provider: EmbeddingProvider | None = None,
        cache: ScoringCache | None = None,
        embedding_timeout: float = 5.0,
        semantic_timeout: float = DEFAULT_SEMANTIC_TIMEOUT,
        embedding_max_chars: int = 8000,
    ) -> None:
        """Initialize the hybrid scorer.

        Args:
            llm_provider: Generative-text provider for the semantic analysis.
                Without one the semantic signal never runs.
            embedding_provider: Embedding provider. Without one the embedding
                signal never runs.
            cache: Result cache; a fresh in-memory ``ResultCache`` by default.
            embedding_timeout: Seconds allowed for both embedding calls.
            semantic_timeout: Seconds allowed for the semantic analysis,
                including its retry.
            embedding_max_chars: Text length kept before embedding.
        """
        self.keyword = KeywordScorer()
        self.vector = VectorScorer()
        self.embedding = EmbeddingScorer(
            embedding_provider, timeout=embedding_timeout, max_chars=embedding_max_chars
        )
        self.semantic = SemanticAnalyzer(llm_provider)
        self.domain = DomainFocusAdjuster()
        self.aggregator = Aggregator()
        self.cache = cache if cache is not None else ResultCache()
        self.semantic_timeout = semantic_timeout

    async def calculate_hybrid_score(
        self,
        requirement_text: str,
        candidate_text: str,
        config: ScoringConfig | None = None,
    ) -> ScoringResult:
        """Score a candidate text against a requirement text.

        Args:
            requirement_text: Raw job/mission description.
            candidate_text: Raw candidate profile.
            config: Performance mode, domain focus and cache switch.

        Returns:
            ScoringResult; always carries a usable final score.

        Raises:
            InvalidInputError: If either raw text is missing or empty.
        """
        requirement_text = _require_text(requirement_text, "requirement_text")
        candidate_text = _require_text(candidate_text, "candidate_text")
        config = config or ScoringConfig()

        compute = functools.partial(self._compute, requirement_text, candidate_text, config)
        if not config.use_cache:
            return await compute()

        fingerprint = compute_fingerprint(requirement_text, candidate_text, config)
        try:
            return await self.cache.get_or_compute(fingerprint, compute)
        except CacheError as e:
            logger.warning(f"Cache unavailable, computing directly: {e}")
            return await compute()

    async def batch_score(
        self,
        requirement_text: str,
        candidate_texts: Sequence[str],
        config: ScoringConfig | None = None,
        max_concurrency: int = DEFAULT_BATCH_CONCURRENCY,
    ) -> list[tuple[int, ScoringResult]]:
        """Score many candidates against one requirement.

        Empty candidate texts are skipped with a warning. A candidate whose
        scoring raises is logged and left out; the others are still returned.

        Returns:
            (candidate index, result) pairs sorted by descending final score;
            ties keep input order.

        Raises:
            InvalidInputError: If the requirement text is empty.
        """
        requirement_text = _require_text(requirement_text, "requirement_text")
        semaphore = asyncio.Semaphore(max(1, max_concurrency))

        async def _score_one(index: int, text: str) -> tuple[int, ScoringResult]:
            async with semaphore:
                return index, await self.calculate_hybrid_score(requirement_text, text, config)

        jobs = []
        indices: list[int] = []
        for index, text in enumerate(candidate_texts):
            if not isinstance(text, str) or not text:
                logger.warning(f"Skipping candidate #{index}: empty text")
                continue
            jobs.append(_score_one(index, text))
            indices.append(index)

        outcomes = await asyncio.gather(*jobs, return_exceptions=True)
        scored: list[tuple[int, ScoringResult]] = []
        for index, outcome in zip(indices, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"Failed to score candidate #{index}: {outcome}")
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            scored.append(outcome)

        logger.info(f"Batch scored {len(scored)}/{len(candidate_texts)} candidates")
        return sorted(scored, key=lambda item: (-item[1].final_score, item[0]))

    async def _compute(
        self,
        requirement_text: str,
        candidate_text: str,
        config: ScoringConfig,
    ) -> ScoringResult:
        """Run the full pipeline once, without caching."""
        started = time.perf_counter()
        mode = config.performance_mode
        signals = self.aggregator.signals_for(mode)

        # Remote stages have nothing to work on when a text has no terms
        has_terms = bool(normalize(requirement_text)) and bool(normalize(candidate_text))
        run_embedding = has_terms and Signal.EMBEDDING in signals and self.embedding.available
        run_semantic = has_terms and Signal.SEMANTIC in signals and self.semantic.available

        (
            (lexical, lexical_ms),
            (embedding_score, embedding_ms),
            (assessment, semantic_ms),
        ) = await asyncio.gather(
            _timed(asyncio.to_thread(self._lexical_stage, requirement_text, candidate_text)),
            _timed(
                self.embedding.score(requirement_text, candidate_text)
                if run_embedding
                else _skipped()
            ),
            _timed(
                self._semantic_stage(requirement_text, candidate_text, config)
                if run_semantic
                else _skipped()
            ),
        )

        breakdown = SignalBreakdown(
            keyword_score=lexical.keyword.score,
            vector_score=lexical.vector_score,
            embedding_score=embedding_score,
            semantic_score=assessment.semantic_score if assessment else None,
        )
        breakdown = self.domain.adjust(breakdown, config.domain_focus, lexical.keyword)

        base_weights = self.domain.context_weights(config.domain_focus, lexical.profile)
        final_score = self.aggregator.aggregate(breakdown, mode, base_weights)
        degraded = (run_embedding and embedding_score is None) or (
            run_semantic and assessment is None
        )

        if assessment is not None:
            analysis = self._merge_analysis(lexical, assessment)
        else:
            analysis = self._fallback_analysis(lexical, breakdown, final_score)

        timings = {"lexical": lexical_ms}
        if run_embedding:
            timings["embedding"] = embedding_ms
        if run_semantic:
            timings["semantic"] = semantic_ms
        timings["total"] = round((time.perf_counter() - started) * 1000, 1)

        logger.info(
            f"Hybrid score {final_score} ({mode.value}) "
            f"K:{breakdown.keyword_score} V:{breakdown.vector_score} "
            f"E:{breakdown.embedding_score} S:{breakdown.semantic_score} "
            f"in {timings['total']}ms{' [degraded]' if degraded else ''}"
        )

        return ScoringResult(
            final_score=final_score,
            breakdown=breakdown,
            analysis=analysis,
            from_cache=False,
            confidence=compute_confidence(breakdown, lexical.profile.domain_expertise),
            degraded=degraded,
            timings_ms=timings,
        )

    def _lexical_stage(self, requirement_text: str, candidate_text: str) -> _LexicalOutcome:
        """Keyword and vector scoring plus descriptive extras (synchronous)."""
        requirement_terms = normalize(requirement_text)
        candidate_terms = normalize(candidate_text)
        required, preferred = extract_declared_skills(requirement_text)

        return _LexicalOutcome(
            keyword=self.keyword.score(requirement_terms, candidate_terms, required, preferred),
            vector_score=self.vector.score(requirement_terms, candidate_terms),
            sector=detect_sector(requirement_terms),
            concepts=conceptual_matches(requirement_terms, candidate_terms),
            profile=detect_profile(candidate_terms),
        )

    async def _semantic_stage(
        self,
        requirement_text: str,
        candidate_text: str,
        config: ScoringConfig,
    ) -> SemanticAssessment | None:
        """Semantic analysis under a timeout; None when unavailable."""
        try:
            return await asyncio.wait_for(
                self.semantic.analyze(requirement_text, candidate_text, config.domain_focus),
                timeout=self.semantic_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Semantic analysis timed out after {self.semantic_timeout}s; "
                "returning numeric-only result"
            )
        except SemanticAnalysisError as e:
            logger.warning(f"Semantic analysis unavailable; returning numeric-only result: {e}")
        return None

    def _merge_analysis(
        self,
        lexical: _LexicalOutcome,
        assessment: SemanticAssessment,
    ) -> QualitativeAnalysis:
        """Merge the LLM analysis with the keyword evidence."""
        semantic = assessment.analysis
        recommendations = list(semantic.recommendations)
        for skill in lexical.keyword.missing[:3]:
            suggestion = f"Develop or document experience in {skill}"
            if suggestion not in recommendations:
                recommendations.append(suggestion)

        return QualitativeAnalysis(
            strengths=semantic.strengths,
            weaknesses=semantic.weaknesses,
            recommendations=recommendations,
            skills_alignment=unique_sorted([*lexical.keyword.matched, *semantic.skills_alignment]),
            missing_competencies=unique_sorted(
                [*lexical.keyword.missing, *semantic.missing_competencies]
            ),
            detailed_justification=semantic.detailed_justification,
            sector_detected=lexical.sector,
            conceptual_matches=lexical.concepts,
            profile_context=lexical.profile.context,
            experience_level=lexical.profile.experience_level,
            domain_expertise=lexical.profile.domain_expertise,
        )

    def _fallback_analysis(
        self,
        lexical: _LexicalOutcome,
        breakdown: SignalBreakdown,
        final_score: int,
    ) -> QualitativeAnalysis:
        """Derive qualitative output deterministically from the numeric signals."""
        keyword = lexical.keyword
        strengths: list[str] = []
        weaknesses: list[str] = []
        recommendations: list[str] = []

        if keyword.used_skill_coverage and keyword.matched:
            declared = len(keyword.required_skills) + len(keyword.preferred_skills)
            strengths.append(
                f"Covers {len(keyword.matched)} of {declared} declared skills: "
                + ", ".join(keyword.matched[:5])
            )
        if breakdown.keyword_score is not None and breakdown.keyword_score >= 70:
            strengths.append("Strong keyword coverage of the requirement")
        if breakdown.vector_score is not None and breakdown.vector_score >= 60:
            strengths.append("High vocabulary overlap with the requirement")
        if breakdown.embedding_score is not None and breakdown.embedding_score >= 70:
            strengths.append("Strong overall semantic similarity with the requirement")

        if keyword.missing:
            weaknesses.append("Missing required skills: " + ", ".join(keyword.missing[:5]))
        if breakdown.keyword_score is not None and breakdown.keyword_score < 40:
            weaknesses.append("Low coverage of the requirement's keywords")
        if breakdown.embedding_score is not None and breakdown.embedding_score < 50:
            weaknesses.append("Weak overall semantic similarity with the requirement")

        for skill in keyword.missing[:3]:
            recommendations.append(f"Develop or document experience in {skill}")
        if keyword.missing_preferred:
            recommendations.append(
                "Highlight nice-to-have skills if relevant: "
                + ", ".join(keyword.missing_preferred[:3])
            )
        if not recommendations:
            recommendations.append("Confirm seniority and availability during a qualification call")

        used = ", ".join(signal.value for signal in breakdown.present())
        justification = (
            f"Final score {final_score}/100 computed from the {used} signals. "
            "No qualitative analysis was available, so this assessment is derived "
            "from the numeric signals only."
        )

        return QualitativeAnalysis(
            strengths=strengths,
            weaknesses=weaknesses,
            recommendations=recommendations,
            skills_alignment=unique_sorted(keyword.matched),
            missing_competencies=unique_sorted(keyword.missing),
            detailed_justification=justification,
            sector_detected=lexical.sector,
            conceptual_matches=lexical.concepts,
            profile_context=lexical.profile.context,
            experience_level=lexical.profile.experience_level,
            domain_expertise=lexical.profile.domain_expertise,
        )
