"""Hybrid Match - hybrid candidate-to-requirement scoring engine."""

from hybrid_match.scoring import (
    DomainFocus,
    ExperienceLevel,
    HybridScorer,
    PerformanceMode,
    ProfileContext,
    QualitativeAnalysis,
    ScoringConfig,
    ScoringResult,
    SignalBreakdown,
)
from hybrid_match.errors import (
    CacheError,
    HybridMatchError,
    InvalidInputError,
    SemanticAnalysisError,
    SignalUnavailableError,
)

__version__ = "0.1.0"


async def calculate_hybrid_score(
    requirement_text: str,
    candidate_text: str,
    config: ScoringConfig | None = None,
) -> ScoringResult:
    """Score a candidate against a requirement with the process-wide scorer.

    The scorer is built once from environment settings (see ``Settings``).
    """
    from hybrid_match.config import get_hybrid_scorer

    return await get_hybrid_scorer().calculate_hybrid_score(
        requirement_text, candidate_text, config
    )


__all__ = [
    "CacheError",
    "DomainFocus",
    "ExperienceLevel",
    "HybridMatchError",
    "HybridScorer",
    "InvalidInputError",
    "PerformanceMode",
    "ProfileContext",
    "QualitativeAnalysis",
    "ScoringConfig",
    "ScoringResult",
    "SemanticAnalysisError",
    "SignalBreakdown",
    "SignalUnavailableError",
    "__version__",
    "calculate_hybrid_score",
]
