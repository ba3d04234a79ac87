"""Hybrid candidate-to-requirement scoring.

Combines four independent signals into one 0-100 score:
- Keyword coverage of declared skills (deterministic, in-process)
- Term-frequency vector similarity (deterministic, in-process)
- Dense-embedding similarity (remote embedding provider)
- Qualitative LLM assessment (remote generative-text provider)

Remote signals degrade gracefully: when they fail, their weight is
redistributed over the signals that did run.
"""

from hybrid_match.scoring.aggregator import Aggregator, compute_confidence
from hybrid_match.scoring.hybrid import HybridScorer
from hybrid_match.scoring.models import (
    DomainFocus,
    ExperienceLevel,
    PerformanceMode,
    ProfileContext,
    QualitativeAnalysis,
    ScoringConfig,
    ScoringResult,
    Signal,
    SignalBreakdown,
)

__all__ = [
    "Aggregator",
    "DomainFocus",
    "ExperienceLevel",
    "HybridScorer",
    "PerformanceMode",
    "ProfileContext",
    "QualitativeAnalysis",
    "ScoringConfig",
    "ScoringResult",
    "Signal",
    "SignalBreakdown",
    "compute_confidence",
]
