"""Pydantic models for hybrid candidate-to-requirement scoring."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PerformanceMode(str, Enum):
    """Named policy selecting which signals run and how they are weighted."""

    FAST = "fast"
    BALANCED = "balanced"
    THOROUGH = "thorough"

    @classmethod
    def _missing_(cls, value: object) -> "PerformanceMode | None":
        # Older callers used "comprehensive" for the thorough policy
        if isinstance(value, str) and value.lower() == "comprehensive":
            return cls.THOROUGH
        return None


class DomainFocus(str, Enum):
    """Optional vertical-specific reweighting."""

    BANKING_INSURANCE = "banking_insurance"


class ProfileContext(str, Enum):
    """Professional context a candidate profile belongs to."""

    GENERAL = "general"
    MANAGEMENT = "management"
    FINANCE = "finance"
    IT = "it"
    BANKING = "banking"
    INSURANCE = "insurance"


class ExperienceLevel(str, Enum):
    """Seniority read from the candidate text."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    EXPERT = "expert"


class Signal(str, Enum):
    """Independent scoring methods contributing to the final score."""

    KEYWORD = "keyword"
    VECTOR = "vector"
    EMBEDDING = "embedding"
    SEMANTIC = "semantic"


class ScoringConfig(BaseModel):
    """The only externally tunable knobs of the engine."""

    model_config = ConfigDict(frozen=True)

    performance_mode: PerformanceMode = PerformanceMode.BALANCED
    domain_focus: DomainFocus | None = None
    use_cache: bool = True


class SignalBreakdown(BaseModel):
    """Per-signal scores (0-100). Absent fields did not run or were unavailable."""

    model_config = ConfigDict(frozen=True)

    keyword_score: int | None = Field(default=None, ge=0, le=100)
    vector_score: int | None = Field(default=None, ge=0, le=100)
    embedding_score: int | None = Field(default=None, ge=0, le=100)
    semantic_score: int | None = Field(default=None, ge=0, le=100)

    def present(self) -> dict[Signal, int]:
        """Return the signals that produced a score."""
        scores = {
            Signal.KEYWORD: self.keyword_score,
            Signal.VECTOR: self.vector_score,
            Signal.EMBEDDING: self.embedding_score,
            Signal.SEMANTIC: self.semantic_score,
        }
        return {signal: score for signal, score in scores.items() if score is not None}


class QualitativeAnalysis(BaseModel):
    """Structured qualitative output merged into every scoring result.

    ``skills_alignment`` and ``missing_competencies`` are sets, stored as
    sorted unique lists so that serialized results are stable.
    """

    model_config = ConfigDict(frozen=True)

    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    skills_alignment: list[str] = Field(default_factory=list)
    missing_competencies: list[str] = Field(default_factory=list)
    detailed_justification: str = ""

    # Descriptive extras from the lexical stage
    sector_detected: str = "unknown"
    conceptual_matches: list[str] = Field(default_factory=list)
    profile_context: ProfileContext = ProfileContext.GENERAL
    experience_level: ExperienceLevel = ExperienceLevel.MID
    domain_expertise: list[ProfileContext] = Field(default_factory=list)


class ScoringResult(BaseModel):
    """The engine's sole output type."""

    model_config = ConfigDict(frozen=True)

    final_score: int = Field(ge=0, le=100)
    breakdown: SignalBreakdown
    analysis: QualitativeAnalysis
    from_cache: bool = False

    confidence: int = Field(default=0, ge=0, le=100)
    # True when a remote stage that was attempted failed; degraded results are not cached
    degraded: bool = False
    timings_ms: dict[str, float] = Field(default_factory=dict)


class KeywordResult(BaseModel):
    """Output of the keyword scorer."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    matched: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    missing_preferred: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    used_skill_coverage: bool = True


class CandidateProfile(BaseModel):
    """Context and seniority detected in a candidate text."""

    model_config = ConfigDict(frozen=True)

    context: ProfileContext = ProfileContext.GENERAL
    experience_level: ExperienceLevel = ExperienceLevel.MID
    # Every context with at least two keyword hits, in catalog order
    domain_expertise: list[ProfileContext] = Field(default_factory=list)


class SemanticAssessment(BaseModel):
    """Validated output of the semantic analyzer."""

    model_config = ConfigDict(frozen=True)

    semantic_score: int = Field(ge=0, le=100)
    analysis: QualitativeAnalysis


class CacheEntry(BaseModel):
    """A cached result. Owned exclusively by the result cache."""

    model_config = ConfigDict(frozen=True)

    fingerprint: str
    result: ScoringResult
    created_at: datetime
    expires_at: datetime
