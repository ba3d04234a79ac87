"""Domain-focus reweighting and conceptual alignment."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from hybrid_match.scoring.catalog import (
    BANKING_INSURANCE_CONCEPTS,
    COMPLIANCE_TERMS,
    EXPERIENCE_LEVEL_MARKERS,
    PROFILE_CONTEXT_KEYWORDS,
)
from hybrid_match.scoring.keyword import coverage_score, ratio_to_score
from hybrid_match.scoring.models import (
    CandidateProfile,
    DomainFocus,
    ExperienceLevel,
    KeywordResult,
    ProfileContext,
    Signal,
    SignalBreakdown,
)
from hybrid_match.utils.text_utils import contains_phrase

logger = logging.getLogger(__name__)

CONCEPT_THRESHOLD = 0.3
MAX_CONCEPT_MATCHES = 8
# Keyword hits needed before a context counts as domain expertise
EXPERTISE_MIN_HITS = 2


class DomainFocusAdjuster:
    """Domain-focus reweighting.

    Under ``banking_insurance``:

    - declared compliance and regulatory skills count ``BOOST_FACTOR`` times
      as much as other skills inside the keyword coverage
    - the signal weights follow the candidate's profile context
      (``CONTEXT_WEIGHTS``) instead of the performance mode's defaults

    Without a focus both are no-ops.
    """

    BOOST_FACTOR = 1.5

    # Signal weights per candidate context; "general" keeps the mode's weights
    CONTEXT_WEIGHTS: dict[ProfileContext, dict[Signal, float]] = {
        ProfileContext.MANAGEMENT: {
            Signal.KEYWORD: 0.35,
            Signal.VECTOR: 0.20,
            Signal.EMBEDDING: 0.25,
            Signal.SEMANTIC: 0.20,
        },
        ProfileContext.FINANCE: {
            Signal.KEYWORD: 0.40,
            Signal.VECTOR: 0.25,
            Signal.EMBEDDING: 0.25,
            Signal.SEMANTIC: 0.10,
        },
        ProfileContext.IT: {
            Signal.KEYWORD: 0.25,
            Signal.VECTOR: 0.30,
            Signal.EMBEDDING: 0.35,
            Signal.SEMANTIC: 0.10,
        },
        ProfileContext.BANKING: {
            Signal.KEYWORD: 0.35,
            Signal.VECTOR: 0.20,
            Signal.EMBEDDING: 0.30,
            Signal.SEMANTIC: 0.15,
        },
        ProfileContext.INSURANCE: {
            Signal.KEYWORD: 0.35,
            Signal.VECTOR: 0.20,
            Signal.EMBEDDING: 0.30,
            Signal.SEMANTIC: 0.15,
        },
    }

    def __init__(self, boosted_terms: frozenset[str] = COMPLIANCE_TERMS) -> None:
        self.boosted_terms = boosted_terms

    def context_weights(
        self,
        domain_focus: DomainFocus | None,
        profile: CandidateProfile,
    ) -> dict[Signal, float] | None:
        """Base signal weights for the candidate's context, or None for the mode defaults."""
        if domain_focus != DomainFocus.BANKING_INSURANCE:
            return None
        weights = self.CONTEXT_WEIGHTS.get(profile.context)
        if weights is not None:
            logger.debug(f"Domain focus {domain_focus.value}: {profile.context.value} weights")
        return weights

    def adjust(
        self,
        breakdown: SignalBreakdown,
        domain_focus: DomainFocus | None,
        keyword_result: KeywordResult | None = None,
    ) -> SignalBreakdown:
        """Return a breakdown with the compliance keyword boost applied.

        A no-op when no focus is set, when the keyword signal is absent, or
        when the keyword score did not come from declared-skill coverage.
        """
        if domain_focus != DomainFocus.BANKING_INSURANCE:
            return breakdown
        if keyword_result is None or breakdown.keyword_score is None:
            return breakdown
        if not keyword_result.used_skill_coverage:
            return breakdown

        declared = [*keyword_result.required_skills, *keyword_result.preferred_skills]
        weights = {skill: self.BOOST_FACTOR for skill in declared if skill in self.boosted_terms}
        if not weights:
            return breakdown

        coverage = coverage_score(
            keyword_result.required_skills,
            keyword_result.preferred_skills,
            keyword_result.matched,
            skill_weights=weights,
        )
        adjusted = ratio_to_score(coverage)
        logger.debug(
            f"Domain focus {domain_focus.value}: boosted {sorted(weights)}, "
            f"keyword {breakdown.keyword_score} -> {adjusted}"
        )
        return breakdown.model_copy(update={"keyword_score": adjusted})


def concept_alignment(
    requirement_terms: Sequence[str],
    candidate_terms: Sequence[str],
    concepts: Mapping[str, Sequence[str]] = BANKING_INSURANCE_CONCEPTS,
) -> dict[str, float]:
    """Harmonic-mean alignment (0-1) of each concept group between two texts.

    A concept only scores when both texts mention at least one of its terms.
    """
    alignment: dict[str, float] = {}
    for concept, keywords in concepts.items():
        requirement_share = sum(
            1 for keyword in keywords if contains_phrase(requirement_terms, keyword)
        ) / len(keywords)
        candidate_share = sum(
            1 for keyword in keywords if contains_phrase(candidate_terms, keyword)
        ) / len(keywords)

        total = requirement_share + candidate_share
        alignment[concept] = (
            2 * requirement_share * candidate_share / total if total else 0.0
        )
    return alignment


def conceptual_matches(
    requirement_terms: Sequence[str],
    candidate_terms: Sequence[str],
    threshold: float = CONCEPT_THRESHOLD,
) -> list[str]:
    """Human-readable concept groups aligned above ``threshold``, best first."""
    alignment = concept_alignment(requirement_terms, candidate_terms)
    ranked = sorted(
        ((score, concept) for concept, score in alignment.items() if score > threshold),
        key=lambda item: (-item[0], item[1]),
    )
    return [
        f"{concept.replace('_', ' ')} ({score:.0%})"
        for score, concept in ranked[:MAX_CONCEPT_MATCHES]
    ]


def detect_profile(candidate_terms: Sequence[str]) -> CandidateProfile:
    """Detect the professional context and seniority of a candidate text.

    The context is the one with the most keyword hits (first in catalog order
    on a tie); with no hit at all the profile stays ``general``.

    Examples:
        >>> detect_profile(["directeur", "financier", "budget", "audit"]).context
        <ProfileContext.FINANCE: 'finance'>
    """
    hits = {
        context: sum(1 for keyword in keywords if contains_phrase(candidate_terms, keyword))
        for context, keywords in PROFILE_CONTEXT_KEYWORDS.items()
    }

    context = ProfileContext.GENERAL
    best = 0
    for candidate_context, count in hits.items():
        if count > best:
            context, best = candidate_context, count

    experience_level = ExperienceLevel.MID
    for level, markers in EXPERIENCE_LEVEL_MARKERS:
        if any(contains_phrase(candidate_terms, marker) for marker in markers):
            experience_level = level
            break

    return CandidateProfile(
        context=context,
        experience_level=experience_level,
        domain_expertise=[c for c, count in hits.items() if count >= EXPERTISE_MIN_HITS],
    )
