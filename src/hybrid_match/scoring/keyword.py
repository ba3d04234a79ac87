"""Keyword scoring for candidate-requirement matching.

Extracts declared skills from the requirement text using the static skill
catalog, then measures how many of them the candidate text covers. Matching is
deterministic and tolerant to case, accents and light inflection.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from hybrid_match.scoring.catalog import PREFERRED_MARKERS, SECTOR_KEYWORDS
from hybrid_match.scoring.models import KeywordResult
from hybrid_match.utils.text_utils import contains_phrase, fold, normalize

logger = logging.getLogger(__name__)

# Sentence boundaries: terminal punctuation followed by whitespace, or line breaks/bullets
SENTENCE_SPLIT = re.compile(r"[.!?;](?=\s|$)|[\n\r•·]+")

PREFERRED_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(fold(marker)) for marker in PREFERRED_MARKERS) + r")\b"
)


def _catalog_terms() -> list[str]:
    """All catalog terms, deduplicated, in declaration order."""
    seen: dict[str, None] = {}
    for terms in SECTOR_KEYWORDS.values():
        for term in terms:
            seen.setdefault(term, None)
    return list(seen)


CATALOG_TERMS = _catalog_terms()


def split_sentences(text: str) -> list[str]:
    """Split text into rough sentences/bullets."""
    return [part.strip() for part in SENTENCE_SPLIT.split(text) if part and part.strip()]


def extract_declared_skills(requirement_text: str) -> tuple[list[str], list[str]]:
    """Extract required and preferred skills declared in a requirement text.

    A catalog skill found in a sentence carrying a "nice to have" marker is
    preferred; every other catalog skill found is required. A skill declared
    both ways counts as required.

    Args:
        requirement_text: Raw job/mission description.

    Returns:
        Tuple of (required_skills, preferred_skills), each in catalog order.
    """
    required: list[str] = []
    preferred: list[str] = []

    sentences = [(normalize(sentence), bool(PREFERRED_PATTERN.search(fold(sentence))))
                 for sentence in split_sentences(requirement_text)]

    for skill in CATALOG_TERMS:
        hits = [is_preferred for terms, is_preferred in sentences if contains_phrase(terms, skill)]
        if not hits:
            continue
        if all(hits):
            preferred.append(skill)
        else:
            required.append(skill)

    return required, preferred


def detect_sector(terms: Sequence[str]) -> str:
    """Detect the dominant sector of a normalized term sequence.

    Returns:
        The sector whose catalog has the highest coverage, or "unknown".
    """
    best_sector = "unknown"
    best_coverage = 0.0

    for sector, keywords in SECTOR_KEYWORDS.items():
        found = sum(1 for keyword in keywords if contains_phrase(terms, keyword))
        coverage = found / len(keywords)
        if coverage > best_coverage:
            best_sector, best_coverage = sector, coverage

    logger.debug(f"Sector detected: {best_sector} ({best_coverage:.1%})")
    return best_sector


def coverage_score(
    required: Sequence[str],
    preferred: Sequence[str],
    matched: Sequence[str],
    skill_weights: Mapping[str, float] | None = None,
) -> float:
    """Weighted coverage of declared skills, on a 0-1 scale.

    Required coverage counts for ``KeywordScorer.REQUIRED_WEIGHT`` and preferred
    coverage for ``KeywordScorer.PREFERRED_WEIGHT``. When one group is empty its
    weight goes to the other group. Individual skills can carry a weight
    (default 1.0) inside their group.
    """
    weights = skill_weights or {}
    matched_set = set(matched)

    def _group_coverage(skills: Sequence[str]) -> float:
        total = sum(weights.get(skill, 1.0) for skill in skills)
        hit = sum(weights.get(skill, 1.0) for skill in skills if skill in matched_set)
        return hit / total if total else 0.0

    groups = [
        (KeywordScorer.REQUIRED_WEIGHT, required),
        (KeywordScorer.PREFERRED_WEIGHT, preferred),
    ]
    active = [(weight, skills) for weight, skills in groups if skills]
    if not active:
        return 0.0

    weight_sum = sum(weight for weight, _ in active)
    return sum(weight / weight_sum * _group_coverage(skills) for weight, skills in active)


class KeywordScorer:
    """Compute deterministic keyword coverage between requirement and candidate.

    With declared skills, the score is the weighted coverage of required (70%)
    and preferred (30%) skills. Without declared skills it falls back to the
    raw term-overlap ratio. When there is no evidence either way (no declared
    skills and no overlapping term) the score is the neutral floor of 50.
    """

    REQUIRED_WEIGHT = 0.7
    PREFERRED_WEIGHT = 0.3

    # Neutral floor when there is no evidence either way
    NEUTRAL_SCORE = 50

    def score(
        self,
        requirement_terms: Sequence[str],
        candidate_terms: Sequence[str],
        required_skills: Sequence[str],
        preferred_skills: Sequence[str],
    ) -> KeywordResult:
        """Score keyword coverage.

        Args:
            requirement_terms: Normalized requirement terms.
            candidate_terms: Normalized candidate terms.
            required_skills: Skills the requirement declares as required.
            preferred_skills: Skills the requirement declares as nice to have.

        Returns:
            KeywordResult with the 0-100 score and matched/missing skills.
        """
        if not required_skills and not preferred_skills:
            return self._overlap_fallback(requirement_terms, candidate_terms)

        matched = [
            skill
            for skill in [*required_skills, *preferred_skills]
            if contains_phrase(candidate_terms, skill)
        ]
        matched_set = set(matched)
        missing = [skill for skill in required_skills if skill not in matched_set]
        missing_preferred = [skill for skill in preferred_skills if skill not in matched_set]

        coverage = coverage_score(required_skills, preferred_skills, matched)
        score = ratio_to_score(coverage)

        logger.debug(
            f"Keyword coverage: {len(matched)} matched, {len(missing)} required missing, "
            f"score={score}"
        )

        return KeywordResult(
            score=score,
            matched=matched,
            missing=missing,
            missing_preferred=missing_preferred,
            required_skills=list(required_skills),
            preferred_skills=list(preferred_skills),
            used_skill_coverage=True,
        )

    def _overlap_fallback(
        self,
        requirement_terms: Sequence[str],
        candidate_terms: Sequence[str],
    ) -> KeywordResult:
        """Raw term-overlap ratio when the requirement declares no skills."""
        requirement_set = set(requirement_terms)
        overlap = requirement_set & set(candidate_terms)

        if not overlap:
            score = self.NEUTRAL_SCORE
        else:
            score = ratio_to_score(len(overlap) / len(requirement_set))

        return KeywordResult(score=score, used_skill_coverage=False)


def ratio_to_score(ratio: float) -> int:
    """Convert a 0-1 ratio to a clamped 0-100 integer score."""
    return max(0, min(100, round(ratio * 100)))
