"""Tests for keyword scoring and skill extraction."""

import pytest

from hybrid_match.scoring.keyword import (
    KeywordScorer,
    coverage_score,
    detect_sector,
    extract_declared_skills,
    split_sentences,
)
from hybrid_match.utils.text_utils import normalize


@pytest.fixture
def scorer() -> KeywordScorer:
    """Create a KeywordScorer instance."""
    return KeywordScorer()


class TestExtractDeclaredSkills:
    """Tests for required/preferred skill extraction."""

    def test_required_skills_found(self) -> None:
        """Test that catalog skills in plain sentences are required."""
        required, preferred = extract_declared_skills(
            "Nous cherchons un développeur Python avec Docker et PostgreSQL."
        )
        assert "python" in required
        assert "docker" in required
        assert "postgresql" in required
        assert preferred == []

    def test_preferred_marker_sentence(self) -> None:
        """Test that skills in a 'nice to have' sentence are preferred."""
        required, preferred = extract_declared_skills(
            "Required: Python and SQL.\nNice to have: Kubernetes."
        )
        assert "python" in required
        assert "sql" in required
        assert preferred == ["kubernetes"]

    def test_french_marker(self) -> None:
        """Test that French markers are recognized despite accents."""
        required, preferred = extract_declared_skills(
            "Maîtrise de React indispensable. Une expérience Docker serait un atout."
        )
        assert required == ["react"]
        assert preferred == ["docker"]

    def test_skill_declared_both_ways_is_required(self) -> None:
        """Test that a skill mentioned as required anywhere stays required."""
        required, preferred = extract_declared_skills(
            "Python is mandatory. Python 3.12 experience is a plus."
        )
        assert required == ["python"]
        assert preferred == []

    def test_no_catalog_skills(self) -> None:
        """Test that free text without catalog skills declares nothing."""
        assert extract_declared_skills("Boulangerie artisanale cherche vendeur motivé") == ([], [])

    def test_java_not_found_in_javascript(self) -> None:
        """Test that a javascript requirement does not declare java."""
        required, _ = extract_declared_skills("Expert JavaScript")
        assert "javascript" in required
        assert "java" not in required

    def test_split_sentences(self) -> None:
        """Test sentence and bullet splitting."""
        assert split_sentences("One. Two!\n• Three") == ["One", "Two", "Three"]


class TestDetectSector:
    """Tests for sector detection."""

    def test_tech(self) -> None:
        """Test detection of a tech profile."""
        terms = normalize("Développeur fullstack React, Node.js, Docker, AWS")
        assert detect_sector(terms) == "tech_fullstack"

    def test_insurance(self) -> None:
        """Test detection of an insurance profile."""
        terms = normalize("Actuariat IARD, souscription et gestion des sinistres")
        assert detect_sector(terms) == "insurance_sector"

    def test_unknown(self) -> None:
        """Test that unrelated text gives unknown."""
        assert detect_sector(normalize("Boulangerie artisanale")) == "unknown"


class TestCoverageScore:
    """Tests for weighted coverage."""

    def test_required_and_preferred_weights(self) -> None:
        """Test the 70/30 split between required and preferred coverage."""
        assert coverage_score(["a"], ["b"], ["a"]) == pytest.approx(0.7)
        assert coverage_score(["a"], ["b"], ["b"]) == pytest.approx(0.3)

    def test_empty_group_redistributes(self) -> None:
        """Test that a missing preferred group gives all weight to required."""
        assert coverage_score(["a", "b"], [], ["a"]) == pytest.approx(0.5)
        assert coverage_score([], ["a", "b"], ["b"]) == pytest.approx(0.5)

    def test_skill_weights(self) -> None:
        """Test per-skill weights inside a group."""
        score = coverage_score(["a", "b"], [], ["a"], skill_weights={"a": 3.0})
        assert score == pytest.approx(0.75)

    def test_nothing_declared(self) -> None:
        """Test that no declared skills give zero coverage."""
        assert coverage_score([], [], []) == 0.0


class TestKeywordScorer:
    """Tests for KeywordScorer."""

    def test_full_required_match(self, scorer: KeywordScorer) -> None:
        """Test a candidate covering the only required skill."""
        result = scorer.score(
            normalize("Recherche Développeur React senior, remote ok"),
            normalize("5 ans React, Node.js, disponible immédiatement"),
            ["react"],
            [],
        )
        assert result.score == 100
        assert result.matched == ["react"]
        assert result.missing == []
        assert result.used_skill_coverage is True

    def test_partial_match(self, scorer: KeywordScorer) -> None:
        """Test missing required and preferred skills are reported separately."""
        result = scorer.score(
            normalize("python docker kubernetes"),
            normalize("python developer"),
            ["python", "docker"],
            ["kubernetes"],
        )
        # 0.7 * 1/2 + 0.3 * 0
        assert result.score == 35
        assert result.missing == ["docker"]
        assert result.missing_preferred == ["kubernetes"]

    def test_inflected_skill_matches(self, scorer: KeywordScorer) -> None:
        """Test that plural forms in the candidate text still match."""
        result = scorer.score(
            normalize("microservices"),
            normalize("Conception de microservice en Go"),
            ["microservices"],
            [],
        )
        assert result.matched == ["microservices"]

    def test_neutral_floor_without_evidence(self, scorer: KeywordScorer) -> None:
        """Test that no declared skills and no shared terms give exactly 50."""
        result = scorer.score(
            normalize("Boulangerie artisanale cherche vendeur motivé"),
            normalize("Guitariste jazz disponible le week-end"),
            [],
            [],
        )
        assert result.score == KeywordScorer.NEUTRAL_SCORE == 50
        assert result.used_skill_coverage is False

    def test_neutral_floor_with_empty_terms(self, scorer: KeywordScorer) -> None:
        """Test that empty term sequences report the neutral score, not an error."""
        assert scorer.score([], [], [], []).score == 50

    def test_overlap_fallback_ratio(self, scorer: KeywordScorer) -> None:
        """Test the raw term-overlap ratio when no skills are declared."""
        result = scorer.score(
            normalize("vendeur boulangerie matin"),
            normalize("vendeur fromagerie matin"),
            [],
            [],
        )
        # 2 of 3 requirement terms are shared
        assert result.score == 67
