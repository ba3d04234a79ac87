"""Qualitative semantic analysis backed by a generative-text provider."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_core.messages import BaseMessage, HumanMessage
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hybrid_match.errors import SemanticAnalysisError
from hybrid_match.prompts.semantic import (
    BANKING_INSURANCE_GUIDANCE,
    CORRECTIVE_PROMPT,
    SEMANTIC_SYSTEM_PROMPT,
    SEMANTIC_USER_PROMPT,
)
from hybrid_match.scoring.models import DomainFocus, QualitativeAnalysis, SemanticAssessment
from hybrid_match.utils.text_utils import contains_phrase, fold, normalize, unique_sorted

if TYPE_CHECKING:
    from hybrid_match.llm.base import LLMProvider

logger = logging.getLogger(__name__)

# Longest text excerpt sent to the model, per document
DEFAULT_MAX_CHARS = 12000
MAX_LIST_ITEMS = 8


class _SemanticAnalysisOutput(BaseModel):
    """Qualitative assessment of a candidate profile against a job description."""

    model_config = ConfigDict(extra="ignore")

    semantic_score: float = Field(ge=0, le=100, description="Overall fit, 0-100")
    strengths: list[str] = Field(description="Candidate strengths for this job, most important first")
    weaknesses: list[str] = Field(description="Gaps or risks, most important first")
    recommendations: list[str] = Field(description="Actionable points for the recruiter or candidate")
    skills_alignment: list[str] = Field(description="Skills explicitly present in both texts")
    missing_competencies: list[str] = Field(
        description="Skills required by the job and absent from the candidate profile"
    )
    detailed_justification: str = Field(min_length=1, description="3-6 sentences explaining the score")


def _clean_list(values: list[str], limit: int = MAX_LIST_ITEMS) -> list[str]:
    """Strip, drop empties and duplicates, keep order, cap length."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for value in values:
        text = value.strip()
        key = fold(text)
        if text and key not in seen:
            seen.add(key)
            cleaned.append(text)
    return cleaned[:limit]


class SemanticAnalyzer:
    """Request a structured qualitative assessment and validate it.

    The output schema is bound as a tool through ``with_structured_output``.
    When the answer fails to parse the request is retried once with a
    corrective instruction appended. A second failure, or any provider error,
    raises ``SemanticAnalysisError``.
    """

    MAX_ATTEMPTS = 2

    def __init__(
        self,
        llm_provider: LLMProvider | None,
        max_chars: int = DEFAULT_MAX_CHARS,
    ) -> None:
        self.llm_provider = llm_provider
        self.max_chars = max_chars
        self._prompt = ChatPromptTemplate.from_messages(
            [("system", SEMANTIC_SYSTEM_PROMPT), ("human", SEMANTIC_USER_PROMPT)]
        )

    @property
    def available(self) -> bool:
        """Whether a generative-text provider is configured."""
        return self.llm_provider is not None

    def build_messages(
        self,
        requirement_text: str,
        candidate_text: str,
        domain_focus: DomainFocus | None = None,
    ) -> list[BaseMessage]:
        """Render the system and user messages for one analysis."""
        guidance = (
            BANKING_INSURANCE_GUIDANCE if domain_focus == DomainFocus.BANKING_INSURANCE else ""
        )
        return self._prompt.format_messages(
            domain_guidance=guidance,
            requirement_text=requirement_text[: self.max_chars],
            candidate_text=candidate_text[: self.max_chars],
        )

    async def analyze(
        self,
        requirement_text: str,
        candidate_text: str,
        domain_focus: DomainFocus | None = None,
    ) -> SemanticAssessment:
        """Analyze candidate fit qualitatively.

        Args:
            requirement_text: Raw job/mission description.
            candidate_text: Raw candidate profile.
            domain_focus: Optional vertical focus added to the instructions.

        Returns:
            Validated SemanticAssessment.

        Raises:
            SemanticAnalysisError: If no provider is configured, the provider
                fails, or both attempts fail validation.
        """
        if self.llm_provider is None:
            raise SemanticAnalysisError("No generative-text provider configured")

        messages = self.build_messages(requirement_text, candidate_text, domain_focus)
        last_error = ""

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            try:
                result = await self.llm_provider.extract_structured(
                    messages, _SemanticAnalysisOutput
                )
            except Exception as e:
                raise SemanticAnalysisError(f"Generative-text provider failed: {e}") from e

            output = result.get("parsed")
            parsing_error = result.get("parsing_error")
            if parsing_error is None and output is not None:
                return self._to_assessment(output, requirement_text, candidate_text)

            if parsing_error is not None:
                last_error = _describe_error(parsing_error)
            else:
                last_error = "no assessment tool call in the answer"
            logger.warning(
                f"Semantic analysis attempt {attempt}/{self.MAX_ATTEMPTS} invalid: {last_error}"
            )
            messages = [*messages, HumanMessage(content=CORRECTIVE_PROMPT.format(error=last_error))]

        raise SemanticAnalysisError(
            f"Semantic analysis failed validation after {self.MAX_ATTEMPTS} attempts: {last_error}"
        )

    def _to_assessment(
        self,
        output: _SemanticAnalysisOutput,
        requirement_text: str,
        candidate_text: str,
    ) -> SemanticAssessment:
        """Convert validated output, keeping only skills grounded in the texts."""
        requirement_terms = normalize(requirement_text)
        candidate_terms = normalize(candidate_text)

        aligned = [
            skill
            for skill in output.skills_alignment
            if contains_phrase(requirement_terms, skill) and contains_phrase(candidate_terms, skill)
        ]
        missing = [
            skill
            for skill in output.missing_competencies
            if contains_phrase(requirement_terms, skill)
            and not contains_phrase(candidate_terms, skill)
        ]

        analysis = QualitativeAnalysis(
            strengths=_clean_list(output.strengths),
            weaknesses=_clean_list(output.weaknesses),
            recommendations=_clean_list(output.recommendations),
            skills_alignment=unique_sorted(aligned),
            missing_competencies=unique_sorted(missing),
            detailed_justification=output.detailed_justification.strip(),
        )
        return SemanticAssessment(semantic_score=round(output.semantic_score), analysis=analysis)


def _describe_error(error: Exception) -> str:
    """Short, model-readable description of why an answer was rejected."""
    if isinstance(error, ValidationError):
        problems: list[str] = []
        for item in error.errors()[:5]:
            location = ".".join(str(part) for part in item["loc"]) or "<root>"
            problems.append(f"{location}: {item['msg']}")
        return "; ".join(problems)
    return str(error)
