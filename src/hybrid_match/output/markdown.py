"""Markdown output formatting."""

from pathlib import Path

from hybrid_match.scoring.models import ScoringResult


def save_markdown(content: str, output_path: str | Path) -> Path:
    """Save content to a markdown file.

    Args:
        content: Markdown content to save.
        output_path: Path to save the file.

    Returns:
        Path to the saved file.
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _section(title: str, items: list[str]) -> list[str]:
    lines = [f"### {title}"]
    if items:
        lines.extend(f"- {item}" for item in items)
    else:
        lines.append("- _None_")
    lines.append("")
    return lines


def format_scoring_result(result: ScoringResult, title: str | None = None) -> str:
    """Format a scoring result as a markdown report.

    Args:
        result: Scoring result to format.
        title: Optional heading, e.g. the candidate's file name.

    Returns:
        Markdown string.
    """
    breakdown = result.breakdown
    analysis = result.analysis

    output = [f"## {title or 'Match Analysis'} (Score: {result.final_score}/100)", ""]

    flags = [
        f"Confidence: {result.confidence}%",
        f"Sector: {analysis.sector_detected}",
        f"Profile: {analysis.profile_context.value} ({analysis.experience_level.value})",
    ]
    if result.from_cache:
        flags.append("from cache")
    if result.degraded:
        flags.append("degraded")
    output.append(f"*{' | '.join(flags)}*")
    output.append("")

    output.append("### Score Breakdown")
    for label, score in (
        ("Keyword", breakdown.keyword_score),
        ("Vector", breakdown.vector_score),
        ("Embedding", breakdown.embedding_score),
        ("Semantic", breakdown.semantic_score),
    ):
        value = f"{score}/100" if score is not None else "not run"
        output.append(f"- **{label}:** {value}")
    output.append("")

    output.extend(_section("Skills Alignment", analysis.skills_alignment))
    output.extend(_section("Missing Competencies", analysis.missing_competencies))
    output.extend(_section("Strengths", analysis.strengths))
    output.extend(_section("Weaknesses", analysis.weaknesses))
    output.extend(_section("Recommendations", analysis.recommendations))
    if analysis.conceptual_matches:
        output.extend(_section("Conceptual Matches", analysis.conceptual_matches))
    if analysis.domain_expertise:
        output.extend(
            _section("Domain Expertise", [context.value for context in analysis.domain_expertise])
        )

    output.append("### Justification")
    output.append(analysis.detailed_justification or "_None_")

    return "\n".join(output)
