"""CLI entry point for Hybrid Match."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv

# Load environment variables from .env.local
# Path: main.py -> hybrid_match/ -> src/ -> project root
load_dotenv(Path(__file__).parent.parent.parent / ".env.local")

import typer  # noqa: E402
from rich.console import Console  # noqa: E402
from rich.panel import Panel  # noqa: E402
from rich.table import Table  # noqa: E402

from hybrid_match.config import build_hybrid_scorer, get_settings  # noqa: E402
from hybrid_match.errors import InvalidInputError  # noqa: E402
from hybrid_match.output.markdown import format_scoring_result, save_markdown  # noqa: E402
from hybrid_match.scoring.models import (  # noqa: E402
    DomainFocus,
    PerformanceMode,
    ScoringConfig,
    ScoringResult,
)

app = typer.Typer(
    name="hybrid-match",
    help="Hybrid Match - score candidate profiles against job descriptions",
    add_completion=False,
)
console = Console()


def configure_logging(verbose: bool) -> None:
    """Configure the root logger from settings, or DEBUG when verbose."""
    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def read_file(path: Path) -> str:
    """Read file content as text."""
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def score_color(score: int) -> str:
    """Rich color for a 0-100 score."""
    return "green" if score >= 70 else "yellow" if score >= 50 else "red"


def print_result(result: ScoringResult) -> None:
    """Print a one-result summary with its breakdown."""
    color = score_color(result.final_score)
    console.print(
        f"\n[bold]Match Score:[/bold] [{color}]{result.final_score}/100[/{color}] "
        f"[dim](confidence {result.confidence}%)[/dim]"
    )
    if result.degraded:
        console.print("[yellow]Degraded:[/yellow] a remote signal was unavailable")

    breakdown = result.breakdown
    console.print("[dim]Score Breakdown:[/dim]")
    console.print(f"  Keyword:   {_fmt(breakdown.keyword_score)}")
    console.print(f"  Vector:    {_fmt(breakdown.vector_score)}")
    console.print(f"  Embedding: {_fmt(breakdown.embedding_score)}")
    console.print(f"  Semantic:  {_fmt(breakdown.semantic_score)}")

    console.print()
    console.print(Panel(format_scoring_result(result), title="Match Analysis", border_style="blue"))


def _fmt(score: int | None) -> str:
    return f"{score}/100" if score is not None else "[dim]not run[/dim]"


@app.command()
def score(
    requirement: Annotated[Path, typer.Argument(help="Path to the job/mission description")],
    candidate: Annotated[Path, typer.Argument(help="Path to the candidate profile")],
    mode: Annotated[
        PerformanceMode,
        typer.Option("--mode", "-m", help="Performance mode"),
    ] = PerformanceMode.BALANCED,
    domain: Annotated[
        DomainFocus | None,
        typer.Option("--domain", "-d", help="Optional domain focus"),
    ] = None,
    no_cache: Annotated[
        bool, typer.Option("--no-cache", help="Bypass the result cache")
    ] = False,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the raw result as JSON")
    ] = False,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Save a markdown report")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show detailed progress")
    ] = False,
) -> None:
    """Score one candidate profile against a job description."""
    configure_logging(verbose)
    raw_requirement = read_file(requirement)
    raw_candidate = read_file(candidate)
    config = ScoringConfig(performance_mode=mode, domain_focus=domain, use_cache=not no_cache)

    if not as_json:
        console.print(
            Panel.fit(
                "[bold blue]Hybrid Match[/bold blue] - Scoring candidate",
                border_style="blue",
            )
        )
        if verbose:
            console.print(f"[dim]Requirement:[/dim] {requirement}")
            console.print(f"[dim]Candidate:[/dim] {candidate}")
            console.print(f"[dim]Mode:[/dim] {mode.value}")
            console.print(f"[dim]Domain:[/dim] {domain.value if domain else 'none'}")

    scorer = build_hybrid_scorer(get_settings())
    try:
        result = asyncio.run(
            scorer.calculate_hybrid_score(raw_requirement, raw_candidate, config)
        )
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    if as_json:
        console.print_json(result.model_dump_json())
    else:
        print_result(result)

    if output:
        save_markdown(format_scoring_result(result, title=candidate.name), output)
        if not as_json:
            console.print(f"\n[green]Report saved to:[/green] {output}")


@app.command()
def batch(
    requirement: Annotated[Path, typer.Argument(help="Path to the job/mission description")],
    candidates: Annotated[list[Path], typer.Argument(help="Paths to candidate profiles")],
    mode: Annotated[
        PerformanceMode,
        typer.Option("--mode", "-m", help="Performance mode"),
    ] = PerformanceMode.FAST,
    domain: Annotated[
        DomainFocus | None,
        typer.Option("--domain", "-d", help="Optional domain focus"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show detailed progress")
    ] = False,
) -> None:
    """Rank several candidate profiles against one job description."""
    configure_logging(verbose)
    raw_requirement = read_file(requirement)
    raw_candidates = [read_file(path) for path in candidates]
    config = ScoringConfig(performance_mode=mode, domain_focus=domain)

    console.print(
        Panel.fit(
            f"[bold blue]Hybrid Match[/bold blue] - Ranking {len(candidates)} candidates",
            border_style="blue",
        )
    )

    scorer = build_hybrid_scorer(get_settings())
    try:
        ranked = asyncio.run(scorer.batch_score(raw_requirement, raw_candidates, config))
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title=f"Ranking ({mode.value})")
    table.add_column("#", justify="right")
    table.add_column("Candidate")
    table.add_column("Score", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Sector")
    table.add_column("Profile")
    table.add_column("Missing")

    for rank, (index, result) in enumerate(ranked, start=1):
        color = score_color(result.final_score)
        table.add_row(
            str(rank),
            candidates[index].name,
            f"[{color}]{result.final_score}[/{color}]",
            f"{result.confidence}%",
            result.analysis.sector_detected,
            f"{result.analysis.profile_context.value} / {result.analysis.experience_level.value}",
            ", ".join(result.analysis.missing_competencies[:3]) or "-",
        )
    console.print(table)

    skipped = len(candidates) - len(ranked)
    if skipped:
        console.print(f"[yellow]{skipped} candidate file(s) skipped (empty or failed to score)[/yellow]")


@app.command()
def version() -> None:
    """Show version information."""
    from hybrid_match import __version__

    console.print(f"Hybrid Match v{__version__}")


if __name__ == "__main__":
    app()
