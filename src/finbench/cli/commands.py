"""CLI command definitions for the financial analysis engine."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from finbench.domain.catalog import Category
from finbench.domain.errors import StructuralError
from finbench.domain.models.financials import RunOptions
from finbench.domain.models.results import AnalysisReport, EvaluationResult
from finbench.infrastructure.files import load_statements
from finbench.settings.config import Config
from finbench.settings.loader import load_settings
from finbench.utils.logging import configure_logging
from finbench.workflows.graph import AnalysisWorkflow

console = Console()
app = typer.Typer(help="Compute, benchmark and score financial statement analyses from the terminal.")


@dataclass
class AppContext:
    """Holds reusable process-wide objects for CLI commands."""

    config: Config
    workflow: AnalysisWorkflow


def _init_context(debug_override: Optional[bool] = None, benchmarks: Optional[Path] = None) -> AppContext:
    """Create a context with configuration, logging, and workflow wiring."""
    config = load_settings(debug_override)
    if benchmarks is not None:
        config.benchmark_file = benchmarks
    configure_logging(debug=config.debug)
    workflow = AnalysisWorkflow(config=config)
    return AppContext(config=config, workflow=workflow)


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: Optional[bool] = typer.Option(
        None,
        "--debug/--no-debug",
        help="Temporarily toggle verbose logging without touching environment variables.",
    ),
    benchmarks: Optional[Path] = typer.Option(
        None,
        "--benchmarks",
        help="JSON benchmark tables; overrides BENCHMARK_FILE.",
    ),
) -> None:
    """Attach the lazily constructed application context to Typer."""
    ctx.obj = _init_context(debug_override=debug, benchmarks=benchmarks)


@app.command()
def analyze(
    ctx: typer.Context,
    statements_path: Path = typer.Argument(..., help="JSON export with company statements."),
    sector: str = typer.Option(..., "--sector", help="Industry sector used to pick benchmarks."),
    legal_entity: Optional[str] = typer.Option(None, "--legal-entity", help="Legal form, e.g. listed or llc."),
    level: str = typer.Option("local", "--level", help="Comparison level: local, regional or global."),
    years: Optional[int] = typer.Option(None, "--years", min=1, help="Analyze only the last N fiscal years."),
    select: Optional[List[str]] = typer.Option(
        None,
        "--select",
        help="basic, intermediate, advanced, comprehensive, or repeated analysis ids.",
    ),
    language: Optional[str] = typer.Option(None, "--language", help="Output language: ar or en."),
    output: Optional[Path] = typer.Option(None, "--output", help="Where to write the report JSON."),
) -> None:
    """Run every selected analysis for one company and present the outcome."""
    if ctx.obj is None:
        raise typer.Exit(code=1)

    context: AppContext = ctx.obj
    selection = _selection(select)
    try:
        statements = load_statements(statements_path)
        options = RunOptions(
            sector=sector,
            legal_entity=legal_entity,
            comparison_level=level,
            years_count=years,
            analysis_selection=selection,
            language=language or context.config.default_language,
        )
    except (StructuralError, ValueError) as exc:
        console.print(f"[bold red]Invalid input:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    console.rule(f"Analyzing {statements[0].company if statements else statements_path.name}")
    with console.status("[bold cyan]Running analyses..."):
        state = context.workflow.execute(statements, options)

    if state.get("errors"):
        console.print("[bold yellow]Run finished with errors:[/bold yellow]")
        for issue in state["errors"]:
            console.print(f"- {issue}")
    try:
        report = context.workflow.unwrap(state)
    except StructuralError as exc:
        console.print(f"[bold red]Run aborted:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    console.print("[bold green]Run completed.[/bold green]")
    _print_run_summary(report)
    _print_highlights(report)

    target = output or context.config.output_dir / f"{_slug(report.metadata.company)}_analysis.json"
    context.workflow.persist_report(report, target)
    console.print(f"Report saved to {target}")


@app.command()
def catalog(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(None, "--category", help="Filter by category id."),
    language: str = typer.Option("en", "--language", help="Name language: ar or en."),
) -> None:
    """List the analyses in the catalog."""
    if ctx.obj is None:
        raise typer.Exit(code=1)

    context: AppContext = ctx.obj
    definitions = context.workflow.context.catalog.list_definitions()
    if category:
        try:
            wanted = Category(category)
        except ValueError as exc:
            console.print(f"[red]Unknown category {category!r}[/red]")
            raise typer.Exit(code=2) from exc
        definitions = tuple(item for item in definitions if item.category == wanted)

    table = Table(title=f"Analysis catalog ({len(definitions)})")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Level")
    table.add_column("Direction")
    table.add_column("Inputs")
    for definition in definitions:
        table.add_row(
            definition.id,
            definition.name.get(language),
            definition.category.value,
            definition.level or "",
            definition.direction.value,
            ", ".join(sorted(definition.required_inputs)),
        )
    console.print(table)


@app.command()
def plan(ctx: typer.Context) -> None:
    """Display the high-level workflow path for quick operator reference."""
    if ctx.obj is None:
        raise typer.Exit(code=1)

    context: AppContext = ctx.obj
    table = Table(title="Workflow Stages")
    table.add_column("Step", style="cyan")
    table.add_column("Description")

    for idx, step in enumerate(context.workflow.describe_stages(), start=1):
        table.add_row(str(idx), step)

    console.print(table)


def _selection(select: Optional[List[str]]):
    if not select:
        return None
    if len(select) == 1 and "." not in select[0]:
        return select[0]
    return tuple(select)


def _slug(value: str) -> str:
    cleaned = "".join(char if char.isalnum() else "_" for char in value.strip())
    return cleaned.strip("_").lower() or "company"


def _print_run_summary(report: AnalysisReport) -> None:
    """Pretty-print a short run summary for operators."""
    meta = report.metadata
    language = meta.language
    summary = report.executive_summary
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key")
    table.add_column("Value")

    table.add_row("Company", meta.company)
    table.add_row("Fiscal years", ", ".join(str(year) for year in meta.years))
    table.add_row("Benchmarks", f"{meta.benchmark_source}{' (low confidence)' if meta.low_confidence else ''}")
    table.add_row("Attempted", str(meta.attempted))
    table.add_row("Evaluated", str(meta.succeeded))
    table.add_row("Skipped", str(meta.skipped))
    table.add_row("Failed", str(meta.failed))
    table.add_row(
        "Overall",
        summary.performance_label.get(language) if summary.performance_label else "N/A",
    )
    console.print(table)


def _print_highlights(report: AnalysisReport) -> None:
    language = report.metadata.language
    summary = report.executive_summary
    for title, ids in (("Strengths", summary.strengths), ("Weaknesses", summary.weaknesses)):
        if not ids:
            continue
        table = Table(title=title)
        table.add_column("Analysis")
        table.add_column("Value", justify="right")
        table.add_column("Industry", justify="right")
        table.add_column("Tier")
        for analysis_id in ids:
            item = report.get(analysis_id)
            if not isinstance(item, EvaluationResult):
                continue
            table.add_row(
                item.name.get(language),
                f"{item.value:.4g}",
                "-" if item.industry_average is None else f"{item.industry_average:.4g}",
                item.tier.label.get(language) if item.tier else "-",
            )
        console.print(table)
    for text in summary.recommendations:
        console.print(f"• {text.get(language)}")
