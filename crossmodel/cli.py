"""Command-line interface for crossmodel."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from crossmodel.analysis.engine import ConsolidationEngine, EngineRun
from crossmodel.config import EngineConfig
from crossmodel.export.report import export_report_json
from crossmodel.results.exceptions import ConsolidationError, UpstreamAuthError
from crossmodel.results.registry import ModelRegistry
from crossmodel.utils.helpers import (
    CONSENSUS_STYLES,
    SEVERITY_STYLES,
    format_models,
    format_percentage,
    format_similarity,
    load_raw_results,
    styled,
)
from crossmodel.utils.logger import setup_logger

console = Console()


def _run_engine(
    input_file: str,
    config: EngineConfig,
    auth_failed: bool,
    suggest: bool = False,
) -> EngineRun:
    raw_results = load_raw_results(Path(input_file))
    engine = ConsolidationEngine(config=config)
    upstream_error = UpstreamAuthError("Model invocation was not authorized") if auth_failed else None
    return engine.run(raw_results, upstream_error=upstream_error, suggest_resolutions=suggest)


def _print_run(run: EngineRun, registry: ModelRegistry) -> None:
    report = run.report

    if report.rejected:
        console.print("\n[bold red]Excluded Models[/bold red]")
        for model, error in report.rejected.items():
            console.print(f"  [red]✗[/red] {model}: {error.reason}")
    for warning in report.warnings:
        console.print(f"  [yellow]![/yellow] {warning}")

    if report.results:
        console.print("\n[bold cyan]Model Results[/bold cyan]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Model", style="cyan")
        table.add_column("Confidence", style="white")
        table.add_column("Time (ms)", style="white")
        table.add_column("Insights", style="white")
        table.add_column("Entities", style="white")
        table.add_column("Sentiment", style="white")
        for model, result in report.results.items():
            sentiment = (
                f"{result.sentiment.label} ({format_percentage(result.sentiment.confidence)})"
                if result.sentiment
                else "N/A"
            )
            table.add_row(
                format_models([model], registry),
                format_percentage(result.confidence),
                str(result.processing_time_ms),
                str(len(result.insights)),
                str(len(result.entities)),
                sentiment,
            )
        console.print(table)

    if run.comparisons:
        console.print("\n[bold cyan]Pairwise Comparisons[/bold cyan]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Models", style="cyan")
        table.add_column("Similarity", style="yellow")
        table.add_column("Agreements", style="green")
        table.add_column("Differences", style="red")
        for comparison in run.comparisons:
            table.add_row(
                format_models(comparison.models, registry),
                format_similarity(comparison.similarity),
                str(len(comparison.agreements)),
                str(len(comparison.differences)),
            )
        console.print(table)

    if run.entity_groups:
        console.print("\n[bold cyan]Entity Consensus[/bold cyan]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Entity", style="cyan")
        table.add_column("Types", style="white")
        table.add_column("Models", style="white")
        table.add_column("Consensus", style="white")
        for group in run.entity_groups:
            table.add_row(
                group.text,
                ", ".join(group.distinct_types),
                format_models(group.models, registry),
                styled(group.consensus, CONSENSUS_STYLES.get(group.consensus)),
            )
        console.print(table)

    if run.conflicts:
        console.print("\n[bold cyan]Conflicts[/bold cyan]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Severity", style="white")
        table.add_column("Category", style="cyan")
        table.add_column("Description", style="white")
        table.add_column("Resolution", style="green")
        for conflict in run.conflicts:
            table.add_row(
                styled(conflict.severity.upper(), SEVERITY_STYLES.get(conflict.severity)),
                conflict.category,
                f"{conflict.description}\n[dim]{conflict.perspective_a}\n{conflict.perspective_b}[/dim]",
                conflict.resolution or "[dim]unresolved[/dim]",
            )
        console.print(table)

    insights = run.insights
    console.print("\n[bold cyan]Consolidated Insights[/bold cyan]")
    if insights.requires_action:
        console.print(f"[bold red]Action required:[/bold red] {insights.summary}")
    elif not insights.has_analysis:
        console.print(f"[dim]{insights.summary}[/dim]")
    else:
        console.print(insights.summary)
    console.print(f"Confidence: [yellow]{format_percentage(insights.confidence_score)}[/yellow]")

    if insights.common_findings:
        console.print("\n[bold]Common Findings[/bold]")
        for finding in insights.common_findings:
            console.print(f"  • {finding}")

    if insights.recommended_actions:
        console.print("\n[bold]Recommended Actions[/bold]")
        for index, action in enumerate(insights.recommended_actions, 1):
            console.print(f"  {index}. {action}")


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """crossmodel - Consolidate and reconcile analyses from several AI models."""
    setup_logger(log_level="DEBUG" if verbose else None)
    if verbose:
        console.print("[dim]Verbose mode enabled[/dim]", highlight=False)


@cli.command("consolidate")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print consolidated insights as JSON")
@click.option("--high-threshold", type=float, default=None, help="Confidence for high-severity sentiment conflicts")
@click.option("--spread", type=float, default=None, help="Confidence spread for medium-severity conflicts")
@click.option("--suggest-resolutions", is_flag=True, help="Attach suggested resolutions to conflicts")
@click.option("--auth-failed", is_flag=True, help="Report an upstream authentication failure")
def consolidate_command(
    input_file: str,
    as_json: bool,
    high_threshold: Optional[float],
    spread: Optional[float],
    suggest_resolutions: bool,
    auth_failed: bool,
):
    """Consolidate raw per-model results from INPUT_FILE.

    Args:
        input_file: JSON file mapping model ids to raw results
    """
    try:
        overrides = {}
        if high_threshold is not None:
            overrides["conflict_high_confidence_threshold"] = high_threshold
        if spread is not None:
            overrides["confidence_spread_medium"] = spread
        # Rebuilt rather than copied so the field bounds are validated
        config = EngineConfig(**{**EngineConfig.from_settings().model_dump(), **overrides})

        run = _run_engine(input_file, config, auth_failed, suggest=suggest_resolutions)

        if as_json:
            click.echo(run.insights.model_dump_json(by_alias=True, indent=2))
            return

        _print_run(run, ModelRegistry())

    except (ConsolidationError, ValueError) as e:
        console.print(f"[red]✗ Error: {str(e)}[/red]")
        sys.exit(1)


@cli.command("export")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True, help="Report file to write")
@click.option("--content-id", default=None, help="Identifier of the analyzed content")
@click.option("--auth-failed", is_flag=True, help="Report an upstream authentication failure")
def export_command(input_file: str, output: str, content_id: Optional[str], auth_failed: bool):
    """Write a JSON analysis report for INPUT_FILE.

    Args:
        input_file: JSON file mapping model ids to raw results
    """
    try:
        raw_results = load_raw_results(Path(input_file))
        run = _run_engine(input_file, EngineConfig.from_settings(), auth_failed)

        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            export_report_json(run.insights, raw_results, content_id=content_id),
            encoding="utf-8",
        )
        console.print(f"[green]✓[/green] Report written to {output_path}")

    except (ConsolidationError, ValueError) as e:
        console.print(f"[red]✗ Error: {str(e)}[/red]")
        sys.exit(1)


@cli.command("models")
def models_command():
    """List supported models."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Icon", style="white")
    for descriptor in ModelRegistry():
        table.add_row(descriptor.id, descriptor.display_name, descriptor.icon)
    console.print(table)


if __name__ == "__main__":
    cli()
