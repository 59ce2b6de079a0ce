"""fieldqc CLI.

Commands:
- rules: Show the classification rule table in resolution order
- classify: Classify every field of a task record
- review: Analyse one field of a task record and optionally record a human decision
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fieldqc.classification.classifier import FieldClassifier
from fieldqc.classification.rules import ConfigurationError, RuleTable, load_rule_table
from fieldqc.config import get_config
from fieldqc.core.logging import configure_logging
from fieldqc.ingestion.records import RecordLoadError, find_field, iter_fields, load_record
from fieldqc.inspector import FieldInspector
from fieldqc.models import NodeContext, ReviewStatus
from fieldqc.quality.engine import AnalysisOutcome, AnalysisStatus

app = typer.Typer(
    name="fieldqc",
    help="fieldqc - Field classification and quality review for task recordings",
    no_args_is_help=True,
)

console = Console()

STATUS_STYLES = {
    ReviewStatus.APPROVED: "green",
    ReviewStatus.REJECTED: "red",
    ReviewStatus.NEEDS_REVIEW: "yellow",
    ReviewStatus.PENDING: "dim",
}


@app.callback()
def main() -> None:
    configure_logging()


def _load_rules(rules: Path | None) -> RuleTable:
    try:
        return load_rule_table(rules)
    except ConfigurationError as e:
        console.print(f"[bold red]Rule table error:[/bold red] {e}")
        raise typer.Exit(1)


def _load_record(record: Path):
    try:
        return load_record(record)
    except RecordLoadError as e:
        console.print(f"[bold red]Record error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def rules(
    rules_path: Path | None = typer.Option(None, "--rules", help="Rule table YAML"),
):
    """Show the classification rule table in resolution order."""
    table_rules = _load_rules(rules_path)

    table = Table(title="Field rules")
    table.add_column("Priority", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Component")
    table.add_column("Pattern")

    for rule in table_rules.ordered():
        pattern = rule.pattern if isinstance(rule.pattern, str) else rule.pattern.pattern
        table.add_row(str(rule.priority), rule.type, rule.component, escape(pattern))

    console.print(table)


@app.command()
def classify(
    record: Path = typer.Argument(..., help="Task record (JSON)"),
    rules_path: Path | None = typer.Option(None, "--rules", help="Rule table YAML"),
):
    """Classify every field of a task record."""
    classifier = FieldClassifier(_load_rules(rules_path))
    data = _load_record(record)

    table = Table(title=f"Fields in {record.name}")
    table.add_column("Path", style="cyan")
    table.add_column("Kind")
    table.add_column("Type")
    table.add_column("Component", style="magenta")

    count = 0
    for ref in iter_fields(data):
        mapping = classifier.resolve(ref.key, ref.value)
        table.add_row(escape(ref.dotted_path), ref.kind.value, mapping.type, mapping.component)
        count += 1

    console.print(table)
    console.print(f"[bold]{count}[/bold] fields classified")


@app.command()
def review(
    record: Path = typer.Argument(..., help="Task record (JSON)"),
    field_path: str = typer.Argument(..., help="Dotted field path, e.g. steps.0.rect"),
    approve: bool = typer.Option(False, "--approve", help="Approve after analysis"),
    reject: bool = typer.Option(False, "--reject", help="Reject after analysis"),
    reason: str | None = typer.Option(None, "--reason", help="Reviewer feedback"),
    rules_path: Path | None = typer.Option(None, "--rules", help="Rule table YAML"),
):
    """Analyse one field and optionally record a human decision."""
    if approve and reject:
        console.print("[bold red]Choose at most one of --approve and --reject[/bold red]")
        raise typer.Exit(2)

    data = _load_record(record)
    try:
        ref = find_field(data, field_path)
    except KeyError as e:
        console.print(f"[bold red]Field not found:[/bold red] {e.args[0]}")
        raise typer.Exit(1)

    inspector = FieldInspector(
        classifier=FieldClassifier(_load_rules(rules_path)),
        config=get_config(),
    )
    context = inspector.select(ref.key, ref.value, ref.path)
    console.print(
        f"[bold]{ref.dotted_path}[/bold] -> {inspector.mapping.type} "
        f"({inspector.mapping.component})"
    )

    outcome = asyncio.run(inspector.analyze())
    _print_outcome(outcome)

    if approve or reject:
        decision = ReviewStatus.APPROVED if approve else ReviewStatus.REJECTED
        context = inspector.review(decision, reason)

    _print_head(context)


def _print_outcome(outcome: AnalysisOutcome) -> None:
    if outcome.status == AnalysisStatus.FAILED:
        console.print(f"[yellow]Analysis failed:[/yellow] {outcome.error}")
        return
    if outcome.result is None:
        console.print(f"[yellow]Analysis {outcome.status.value}[/yellow]")
        return

    result = outcome.result
    console.print(f"Confidence: {result.confidence:.0%}")
    for issue in result.quality_issues:
        console.print(f"  [yellow]issue[/yellow] {escape(issue)}")
    for suggestion in result.suggestions:
        console.print(f"  [blue]suggestion[/blue] {escape(suggestion)}")
    console.print(f"[dim]{result.reasoning}[/dim]")


def _print_head(context: NodeContext) -> None:
    assessment = context.head.quality_assessment
    style = STATUS_STYLES[assessment.status]

    table = Table(title=f"{context.key} {context.head.id}")
    table.add_column("Status")
    table.add_column("Reviewer")
    table.add_column("Confidence", justify="right")
    table.add_column("Reason")
    table.add_row(
        f"[{style}]{assessment.status.value}[/{style}]",
        assessment.reviewer.value,
        f"{assessment.confidence:.2f}",
        escape(assessment.reason or ""),
    )
    console.print(table)


if __name__ == "__main__":
    app()
