"""
DDD Catalog - Main CLI Application

Command-line interface for building and inspecting a domain model catalog
from a scanner's JSON output.
"""
import json
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ddd_catalog.config import get_config
from ddd_catalog.core.errors import CatalogError
from ddd_catalog.data.loaders import load_occurrences, save_result
from ddd_catalog.domain.builder import CatalogResult, build_catalog
from ddd_catalog.domain.records import Diagnostic, Severity
from ddd_catalog.domain.schema import MARKERS, PatternKind
from ddd_catalog.observability.logging import LoggingConfig, get_logger, setup_logging

# Initialize app
app = typer.Typer(
    name="ddd-catalog",
    help="Build a Domain-Driven Design model catalog from extracted pattern markers",
    add_completion=False,
)

console = Console()

# Exit codes
EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_FAULT = 2


class OutputFormat(str, Enum):
    """Output format options."""
    TABLE = "table"
    JSON = "json"


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Configure logging for all commands."""
    try:
        settings = get_config()
    except CatalogError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_FAULT)

    config = LoggingConfig.from_settings(settings.logging)
    if verbose:
        config.level = "DEBUG"
    setup_logging(config, force=True)
    get_logger(__name__).debug("cli.configured", level=config.level)


@app.command()
def build(
    input_file: Path = typer.Argument(..., help="JSON file with raw marker occurrences"),
    output: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    save: Optional[Path] = typer.Option(None, "--save", "-s", help="Save the full result as JSON"),
    strict: Optional[bool] = typer.Option(None, "--strict/--no-strict", help="Fail on warnings too"),
):
    """Build the catalog and report diagnostics."""
    result = _build_or_exit(input_file)

    if output == OutputFormat.JSON:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_summary(result)
        _display_diagnostics(list(result.diagnostics))

    if save:
        save_result(result, save)
        if output == OutputFormat.TABLE:
            console.print(f"[green]Result saved to {save}[/green]")

    if strict is None:
        strict = get_config().build.strict
    failed = result.has_errors or (strict and bool(result.diagnostics))
    raise typer.Exit(EXIT_DIAGNOSTICS if failed else EXIT_OK)


@app.command()
def show(
    input_file: Path = typer.Argument(..., help="JSON file with raw marker occurrences"),
    kind: Optional[str] = typer.Option(None, "--kind", "-k", help="Only records of this pattern kind"),
):
    """List the catalog records."""
    selected: Optional[PatternKind] = None
    if kind:
        try:
            selected = PatternKind.parse(kind)
        except CatalogError as e:
            console.print(f"[red]Error: {escape(e.message)}[/red]")
            raise typer.Exit(EXIT_FAULT)

    result = _build_or_exit(input_file)
    catalog = result.catalog
    records = list(catalog.find_by_kind(selected)) if selected else list(catalog)

    table = Table(title=f"Catalog records ({len(records)})")
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Id")
    table.add_column("Bounded Context")
    table.add_column("Element")

    for record in records:
        context = catalog.bounded_context_of(record)
        table.add_row(
            record.kind.display_name,
            escape(record.name) or "-",
            record.id or "-",
            escape(context.name) if context else "-",
            record.element_ref,
        )

    console.print(table)


@app.command()
def links(
    input_file: Path = typer.Argument(..., help="JSON file with raw marker occurrences"),
):
    """List the resolved reference links."""
    result = _build_or_exit(input_file)

    table = Table(title=f"Reference links ({len(result.links)})")
    table.add_column("Source", style="cyan")
    table.add_column("Relation", style="yellow")
    table.add_column("Target", style="cyan")

    for link in result.links:
        table.add_row(escape(str(link.source)), link.relation.value, escape(str(link.target)))

    console.print(table)


@app.command()
def kinds():
    """Show the marker schema."""
    table = Table(title="Pattern kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("Pattern")
    table.add_column("Annotation")
    table.add_column("Target")
    table.add_column("References")

    for kind, spec in MARKERS.items():
        references = ", ".join(
            f"{rule.field} -> {rule.target_names}" for rule in spec.references
        )
        table.add_row(kind.value, spec.display_name, spec.annotation, spec.target.value, references or "-")

    console.print(table)


# Helper functions
def _build_or_exit(input_file: Path) -> CatalogResult:
    """Load occurrences and build, turning faults into a clean exit."""
    if not input_file.exists():
        console.print(f"[red]Error: Input file not found: {input_file}[/red]")
        raise typer.Exit(EXIT_FAULT)

    try:
        return build_catalog(load_occurrences(input_file))
    except CatalogError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        for suggestion in e.suggestions:
            console.print(f"  - {escape(suggestion)}")
        raise typer.Exit(EXIT_FAULT)


def _display_summary(result: CatalogResult):
    """Display build summary."""
    summary = result.summary()
    color = "red" if result.has_errors else "yellow" if result.diagnostics else "green"
    console.print(Panel.fit(
        f"[bold]{summary['records']}[/bold] records, "
        f"[bold]{summary['links']}[/bold] links, "
        f"[{color}]{summary['errors']} errors, {summary['warnings']} warnings[/{color}]",
        title="DDD Catalog",
        border_style=color,
    ))

    table = Table(title="Records per kind")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", style="green")
    for kind, count in result.catalog.kinds().items():
        table.add_row(kind.display_name, str(count))
    console.print(table)


def _display_diagnostics(diagnostics: List[Diagnostic]):
    """Display diagnostics as rich table."""
    if not diagnostics:
        console.print("[green]No diagnostics[/green]")
        return

    table = Table(title="Diagnostics")
    table.add_column("Severity")
    table.add_column("Code", style="cyan")
    table.add_column("Message")

    for diagnostic in diagnostics:
        color = "red" if diagnostic.severity is Severity.ERROR else "yellow"
        table.add_row(
            f"[{color}]{diagnostic.severity.value}[/{color}]",
            diagnostic.code.value,
            escape(diagnostic.message),
        )

    console.print(table)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
