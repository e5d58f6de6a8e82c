"""CLI interface for hierval using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from hierval import __description__, __version__
from hierval.config import HiervalConfig, load_config
from hierval.diagnostics import ErrorLevel, ValidationLogger
from hierval.errors import HiervalError
from hierval.hierarchy import generate_hierarchy, write_hierarchy
from hierval.loader import load_nodes
from hierval.orchestrator import run_validation
from hierval.validation import HierarchyValidator

app = typer.Typer(
    name="hierval",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"hierval version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """hierval - Hierarchy validation and cross-locale sync for documentation builds."""


def _load(config_path: Path | None) -> HiervalConfig:
    """Load configuration or exit with a readable error."""
    try:
        hierval_config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    logging.basicConfig(
        level=_LOG_LEVELS.get(hierval_config.logging.level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s"
    )
    return hierval_config


def _print_diagnostics(validation_logger: ValidationLogger) -> None:
    if not validation_logger.items:
        console.print("\n[green]No issues found![/green]")
        return

    console.print("\n[blue]Diagnostics:[/blue]")
    table = Table()
    table.add_column("Level", style="white")
    table.add_column("Code", style="cyan")
    table.add_column("Message", style="white")
    table.add_column("File", style="dim")

    for item in validation_logger.items:
        color = "red" if item.level == ErrorLevel.ERROR else "yellow" if item.level == ErrorLevel.WARNING else "green"
        table.add_row(
            f"[{color}]{item.level.value.upper()}[/{color}]",
            item.code.value,
            item.message,
            item.file or ""
        )

    console.print(table)


@app.command()
def validate(
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .hierval.json)")
    ] = None,
    no_drysync: Annotated[
        bool,
        typer.Option("--no-drysync", help="Skip the dry-sync call to the hierarchy service")
    ] = False,
    fallback_docset: Annotated[
        Path,
        typer.Option("--fallback-docset", help="Default-locale docset used for token validation")
    ] = None,
    report_dir: Annotated[
        Path,
        typer.Option("--report-dir", help="Write a JSON diagnostics report to this directory")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
) -> None:
    """Validate the docset hierarchy and reconcile the publish manifest."""
    valid_formats = ["table", "json"]
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    hierval_config = _load(config)

    updates = {}
    if no_drysync:
        updates["no_drysync"] = True
    if fallback_docset:
        updates["fallback_docset_path"] = str(fallback_docset)
    if updates:
        hierval_config = hierval_config.model_copy(
            update={"docset": hierval_config.docset.model_copy(update=updates)}
        )

    validation_logger = ValidationLogger()
    try:
        is_valid = run_validation(hierval_config, validation_logger=validation_logger)
    except HiervalError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if format == "json":
        console.print(jsonlib.dumps({"valid": is_valid, **validation_logger.to_dict()}, indent=2))
    else:
        status_color = "green" if is_valid else "red"
        console.print(f"[{status_color}]Hierarchy Validation: {'PASS' if is_valid else 'FAIL'}[/{status_color}]")
        _print_diagnostics(validation_logger)

    if report_dir:
        report_file = validation_logger.flush_to_filesystem(report_dir)
        if report_file:
            console.print(f"[dim]Report written to {report_file}[/dim]")

    raise typer.Exit(0 if is_valid else 1)


@app.command()
def hierarchy(
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .hierval.json)")
    ] = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Write the hierarchy JSON to this file instead of stdout")
    ] = None,
) -> None:
    """Validate the structure and print the generated hierarchy."""
    hierval_config = _load(config)
    docset = hierval_config.docset

    validation_logger = ValidationLogger()
    try:
        nodes = load_nodes(docset.manifest_file_path, docset.docset_path, docset.locale)
    except HiervalError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    is_valid, nodes = HierarchyValidator(validation_logger).validate(nodes)
    if not is_valid:
        console.print("[red]Hierarchy is structurally invalid[/red]")
        _print_diagnostics(validation_logger)
        raise typer.Exit(1)

    raw_hierarchy = generate_hierarchy(nodes, docset.docset_output_path)
    if output:
        write_hierarchy(raw_hierarchy, output)
        console.print(f"[green]Hierarchy written to:[/green] {output}")
    else:
        console.print(jsonlib.dumps(raw_hierarchy.model_dump(mode="json", by_alias=True), indent=2))


if __name__ == "__main__":
    app()
