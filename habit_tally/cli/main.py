"""
CLI interface for Habit Tally.

Provides command-line access to logging, editing, listing and exporting
daily entries.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from habit_tally.app_logging import configure_logging
from habit_tally.config.loader import AppConfig, resolve_config
from habit_tally.core.errors import PersistenceError, ValidationError
from habit_tally.core.exporter import DEFAULT_EXPORT_NAME, export_records
from habit_tally.core.lifecycle import LifecycleController, Ordering
from habit_tally.storage.models import QUANTITY_FIELDS, Record
from habit_tally.storage.repository import RecordRepository
from habit_tally.storage.store import JsonRecordStore

app = typer.Typer()
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_ERROR = 1

BAR_WIDTH = 20


@dataclass
class CliState:
    """Options shared by every command."""
    config: AppConfig
    data_file: Path


def _build_controller(ctx: typer.Context) -> LifecycleController:
    """Create a controller and load the record file into it."""
    state: CliState = ctx.obj
    controller = LifecycleController(
        repository=RecordRepository(),
        store=JsonRecordStore(state.data_file),
        date_format=state.config.display.date_format,
        ordering=state.config.display.default_ordering,
    )
    controller.load()
    return controller


def _report_save(saved: bool, warning: Optional[str]) -> None:
    if not saved:
        console.print(f"[yellow]Warning:[/] change kept in memory but not saved: {escape(str(warning))}")


def _format_quantity(value: float) -> str:
    """Format a quantity without a trailing .0 for whole numbers."""
    return f"{value:g}"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a YAML config file"
    ),
    data_file: Optional[Path] = typer.Option(
        None,
        "--data-file",
        "-d",
        help="Override the record file location"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log lifecycle events to stderr"
    )
):
    """Habit Tally CLI."""
    try:
        app_config = resolve_config(config)
    except Exception as e:
        console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_ERROR)
    
    configure_logging(logging.DEBUG if verbose else app_config.logging.level_number)
    ctx.obj = CliState(
        config=app_config,
        data_file=data_file or app_config.storage.data_file
    )
    if ctx.invoked_subcommand is None:
        console.print("Habit Tally - Use --help to see available commands")


@app.command()
def add(
    ctx: typer.Context,
    coffee: str = typer.Argument(..., help="Cups of coffee"),
    books: str = typer.Argument(..., help="Books (or pages) read"),
    trips: str = typer.Argument(..., help="Trips taken")
):
    """
    Log a new entry.
    
    Decimal values accept "." or "," as separator. Prefix negative
    values with "--" so they are not read as options.
    """
    controller = _build_controller(ctx)
    try:
        outcome = controller.submit_entry(coffee, books, trips)
    except ValidationError as e:
        console.print(f"[red]Validation error:[/] {escape(e.message)}")
        sys.exit(EXIT_CODE_ERROR)
    
    console.print(f"[green]✓[/] {outcome.message} (id {outcome.record.id})")
    _report_save(outcome.saved, outcome.warning)
    sys.exit(EXIT_CODE_OK)


@app.command()
def edit(
    ctx: typer.Context,
    record_id: int = typer.Argument(..., help="Id of the entry to edit"),
    coffee: str = typer.Argument(..., help="Cups of coffee"),
    books: str = typer.Argument(..., help="Books (or pages) read"),
    trips: str = typer.Argument(..., help="Trips taken")
):
    """Change the quantities of an existing entry."""
    controller = _build_controller(ctx)
    if not controller.begin_edit(record_id):
        console.print(f"[red]Error:[/] entry {record_id} not found")
        sys.exit(EXIT_CODE_ERROR)
    
    try:
        outcome = controller.submit_entry(coffee, books, trips)
    except ValidationError as e:
        console.print(f"[red]Validation error:[/] {escape(e.message)}")
        sys.exit(EXIT_CODE_ERROR)
    
    console.print(f"[green]✓[/] {outcome.message}")
    _report_save(outcome.saved, outcome.warning)
    sys.exit(EXIT_CODE_OK)


@app.command()
def delete(
    ctx: typer.Context,
    record_id: int = typer.Argument(..., help="Id of the entry to delete")
):
    """Delete an entry. Deleting an unknown id is not an error."""
    controller = _build_controller(ctx)
    outcome = controller.delete_entry(record_id)
    console.print(f"[green]✓[/] {outcome.message}")
    _report_save(outcome.saved, outcome.warning)
    sys.exit(EXIT_CODE_OK)


def _displayed(ctx: typer.Context, order: Optional[str]) -> List[Record]:
    controller = _build_controller(ctx)
    if order is not None:
        try:
            controller.set_ordering(order.lower())
        except ValueError:
            valid = ", ".join(ordering.value for ordering in Ordering)
            console.print(f"[red]Error:[/] order must be one of: {valid}")
            sys.exit(EXIT_CODE_ERROR)
    return controller.displayed()


ORDER_HELP = "Display order: 'recent' (newest first) or 'coffee' (most coffee first)"


@app.command("list")
def list_entries(
    ctx: typer.Context,
    order: Optional[str] = typer.Option(None, "--order", "-o", help=ORDER_HELP)
):
    """Show all entries as a table."""
    records = _displayed(ctx, order)
    if not records:
        console.print("[dim]No entries yet.[/]")
        return
    
    table = Table(title="Entries")
    table.add_column("ID", justify="right")
    table.add_column("Date")
    for name in QUANTITY_FIELDS:
        table.add_column(name.capitalize(), justify="right")
    
    for record in records:
        table.add_row(
            str(record.id),
            Text(record.date),
            *(_format_quantity(getattr(record, name)) for name in QUANTITY_FIELDS)
        )
    console.print(table)


@app.command()
def chart(
    ctx: typer.Context,
    order: Optional[str] = typer.Option(None, "--order", "-o", help=ORDER_HELP)
):
    """Draw a bar per entry and quantity, scaled to the largest value."""
    records = _displayed(ctx, order)
    if not records:
        console.print("[dim]No entries yet.[/]")
        return
    
    colors = {"coffee": "yellow", "books": "cyan", "trips": "magenta"}
    for name in QUANTITY_FIELDS:
        peak = max(getattr(record, name) for record in records)
        console.print(f"\n[bold]{name.capitalize()}[/bold]")
        for record in records:
            value = getattr(record, name)
            length = round(value / peak * BAR_WIDTH) if peak > 0 else 0
            bar = "█" * length
            label = escape(record.date.rjust(10))
            console.print(
                f"{label} [{colors[name]}]{bar:<{BAR_WIDTH}}[/] {_format_quantity(value)}"
            )


@app.command()
def export(
    ctx: typer.Context,
    output: str = typer.Option(
        DEFAULT_EXPORT_NAME,
        "--output",
        "-o",
        help="Destination file, or '-' for stdout"
    )
):
    """Export all entries as a JSON file."""
    controller = _build_controller(ctx)
    records = controller.repository.all()
    
    try:
        if output == "-":
            result = export_records(records, sys.stdout)
        else:
            result = export_records(records, output)
    except PersistenceError as e:
        console.print(f"[red]Error:[/] {escape(e.message)}")
        sys.exit(EXIT_CODE_ERROR)
    
    if not result.exported:
        console.print(f"[yellow]Notice:[/] {escape(result.message)}")
    elif output != "-":
        console.print(f"[green]✓[/] {escape(result.message)}")
    sys.exit(EXIT_CODE_OK)


if __name__ == "__main__":
    app()
