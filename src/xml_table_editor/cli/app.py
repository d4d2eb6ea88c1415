"""
Main CLI application for the XML table editor.

Provides a Typer-based command-line interface for listing, viewing and
editing named tables stored in XML files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import get_config_manager, load_config
from ..core.errors import TableEditorError
from ..core.table_session import TableSession
from .shell import TableShell, render_table, resolve_column

# Initialize Typer app
app = typer.Typer(
    name="xml-table-editor",
    help="View and edit named tables stored in XML files",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    View and edit named tables stored in XML files.
    """
    level = "DEBUG" if verbose else load_config().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _open_session(file_path: Path) -> TableSession:
    """Open a file in a new session or exit with an error message."""
    session = TableSession(load_config())
    try:
        session.open(file_path)
    except TableEditorError as e:
        console.print(f"[red]Error opening {file_path}: {e}[/red]")
        raise typer.Exit(1)

    for warning in session.last_warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")
    return session


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@app.command()
def tables(
    file_path: Path = typer.Argument(..., help="Path to the XML file"),
) -> None:
    """
    List the tables stored in an XML file.
    """
    session = _open_session(file_path)
    stats = session.document.get_stats()

    if not session.table_names:
        console.print("[yellow]No tables found in the XML file[/yellow]")
        return

    table_list = Table(title=f"Tables in {file_path.name}")
    table_list.add_column("Table", style="cyan")
    table_list.add_column("Rows", style="green", justify="right")

    for name in session.table_names:
        table_list.add_row(name, str(stats['row_counts'].get(name, 0)))

    console.print(table_list)


@app.command()
def show(
    file_path: Path = typer.Argument(..., help="Path to the XML file"),
    table_name: str = typer.Argument(..., help="Name of the table to show"),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: table, json"),
) -> None:
    """
    Show the contents of one table.
    """
    session = _open_session(file_path)
    try:
        snapshot = session.select_table(table_name)
    except TableEditorError as e:
        _fail(str(e))

    if output_format == "json":
        console.print_json(json.dumps(snapshot.model_dump()))
    elif output_format == "table":
        console.print(render_table(
            snapshot.headers,
            snapshot.padded_rows(),
            title=table_name,
            max_rows=session.config.max_display_rows,
        ))
    else:
        _fail(f"Unknown format {output_format!r}; use table or json")


@app.command("add-row")
def add_row(
    file_path: Path = typer.Argument(..., help="Path to the XML file"),
    table_name: str = typer.Argument(..., help="Table to add the row to"),
    values: Optional[List[str]] = typer.Argument(None, help="Cell values in column order"),
) -> None:
    """
    Append a row to a table and save the file.
    """
    session = _open_session(file_path)
    try:
        snapshot = session.select_table(table_name)
        if values and len(values) > snapshot.column_count:
            console.print(
                f"[yellow]Table has {snapshot.column_count} columns; "
                f"ignoring {len(values) - snapshot.column_count} extra values[/yellow]"
            )
        index = session.add_row(values or [])
        session.save()
    except TableEditorError as e:
        _fail(str(e))

    console.print(f"[green]Added row {index + 1} to {table_name}[/green]")


@app.command("delete-row")
def delete_row(
    file_path: Path = typer.Argument(..., help="Path to the XML file"),
    table_name: str = typer.Argument(..., help="Table to delete the row from"),
    row: int = typer.Argument(..., help="Row number (1-based, as shown by 'show')"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """
    Delete a row from a table and save the file.
    """
    session = _open_session(file_path)
    try:
        session.select_table(table_name)
    except TableEditorError as e:
        _fail(str(e))

    if not yes and session.config.confirm_destructive:
        typer.confirm(f"Are you sure you want to delete row {row} of {table_name}?", abort=True)

    try:
        session.delete_row(row - 1)
        session.save()
    except TableEditorError as e:
        _fail(str(e))

    console.print(f"[green]Deleted row {row} from {table_name}[/green]")


@app.command("set-cell")
def set_cell(
    file_path: Path = typer.Argument(..., help="Path to the XML file"),
    table_name: str = typer.Argument(..., help="Table containing the cell"),
    row: int = typer.Argument(..., help="Row number (1-based)"),
    column: str = typer.Argument(..., help="Column header name or 1-based number"),
    value: str = typer.Argument(..., help="New cell value"),
) -> None:
    """
    Change a single cell and save the file.
    """
    session = _open_session(file_path)
    try:
        snapshot = session.select_table(table_name)
    except TableEditorError as e:
        _fail(str(e))

    try:
        column_index = resolve_column(snapshot.headers, column)
    except ValueError as e:
        _fail(str(e))

    rows = snapshot.padded_rows()
    if not 1 <= row <= len(rows):
        _fail(f"Row {row} does not exist; {table_name} has {len(rows)} rows")

    rows[row - 1][column_index] = value
    try:
        session.commit_grid(snapshot.headers, rows)
        session.save()
    except TableEditorError as e:
        _fail(str(e))

    console.print(f"[green]Set {snapshot.headers[column_index]} of row {row} to {value!r}[/green]")


@app.command()
def edit(
    file_path: Optional[Path] = typer.Argument(None, help="XML file to open"),
) -> None:
    """
    Start the interactive table editing shell.
    """
    shell = TableShell(config=load_config(), console=console)
    shell.run(file_path)


@app.command()
def info() -> None:
    """
    Show information about the XML table editor.
    """
    config_info = get_config_manager().get_config_info()

    info_text = f"""[bold cyan]XML Table Editor[/bold cyan]

Edit named tables stored in XML files.

[bold]Expected File Shape:[/bold]
• <AnyRoot> containing <table name="..."> elements
• each table holds <row> elements of <cell name="..."> values
• column headers come from the first row of each table

[bold]Current Configuration:[/bold]
• Indent: {config_info['indent']} spaces
• Encoding: {config_info['encoding']}
• Strict Table Names: {'Yes' if config_info['strict_table_names'] else 'No'}
• Config File: {'✓ Exists' if config_info['config_exists'] else '✗ Not Found'}

[bold]Commands:[/bold]
• [cyan]xml-table-editor tables <file>[/cyan] - List tables
• [cyan]xml-table-editor show <file> <table>[/cyan] - Show a table
• [cyan]xml-table-editor edit [FILE][/cyan] - Interactive editing
    """

    console.print(Panel(info_text, border_style="blue"))


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default config file"),
    set_indent: Optional[int] = typer.Option(None, "--set-indent", help="Set the indentation width used when saving"),
) -> None:
    """
    Manage editor configuration.
    """
    config_manager = get_config_manager()

    if create_default:
        path = config_manager.create_default_config()
        console.print(f"[green]Created default configuration at {path}[/green]")
        return

    if show:
        config_info = config_manager.get_config_info()
        current_config = load_config()

        config_display = f"""[bold]XML Table Editor Configuration[/bold]

[bold cyan]Serialization:[/bold cyan]
• Indent: {current_config.serialization.indent}
• Encoding: {current_config.serialization.encoding}
• XML Declaration: {current_config.serialization.xml_declaration if current_config.serialization.xml_declaration is not None else 'keep source'}

[bold yellow]Behaviour:[/bold yellow]
• Strict Table Names: {current_config.strict_table_names}
• Confirm Destructive Actions: {current_config.confirm_destructive}
• Max Display Rows: {current_config.max_display_rows}
• Log Level: {current_config.log_level}

[bold magenta]Files:[/bold magenta]
• Config File: {config_info['config_file']}
• Exists: {'Yes' if config_info['config_exists'] else 'No'}"""

        console.print(Panel(config_display, border_style="green"))
        return

    if set_indent is not None:
        if set_indent < 0:
            console.print("[red]Indent must not be negative[/red]")
            raise typer.Exit(1)

        current_config = load_config()
        current_config.serialization.indent = set_indent
        config_manager.save_config(current_config)
        console.print(f"[green]Set indent to {set_indent}[/green]")
        return

    # Default: show basic info
    console.print("Use [cyan]xml-table-editor config --show[/cyan] to see full configuration")
    console.print("Use [cyan]xml-table-editor config --create-default[/cyan] to create a default config file")


if __name__ == "__main__":
    app()
