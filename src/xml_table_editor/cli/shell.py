"""
Interactive shell for editing XML tables in the terminal.

Plays the part of the windowed front end: it picks files, shows the
selected table, asks before destructive actions and keeps the
add/delete/edit mode state. All document work goes through TableSession.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..config import EditorConfig
from ..core.errors import TableEditorError
from ..core.grid import MemoryGrid, read_grid
from ..core.table_session import TableSession, TableSnapshot

logger = logging.getLogger(__name__)


class EditMode(Enum):
    """Mutually exclusive editing modes of the shell."""
    IDLE = "idle"
    ADDING = "adding"
    DELETING = "deleting"
    EDITING = "editing"


@dataclass
class ShellState:
    """Presentation state that never reaches the document."""

    mode: EditMode = EditMode.IDLE
    has_unsaved_changes: bool = False
    commands_run: int = 0


def resolve_column(headers: Sequence[str], column: str) -> int:
    """
    Map a column given by header name or 1-based number to a 0-based index.

    Header names win over numbers, so a column literally named "2" is found
    by name.
    """
    if column in headers:
        return list(headers).index(column)
    if column.isdigit():
        position = int(column)
        if 1 <= position <= len(headers):
            return position - 1
    raise ValueError(f"Unknown column {column!r}; expected a header name or 1..{len(headers)}")


def render_table(snapshot_headers: Sequence[str], rows: List[List[str]], title: str, max_rows: int) -> Table:
    """Build a Rich table with 1-based row numbers."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    for header in snapshot_headers:
        table.add_column(header)

    for number, values in enumerate(rows[:max_rows], start=1):
        table.add_row(str(number), *values)

    if len(rows) > max_rows:
        table.caption = f"{len(rows) - max_rows} more rows not shown"
    return table


class TableShell:
    """
    Command loop driving a TableSession with an in-memory grid.

    Grid edits stay local until ``/update`` commits and saves them;
    ``/cancel`` throws them away by reloading the table.
    """

    def __init__(
        self,
        session: Optional[TableSession] = None,
        config: Optional[EditorConfig] = None,
        console: Optional[Console] = None,
        prompt: Optional[Callable[[str], str]] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ):
        self.config = config or (session.config if session else EditorConfig())
        self.session = session or TableSession(self.config)
        self.console = console or Console()
        self.grid = MemoryGrid()
        self.state = ShellState()
        self.is_running = False

        self._prompt = prompt or (lambda text: Prompt.ask(text, console=self.console))
        self._confirm = confirm or (lambda question: Confirm.ask(question, console=self.console, default=False))

    def run(self, document_path: Optional[Path] = None) -> None:
        """Start the interactive loop, optionally opening a file first."""
        self.is_running = True
        self._show_welcome()

        if document_path:
            self._open(document_path)

        while self.is_running:
            try:
                command = self._prompt(self._prompt_text())
            except (EOFError, KeyboardInterrupt):
                self.console.print("\n[yellow]Session ended[/yellow]")
                break

            if command.strip():
                self.handle_command(command)

        if self.state.has_unsaved_changes:
            self.console.print("[yellow]Unsaved grid changes were discarded[/yellow]")

    def handle_command(self, command: str) -> None:
        """Run a single shell command; errors are reported, never raised."""
        try:
            parts = shlex.split(command.strip().lstrip('/'))
        except ValueError as e:
            self.console.print(f"[red]Cannot parse command: {e}[/red]")
            return
        if not parts:
            return

        cmd = parts[0].lower()
        args = parts[1:]
        self.state.commands_run += 1

        handlers = {
            'help': self._show_help,
            'open': self._cmd_open,
            'tables': self._cmd_tables,
            'select': self._cmd_select,
            'show': self._cmd_show,
            'add': self._cmd_add,
            'delete': self._cmd_delete,
            'pick': self._cmd_pick,
            'edit': self._cmd_edit,
            'set': self._cmd_set,
            'update': self._cmd_update,
            'cancel': self._cmd_cancel,
            'status': self._cmd_status,
            'quit': self._cmd_quit,
            'exit': self._cmd_quit,
        }

        handler = handlers.get(cmd)
        if handler is None:
            self.console.print(f"[red]Unknown command: /{cmd}[/red]")
            self.console.print("Use [cyan]/help[/cyan] to see available commands")
            return

        try:
            handler(args)
        except TableEditorError as e:
            logger.debug(f"Command /{cmd} failed", exc_info=True)
            self.console.print(f"[red]Error: {e}[/red]")

    # Commands

    def _cmd_open(self, args: List[str]) -> None:
        if not args:
            self.console.print("[red]Usage: /open <filename>[/red]")
            return
        self._open(Path(' '.join(args)))

    def _cmd_tables(self, args: List[str]) -> None:
        if not self.session.is_loaded:
            self.console.print("[red]No XML file is loaded. Use /open <filename> first.[/red]")
            return

        names = self.session.table_names
        if not names:
            self.console.print("[yellow]No tables found in the XML file.[/yellow]")
            return

        for name in names:
            marker = "→ " if name == self.session.current_table_name else "  "
            self.console.print(f"{marker}[cyan]{name}[/cyan]")

    def _cmd_select(self, args: List[str]) -> None:
        if not args:
            self.console.print("[red]Usage: /select <table name>[/red]")
            return
        self._select(' '.join(args))

    def _cmd_show(self, args: List[str]) -> None:
        if not self._require_table():
            return
        self.console.print(render_table(
            self.grid.headers(),
            read_grid(self.grid),
            title=self.session.current_table_name,
            max_rows=self.config.max_display_rows,
        ))

    def _cmd_add(self, args: List[str]) -> None:
        if not self._require_table():
            return
        if self.state.mode == EditMode.ADDING:
            self.state.mode = EditMode.IDLE
            self.console.print("Add mode off")
            return

        self.state.mode = EditMode.ADDING
        row = self.grid.insert_row()
        self.state.has_unsaved_changes = True
        self.console.print(f"[green]Add mode on[/green]: added empty row {row + 1}. Fill it with /set.")

    def _cmd_delete(self, args: List[str]) -> None:
        if not self._require_table():
            return
        if self.state.mode == EditMode.DELETING:
            self.state.mode = EditMode.IDLE
            self.console.print("Delete mode off")
            return

        self.state.mode = EditMode.DELETING
        self.console.print("[green]Delete mode on[/green]: use /pick <row> to delete a row.")

    def _cmd_pick(self, args: List[str]) -> None:
        if not self._require_table():
            return
        if self.state.mode != EditMode.DELETING:
            self.console.print("[red]Turn on delete mode with /delete first[/red]")
            return
        if len(args) != 1 or not args[0].isdigit():
            self.console.print("[red]Usage: /pick <row number>[/red]")
            return

        row = int(args[0]) - 1
        if not 0 <= row < self.grid.row_count():
            self.console.print(f"[red]Row {args[0]} does not exist[/red]")
            return

        if self._confirmed(f"Are you sure you want to delete row {row + 1}?"):
            # Only the grid changes here; /update writes the document
            self.grid.remove_row(row)
            self.state.has_unsaved_changes = True
            self.console.print(f"Deleted row {row + 1} from the grid")

    def _cmd_edit(self, args: List[str]) -> None:
        if not self._require_table():
            return
        if self.state.mode == EditMode.EDITING:
            self.state.mode = EditMode.IDLE
            self.console.print("Edit mode off")
            return

        self.state.mode = EditMode.EDITING
        self.console.print("[green]Edit mode on[/green]: use /set <row> <column> <value>.")

    def _cmd_set(self, args: List[str]) -> None:
        if not self._require_table():
            return
        if self.state.mode not in (EditMode.ADDING, EditMode.EDITING):
            self.console.print("[red]Turn on add or edit mode before changing cells[/red]")
            return
        if len(args) < 2 or not args[0].isdigit():
            self.console.print("[red]Usage: /set <row> <column> <value>[/red]")
            return

        row = int(args[0]) - 1
        if not 0 <= row < self.grid.row_count():
            self.console.print(f"[red]Row {args[0]} does not exist[/red]")
            return
        try:
            column = resolve_column(self.grid.headers(), args[1])
        except ValueError as e:
            self.console.print(f"[red]{e}[/red]")
            return

        self.grid.set_cell(row, column, ' '.join(args[2:]))
        self.state.has_unsaved_changes = True

    def _cmd_update(self, args: List[str]) -> None:
        if not self._require_table():
            return
        if not self.state.has_unsaved_changes and self.state.mode == EditMode.IDLE:
            self.console.print("No changes to save.")
            return

        self.session.commit_from_grid(self.grid)
        self.session.save()

        self.state.mode = EditMode.IDLE
        self._load_grid(self.session.discard_and_reload())
        self.console.print(f"[green]✓[/green] Changes saved to [cyan]{self.session.current_file_path}[/cyan]")

    def _cmd_cancel(self, args: List[str]) -> None:
        if not self._require_table():
            return
        if not self.state.has_unsaved_changes and self.state.mode == EditMode.IDLE:
            self.console.print("No changes to discard.")
            return

        if self._confirmed("Are you sure you want to discard all changes?"):
            self.state.mode = EditMode.IDLE
            self._load_grid(self.session.discard_and_reload())
            self.console.print("All changes have been discarded.")

    def _cmd_status(self, args: List[str]) -> None:
        status_parts = [
            f"**File:** {self.session.current_file_path or 'none'}",
            f"**Tables:** {len(self.session.table_names)}",
            f"**Current Table:** {self.session.current_table_name or 'none'}",
            f"**Mode:** {self.state.mode.value}",
            f"**Rows In Grid:** {self.grid.row_count()}",
            f"**Unsaved Grid Changes:** {'yes' if self.state.has_unsaved_changes else 'no'}",
            f"**Document Modified:** {'yes' if self.session.is_modified else 'no'}",
        ]
        self.console.print(Panel(Markdown("\n\n".join(status_parts)), title="Status", border_style="blue"))

    def _cmd_quit(self, args: List[str]) -> None:
        self.is_running = False

    # Helpers

    def _open(self, path: Path) -> bool:
        if self.state.has_unsaved_changes and not self._confirmed(
            "Opening another file discards unsaved grid changes. Continue?"
        ):
            return False

        try:
            names = self.session.open(path)
        except TableEditorError as e:
            self.console.print(f"[red]Failed to load XML file: {e}[/red]")
            return False

        self.state = ShellState()
        self.grid = MemoryGrid()
        self.console.print(f"[green]✓[/green] Loaded [cyan]{path}[/cyan] ({len(names)} tables)")

        if not names:
            self.console.print("[yellow]No tables found in the XML file.[/yellow]")
            return True

        self._select(names[0])
        return True

    def _select(self, name: str) -> None:
        if self.state.has_unsaved_changes and not self._confirmed(
            "Switching tables discards unsaved grid changes. Continue?"
        ):
            return

        snapshot = self.session.select_table(name)
        self.state.mode = EditMode.IDLE
        self._load_grid(snapshot)
        self.console.print(
            f"Selected [cyan]{name}[/cyan]: {snapshot.row_count} rows, {snapshot.column_count} columns"
        )

    def _load_grid(self, snapshot: TableSnapshot) -> None:
        self.session.populate_grid(self.grid, snapshot)
        self.state.has_unsaved_changes = False

    def _require_table(self) -> bool:
        if self.session.current_table_name is None:
            self.console.print("[red]No table is selected. Use /open and /select first.[/red]")
            return False
        return True

    def _confirmed(self, question: str) -> bool:
        if not self.config.confirm_destructive:
            return True
        return self._confirm(question)

    def _prompt_text(self) -> str:
        table = self.session.current_table_name or "no table"
        marker = " ●" if self.state.has_unsaved_changes else ""
        return f"[bold cyan]{table}[/bold cyan] [dim]({self.state.mode.value}{marker})[/dim]"

    def _show_welcome(self) -> None:
        self.console.print(Panel(
            "Edit tables stored in XML files. Type [cyan]/help[/cyan] for commands.",
            title="XML Table Editor",
            border_style="blue",
        ))

    def _show_help(self, args: Optional[List[str]] = None) -> None:
        help_text = """
## Available Commands

**File and Tables:**
• `/open <filename>` - Load an XML file (selects its first table)
• `/tables` - List tables in the file
• `/select <name>` - Switch to another table
• `/show` - Show the current grid

**Editing (changes stay in the grid until /update):**
• `/add` - Toggle add mode; turning it on appends an empty row
• `/delete` - Toggle delete mode
• `/pick <row>` - Delete a row while in delete mode
• `/edit` - Toggle edit mode
• `/set <row> <column> <value>` - Change a cell in add or edit mode

**Saving:**
• `/update` - Write the grid into the table and save the file
• `/cancel` - Discard all grid changes
• `/status` - Show session status
• `/quit` - Exit
        """
        self.console.print(Panel(Markdown(help_text.strip()), title="Help", border_style="green"))
