"""
Table session coordinating a TableDocument with an editable grid.

The session owns no tree data of its own. It tracks which file is loaded
and which table is selected, hands table snapshots to the caller's grid and
writes committed grid contents back into the document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel

from .document_model import TableDocument, TableHandle
from .errors import (
    CommitError,
    DocumentIOError,
    NotLoadedError,
    TableNotFoundError,
)
from .grid import TableGrid, fill_grid, read_grid
from ..config import EditorConfig


class TableSnapshot(BaseModel):
    """Plain copy of one table's headers and rows."""

    name: str
    headers: List[str] = []
    rows: List[List[str]] = []

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def padded_rows(self) -> List[List[str]]:
        """Rows matched positionally against the headers."""
        width = len(self.headers)
        return [list(row[:width]) + [""] * (width - len(row[:width])) for row in self.rows]


@dataclass
class SessionState:
    """Current state of the table session."""

    loaded: bool = False
    current_file_path: Optional[Path] = None
    current_table_name: Optional[str] = None
    available_table_names: List[str] = field(default_factory=list)


class TableSession:
    """
    Stateful facade between a TableDocument and a caller-supplied grid.

    Lifecycle: unloaded, then loaded by ``open``, then a table is selected
    by ``select_table``. There is no close operation. Failed operations
    leave the session in its last valid state.
    """

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or EditorConfig()
        self.logger = logging.getLogger(__name__)

        self.state = SessionState()
        self.document = TableDocument()
        self.last_warnings: List[str] = []
        self._snapshot: Optional[TableSnapshot] = None

    @property
    def is_loaded(self) -> bool:
        return self.state.loaded

    @property
    def table_names(self) -> List[str]:
        return list(self.state.available_table_names)

    @property
    def current_file_path(self) -> Optional[Path]:
        return self.state.current_file_path

    @property
    def current_table_name(self) -> Optional[str]:
        return self.state.current_table_name

    @property
    def is_modified(self) -> bool:
        return self.state.loaded and self.document.is_modified

    def open(self, path: Union[str, Path]) -> List[str]:
        """
        Load an XML file and return the names of its tables.

        Raises:
            DocumentIOError: the file cannot be read.
            DocumentFormatError: the content is malformed or has no root.
        """
        file_path = Path(path)
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise DocumentIOError(f"Cannot read {file_path}: {e}", file_path) from e

        document = TableDocument.parse(data)
        warnings = document.validate(strict_table_names=self.config.strict_table_names)
        for warning in warnings:
            self.logger.warning(f"{file_path}: {warning}")

        self.document = document
        self.last_warnings = warnings
        self._snapshot = None
        self.state = SessionState(
            loaded=True,
            current_file_path=file_path,
            available_table_names=document.list_table_names(),
        )

        self.logger.info(f"Loaded {file_path} with {len(self.state.available_table_names)} tables")
        return self.table_names

    def select_table(self, name: str) -> TableSnapshot:
        """Make ``name`` the current table and return its contents."""
        handle = self._find(name)
        snapshot = TableSnapshot(
            name=name,
            headers=self.document.extract_headers(handle),
            rows=self.document.extract_rows(handle),
        )

        self.state.current_table_name = name
        self._snapshot = snapshot
        self.logger.debug(f"Selected table {name} with {snapshot.row_count} rows")
        return snapshot

    def commit_grid(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """
        Rewrite the current table from grid contents.

        Cells are named after the headers captured when the table was
        selected; column renames made in the grid are not applied.
        """
        handle = self._current_handle()
        original_headers = self._snapshot.headers

        if list(headers) != original_headers:
            self.logger.warning(
                f"Grid headers {list(headers)} differ from table headers {original_headers}; "
                "keeping the table headers"
            )

        self.document.replace_rows(handle, rows, original_headers)
        self._snapshot = TableSnapshot(
            name=handle.name,
            headers=original_headers,
            rows=self.document.extract_rows(handle),
        )
        self.logger.info(f"Committed {len(rows)} rows to table {handle.name}")

    def save(self) -> None:
        """Serialize the whole document over the current file."""
        if not self.state.loaded:
            raise NotLoadedError("No XML file is loaded")

        serialization = self.config.serialization
        data = self.document.serialize(
            indent=serialization.indent,
            encoding=serialization.encoding,
            xml_declaration=serialization.xml_declaration,
        )

        path = self.state.current_file_path
        try:
            path.write_bytes(data)
        except OSError as e:
            raise DocumentIOError(f"Cannot write {path}: {e}", path) from e

        self.document.is_modified = False
        self.logger.info(f"Saved {path}")

    def discard_and_reload(self) -> TableSnapshot:
        """Drop grid-side edits by re-reading the current table from the document."""
        if self.state.current_table_name is None:
            raise CommitError("No table is selected")
        return self.select_table(self.state.current_table_name)

    def add_row(self, values: Sequence[str]) -> int:
        """Append a row to the current table directly in the document."""
        handle = self._current_handle()
        index = self.document.add_row(handle, values, headers=self._snapshot.headers)
        self._snapshot.rows = self.document.extract_rows(handle)
        return index

    def delete_row(self, index: int) -> None:
        """Remove a row of the current table directly in the document."""
        handle = self._current_handle()
        self.document.delete_row(handle, index)
        self._snapshot.rows = self.document.extract_rows(handle)

    def populate_grid(self, grid: TableGrid, snapshot: Optional[TableSnapshot] = None) -> TableSnapshot:
        """Fill a grid with a snapshot (the current table's by default)."""
        if snapshot is None:
            if self._snapshot is None:
                raise CommitError("No table is selected")
            snapshot = self._snapshot
        fill_grid(grid, snapshot)
        return snapshot

    def commit_from_grid(self, grid: TableGrid) -> None:
        """Collect a grid's contents and commit them to the current table."""
        self.commit_grid(grid.headers(), read_grid(grid))

    def _find(self, name: str) -> TableHandle:
        if not self.state.loaded:
            raise NotLoadedError("No XML file is loaded")
        handle = self.document.find_table(name)
        if handle is None:
            raise TableNotFoundError(name)
        return handle

    def _current_handle(self) -> TableHandle:
        if self.state.current_table_name is None or self._snapshot is None:
            raise CommitError("No table is selected")
        return self._find(self.state.current_table_name)
