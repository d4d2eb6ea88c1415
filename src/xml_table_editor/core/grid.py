"""
Grid capability used to display and edit a single table.

The session talks to any object implementing ``TableGrid``; no UI toolkit
is assumed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from .table_session import TableSnapshot


class TableGrid(ABC):
    """Abstract editable grid of string cells with a header row."""

    @abstractmethod
    def set_columns(self, headers: Sequence[str]) -> None:
        """Replace the column headers; existing cells are cleared."""

    @abstractmethod
    def headers(self) -> List[str]:
        """Current column headers."""

    @abstractmethod
    def set_row_count(self, count: int) -> None:
        """Grow or shrink the grid to ``count`` rows."""

    @abstractmethod
    def get_cell(self, row: int, column: int) -> str:
        """Text of a cell; empty string when never set."""

    @abstractmethod
    def set_cell(self, row: int, column: int, value: str) -> None:
        """Set the text of a cell."""

    @abstractmethod
    def row_count(self) -> int:
        ...

    @abstractmethod
    def column_count(self) -> int:
        ...


class MemoryGrid(TableGrid):
    """List-backed grid used by the terminal shell and tests."""

    def __init__(self):
        self._headers: List[str] = []
        self._cells: List[List[str]] = []

    def set_columns(self, headers: Sequence[str]) -> None:
        self._headers = list(headers)
        self._cells = [["" for _ in self._headers] for _ in self._cells]

    def headers(self) -> List[str]:
        return list(self._headers)

    def set_row_count(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"Row count cannot be negative: {count}")
        if count < len(self._cells):
            del self._cells[count:]
        while len(self._cells) < count:
            self._cells.append(["" for _ in self._headers])

    def get_cell(self, row: int, column: int) -> str:
        self._check_position(row, column)
        return self._cells[row][column]

    def set_cell(self, row: int, column: int, value: str) -> None:
        self._check_position(row, column)
        self._cells[row][column] = value

    def row_count(self) -> int:
        return len(self._cells)

    def column_count(self) -> int:
        return len(self._headers)

    def insert_row(self, index: Optional[int] = None) -> int:
        """Insert an empty row (at the end by default) and return its index."""
        if index is None:
            index = len(self._cells)
        if index < 0 or index > len(self._cells):
            raise IndexError(f"Row index {index} is out of range")
        self._cells.insert(index, ["" for _ in self._headers])
        return index

    def remove_row(self, index: int) -> None:
        if index < 0 or index >= len(self._cells):
            raise IndexError(f"Row index {index} is out of range")
        del self._cells[index]

    def _check_position(self, row: int, column: int) -> None:
        if not 0 <= row < len(self._cells):
            raise IndexError(f"Row index {row} is out of range")
        if not 0 <= column < len(self._headers):
            raise IndexError(f"Column index {column} is out of range")


def fill_grid(grid: TableGrid, snapshot: TableSnapshot) -> None:
    """Lay out a table snapshot in a grid, matching cells to headers by position."""
    grid.set_columns(snapshot.headers)
    grid.set_row_count(len(snapshot.rows))
    for row_index, values in enumerate(snapshot.padded_rows()):
        for column_index, value in enumerate(values):
            grid.set_cell(row_index, column_index, value)


def read_grid(grid: TableGrid) -> List[List[str]]:
    """Collect the grid's current contents row by row."""
    return [
        [grid.get_cell(row, column) for column in range(grid.column_count())]
        for row in range(grid.row_count())
    ]
