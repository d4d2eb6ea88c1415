"""
Core document handling: the tabular XML model, grid capability and table session.
"""

from .document_model import TableDocument, TableHandle, TABLE_TAG, ROW_TAG, CELL_TAG, NAME_ATTRIBUTE
from .errors import (
    TableEditorError,
    DocumentIOError,
    DocumentFormatError,
    DocumentParseError,
    TableNotFoundError,
    RowIndexError,
    SessionStateError,
    NotLoadedError,
    CommitError,
)
from .grid import TableGrid, MemoryGrid, fill_grid, read_grid
from .table_session import TableSession, TableSnapshot, SessionState

__all__ = [
    "TableDocument",
    "TableHandle",
    "TABLE_TAG",
    "ROW_TAG",
    "CELL_TAG",
    "NAME_ATTRIBUTE",
    "TableEditorError",
    "DocumentIOError",
    "DocumentFormatError",
    "DocumentParseError",
    "TableNotFoundError",
    "RowIndexError",
    "SessionStateError",
    "NotLoadedError",
    "CommitError",
    "TableGrid",
    "MemoryGrid",
    "fill_grid",
    "read_grid",
    "TableSession",
    "TableSnapshot",
    "SessionState",
]
