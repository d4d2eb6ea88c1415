"""
Error types raised by the document model and table session.

Every failure carries enough detail for the caller to show or log it;
the core itself never decides how an error is presented.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class TableEditorError(Exception):
    """Base class for all table editor failures."""


class DocumentIOError(TableEditorError):
    """The XML file could not be read or written."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class DocumentFormatError(TableEditorError):
    """The document is malformed or fails the minimal structural checks."""


class DocumentParseError(DocumentFormatError):
    """XML parsing failed; position is reported as the parser gave it."""

    def __init__(self, line: int, column: int, message: str):
        super().__init__(f"XML parsing failed at line {line}, column {column}: {message}")
        self.line = line
        self.column = column
        self.message = message


class TableNotFoundError(TableEditorError, LookupError):
    """No table with the requested name exists in the document."""

    def __init__(self, name: str):
        super().__init__(f"Table {name!r} not found")
        self.name = name


class RowIndexError(TableEditorError, IndexError):
    """A row index is outside the table's current row range."""

    def __init__(self, index: int, row_count: int):
        super().__init__(f"Row index {index} is out of range (table has {row_count} rows)")
        self.index = index
        self.row_count = row_count


class SessionStateError(TableEditorError):
    """An operation was attempted in a session state that does not allow it."""


class NotLoadedError(SessionStateError):
    """No document has been loaded into the session."""


class CommitError(SessionStateError):
    """A commit was attempted with no table selected."""
