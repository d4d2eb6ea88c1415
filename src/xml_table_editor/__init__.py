"""
Edit named tables stored in XML files.
"""

from .core import TableDocument, TableSession, TableSnapshot, MemoryGrid, TableEditorError

__version__ = "0.1.0"

__all__ = ["TableDocument", "TableSession", "TableSnapshot", "MemoryGrid", "TableEditorError"]
