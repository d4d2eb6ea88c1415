"""
Terminal front end: Typer commands and the interactive shell.
"""

from .shell import EditMode, TableShell

__all__ = ["EditMode", "TableShell"]
