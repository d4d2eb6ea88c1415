"""
Core document model for XML files holding named tables.

A document is an element tree whose root contains ``<table name=...>``
elements made of ``<row>`` children, each holding ``<cell name=...>``
children. Tables are addressed through opaque handles rather than live
element references.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from xml.etree import ElementTree as ET

from .errors import DocumentFormatError, RowIndexError, TableNotFoundError

TABLE_TAG = "table"
ROW_TAG = "row"
CELL_TAG = "cell"
NAME_ATTRIBUTE = "name"

PLACEHOLDER_HEADER = "Column_{position}"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableHandle:
    """Opaque reference to a table: its position among all table elements."""

    index: int
    name: str

    def __str__(self) -> str:
        return f"table[{self.index}]:{self.name}"


class TableDocument:
    """
    In-memory tabular XML document.

    Created empty, populated wholesale by ``parse``, mutated in place and
    serialized wholesale. Not safe for concurrent use.
    """

    def __init__(self, root: Optional[ET.Element] = None, has_declaration: bool = False):
        self.root = root
        self.has_declaration = has_declaration

        # Track modification state
        self.is_modified = False
        self.last_modified = datetime.now()

    @classmethod
    def parse(cls, data: bytes) -> TableDocument:
        """Parse raw XML bytes into a TableDocument."""
        from ..converters.xml_bridge import XMLBridge

        bridge = XMLBridge()
        root = bridge.parse_bytes(data)
        return cls(root=root, has_declaration=bridge.has_declaration(data))

    def serialize(
        self,
        indent: int = 4,
        encoding: str = "utf-8",
        xml_declaration: Optional[bool] = None,
    ) -> bytes:
        """
        Render the whole document as indented XML bytes.

        ``xml_declaration=None`` writes a declaration only when the parsed
        source had one, or when the encoding is not UTF-8 or ASCII. Cell
        content is written exactly as extracted; only the layout between
        tables, rows and cells is re-indented.
        """
        from ..converters.xml_bridge import XMLBridge

        if self.root is None:
            raise DocumentFormatError("Cannot serialize a document without a root element")

        if xml_declaration is None:
            xml_declaration = self.has_declaration

        bridge = XMLBridge(indent=indent, encoding=encoding)
        return bridge.to_bytes(self.root, xml_declaration=xml_declaration, verbatim_tags=(CELL_TAG,))

    def validate(self, strict_table_names: bool = False) -> List[str]:
        """
        Run the minimal structural checks and return any warnings.

        Only a missing root element is fatal. The root tag is accepted as-is
        and a document without tables is a legitimate, editable state.
        """
        if self.root is None:
            raise DocumentFormatError("No root element found")

        logger.debug(f"Root element: <{self.root.tag}>")
        warnings = []

        tables = self._table_elements()
        if not tables:
            warnings.append("No table elements found")

        duplicates = sorted(
            name for name, count in Counter(self.list_table_names()).items() if count > 1
        )
        if duplicates:
            if strict_table_names:
                raise DocumentFormatError(f"Duplicate table names: {', '.join(duplicates)}")
            warnings.append(
                f"Duplicate table names ({', '.join(duplicates)}); only the first of each is reachable"
            )

        return warnings

    def list_table_names(self) -> List[str]:
        """Names of all tables in document order, skipping unnamed ones."""
        names = []
        for table in self._table_elements():
            name = table.get(NAME_ATTRIBUTE, "")
            if name:
                names.append(name)
        return names

    def find_table(self, name: str) -> Optional[TableHandle]:
        """Find the first table whose name attribute equals ``name``."""
        if not name:
            return None
        for index, table in enumerate(self._table_elements()):
            if table.get(NAME_ATTRIBUTE) == name:
                return TableHandle(index=index, name=name)
        return None

    def extract_headers(self, handle: TableHandle) -> List[str]:
        """Column names from the first row's cells, with placeholders for unnamed cells."""
        rows = self._row_elements(self._resolve(handle))
        if not rows:
            return []

        headers = []
        for position, cell in enumerate(rows[0].findall(CELL_TAG), start=1):
            headers.append(cell.get(NAME_ATTRIBUTE) or PLACEHOLDER_HEADER.format(position=position))
        return headers

    def extract_rows(self, handle: TableHandle) -> List[List[str]]:
        """Cell text of every row, in document order and without column matching."""
        return [
            [_cell_text(cell) for cell in row.findall(CELL_TAG)]
            for row in self._row_elements(self._resolve(handle))
        ]

    def row_count(self, handle: TableHandle) -> int:
        return len(self._row_elements(self._resolve(handle)))

    def replace_rows(
        self,
        handle: TableHandle,
        new_rows: Sequence[Sequence[str]],
        headers: Sequence[str],
    ) -> None:
        """
        Replace every row of a table.

        Each new row gets one cell per header, named after it. Values past
        the header count are dropped and missing values become empty.
        """
        table = self._resolve(handle)
        built = [self._build_row(values, headers) for values in new_rows]

        for row in self._row_elements(table):
            table.remove(row)
        table.extend(built)

        self.mark_modified()
        logger.debug(f"Replaced rows of {handle} with {len(built)} rows")

    def add_row(
        self,
        handle: TableHandle,
        values: Sequence[str],
        headers: Optional[Sequence[str]] = None,
    ) -> int:
        """Append a row built against ``headers`` (default: current headers); return its index."""
        table = self._resolve(handle)
        if headers is None:
            headers = self.extract_headers(handle)

        table.append(self._build_row(values, headers))
        self.mark_modified()

        index = len(self._row_elements(table)) - 1
        logger.debug(f"Added row {index} to {handle}")
        return index

    def delete_row(self, handle: TableHandle, index: int) -> None:
        """Remove the row at a 0-based position."""
        table = self._resolve(handle)
        rows = self._row_elements(table)
        if index < 0 or index >= len(rows):
            raise RowIndexError(index, len(rows))

        table.remove(rows[index])
        self.mark_modified()
        logger.debug(f"Deleted row {index} from {handle}")

    def mark_modified(self) -> None:
        """Mark the document as modified."""
        self.is_modified = True
        self.last_modified = datetime.now()

    def get_stats(self) -> Dict[str, Any]:
        """Get document statistics."""
        tables = self._table_elements()

        # Shadowed duplicates are skipped, matching name lookup
        row_counts: Dict[str, int] = {}
        for table in tables:
            name = table.get(NAME_ATTRIBUTE, "")
            if name and name not in row_counts:
                row_counts[name] = len(self._row_elements(table))

        return {
            "root_tag": self.root.tag if self.root is not None else None,
            "table_count": len(tables),
            "row_counts": row_counts,
            "is_modified": self.is_modified,
            "last_modified": self.last_modified.isoformat(),
        }

    def _table_elements(self) -> List[ET.Element]:
        if self.root is None:
            return []
        return [element for element in self.root.iter(TABLE_TAG) if element is not self.root]

    @staticmethod
    def _row_elements(table: ET.Element) -> List[ET.Element]:
        return table.findall(ROW_TAG)

    def _resolve(self, handle: TableHandle) -> ET.Element:
        tables = self._table_elements()
        if 0 <= handle.index < len(tables):
            table = tables[handle.index]
            if table.get(NAME_ATTRIBUTE) == handle.name:
                return table
        raise TableNotFoundError(handle.name)

    @staticmethod
    def _build_row(values: Sequence[str], headers: Sequence[str]) -> ET.Element:
        row = ET.Element(ROW_TAG)
        for position, header in enumerate(headers):
            cell = ET.SubElement(row, CELL_TAG, {NAME_ATTRIBUTE: header})
            value = values[position] if position < len(values) else None
            cell.text = "" if value is None else str(value)
        return row


def _cell_text(cell: ET.Element) -> str:
    return "".join(cell.itertext())
