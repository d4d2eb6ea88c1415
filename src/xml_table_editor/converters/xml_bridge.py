"""
XML bridge between raw bytes and the in-memory element tree.

Provides parsing with parser-reported error positions and deterministic,
indented serialization used by the table document model.
"""

from __future__ import annotations

import codecs
import copy
import logging
import re
from typing import Iterable, Optional
from xml.etree import ElementTree as ET

from ..core.errors import DocumentFormatError, DocumentParseError

_UTF8_BOM = b"\xef\xbb\xbf"

# Encodings a parser assumes when the declaration is missing
_SELF_DESCRIBING_ENCODINGS = ("utf-8", "ascii")

# Comments and PIs are written as-is; any other raw carriage return is character data
_RAW_CARRIAGE_RETURN = re.compile(r"(<!--.*?-->|<\?.*?\?>)|\r", re.DOTALL)

# Marks a verbatim element whose own tail belongs to the indented layout
_OWN_TAIL = object()


class XMLBridge:
    """
    Bridge for converting XML bytes to element trees and back.

    Parsing keeps comments and processing instructions inside the root so
    that saving a document disturbs as little of the original as possible.
    """

    def __init__(self, indent: int = 4, encoding: str = "utf-8"):
        self.indent = indent
        self.encoding = encoding
        self.logger = logging.getLogger(__name__)

    def parse_bytes(self, data: bytes) -> ET.Element:
        """
        Parse raw XML content into a root element.

        Raises:
            DocumentParseError: with the line and column reported by expat.
            DocumentFormatError: the declared encoding cannot be decoded.
        """
        builder = ET.TreeBuilder(insert_comments=True, insert_pis=True)
        parser = ET.XMLParser(target=builder)
        try:
            parser.feed(data)
            root = parser.close()
        except ET.ParseError as e:
            line, column = getattr(e, "position", (0, 0))
            raise DocumentParseError(line, column, str(e)) from e
        except (LookupError, ValueError) as e:
            raise DocumentFormatError(f"Cannot decode XML content: {e}") from e

        self.logger.debug(f"Parsed {len(data)} bytes, root element <{root.tag}>")
        return root

    @staticmethod
    def has_declaration(data: bytes) -> bool:
        """Check whether the content starts with an XML declaration."""
        if data.startswith(_UTF8_BOM):
            data = data[len(_UTF8_BOM):]
        return data.startswith(b"<?xml")

    def to_bytes(
        self,
        root: ET.Element,
        xml_declaration: bool = False,
        indent: Optional[int] = None,
        verbatim_tags: Iterable[str] = (),
    ) -> bytes:
        """
        Render an element tree as indented XML bytes.

        The live tree is left untouched; indentation is applied to a copy.
        Content inside elements named in ``verbatim_tags`` is not
        re-indented. Encodings other than UTF-8 and ASCII always get a
        declaration so the output can be read back.
        """
        try:
            codec_name = codecs.lookup(self.encoding).name
        except LookupError as e:
            raise DocumentFormatError(f"Unknown output encoding {self.encoding!r}") from e

        if not xml_declaration and codec_name not in _SELF_DESCRIBING_ENCODINGS:
            self.logger.debug(f"Writing a declaration for {self.encoding} output")
            xml_declaration = True

        width = self.indent if indent is None else indent
        rendered = copy.deepcopy(root)

        kept = self._capture_content(rendered, set(verbatim_tags))
        ET.indent(rendered, space=" " * width)
        for element, text, tail in kept:
            element.text = text
            if tail is not _OWN_TAIL:
                element.tail = tail

        text = ET.tostring(rendered, encoding="unicode")
        text = _RAW_CARRIAGE_RETURN.sub(lambda match: match.group(1) or "&#13;", text)
        if xml_declaration:
            text = f'<?xml version="1.0" encoding="{self.encoding}"?>\n{text}'

        return (text + "\n").encode(self.encoding, errors="xmlcharrefreplace")

    @staticmethod
    def _capture_content(root: ET.Element, tags: set) -> list:
        """Record text and tails inside the given elements; their own tails stay structural."""
        kept = []
        if not tags:
            return kept
        for element in root.iter():
            if element.tag not in tags:
                continue
            kept.append((element, element.text, _OWN_TAIL))
            for inner in element.iter():
                if inner is not element:
                    kept.append((inner, inner.text, inner.tail))
        return kept
