"""Tests for the byte-level XML bridge."""

from xml.etree import ElementTree as ET

import pytest

from xml_table_editor.converters import XMLBridge
from xml_table_editor.core import DocumentFormatError, DocumentParseError


class TestParseBytes:
    """Tests for XMLBridge.parse_bytes."""

    def test_keeps_comments_and_processing_instructions(self):
        """Test comments and PIs inside the root survive parsing."""
        root = XMLBridge().parse_bytes(b"<r><!-- hi --><?app go?><table name='T'/></r>")
        assert len(root) == 3
        assert root[0].tag is ET.Comment
        assert root[1].tag is ET.ProcessingInstruction

    def test_wraps_parse_errors(self):
        """Test expat errors become DocumentParseError with a position."""
        with pytest.raises(DocumentParseError) as excinfo:
            XMLBridge().parse_bytes(b"<r>\n<a>\n</b>\n</r>")

        assert excinfo.value.line == 3
        assert isinstance(excinfo.value.__cause__, ET.ParseError)

    def test_honours_declared_encoding(self):
        """Test non-UTF-8 input is decoded per its declaration."""
        data = '<?xml version="1.0" encoding="ISO-8859-1"?><r><cell>Café</cell></r>'.encode("iso-8859-1")
        root = XMLBridge().parse_bytes(data)
        assert root[0].text == "Café"


class TestDeclarationDetection:
    """Tests for XMLBridge.has_declaration."""

    @pytest.mark.parametrize("data,expected", [
        (b'<?xml version="1.0"?><r/>', True),
        (b'\xef\xbb\xbf<?xml version="1.0"?><r/>', True),
        (b"<r/>", False),
    ])
    def test_has_declaration(self, data, expected):
        assert XMLBridge.has_declaration(data) is expected


class TestToBytes:
    """Tests for XMLBridge.to_bytes."""

    def test_indent_width(self):
        """Test the configured width is used per depth level."""
        root = ET.fromstring("<r><a><b>x</b></a></r>")
        assert XMLBridge(indent=3).to_bytes(root) == b"<r>\n   <a>\n      <b>x</b>\n   </a>\n</r>\n"

    def test_indent_override(self):
        """Test a per-call indent overrides the bridge default."""
        root = ET.fromstring("<r><a/></r>")
        assert XMLBridge(indent=4).to_bytes(root, indent=1) == b"<r>\n <a />\n</r>\n"

    def test_declaration_uses_encoding(self):
        """Test the declaration names the output encoding."""
        root = ET.fromstring("<r><c>Café</c></r>")
        data = XMLBridge(encoding="iso-8859-1").to_bytes(root, xml_declaration=True)

        assert data.startswith(b'<?xml version="1.0" encoding="iso-8859-1"?>\n')
        assert "Café".encode("iso-8859-1") in data

    def test_unencodable_characters_become_references(self):
        """Test characters outside the encoding are written as character references."""
        root = ET.fromstring("<r><c>€</c></r>")
        data = XMLBridge(encoding="ascii").to_bytes(root)

        assert b"&#8364;" in data
        assert ET.fromstring(data)[0].text == "€"

    def test_does_not_touch_source_tree(self):
        """Test indentation is applied to a copy."""
        root = ET.fromstring("<r><a><b>x</b></a></r>")
        XMLBridge().to_bytes(root)
        assert root.text is None
        assert root[0].tail is None


class TestEncodingHandling:
    """Tests for declared and configured encodings."""

    def test_unknown_declared_encoding_is_format_error(self):
        """Test an undecodable declaration is reported as a format error."""
        data = b'<?xml version="1.0" encoding="bogus-enc"?><r><table name="T"/></r>'

        with pytest.raises(DocumentFormatError) as excinfo:
            XMLBridge().parse_bytes(data)
        assert "bogus-enc" in str(excinfo.value)

    def test_non_utf8_output_always_declares_encoding(self):
        """Test output a parser cannot guess gets a declaration even when not asked for."""
        root = ET.fromstring("<r><c>Café</c></r>")
        data = XMLBridge(encoding="iso-8859-1").to_bytes(root, xml_declaration=False)

        assert data.startswith(b'<?xml version="1.0" encoding="iso-8859-1"?>\n')
        assert XMLBridge().parse_bytes(data)[0].text == "Café"

    def test_utf8_output_needs_no_declaration(self):
        root = ET.fromstring("<r/>")
        assert XMLBridge(encoding="UTF-8").to_bytes(root) == b"<r />\n"

    def test_unknown_output_encoding(self):
        with pytest.raises(DocumentFormatError):
            XMLBridge(encoding="no-such-codec").to_bytes(ET.fromstring("<r/>"))


class TestContentPreservation:
    """Tests for text that indentation and escaping must not change."""

    def test_carriage_return_written_as_reference(self):
        """Test a carriage return in text survives a write and re-read."""
        root = XMLBridge().parse_bytes(b"<r><c>a&#13;b</c></r>")
        data = XMLBridge().to_bytes(root)

        assert b"a&#13;b" in data
        assert XMLBridge().parse_bytes(data)[0].text == "a\rb"

    def test_carriage_return_in_comment_left_alone(self):
        root = ET.fromstring("<r><c>x</c></r>")
        root.insert(0, ET.Comment(" note\r "))

        data = XMLBridge().to_bytes(root)

        assert b"<!-- note\r -->" in data

    def test_verbatim_tags_are_not_reindented(self):
        """Test mixed content inside a verbatim element keeps its exact text."""
        root = ET.fromstring("<r><row><c>x<b>y</b></c></row></r>")
        data = XMLBridge(indent=2).to_bytes(root, verbatim_tags=("c",))

        assert data == b"<r>\n  <row>\n    <c>x<b>y</b></c>\n  </row>\n</r>\n"
