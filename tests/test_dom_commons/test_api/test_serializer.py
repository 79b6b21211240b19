"""Tests for XML serialization."""

import io

import pytest
from lxml import etree

from dom_commons.api.parser import parse
from dom_commons.api.serializer import as_xml, create_xml_declaration, dump, write
from dom_commons.shared.config import ConfigValidationError, OutputOptions
from dom_commons.shared.errors import SerializationError
from dom_commons.shared.locks import get_lock_registry

DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


class _FailingStream:
    """Binary sink whose writes always fail."""

    def write(self, data):
        raise OSError("no space left")


class TestDeclaration:
    """Test suite for create_xml_declaration."""

    def test_default(self):
        """Test the default declaration."""
        assert create_xml_declaration() == DECLARATION

    def test_standalone(self):
        """Test the standalone pseudo-attribute."""
        assert (
            create_xml_declaration(OutputOptions(standalone=True))
            == '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        )
        assert 'standalone="no"' in create_xml_declaration(OutputOptions(standalone=False))

    def test_omitted(self):
        """Test that an omitted declaration is empty."""
        assert create_xml_declaration(OutputOptions.compact()) == ""

    def test_encoding_and_version(self):
        """Test custom encoding and version."""
        options = OutputOptions(encoding="ISO-8859-1", version="1.1")

        assert create_xml_declaration(options) == '<?xml version="1.1" encoding="ISO-8859-1"?>'


class TestAsXml:
    """Test suite for as_xml."""

    def test_default_output(self):
        """Test declaration and markup without separator."""
        document = parse("<root><element>Value</element></root>")

        assert as_xml(document) == DECLARATION + "<root><element>Value</element></root>"
        assert as_xml(document.getroot()) == DECLARATION + "<root><element>Value</element></root>"

    def test_indented_output(self):
        """Test four-space indentation without trailing newline."""
        document = parse("<root><element>Value</element></root>")

        expected = DECLARATION + "\n<root>\n    <element>Value</element>\n</root>"
        assert as_xml(document, indent=True) == expected
        assert as_xml(document.getroot(), indent=True) == expected

    def test_indent_does_not_mutate_tree(self):
        """Test that indentation is applied to a copy."""
        root = etree.fromstring("<root><a><b/></a></root>")
        before = etree.tostring(root)

        as_xml(root, indent=True)

        assert etree.tostring(root) == before

    def test_tail_not_serialized(self):
        """Test that trailing text of an element is left out."""
        root = etree.fromstring("<r><a>1</a>tail</r>")

        assert as_xml(root[0]) == DECLARATION + "<a>1</a>"

    def test_properties(self):
        """Test transformer-style properties."""
        root = etree.fromstring("<r/>")

        assert as_xml(root, properties={"omit-xml-declaration": "yes"}) == "<r/>"
        assert as_xml(root, properties={"standalone": "yes"}).startswith(
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        )
        assert as_xml(root, indent=True, properties={"indent": "no"}) == DECLARATION + "<r/>"

    def test_unknown_property(self):
        """Test that unknown properties are refused."""
        with pytest.raises(ConfigValidationError):
            as_xml(etree.fromstring("<r/>"), properties={"method": "html"})

    def test_text_node(self):
        """Test serialization of a text value."""
        text = etree.fromstring("<r>a &amp; b</r>").xpath("text()")[0]

        assert as_xml(text, properties={"omit-xml-declaration": "yes"}) == "a &amp; b"

    def test_empty_document(self):
        """Test that an empty document yields the declaration only."""
        assert as_xml(etree.ElementTree()) == DECLARATION

    def test_round_trip(self):
        """Test that parsing the output yields an equivalent tree."""
        source = '<r xmlns:p="urn:p"><p:a x="1">text<!--c--></p:a><b/></r>'
        document = parse(source)

        reparsed = parse(as_xml(document))

        assert etree.tostring(reparsed) == etree.tostring(document)
        assert as_xml(reparsed) == as_xml(document)

    @pytest.mark.parametrize("text", ["plain", "été à Zürich", "日本語"])
    @pytest.mark.parametrize("encoding", ["UTF-8", "ISO-8859-1", "UTF-16"])
    def test_round_trip_with_encoding(self, text, encoding):
        """Test that output in any declared encoding parses back unchanged."""
        document = parse(f'<r a="{text}"><b>{text}</b></r>')

        output = as_xml(document, properties={"encoding": encoding})
        reparsed = parse(output)

        assert f'encoding="{encoding}"' in output
        assert reparsed.getroot().get("a") == text
        assert reparsed.getroot()[0].text == text
        assert etree.tostring(reparsed) == etree.tostring(document)


class TestWrite:
    """Test suite for write and dump."""

    def test_write_text_stream(self):
        """Test writing to a text stream."""
        stream = io.StringIO()

        write(etree.fromstring("<r/>"), stream)

        assert stream.getvalue() == DECLARATION + "<r/>"

    def test_write_binary_stream_encoding(self):
        """Test that bytes use the requested encoding."""
        stream = io.BytesIO()
        root = etree.fromstring("<r>é€</r>")

        write(root, stream, OutputOptions(encoding="ISO-8859-1", omit_declaration=True))

        assert stream.getvalue() == b"<r>\xe9&#8364;</r>"

    def test_binary_output_parses_back(self):
        """Test that encoded bytes round-trip through their declaration."""
        stream = io.BytesIO()

        write(etree.fromstring("<r>é€</r>"), stream, OutputOptions(encoding="ISO-8859-1"))

        assert parse(stream.getvalue()).getroot().text == "é€"

    def test_write_failure(self):
        """Test that stream errors become SerializationError."""
        with pytest.raises(SerializationError) as exc_info:
            write(etree.fromstring("<r/>"), _FailingStream())

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_write_non_node(self):
        """Test that objects which are not nodes are refused."""
        with pytest.raises(SerializationError):
            write(object(), io.StringIO())

    def test_lock_released(self):
        """Test that the advisory lock is dropped after writing."""
        root = etree.fromstring("<r/>")

        write(root, io.StringIO())

        assert get_lock_registry().active_count() == 0

    def test_dump(self, capsys):
        """Test printing indented output."""
        dump(etree.fromstring("<r><a/></r>"))

        assert capsys.readouterr().out == DECLARATION + "\n<r>\n    <a/>\n</r>\n"
