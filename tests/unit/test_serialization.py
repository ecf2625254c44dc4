#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_serialization.py
"""Tests for pandoc JSON decoding and encoding."""

import json
import logging

import pytest

from pandocast.ast.attributes import AttributeSet
from pandocast.ast.nodes import Citation, Document, citation, element
from pandocast.ast.serialization import decode, encode, from_wire, to_wire
from pandocast.config import set_preferred_pandoc_version
from pandocast.exceptions import ArityError, CoercionError, PandocAstError, ParseError, UnknownTagError
from pandocast.options import EncodeOptions
from pandocast.version import Version


def _str(text):
    return element("Str", text)


@pytest.mark.unit
class TestDecode:
    """Test decoding pandoc JSON."""

    def test_object_form(self, pandoc_json) -> None:
        """Test decoding a document written by pandoc 1.18."""
        doc = decode(pandoc_json)
        assert doc.api_version == Version("1.17.0.4")
        assert doc.metavalue("author") == "Jane"

        header, para = doc.blocks
        assert header.level == 2
        assert header.attribute_set == AttributeSet("sec", ["x", "y"], [("k", "v")])
        assert para == element("Para", [_str("Hello"), element("Space"), element("Emph", [_str("world")])])

    def test_legacy_form(self) -> None:
        """Test decoding the legacy array form."""
        doc = decode('[{"unMeta": {}}, [{"t": "Para", "c": [{"t": "Str", "c": "x"}]}]]')
        assert doc.api_version == Version("1.16")
        assert doc.blocks == [element("Para", [_str("x")])]

    def test_bytes_input(self) -> None:
        """Test decoding bytes."""
        assert decode(b'{"blocks": [], "meta": {}, "pandoc-api-version": [1, 17]}') == Document()

    def test_link_without_attributes_is_upgraded(self) -> None:
        """Test that links from pandoc before 1.16 get an empty attribute set."""
        doc = decode('[{"unMeta": {}}, [{"t": "Plain", "c": [{"t": "Link", "c": [[{"t": "Str", "c": "a"}], ["u", "t"]]}]}]]')
        link = doc.blocks[0].content[0]
        assert link.attribute_set == AttributeSet()
        assert link.url == "u"
        assert link.content == [_str("a")]

    def test_citations(self) -> None:
        """Test that citations are decoded to Citation values."""
        wire = {
            "t": "Cite",
            "c": [
                [
                    {
                        "citationId": "doe",
                        "citationPrefix": [{"t": "Str", "c": "see"}],
                        "citationSuffix": [],
                        "citationMode": {"t": "AuthorInText", "c": []},
                        "citationNoteNum": 1,
                        "citationHash": 0,
                    }
                ],
                [{"t": "Str", "c": "@doe"}],
            ],
        }
        cite = from_wire(wire)
        assert cite.citations == [Citation("doe", [_str("see")], [], element("AuthorInText"), 1, 0)]

    def test_nullary_with_or_without_content(self) -> None:
        """Test that nullary elements decode with or without c."""
        assert from_wire({"t": "Space"}) == element("Space")
        assert from_wire({"t": "Space", "c": []}) == element("Space")

    def test_meta_bool(self) -> None:
        """Test that MetaBool decodes to a boolean."""
        assert from_wire({"t": "MetaBool", "c": True}).content is True
        assert from_wire({"t": "MetaBool", "c": "false"}).content is False

    def test_metamap(self) -> None:
        """Test that MetaMap values are decoded."""
        meta = from_wire({"t": "MetaMap", "c": {"k": {"t": "MetaString", "c": "v"}}})
        assert meta.content == {"k": element("MetaString", "v")}

    def test_malformed_json(self) -> None:
        """Test that malformed JSON raises ParseError with the position."""
        with pytest.raises(ParseError) as exc_info:
            decode('{"blocks": [}')
        assert "line 1" in exc_info.value.message
        assert "column" in exc_info.value.message
        assert ".py" not in exc_info.value.message
        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)

    @pytest.mark.parametrize("text", ["42", '"text"', "[1, 2, 3]", "null"])
    def test_not_a_document(self, text) -> None:
        """Test that JSON other than a document raises ParseError."""
        with pytest.raises(ParseError):
            decode(text)

    @pytest.mark.parametrize(
        "text,error",
        [
            (b'{"blocks": ["\xff"]}', ParseError),
            ('{"blocks": 5}', ArityError),
            ('{"blocks": [], "meta": []}', ArityError),
            ('{"blocks": [{"t": "Header", "c": [1, "bad", []]}]}', ParseError),
            ('{"blocks": [], "meta": {"m": {"t": "MetaMap", "c": [1]}}}', ArityError),
            ('{"blocks": [{"t": "Para", "c": [{"t": "Cite", "c": [[5], []]}]}]}', ParseError),
        ],
    )
    def test_malformed_document(self, text, error) -> None:
        """Test that values of the wrong type raise pandocast errors."""
        with pytest.raises(error) as exc_info:
            decode(text)
        assert isinstance(exc_info.value, PandocAstError)

    def test_invalid_utf8_keeps_cause(self) -> None:
        """Test that undecodable bytes are reported with the original error."""
        with pytest.raises(ParseError) as exc_info:
            decode(b'{"blocks": ["\xff"]}')
        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)
        assert exc_info.value.__cause__ is exc_info.value.original_error

    def test_unknown_tag(self) -> None:
        """Test that unknown tags raise UnknownTagError."""
        with pytest.raises(UnknownTagError):
            decode('{"blocks": [{"t": "Paragraph", "c": []}], "meta": {}}')

    def test_payload_arity(self) -> None:
        """Test that payloads with the wrong number of slots raise ArityError."""
        with pytest.raises(ArityError):
            from_wire({"t": "Header", "c": [1, []]})
        with pytest.raises(ArityError):
            from_wire({"t": "Para"})


@pytest.mark.unit
class TestEncode:
    """Test encoding pandoc JSON."""

    def test_sorted_keys_and_flat_document(self) -> None:
        """Test the flat object form with sorted keys."""
        doc = Document({}, [element("Para", [_str("x")])], api_version="1.17.0.4")
        assert encode(doc) == (
            '{"blocks": [{"c": [{"c": "x", "t": "Str"}], "t": "Para"}], '
            '"meta": {}, "pandoc-api-version": [1, 17, 0, 4]}'
        )

    def test_legacy_document(self) -> None:
        """Test the legacy array form below API 1.17."""
        doc = Document({"k": element("MetaString", "v")}, [], api_version="1.16")
        assert json.loads(encode(doc)) == [{"unMeta": {"k": {"t": "MetaString", "c": "v"}}}, []]

    def test_options(self) -> None:
        """Test indentation and ASCII escaping."""
        doc = Document({}, [element("Para", [_str("é")])])
        assert "\n  " in encode(doc, EncodeOptions(indent=2))
        assert "\\u00e9" in encode(doc, EncodeOptions(ensure_ascii=True))
        assert "é" in encode(doc)

    def test_numeric_coercion(self) -> None:
        """Test that numeric slots are coerced."""
        table = element("Table", [], [element("AlignDefault")], ["0.5"], [[]], [])
        header = element("Header", "2", None, [])
        ordered = element("OrderedList", ["3", element("Decimal"), element("Period")], [])
        cite = element("Cite", [citation(note_num="4", hash=2.0)], [])

        assert to_wire(table)["c"][2] == [0.5]
        assert to_wire(header)["c"][0] == 2
        assert to_wire(ordered)["c"][0] == [3, {"t": "Decimal", "c": []}, {"t": "Period", "c": []}]
        wire_citation = to_wire(cite)["c"][0][0]
        assert wire_citation["citationNoteNum"] == 4
        assert wire_citation["citationHash"] == 2

    def test_scalars_are_stringified(self) -> None:
        """Test that other scalars become strings."""
        assert to_wire(_str(5)) == {"t": "Str", "c": "5"}
        assert to_wire(_str(None)) == {"t": "Str", "c": ""}

    def test_meta_bool_is_json_boolean(self) -> None:
        """Test that MetaBool encodes as a JSON boolean."""
        assert to_wire(element("MetaBool", "yes")) == {"t": "MetaBool", "c": True}

    def test_coercion_error(self) -> None:
        """Test that non-numeric values in numeric slots raise CoercionError."""
        with pytest.raises(CoercionError) as exc_info:
            to_wire(element("Header", "first", None, []))
        assert exc_info.value.field == "Header.level"
        with pytest.raises(CoercionError):
            to_wire(element("Table", [], [], ["wide"], [], []))

    def test_attributes(self) -> None:
        """Test the wire form of attributes."""
        span = element("Span", {"id": "s", "class": "a b", "k": "v"}, [])
        assert to_wire(span) == {"t": "Span", "c": [["s", ["a", "b"], [["k", "v"]]], []]}

    def test_element_to_json(self) -> None:
        """Test encoding a single element."""
        assert _str("x").to_json() == '{"c": "x", "t": "Str"}'
        assert element("SoftBreak").to_json(pandoc_version="1.15") == '{"c": [], "t": "Space"}'


@pytest.mark.unit
class TestDowngrades:
    """Test write-time downgrades for older pandoc releases."""

    def test_softbreak(self) -> None:
        """Test that SoftBreak becomes Space below pandoc 1.16."""
        assert to_wire(element("SoftBreak"), "1.15") == {"t": "Space", "c": []}
        assert to_wire(element("SoftBreak"), "1.16") == {"t": "SoftBreak", "c": []}

    def test_link_attributes(self) -> None:
        """Test that links lose their attributes below pandoc 1.16."""
        link = element("Link", {"id": "l"}, [_str("a")], ["u", "t"])
        assert to_wire(link, "1.15")["c"] == [[{"t": "Str", "c": "a"}], ["u", "t"]]
        assert len(to_wire(link, "1.16")["c"]) == 3
        assert link.id == "l"

    def test_line_block_spaces(self) -> None:
        """Test that leading spaces of lines become non-breaking spaces."""
        block = element("LineBlock", [[_str("  indented")], [element("Emph", [_str(" x")])]])
        wire = to_wire(block, "1.18")
        assert wire["t"] == "LineBlock"
        assert wire["c"][0][0]["c"] == "\u00a0\u00a0indented"
        assert wire["c"][1][0]["c"][0]["c"] == " x"
        assert block.content[0][0].content == "  indented"

    def test_line_block_below_1_18(self) -> None:
        """Test that LineBlock becomes a Para with line breaks below pandoc 1.18."""
        block = element("LineBlock", [[_str("a")], [_str(" b"), element("Space"), _str("c")]])
        wire = to_wire(block, "1.17")
        assert wire == {
            "t": "Para",
            "c": [
                {"t": "Str", "c": "a"},
                {"t": "LineBreak", "c": []},
                {"t": "Str", "c": "\u00a0b"},
                {"t": "Space", "c": []},
                {"t": "Str", "c": "c"},
            ],
        }

    def test_empty_line_block(self) -> None:
        """Test decomposing an empty LineBlock."""
        assert to_wire(element("LineBlock", []), "1.17") == {"t": "Para", "c": []}

    def test_target_release_order(self) -> None:
        """Test explicit argument, options, preferred release and document release."""
        doc = Document({}, [element("Para", [element("SoftBreak")])], api_version="1.16")
        assert "SoftBreak" in encode(doc)
        assert "SoftBreak" not in encode(doc, pandoc_version="1.15")
        assert "SoftBreak" not in encode(doc, EncodeOptions(pandoc_version="1.15"))
        assert "SoftBreak" in encode(doc, EncodeOptions(pandoc_version="1.15"), pandoc_version="1.16")

        set_preferred_pandoc_version("1.15")
        assert "SoftBreak" not in encode(doc)

    def test_downgrade_is_logged(self, caplog) -> None:
        """Test that decomposing a LineBlock is logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="pandocast.ast.compat"):
            to_wire(element("LineBlock", [[_str("a")]]), "1.17")
        assert "LineBlock" in caplog.text
