#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_selectors.py
"""Tests for selector expressions."""

import pytest

from pandocast.ast.nodes import Document, element
from pandocast.ast.selectors import Selector, SimpleSelector, match
from pandocast.exceptions import SelectorSyntaxError


@pytest.fixture
def code():
    """Provide an inline code element with an id and two classes."""
    return element("Code", {"id": "snippet", "class": "python numberLines"}, "print()")


@pytest.mark.unit
class TestSelectorParsing:
    """Test parsing selector expressions."""

    def test_parse_parts(self) -> None:
        """Test that every part of an alternative is parsed."""
        selector = Selector.parse("Code:inline #snippet .python")
        assert selector.alternatives == (
            SimpleSelector(name="code", category="inline", ids=("snippet",), classes=("python",)),
        )

    def test_alternatives(self) -> None:
        """Test that alternatives are split on the bar."""
        selector = Selector.parse("Str|Code | Math")
        assert [alternative.name for alternative in selector.alternatives] == ["str", "code", "math"]

    def test_parse_is_cached(self) -> None:
        """Test that parsing the same text twice returns the same selector."""
        assert Selector.parse("Para") is Selector.parse("Para")
        selector = Selector.parse("Para")
        assert Selector.parse(selector) is selector
        assert str(selector) == "Para"

    def test_adjacent_constraints(self) -> None:
        """Test constraints without separating whitespace."""
        selector = Selector.parse("Span.b#a")
        assert selector.alternatives[0].ids == ("a",)
        assert selector.alternatives[0].classes == ("b",)

    def test_dots_belong_to_identifiers(self) -> None:
        """Test that a dot inside an identifier does not start a class."""
        assert Selector.parse("#a.b").alternatives[0].ids == ("a.b",)

    @pytest.mark.parametrize("text", ["Para$", "#1abc", ".", ":paragraph", "Header2", "Para #"])
    def test_syntax_errors(self, text) -> None:
        """Test that malformed selectors raise SelectorSyntaxError."""
        with pytest.raises(SelectorSyntaxError) as exc_info:
            Selector.parse(text)
        assert exc_info.value.selector == text

    def test_non_string(self) -> None:
        """Test that non-string selectors are rejected."""
        with pytest.raises(SelectorSyntaxError):
            Selector.parse(42)

    def test_constructor_parses_text(self, code) -> None:
        """Test that constructing a selector from text parses it."""
        selector = Selector("Code.python | Str")
        assert selector == Selector.parse("Code.python | Str")
        assert [alternative.name for alternative in selector.alternatives] == ["code", "str"]
        assert selector.match(code)
        assert Selector("Str").match(element("Str", "x"))

    @pytest.mark.parametrize("value", ["Para$", 42])
    def test_constructor_errors(self, value) -> None:
        """Test that the constructor rejects what parse rejects."""
        with pytest.raises(SelectorSyntaxError):
            Selector(value)


@pytest.mark.unit
class TestSelectorMatching:
    """Test matching elements against selectors."""

    def test_name_is_case_insensitive(self, code) -> None:
        """Test tag name matching."""
        assert code.match("Code")
        assert code.match("code")
        assert not code.match("Str")

    def test_category(self, code) -> None:
        """Test category matching."""
        assert code.match(":inline")
        assert not code.match(":block")
        assert element("Para", []).match("Para:block")
        assert element("MetaString", "x").match(":meta")
        assert Document().match(":document")

    def test_id_and_class(self, code) -> None:
        """Test id and class constraints."""
        assert code.match("#snippet")
        assert code.match(".python .numberLines")
        assert code.match("Code#snippet .python")
        assert not code.match("#other")
        assert not code.match(".java")
        assert not code.match(".python .java")

    def test_alternatives(self, code) -> None:
        """Test that any alternative may match."""
        assert code.match("Str | Code")
        assert code.match(".java|#snippet")
        assert not code.match("Str|Math")

    def test_without_attributes(self) -> None:
        """Test that elements without attributes never match # or . constraints."""
        assert not element("Para", []).match("#x")
        assert not element("Str", "x").match(".x")
        assert not Document().match(":document #x")

    def test_empty_selector_matches_everything(self, code) -> None:
        """Test that an empty alternative matches every element."""
        assert code.match("")
        assert element("Space").match("  ")

    def test_identifier_characters(self) -> None:
        """Test identifiers with digits, colons, dots and hyphens."""
        header = element("Header", 1, {"id": "sec:intro-1.2"}, [])
        assert header.match("#sec:intro-1.2")

    def test_module_level_match(self, code) -> None:
        """Test the match function and Selector objects."""
        assert match(code, "Code")
        assert code.match(Selector.parse(".python"))
