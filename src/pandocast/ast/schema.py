#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/schema.py
"""Declarative table of pandoc element tags.

Every pandoc element is described by one :class:`ElementSpec`: its tag, its
category and the ordered fields of its payload. The generic constructor,
accessors, decoder and encoder all consult this table instead of having one
class or function per tag.

The shapes follow pandoc-types 1.17, the newest API supported by pandocast.
Older shapes are converted on read and on write by
:mod:`pandocast.ast.compat`.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pandocast.constants import Category, FieldKind
from pandocast.exceptions import UnknownTagError


@dataclass(frozen=True)
class FieldSpec:
    """A positional payload field.

    Parameters
    ----------
    name : str
        Accessor name of the field
    kind : FieldKind, default = "value"
        How the field is decoded and coerced on encode
    aliases : tuple of str, default = ()
        Additional accessor names

    """

    name: str
    kind: FieldKind = "value"
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class ElementSpec:
    """Description of one element tag.

    Parameters
    ----------
    tag : str
        Element tag as it appears in the ``t`` key
    category : Category
        One of block, inline, meta or document
    fields : tuple of FieldSpec
        Ordered payload fields

    """

    tag: str
    category: Category
    fields: tuple[FieldSpec, ...] = ()
    _index: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Build the accessor-name index."""
        for position, spec in enumerate(self.fields):
            self._index[spec.name] = position
            for alias in spec.aliases:
                self._index[alias] = position

    @property
    def arity(self) -> int:
        """Return the number of payload fields."""
        return len(self.fields)

    @property
    def has_attributes(self) -> bool:
        """Return whether the payload holds an attribute set."""
        return any(spec.kind == "attr" for spec in self.fields)

    def field_index(self, name: str) -> Optional[int]:
        """Return the position of a field or alias, or None if absent."""
        return self._index.get(name)

    def field_names(self) -> frozenset[str]:
        """Return all accessor names including aliases."""
        return frozenset(self._index)


_CONTENT = FieldSpec("content")
_ITEMS = FieldSpec("content", aliases=("items",))
_ATTR = FieldSpec("attr", kind="attr")


def _spec(tag: str, category: Category, *fields: FieldSpec) -> ElementSpec:
    return ElementSpec(tag=tag, category=category, fields=tuple(fields))


_BLOCKS = (
    _spec("Plain", "block", _CONTENT),
    _spec("Para", "block", _CONTENT),
    _spec("CodeBlock", "block", _ATTR, _CONTENT),
    _spec("RawBlock", "block", FieldSpec("format"), _CONTENT),
    _spec("BlockQuote", "block", _CONTENT),
    _spec("OrderedList", "block", FieldSpec("list_attributes", kind="list_attributes"), _ITEMS),
    _spec("BulletList", "block", _ITEMS),
    _spec("DefinitionList", "block", _ITEMS),
    _spec("Header", "block", FieldSpec("level", kind="level"), _ATTR, _CONTENT),
    _spec("HorizontalRule", "block"),
    _spec(
        "Table",
        "block",
        FieldSpec("caption"),
        FieldSpec("alignment", aliases=("alignments",)),
        FieldSpec("widths", kind="widths"),
        FieldSpec("headers"),
        FieldSpec("rows"),
    ),
    _spec("Div", "block", _ATTR, _CONTENT),
    _spec("Null", "block"),
    _spec("LineBlock", "block", _CONTENT),
)

_INLINES = (
    _spec("Str", "inline", _CONTENT),
    _spec("Emph", "inline", _CONTENT),
    _spec("Strong", "inline", _CONTENT),
    _spec("Strikeout", "inline", _CONTENT),
    _spec("Superscript", "inline", _CONTENT),
    _spec("Subscript", "inline", _CONTENT),
    _spec("SmallCaps", "inline", _CONTENT),
    _spec("Quoted", "inline", FieldSpec("type"), _CONTENT),
    _spec("Cite", "inline", FieldSpec("citations", kind="citations"), _CONTENT),
    _spec("Code", "inline", _ATTR, _CONTENT),
    _spec("Space", "inline"),
    _spec("SoftBreak", "inline"),
    _spec("LineBreak", "inline"),
    _spec("Math", "inline", FieldSpec("type"), _CONTENT),
    _spec("RawInline", "inline", FieldSpec("format"), _CONTENT),
    _spec("Link", "inline", _ATTR, _CONTENT, FieldSpec("target")),
    _spec("Image", "inline", _ATTR, _CONTENT, FieldSpec("target")),
    _spec("Note", "inline", _CONTENT),
    _spec("Span", "inline", _ATTR, _CONTENT),
)

_META = (
    _spec("MetaBool", "meta", FieldSpec("content", kind="bool")),
    _spec("MetaString", "meta", _CONTENT),
    _spec("MetaMap", "meta", FieldSpec("content", kind="map")),
    _spec("MetaInlines", "meta", _CONTENT),
    _spec("MetaList", "meta", _CONTENT),
    _spec("MetaBlocks", "meta", _CONTENT),
)

# Nullary tags only used as values inside other elements
TYPE_KEYWORDS: tuple[str, ...] = (
    "DefaultDelim",
    "Period",
    "OneParen",
    "TwoParens",
    "SingleQuote",
    "DoubleQuote",
    "DisplayMath",
    "InlineMath",
    "AuthorInText",
    "SuppressAuthor",
    "NormalCitation",
    "AlignLeft",
    "AlignRight",
    "AlignCenter",
    "AlignDefault",
    "DefaultStyle",
    "Example",
    "Decimal",
    "LowerRoman",
    "UpperRoman",
    "LowerAlpha",
    "UpperAlpha",
)

ELEMENT_SPECS: dict[str, ElementSpec] = {
    spec.tag: spec
    for spec in (*_BLOCKS, *_INLINES, *_META, *(_spec(tag, "inline") for tag in TYPE_KEYWORDS))
}

# The root is described here so that selectors and categories can treat it
# like any other element; it is never constructed through element().
DOCUMENT_SPEC = _spec("Document", "document", FieldSpec("meta"), FieldSpec("blocks", aliases=("content",)))

# Leaf tags whose content is literal text
TEXT_TAGS: frozenset[str] = frozenset({"Str", "Code", "Math", "MetaString"})

# Tags rendered as a single space in plain text
SPACE_TAGS: frozenset[str] = frozenset({"Space", "SoftBreak", "LineBreak"})


def get_spec(tag: str) -> ElementSpec:
    """Return the table entry for a tag.

    Raises
    ------
    UnknownTagError
        If the tag is not part of the element table

    """
    if not isinstance(tag, str):
        raise UnknownTagError(tag)
    try:
        return ELEMENT_SPECS[tag]
    except KeyError:
        raise UnknownTagError(tag) from None


def is_known_tag(tag: object) -> bool:
    """Return whether ``tag`` names an element in the table."""
    return isinstance(tag, str) and tag in ELEMENT_SPECS


__all__ = [
    "FieldSpec",
    "ElementSpec",
    "ELEMENT_SPECS",
    "DOCUMENT_SPEC",
    "TYPE_KEYWORDS",
    "TEXT_TAGS",
    "SPACE_TAGS",
    "get_spec",
    "is_known_tag",
]
