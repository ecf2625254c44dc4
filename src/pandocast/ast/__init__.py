#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/__init__.py
"""Pandoc abstract syntax tree.

The module consists of several components:

- attributes: identifier, classes and key/value pairs of elements
- schema: the declarative table of element tags
- nodes: the Element and Document classes
- compat: upgrade and downgrade rules between pandoc versions
- serialization: pandoc JSON decoding and encoding
- walker: walk, query and transform traversals
- selectors: selector expressions for matching elements
- utils: plain-text extraction and metadata flattening

Examples
--------
    >>> from pandocast.ast import decode, encode, transform
    >>> doc = decode(json_text)
    >>> transform(doc, {"Emph": lambda e: e.content})
    >>> json_text = encode(doc)

"""

from __future__ import annotations

from pandocast.ast.attributes import AttributeSet, attributes, split_classes
from pandocast.ast.compat import pandoc_version
from pandocast.ast.nodes import Citation, DefinitionPair, Document, Element, citation, coerce_bool, element
from pandocast.ast.schema import ELEMENT_SPECS, TYPE_KEYWORDS, ElementSpec, FieldSpec, get_spec, is_known_tag
from pandocast.ast.selectors import Selector
from pandocast.ast.serialization import decode, encode, from_wire, to_wire
from pandocast.ast.utils import metavalue, stringify
from pandocast.ast.walker import query, transform, walk

__all__ = [
    # Attributes
    "AttributeSet",
    "attributes",
    "split_classes",
    # Elements
    "Element",
    "Document",
    "Citation",
    "DefinitionPair",
    "element",
    "citation",
    "coerce_bool",
    # Schema
    "ELEMENT_SPECS",
    "TYPE_KEYWORDS",
    "ElementSpec",
    "FieldSpec",
    "get_spec",
    "is_known_tag",
    # Versions
    "pandoc_version",
    # Serialization
    "decode",
    "encode",
    "from_wire",
    "to_wire",
    # Traversal
    "walk",
    "query",
    "transform",
    "Selector",
    # Utilities
    "stringify",
    "metavalue",
]
