#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/utils.py
"""Utility functions for working with pandoc elements.

Functions
---------
stringify : Extract plain text from an element, a document or a list
metavalue : Flatten metadata elements to plain Python values

Examples
--------
Extract text from a header:

    >>> from pandocast.ast.nodes import element
    >>> from pandocast.ast.utils import stringify
    >>> header = element("Header", 1, None, [
    ...     element("Str", "Hello"),
    ...     element("Space"),
    ...     element("Emph", [element("Str", "world")]),
    ... ])
    >>> stringify(header)
    'Hello world'

"""

from __future__ import annotations

from typing import Any

from pandocast.ast.nodes import Element
from pandocast.ast.schema import SPACE_TAGS, TEXT_TAGS
from pandocast.ast.walker import query

TEXT_SELECTOR = "|".join(sorted(TEXT_TAGS))
SPACE_SELECTOR = "|".join(sorted(SPACE_TAGS))

# Selector map used to extract plain text from a tree
STRINGIFY_ACTION = {
    TEXT_SELECTOR: lambda node: node.content,
    SPACE_SELECTOR: lambda node: " ",
}


def _own_text(node: Any) -> str:
    if isinstance(node, Element):
        if node.tag in TEXT_TAGS:
            return "" if node.content is None else str(node.content)
        if node.tag in SPACE_TAGS:
            return " "
    return ""


def stringify(node: Any) -> str:
    r"""Extract plain text from an element, a document or a list of them.

    ``Str``, ``Code``, ``Math`` and ``MetaString`` contribute their content,
    ``Space``, ``SoftBreak`` and ``LineBreak`` contribute a single space, and
    every other element contributes only the text of its descendants.

    Parameters
    ----------
    node : Element, Document, list or dict
        Tree to extract text from

    Returns
    -------
    str
        Concatenated text

    Examples
    --------
    >>> stringify([element("Str", "a"), element("SoftBreak"), element("Code", None, "b")])
    'a b'

    """
    return _own_text(node) + "".join(str(text) for text in query(node, STRINGIFY_ACTION))


def metavalue(node: Any) -> Any:
    """Flatten a metadata element to plain Python values.

    Parameters
    ----------
    node : Element
        A metadata element

    Returns
    -------
    Any
        ``MetaBool`` gives a bool, ``MetaString`` a string, ``MetaInlines``
        the text of its inlines, ``MetaBlocks`` the text of its blocks joined
        by newlines, ``MetaList`` a list and ``MetaMap`` a dict. Other
        elements give their plain text.

    """
    if not isinstance(node, Element):
        return node
    tag = node.tag
    if tag == "MetaBool":
        return bool(node.content)
    if tag == "MetaString":
        return node.content
    if tag == "MetaInlines":
        return "".join(stringify(inline) for inline in node.content)
    if tag == "MetaBlocks":
        return "\n".join(stringify(block) for block in node.content)
    if tag == "MetaList":
        return [metavalue(item) for item in node.content]
    if tag == "MetaMap":
        return {key: metavalue(value) for key, value in node.content.items()}
    return stringify(node)


__all__ = ["stringify", "metavalue", "STRINGIFY_ACTION"]
