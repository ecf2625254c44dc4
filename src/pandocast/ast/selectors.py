#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/selectors.py
"""Selector expressions for matching elements.

A selector is one or more alternatives separated by ``|``. Each alternative
consists of, in this order:

- an optional tag name, compared case-insensitively (``Para``, ``str``)
- an optional category (``:document``, ``:block``, ``:inline``, ``:meta``)
- any number of ``#id`` and ``.class`` constraints

An element matches a selector if it matches any alternative, and it matches
an alternative if all of its parts hold. Elements without attributes never
satisfy ``#id`` or ``.class`` constraints. An empty alternative matches
every element.

Selectors are parsed once into a :class:`Selector` and can then be matched
against any number of elements.

Examples
--------
    >>> from pandocast.ast.nodes import element
    >>> from pandocast.ast.selectors import Selector
    >>> selector = Selector.parse("Header#intro | Code.python")
    >>> selector.match(element("Code", {"class": "python"}, "print()"))
    True

"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pandocast.exceptions import SelectorSyntaxError

_NAME_RE = re.compile(r"([A-Za-z]+)\s*")
_CATEGORY_RE = re.compile(r":(document|block|inline|meta)\s*")
_IDENTIFIER = r"[^\W\d_](?:[^\W\d_]|[0-9_:.-])*"
_CONSTRAINT_RE = re.compile(rf"([#.])({_IDENTIFIER})\s*")


@dataclass(frozen=True)
class SimpleSelector:
    """One alternative of a selector.

    Parameters
    ----------
    name : str or None
        Lower-cased tag name, or None to accept any tag
    category : str or None
        Required category, or None to accept any category
    ids : tuple of str
        Identifiers the element must have
    classes : tuple of str
        Classes the element must have

    """

    name: Optional[str] = None
    category: Optional[str] = None
    ids: tuple[str, ...] = ()
    classes: tuple[str, ...] = ()

    def match(self, node: Any) -> bool:
        """Return whether ``node`` satisfies every part of this alternative."""
        if self.name is not None and self.name != node.tag.lower():
            return False
        if self.category is not None and not getattr(node, f"is_{self.category}", False):
            return False
        if not self.ids and not self.classes:
            return True
        if not getattr(node, "has_attributes", False):
            return False
        if any(node.id != identifier for identifier in self.ids):
            return False
        classes = node.classes
        return all(name in classes for name in self.classes)


def _parse_alternative(text: str, selector: str) -> SimpleSelector:
    text = text.strip()
    position = 0

    name = None
    match = _NAME_RE.match(text, position)
    if match:
        name = match.group(1).lower()
        position = match.end()

    category = None
    match = _CATEGORY_RE.match(text, position)
    if match:
        category = match.group(1)
        position = match.end()

    ids: list[str] = []
    classes: list[str] = []
    while position < len(text):
        match = _CONSTRAINT_RE.match(text, position)
        if not match:
            raise SelectorSyntaxError(f"invalid selector at {text[position:]!r}", selector=selector)
        (ids if match.group(1) == "#" else classes).append(match.group(2))
        position = match.end()

    return SimpleSelector(name=name, category=category, ids=tuple(ids), classes=tuple(classes))


@dataclass(frozen=True)
class Selector:
    """A parsed selector expression.

    ``Selector(text)`` parses the expression; :meth:`Selector.parse` returns
    a cached instance for the same text.

    Parameters
    ----------
    text : str
        The original selector expression
    alternatives : tuple of SimpleSelector, optional
        The parsed alternatives; parsed from ``text`` when omitted

    Raises
    ------
    SelectorSyntaxError
        If an alternative is not a valid selector

    """

    text: str
    alternatives: tuple[SimpleSelector, ...] = ()

    def __post_init__(self) -> None:
        """Parse the alternatives from the text when they are not given."""
        if not isinstance(self.text, str):
            raise SelectorSyntaxError(f"selector must be a string, got {type(self.text).__name__}")
        if not self.alternatives:
            object.__setattr__(self, "alternatives", _parse_cached(self.text).alternatives)

    @classmethod
    def parse(cls, selector: Union[str, Selector]) -> Selector:
        """Parse a selector expression.

        Parameters
        ----------
        selector : str or Selector
            Selector expression; a Selector is returned unchanged

        Returns
        -------
        Selector
            The parsed selector

        Raises
        ------
        SelectorSyntaxError
            If an alternative is not a valid selector

        """
        if isinstance(selector, Selector):
            return selector
        if not isinstance(selector, str):
            raise SelectorSyntaxError(f"selector must be a string, got {type(selector).__name__}")
        return _parse_cached(selector)

    def match(self, node: Any) -> bool:
        """Return whether ``node`` matches any alternative."""
        return any(alternative.match(node) for alternative in self.alternatives)

    def __str__(self) -> str:
        return self.text


@functools.lru_cache(maxsize=256)
def _parse_cached(selector: str) -> Selector:
    alternatives = tuple(_parse_alternative(part, selector) for part in selector.split("|"))
    return Selector(text=selector, alternatives=alternatives)


def match(node: Any, selector: Union[str, Selector]) -> bool:
    """Return whether ``node`` matches ``selector``."""
    return Selector.parse(selector).match(node)


__all__ = ["Selector", "SimpleSelector", "match"]
