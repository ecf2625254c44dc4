#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/attributes.py
"""Attribute sets attached to pandoc elements.

Pandoc attributes consist of an identifier, an ordered list of classes and an
ordered list of key/value pairs. Keys may repeat, so the pairs behave like a
multi-map rather than a dict.

Examples
--------
Build attributes from keyword-style input:

    >>> from pandocast.ast.attributes import attributes
    >>> attrs = attributes({"id": "intro", "class": "note wide", "lang": "en"})
    >>> attrs.classes
    ['note', 'wide']
    >>> attrs.pairs
    [('lang', 'en')]

"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

ID_KEY = "id"
CLASS_KEYS = ("class", "classes")

KeyValues = list[tuple[str, str]]
AttributesInput = Union["AttributeSet", Mapping[str, Any], Iterable[tuple[str, Any]], None]


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def split_classes(*values: Any) -> list[str]:
    """Flatten class values into a list of class names.

    Strings are split on whitespace, nested sequences are flattened, and
    empty tokens are discarded.

    Parameters
    ----------
    *values : Any
        Strings or (nested) sequences of strings

    Returns
    -------
    list of str
        Class names in input order, duplicates kept

    Examples
    --------
    >>> split_classes(" foo\\t bar ", ["doz", ["x y"]])
    ['foo', 'bar', 'doz', 'x', 'y']

    """
    classes: list[str] = []
    for value in values:
        if value is None:
            continue
        if isinstance(value, str):
            classes.extend(value.split())
        elif isinstance(value, Iterable):
            classes.extend(split_classes(*value))
        else:
            classes.extend(str(value).split())
    return classes


@dataclass
class AttributeSet:
    """Identifier, classes and key/value pairs of an element.

    Parameters
    ----------
    id : str, default = ""
        Element identifier
    classes : list of str, default = empty list
        Class names in order, duplicates allowed
    pairs : list of (str, str), default = empty list
        Key/value pairs in order, duplicate keys allowed

    """

    id: str = ""
    classes: list[str] = field(default_factory=list)
    pairs: KeyValues = field(default_factory=list)

    def values(self, key: str) -> list[str]:
        """Return every value stored under ``key`` in order."""
        return [value for pair_key, value in self.pairs if pair_key == key]

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the last value stored under ``key``."""
        found = self.values(key)
        return found[-1] if found else default

    def add(self, key: str, value: Any) -> None:
        """Add one attribute, treating ``id`` and ``class`` specially.

        ``id`` replaces the identifier, ``class`` (or ``classes``) appends
        class names, and every other key appends a pair.

        """
        if key == ID_KEY:
            self.id = _as_text(value)
        elif key in CLASS_KEYS:
            self.classes.extend(split_classes(value))
        else:
            self.pairs.append((key, _as_text(value)))

    def key_values(self) -> KeyValues:
        """Return the attributes as one list of pairs.

        The identifier comes first (if not empty), then the space-joined
        classes (if any), then the remaining pairs.

        """
        result: KeyValues = []
        if self.id != "":
            result.append((ID_KEY, self.id))
        if self.classes:
            result.append(("class", " ".join(self.classes)))
        result.extend(self.pairs)
        return result

    def replace_key_values(self, new_attributes: AttributesInput) -> None:
        """Replace attributes from keyword-style input.

        Pairs are always replaced. Classes are replaced only when the input
        mentions ``class`` or ``classes``, and the identifier only when it
        mentions ``id``.

        """
        items = _input_items(new_attributes)
        if any(key in CLASS_KEYS for key, _ in items):
            self.classes = []
        self.pairs = []
        _apply(self, items)

    def to_wire(self) -> list[Any]:
        """Return the ``[id, [classes], [[key, value], ...]]`` wire form."""
        return [self.id, list(self.classes), [[key, value] for key, value in self.pairs]]

    @classmethod
    def from_wire(cls, data: Any) -> AttributeSet:
        """Build an attribute set from its wire form."""
        if isinstance(data, AttributeSet):
            return data
        identifier, classes, pairs = data
        return cls(
            id=_as_text(identifier),
            classes=[_as_text(name) for name in classes],
            pairs=[(_as_text(key), _as_text(value)) for key, value in pairs],
        )


def is_wire_attributes(value: Any) -> bool:
    """Return whether ``value`` has the ``[id, [classes], [[key, value], ...]]`` wire shape."""
    return (
        isinstance(value, (list, tuple))
        and len(value) == 3
        and isinstance(value[0], str)
        and isinstance(value[1], (list, tuple))
        and isinstance(value[2], (list, tuple))
        and all(isinstance(pair, (list, tuple)) and len(pair) == 2 for pair in value[2])
    )


def _input_items(source: AttributesInput) -> list[tuple[str, Any]]:
    if source is None:
        return []
    if isinstance(source, AttributeSet):
        return [(ID_KEY, source.id), ("classes", list(source.classes)), *source.pairs]
    if isinstance(source, Mapping):
        return list(source.items())
    return [(key, value) for key, value in source]


def _apply(target: AttributeSet, items: list[tuple[str, Any]]) -> None:
    # class tokens precede classes tokens regardless of key order
    for key, value in items:
        if key == "class":
            target.add(key, value)
    for key, value in items:
        if key != "class":
            target.add(key, value)


def attributes(source: AttributesInput = None) -> AttributeSet:
    """Build an attribute set from keyword-style input.

    Parameters
    ----------
    source : mapping, iterable of pairs, AttributeSet or None
        ``id`` becomes the identifier; ``class`` and ``classes`` values are
        split on whitespace and flattened (``class`` tokens first); all other
        keys become pairs in input order. An iterable of pairs may repeat
        keys.

    Returns
    -------
    AttributeSet
        A new attribute set

    Examples
    --------
    >>> attributes({"classes": ["x", "x", "y"], "answer": "42", "id": "0"})
    AttributeSet(id='0', classes=['x', 'x', 'y'], pairs=[('answer', '42')])
    >>> attributes(None)
    AttributeSet(id='', classes=[], pairs=[])

    """
    result = AttributeSet()
    _apply(result, _input_items(source))
    return result


__all__ = ["AttributeSet", "AttributesInput", "KeyValues", "attributes", "is_wire_attributes", "split_classes"]
