#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/nodes.py
"""Element and document classes for the pandoc AST.

This module defines the in-memory representation of pandoc documents. Unlike
a class-per-node hierarchy, every element is an instance of the single
:class:`Element` class; its tag selects an entry of the declarative table in
:mod:`pandocast.ast.schema`, which fixes the element's category and the
ordered fields of its payload.

Element Model
-------------
An element consists of:
    - ``tag``: one of the tags of the element table (read-only)
    - ``payload``: ``[]`` for nullary tags, the single value for unary tags,
      a list of exactly n slots for n-ary tags (the wire ``c`` value)

Payload fields are available by name (``header.level``, ``link.target``,
``bullet_list.items``). Attribute-bearing tags additionally expose ``id``,
``class_``, ``classes``, ``key_values`` and ``add_attribute``.

The in-memory tree always has the newest (pandoc-types 1.17) shape.
Conversion from and to older shapes happens only in
:mod:`pandocast.ast.serialization`.

Examples
--------
Build a small document:

    >>> from pandocast.ast.nodes import Document, element
    >>> para = element("Para", [element("Str", "Hello"), element("Space"), element("Str", "world")])
    >>> doc = Document({}, [para])
    >>> doc.string()
    'Hello world'

"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple, Optional, Union

from pandocast.ast.attributes import (
    AttributeSet,
    AttributesInput,
    KeyValues,
    attributes,
    is_wire_attributes,
    split_classes,
)
from pandocast.ast.compat import is_legacy_document, upgrade_document
from pandocast.ast.schema import DOCUMENT_SPEC, ElementSpec, FieldSpec, get_spec
from pandocast.constants import (
    API_VERSION_ALIASES,
    CITATION_MODE_ALIASES,
    CITATION_WIRE_KEYS,
    DEFAULT_API_VERSION,
    DEFAULT_CITATION_HASH,
    DEFAULT_CITATION_ID,
    DEFAULT_CITATION_MODE,
    DEFAULT_CITATION_NOTE_NUM,
    FALSE_TOKENS,
)
from pandocast.exceptions import (
    AmbiguousArgumentsError,
    ArityError,
    SetterMisuseError,
    UnsupportedVersionError,
    VersionFormatError,
)
from pandocast.version import API_MIN, Version, VersionLike, require_api_for_release, require_release_for_api

if TYPE_CHECKING:
    from pandocast.ast.selectors import Selector
    from pandocast.ast.walker import Action

SelectorLike = Union[str, "Selector"]


def coerce_bool(value: Any) -> bool:
    """Coerce a loosely typed value to a boolean.

    ``None``, ``False``, zero, the empty string, ``"0"``, ``"false"`` and
    ``"FALSE"`` are false; every other value is true.

    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        return value not in FALSE_TOKENS
    if isinstance(value, (int, float)):
        return value != 0
    return bool(value)


def _normalize_slot(spec: FieldSpec, value: Any) -> Any:
    if spec.kind == "attr":
        if isinstance(value, AttributeSet):
            return value
        if is_wire_attributes(value):
            return AttributeSet.from_wire(value)
        return attributes(value)
    if spec.kind == "citations":
        return [item if isinstance(item, Citation) else citation(item) for item in (value or [])]
    if spec.kind == "bool":
        return coerce_bool(value)
    if spec.kind == "map":
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ArityError(f"MetaMap expects a mapping, got {type(value).__name__}", tag="MetaMap")
    return value


class Element:
    """A pandoc document element.

    Parameters
    ----------
    tag : str
        Element tag, e.g. ``"Para"`` or ``"Str"``
    *args : Any
        Exactly as many positional values as the tag declares fields

    Raises
    ------
    UnknownTagError
        If the tag is not part of the element table
    ArityError
        If the number of arguments does not match the tag

    Examples
    --------
    >>> header = Element("Header", 1, {"id": "intro"}, [Element("Str", "Intro")])
    >>> header.level, header.id
    (1, 'intro')

    """

    __slots__ = ("_spec", "_payload")

    def __init__(self, tag: str, *args: Any):
        """Create an element from positional field values."""
        spec = get_spec(tag)
        if len(args) != spec.arity:
            raise ArityError(
                f"{tag} expects {spec.arity} arguments, but given {len(args)}",
                tag=tag,
                expected=spec.arity,
                given=len(args),
            )
        object.__setattr__(self, "_spec", spec)
        object.__setattr__(self, "_payload", self._build_payload(spec, args))

    @classmethod
    def from_payload(cls, tag: str, payload: Any) -> Element:
        """Create an element from a wire-shaped payload (the ``c`` value).

        Nullary tags accept ``None`` or an empty list; unary tags take the
        payload as their single value; n-ary tags require a sequence of
        exactly n slots.

        Raises
        ------
        UnknownTagError
            If the tag is not part of the element table
        ArityError
            If the payload does not have the tag's shape

        """
        spec = get_spec(tag)
        if spec.arity == 0:
            if payload not in (None, [], ()):
                raise ArityError(f"{tag} expects an empty payload", tag=tag, expected=0)
            return cls(tag)
        if spec.arity == 1:
            return cls(tag, payload)
        if not isinstance(payload, (list, tuple)) or len(payload) != spec.arity:
            given = len(payload) if isinstance(payload, (list, tuple)) else 1
            raise ArityError(
                f"{tag} expects {spec.arity} payload slots, but given {given}",
                tag=tag,
                expected=spec.arity,
                given=given,
            )
        return cls(tag, *payload)

    @staticmethod
    def _build_payload(spec: ElementSpec, args: tuple[Any, ...]) -> Any:
        if spec.arity == 0:
            return []
        if spec.arity == 1:
            return _normalize_slot(spec.fields[0], args[0])
        return [_normalize_slot(field_spec, value) for field_spec, value in zip(spec.fields, args)]

    # ------------------------------------------------------------------
    # Tag and category
    # ------------------------------------------------------------------

    @property
    def tag(self) -> str:
        """Return the element tag."""
        return self._spec.tag

    @tag.setter
    def tag(self, value: Any) -> None:
        raise SetterMisuseError("tag", "the tag of an element cannot be changed; build a new element instead")

    @property
    def name(self) -> str:
        """Return the element tag (alias of ``tag``)."""
        return self._spec.tag

    @name.setter
    def name(self, value: Any) -> None:
        raise SetterMisuseError("name", "the name of an element cannot be changed; build a new element instead")

    @property
    def spec(self) -> ElementSpec:
        """Return the table entry describing this element."""
        return self._spec

    @property
    def category(self) -> str:
        """Return the category: block, inline, meta or document."""
        return self._spec.category

    @category.setter
    def category(self, value: Any) -> None:
        raise SetterMisuseError("category")

    @property
    def is_block(self) -> bool:
        """Return whether this is a block element."""
        return self._spec.category == "block"

    @property
    def is_inline(self) -> bool:
        """Return whether this is an inline element."""
        return self._spec.category == "inline"

    @property
    def is_meta(self) -> bool:
        """Return whether this is a metadata element."""
        return self._spec.category == "meta"

    @property
    def is_document(self) -> bool:
        """Return False; only :class:`Document` is a document."""
        return False

    # ------------------------------------------------------------------
    # Payload and fields
    # ------------------------------------------------------------------

    @property
    def payload(self) -> Any:
        """Return the raw payload (the wire ``c`` value)."""
        return self._payload

    @payload.setter
    def payload(self, value: Any) -> None:
        replacement = Element.from_payload(self._spec.tag, value)
        object.__setattr__(self, "_payload", replacement._payload)

    @property
    def content(self) -> Any:
        """Return the ``content`` field, or the whole payload if the tag has none."""
        index = self._spec.field_index("content")
        if index is None:
            return self._payload
        return self._get_slot(index)

    @content.setter
    def content(self, value: Any) -> None:
        index = self._spec.field_index("content")
        if index is None:
            self.payload = value
        else:
            self._set_slot(index, value)

    def _get_slot(self, index: int) -> Any:
        if self._spec.arity == 1:
            return self._payload
        return self._payload[index]

    def _set_slot(self, index: int, value: Any) -> None:
        value = _normalize_slot(self._spec.fields[index], value)
        if self._spec.arity == 1:
            object.__setattr__(self, "_payload", value)
        else:
            self._payload[index] = value

    def __getattr__(self, name: str) -> Any:
        spec: ElementSpec = object.__getattribute__(self, "_spec")
        index = spec.field_index(name)
        if index is None:
            raise AttributeError(f"{spec.tag} element has no field {name!r}")
        return self._get_slot(index)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in Element.__slots__ or hasattr(type(self), name):
            object.__setattr__(self, name, value)
            return
        index = self._spec.field_index(name)
        if index is None:
            raise AttributeError(f"{self._spec.tag} element has no field {name!r}")
        self._set_slot(index, value)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    @property
    def has_attributes(self) -> bool:
        """Return whether this element carries an attribute set."""
        return self._spec.has_attributes

    def _attr_index(self) -> int:
        index = self._spec.field_index("attr")
        if index is None or not self._spec.has_attributes:
            raise AttributeError(f"{self._spec.tag} element has no attributes")
        return index

    @property
    def attribute_set(self) -> AttributeSet:
        """Return the attribute set of an attribute-bearing element."""
        return self._get_slot(self._attr_index())

    @attribute_set.setter
    def attribute_set(self, value: AttributesInput) -> None:
        self._set_slot(self._attr_index(), value)

    @property
    def id(self) -> str:
        """Return the element identifier."""
        return self.attribute_set.id

    @id.setter
    def id(self, value: Any) -> None:
        self.attribute_set.id = "" if value is None else str(value)

    @property
    def class_(self) -> str:
        """Return the classes joined by single spaces."""
        return " ".join(self.attribute_set.classes)

    @class_.setter
    def class_(self, value: Any) -> None:
        self.attribute_set.classes = split_classes(value)

    @property
    def classes(self) -> list[str]:
        """Return the list of classes (read-only, use ``class_`` to replace)."""
        return self.attribute_set.classes

    @classes.setter
    def classes(self, value: Any) -> None:
        raise SetterMisuseError("classes", "classes is read-only; assign to class_ instead")

    def add_attribute(self, key: str, value: Any) -> None:
        """Add an attribute; ``id`` replaces, ``class`` appends, other keys add a pair."""
        self.attribute_set.add(key, value)

    @property
    def key_values(self) -> KeyValues:
        """Return ``id``, ``class`` and the pairs as one list of pairs."""
        return self.attribute_set.key_values()

    @key_values.setter
    def key_values(self, value: AttributesInput) -> None:
        self.attribute_set.replace_key_values(value)

    # ------------------------------------------------------------------
    # Tag-specific accessors
    # ------------------------------------------------------------------

    def _require(self, *tags: str) -> None:
        if self._spec.tag not in tags:
            raise AttributeError(f"{self._spec.tag} element is not one of {', '.join(tags)}")

    @property
    def url(self) -> str:
        """Return the target URL of a Link or Image."""
        self._require("Link", "Image")
        return self.target[0]

    @property
    def title(self) -> str:
        """Return the target title of a Link or Image."""
        self._require("Link", "Image")
        return self.target[1]

    @property
    def definition_pairs(self) -> list[DefinitionPair]:
        """Return the items of a DefinitionList as (term, definitions) pairs."""
        self._require("DefinitionList")
        return [DefinitionPair(term, definitions) for term, definitions in self.content]

    # ------------------------------------------------------------------
    # Text, metadata, traversal and serialization
    # ------------------------------------------------------------------

    def string(self) -> str:
        """Return the plain text of this element and its descendants."""
        from pandocast.ast.utils import stringify

        return stringify(self)

    def metavalue(self) -> Any:
        """Return a metadata element flattened to plain Python values."""
        from pandocast.ast.utils import metavalue

        return metavalue(self)

    def match(self, selector: SelectorLike) -> bool:
        """Return whether this element matches a selector expression."""
        from pandocast.ast.selectors import Selector

        return Selector.parse(selector).match(self)

    def walk(self, action: Action, *args: Any) -> None:
        """Call ``action`` on every nested element, see :func:`pandocast.ast.walker.walk`."""
        from pandocast.ast.walker import walk

        walk(self, action, *args)

    def query(self, action: Action, *args: Any) -> list[Any]:
        """Collect results from nested elements, see :func:`pandocast.ast.walker.query`."""
        from pandocast.ast.walker import query

        return query(self, action, *args)

    def transform(self, action: Action, *args: Any) -> Element:
        """Rewrite nested elements, see :func:`pandocast.ast.walker.transform`."""
        from pandocast.ast.walker import transform

        return transform(self, action, *args)

    def to_json(self, pandoc_version: Optional[VersionLike] = None) -> str:
        """Encode this element as pandoc JSON with sorted keys."""
        from pandocast.ast.serialization import effective_release, to_wire

        release = effective_release(pandoc_version)
        return json.dumps(to_wire(self, release), sort_keys=True, ensure_ascii=False)

    # ------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self._spec.tag == other._spec.tag and self._payload == other._payload

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._spec.arity == 0:
            return f"{self._spec.tag}()"
        if self._spec.arity == 1:
            return f"{self._spec.tag}({self._payload!r})"
        return f"{self._spec.tag}({', '.join(repr(slot) for slot in self._payload)})"


def element(tag: str, *args: Any) -> Element:
    """Create an element of any tag.

    Parameters
    ----------
    tag : str
        Element tag
    *args : Any
        Positional field values

    Returns
    -------
    Element
        The new element

    Raises
    ------
    UnknownTagError
        If the tag is undefined or unknown
    ArityError
        If the number of arguments does not match the tag

    Examples
    --------
    >>> element("Emph", [element("Str", "hi")])
    Emph([Str('hi')])

    """
    return Element(tag, *args)


class DefinitionPair(NamedTuple):
    """A term of a DefinitionList with its definitions."""

    term: list[Element]
    definitions: list[list[Element]]


@dataclass
class Citation:
    """A single citation inside a ``Cite`` element.

    Parameters
    ----------
    id : str, default = "missing"
        Citation key
    prefix : list of Element, default = empty list
        Inlines before the citation
    suffix : list of Element, default = empty list
        Inlines after the citation
    mode : Element, default = NormalCitation
        One of ``NormalCitation``, ``AuthorInText``, ``SuppressAuthor``
    note_num : int, default = 0
        Note number
    hash : int, default = 1
        Citation hash

    """

    id: str = DEFAULT_CITATION_ID
    prefix: list[Element] = field(default_factory=list)
    suffix: list[Element] = field(default_factory=list)
    mode: Element = field(default_factory=lambda: Element(DEFAULT_CITATION_MODE))
    note_num: int = DEFAULT_CITATION_NOTE_NUM
    hash: int = DEFAULT_CITATION_HASH


_CITATION_KEY_ALIASES: dict[str, str] = {
    **{short: short for short in CITATION_WIRE_KEYS},
    **{wire: short for short, wire in CITATION_WIRE_KEYS.items()},
    "num": "note_num",
    "note": "note_num",
    "citationID": "id",
}


def _citation_mode(mode: Any) -> Element:
    if isinstance(mode, Element):
        return mode
    if isinstance(mode, Mapping) and "t" in mode:
        return Element(mode["t"])
    if isinstance(mode, str):
        return Element(CITATION_MODE_ALIASES.get(mode, mode))
    return Element(DEFAULT_CITATION_MODE)


def citation(source: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Citation:
    """Build a citation, filling in defaults.

    Parameters
    ----------
    source : mapping, optional
        Citation fields by short name (``id``, ``prefix``, ``suffix``,
        ``mode``, ``note_num`` or ``num``, ``hash``) or wire name
        (``citationId``...)
    **kwargs : Any
        Further fields, overriding ``source``

    Returns
    -------
    Citation
        A new citation

    Examples
    --------
    >>> citation(id="foo", prefix=[element("Str", "see")]).mode
    NormalCitation()

    """
    if isinstance(source, Citation):
        return source
    values: dict[str, Any] = {}
    for key, value in {**dict(source or {}), **kwargs}.items():
        short = _CITATION_KEY_ALIASES.get(key)
        if short is None:
            raise TypeError(f"unknown citation field {key!r}")
        values[short] = value
    if "mode" in values:
        values["mode"] = _citation_mode(values["mode"])
    for key in ("prefix", "suffix"):
        if key in values:
            values[key] = list(values[key] or [])
    return Citation(**values)


def _check_api_version(value: VersionLike) -> Version:
    version = Version(value)
    if len(version) < 2:
        raise VersionFormatError("api_version must have major and minor part", version=value)
    if version < API_MIN:
        raise UnsupportedVersionError(f"api_version must be >= {API_MIN}", version=value)
    return version


def _coerce_meta(meta: Optional[Mapping[str, Any]]) -> dict[str, Element]:
    from pandocast.ast.serialization import from_wire

    if meta is None:
        return {}
    if not isinstance(meta, Mapping):
        raise ArityError(f"Document meta must be a mapping, got {type(meta).__name__}", tag="Document")
    return {str(key): from_wire(value) for key, value in meta.items()}


def _coerce_blocks(blocks: Optional[Iterable[Any]]) -> list[Element]:
    from pandocast.ast.serialization import from_wire

    if blocks is None:
        return []
    if not isinstance(blocks, (list, tuple)):
        raise ArityError(f"Document blocks must be a list, got {type(blocks).__name__}", tag="Document")
    return [from_wire(block) for block in blocks]


_DOCUMENT_KEYWORDS = frozenset({"meta", "blocks", "pandoc_version", *API_VERSION_ALIASES})


class Document:
    """Root of a pandoc document.

    The constructor accepts exactly one of these shapes:

    1. ``Document([{"unMeta": meta}, blocks])``, the legacy array form
       used before pandoc 1.18 (API version 1.16)
    2. ``Document({"meta": ..., "blocks": ..., "pandoc-api-version": ...})``,
       the object form (``pandoc_api_version`` and ``api_version`` are
       accepted as aliases, and a ``pandoc_version`` release is used when no
       API version is given; default API 1.17)
    3. ``Document(meta, blocks, api_version=..., pandoc_version=...)``

    Raw wire structures in ``meta`` and ``blocks`` are converted to
    :class:`Element` instances immediately.

    Raises
    ------
    AmbiguousArgumentsError
        If the arguments match none of the shapes
    UnsupportedVersionError
        If the API version is below 1.12.3 or the release is unsupported
    VersionFormatError
        If the API version has no minor part

    """

    def __init__(self, *args: Any, **kwargs: Any):
        """Create a document from one of the accepted argument shapes."""
        unexpected = set(kwargs) - _DOCUMENT_KEYWORDS
        if unexpected:
            raise AmbiguousArgumentsError(f"Document: unexpected keyword arguments {sorted(unexpected)}")

        source: dict[str, Any]
        if len(args) == 0:
            source = {}
        elif len(args) == 1:
            data = args[0]
            if isinstance(data, Mapping):
                source = dict(data)
            elif is_legacy_document(data):
                source = upgrade_document(data)
            else:
                raise AmbiguousArgumentsError("Document: expect a legacy array or a mapping")
        elif len(args) == 2:
            source = {"meta": args[0], "blocks": args[1]}
        else:
            raise AmbiguousArgumentsError("Document: too many or ambiguous arguments")
        source.update(kwargs)

        self._meta: dict[str, Element] = _coerce_meta(source.get("meta"))
        self._blocks: list[Element] = _coerce_blocks(source.get("blocks"))
        self._api_version: Version = Version(DEFAULT_API_VERSION)

        api_version = next((source[key] for key in API_VERSION_ALIASES if source.get(key) is not None), None)
        if api_version is None and source.get("pandoc_version") is not None:
            self.pandoc_version = source["pandoc_version"]
        else:
            self.api_version = api_version if api_version is not None else DEFAULT_API_VERSION

    # ------------------------------------------------------------------
    # Element-like protocol
    # ------------------------------------------------------------------

    tag = "Document"
    name = "Document"
    spec = DOCUMENT_SPEC
    category = "document"
    is_block = False
    is_inline = False
    is_meta = False
    is_document = True
    has_attributes = False

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    @property
    def meta(self) -> dict[str, Element]:
        """Return the metadata mapping."""
        return self._meta

    @meta.setter
    def meta(self, value: Optional[Mapping[str, Any]]) -> None:
        self._meta = _coerce_meta(value)

    @property
    def blocks(self) -> list[Element]:
        """Return the list of block elements."""
        return self._blocks

    @blocks.setter
    def blocks(self, value: Optional[Iterable[Any]]) -> None:
        self._blocks = _coerce_blocks(value)

    content = blocks

    @property
    def api_version(self) -> Version:
        """Return the pandoc-types API version of this document."""
        return self._api_version

    @api_version.setter
    def api_version(self, value: VersionLike) -> None:
        self._api_version = _check_api_version(value)

    @property
    def pandoc_version(self) -> Version:
        """Return the oldest pandoc release compatible with the API version."""
        return require_release_for_api(self._api_version)

    @pandoc_version.setter
    def pandoc_version(self, value: VersionLike) -> None:
        self.api_version = require_api_for_release(value)

    # ------------------------------------------------------------------
    # Text, metadata, traversal and serialization
    # ------------------------------------------------------------------

    def string(self) -> str:
        """Return the plain text of all blocks; metadata is not included."""
        from pandocast.ast.utils import stringify

        return stringify(self._blocks)

    def metavalue(self, key: Optional[str] = None) -> Any:
        """Return metadata flattened to plain Python values.

        Parameters
        ----------
        key : str, optional
            Return only this entry (None if absent) instead of the whole mapping

        """
        from pandocast.ast.utils import metavalue

        if key is not None:
            entry = self._meta.get(key)
            return None if entry is None else metavalue(entry)
        return {name: metavalue(value) for name, value in self._meta.items()}

    def match(self, selector: SelectorLike) -> bool:
        """Return whether the document matches a selector expression."""
        from pandocast.ast.selectors import Selector

        return Selector.parse(selector).match(self)

    def walk(self, action: Action, *args: Any) -> None:
        """Call ``action`` on every element, see :func:`pandocast.ast.walker.walk`."""
        from pandocast.ast.walker import walk

        walk(self, action, *args)

    def query(self, action: Action, *args: Any) -> list[Any]:
        """Collect results from every element, see :func:`pandocast.ast.walker.query`."""
        from pandocast.ast.walker import query

        return query(self, action, *args)

    def transform(self, action: Action, *args: Any) -> Document:
        """Rewrite elements, see :func:`pandocast.ast.walker.transform`."""
        from pandocast.ast.walker import transform

        return transform(self, action, *args)

    def to_json(self, pandoc_version: Optional[VersionLike] = None) -> str:
        """Encode the document as pandoc JSON, see :func:`pandocast.ast.serialization.encode`."""
        from pandocast.ast.serialization import encode

        return encode(self, pandoc_version=pandoc_version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return (
            self._api_version == other._api_version
            and self._meta == other._meta
            and self._blocks == other._blocks
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Document(meta={self._meta!r}, blocks={self._blocks!r}, api_version='{self._api_version}')"


__all__ = [
    "Element",
    "Document",
    "Citation",
    "DefinitionPair",
    "element",
    "citation",
    "coerce_bool",
]
