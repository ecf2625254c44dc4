#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/serialization.py
"""JSON serialization and deserialization for pandoc documents.

This module converts between pandoc's JSON wire format and the element tree
of :mod:`pandocast.ast.nodes`.

Decoding is eager: every ``{"t": ..., "c": ...}`` mapping becomes an
:class:`~pandocast.ast.nodes.Element`, attribute slots become
:class:`~pandocast.ast.attributes.AttributeSet` values and citations become
:class:`~pandocast.ast.nodes.Citation` values before the document is
returned. Older shapes are upgraded on the way in.

Encoding runs every element through the downgrade rules of
:mod:`pandocast.ast.compat` for the target pandoc release and coerces
scalars to the JSON types pandoc expects. Keys are always sorted.

Examples
--------
Decode a document, change it and encode it again:

    >>> from pandocast.ast.serialization import decode, encode
    >>> doc = decode('{"blocks":[{"t":"Para","c":[{"t":"Str","c":"Hi"}]}],'
    ...              '"meta":{},"pandoc-api-version":[1,17,0,4]}')
    >>> doc.blocks[0].content[0].content = "Hello"
    >>> encode(doc)
    '{"blocks": [{"c": [{"c": "Hello", "t": "Str"}], "t": "Para"}], "meta": {}, "pandoc-api-version": [1, 17, 0, 4]}'

Target an older pandoc by lowering the document's API version:

    >>> doc.pandoc_version = "1.16"
    >>> encode(doc)
    '[{"unMeta": {}}, [{"c": [{"c": "Hello", "t": "Str"}], "t": "Para"}]]'

"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from pandocast.ast.attributes import AttributeSet, is_wire_attributes
from pandocast.ast.compat import document_wire, downgrade, effective_release, is_legacy_document, upgrade_payload
from pandocast.ast.nodes import Citation, Document, Element, citation
from pandocast.ast.schema import FieldSpec, get_spec
from pandocast.constants import CITATION_WIRE_KEYS, CONTENT_KEY, TAG_KEY
from pandocast.exceptions import AmbiguousArgumentsError, ArityError, CoercionError, PandocAstError, ParseError
from pandocast.options import EncodeOptions
from pandocast.version import Version, VersionLike

logger = logging.getLogger(__name__)

_WIRE_TO_CITATION_KEY = {wire: short for short, wire in CITATION_WIRE_KEYS.items()}


# ----------------------------------------------------------------------
# Scalar coercion
# ----------------------------------------------------------------------


def _coerce_int(value: Any, field_name: str) -> int:
    try:
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text)
            except ValueError:
                return int(float(text))
        return int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise CoercionError(
            f"cannot coerce {value!r} to an integer for {field_name}",
            field=field_name,
            value=value,
            original_error=exc,
        ) from exc


def _coerce_float(value: Any, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise CoercionError(
            f"cannot coerce {value!r} to a number for {field_name}",
            field=field_name,
            value=value,
            original_error=exc,
        ) from exc


def _coerce_text(value: Any) -> str:
    return "" if value is None else str(value)


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------


def _encode_slot(tag: str, spec: FieldSpec, value: Any, release: Version) -> Any:
    if spec.kind == "attr":
        return value.to_wire()
    if spec.kind == "level":
        return _coerce_int(value, f"{tag}.{spec.name}")
    if spec.kind == "bool":
        return bool(value)
    if spec.kind == "widths":
        return [_coerce_float(width, f"{tag}.{spec.name}") for width in value or []]
    if spec.kind == "list_attributes":
        if not isinstance(value, (list, tuple)) or len(value) != 3:
            raise CoercionError(
                f"{tag}.{spec.name} must be [start, style, delimiter], got {value!r}",
                field=f"{tag}.{spec.name}",
                value=value,
            )
        start, style, delimiter = value
        return [_coerce_int(start, f"{tag}.start"), to_wire(style, release), to_wire(delimiter, release)]
    return to_wire(value, release)


def _encode_element(node: Element, release: Version) -> Any:
    spec = node.spec
    if spec.arity == 0:
        payload: Any = []
    elif spec.arity == 1:
        payload = _encode_slot(spec.tag, spec.fields[0], node.payload, release)
    else:
        payload = [
            _encode_slot(spec.tag, field_spec, value, release) for field_spec, value in zip(spec.fields, node.payload)
        ]
    return downgrade({TAG_KEY: spec.tag, CONTENT_KEY: payload}, release)


def _encode_citation(item: Citation, release: Version) -> dict[str, Any]:
    wire = CITATION_WIRE_KEYS
    return {
        wire["id"]: _coerce_text(item.id),
        wire["prefix"]: to_wire(item.prefix, release),
        wire["suffix"]: to_wire(item.suffix, release),
        wire["mode"]: to_wire(item.mode, release),
        wire["note_num"]: _coerce_int(item.note_num, "citationNoteNum"),
        wire["hash"]: _coerce_int(item.hash, "citationHash"),
    }


def to_wire(value: Any, release: Optional[VersionLike] = None) -> Any:
    """Convert a tree or any part of it to JSON-compatible structures.

    Parameters
    ----------
    value : Document, Element, AttributeSet, Citation, list, dict or scalar
        The value to convert
    release : VersionLike, optional
        Target pandoc release; defaults to :func:`pandocast.ast.compat.effective_release`

    Returns
    -------
    Any
        Plain lists, dicts, strings, numbers and booleans. Scalars outside
        numeric and boolean slots are converted to strings (None to "").

    Raises
    ------
    CoercionError
        If a numeric slot holds a value that is not a number

    """
    if release is None:
        release = effective_release(document=value if isinstance(value, Document) else None)
    elif not isinstance(release, Version):
        release = Version(release)

    if isinstance(value, Element):
        return _encode_element(value, release)
    if isinstance(value, Document):
        meta = {key: to_wire(entry, release) for key, entry in value.meta.items()}
        blocks = [to_wire(block, release) for block in value.blocks]
        return document_wire(meta, blocks, value.api_version)
    if isinstance(value, AttributeSet):
        return value.to_wire()
    if isinstance(value, Citation):
        return _encode_citation(value, release)
    if isinstance(value, (list, tuple)):
        return [to_wire(item, release) for item in value]
    if isinstance(value, Mapping):
        return {_coerce_text(key): to_wire(item, release) for key, item in value.items()}
    return _coerce_text(value)


def encode(
    document: Union[Document, Element],
    options: Optional[EncodeOptions] = None,
    *,
    pandoc_version: Optional[VersionLike] = None,
) -> str:
    """Encode a document as pandoc JSON.

    Parameters
    ----------
    document : Document or Element
        The tree to encode
    options : EncodeOptions, optional
        JSON formatting and target release
    pandoc_version : VersionLike, optional
        Target pandoc release, overriding ``options.pandoc_version``

    Returns
    -------
    str
        JSON text with sorted keys

    Raises
    ------
    CoercionError
        If a numeric slot holds a value that is not a number

    Notes
    -----
    The target release is the first of: ``pandoc_version``,
    ``options.pandoc_version``, the process-wide preferred release
    (:mod:`pandocast.config`), and the minimum release of the document's
    API version.

    """
    if options is None:
        options = EncodeOptions()
    explicit = pandoc_version if pandoc_version is not None else options.pandoc_version
    release = effective_release(explicit, document if isinstance(document, Document) else None)
    logger.debug("Encoding %s for pandoc %s", type(document).__name__, release)
    return json.dumps(
        to_wire(document, release),
        sort_keys=True,
        indent=options.indent,
        ensure_ascii=options.ensure_ascii,
    )


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------


def _decode_citation(data: Any) -> Citation:
    if isinstance(data, Citation):
        return data
    if not isinstance(data, Mapping):
        raise ParseError(f"citation must be an object, got {type(data).__name__}")
    values = {}
    for key, value in data.items():
        short = _WIRE_TO_CITATION_KEY.get(key, key)
        values[short] = from_wire(value) if short in ("prefix", "suffix", "mode") else value
    try:
        return citation(values)
    except TypeError as exc:
        raise ParseError(str(exc), original_error=exc) from exc


def _decode_slot(tag: str, spec: FieldSpec, value: Any) -> Any:
    if spec.kind == "attr":
        if not isinstance(value, AttributeSet) and not is_wire_attributes(value):
            raise ParseError(f"{tag}.{spec.name} must be [id, [classes], [[key, value], ...]], got {value!r}")
        return value
    if spec.kind == "citations":
        return [_decode_citation(item) for item in value or []]
    return from_wire(value)


def _decode_element(data: Mapping[str, Any]) -> Element:
    tag = data[TAG_KEY]
    spec = get_spec(tag)
    if spec.arity and CONTENT_KEY not in data:
        raise ArityError(f"{tag} expects content", tag=tag, expected=spec.arity, given=0)
    payload = upgrade_payload(tag, data.get(CONTENT_KEY))

    if spec.arity == 1:
        payload = _decode_slot(tag, spec.fields[0], payload)
    elif spec.arity > 1 and isinstance(payload, (list, tuple)) and len(payload) == spec.arity:
        payload = [_decode_slot(tag, field_spec, value) for field_spec, value in zip(spec.fields, payload)]
    return Element.from_payload(tag, payload)


def from_wire(value: Any) -> Any:
    """Convert JSON-compatible structures to elements.

    Every mapping with a string ``t`` key becomes an :class:`Element`; other
    mappings and lists are converted item by item; elements, documents and
    scalars are returned unchanged.

    Raises
    ------
    UnknownTagError
        If a tag is not part of the element table
    ArityError
        If a payload does not have the shape of its tag

    """
    if isinstance(value, (Element, Document, AttributeSet, Citation)):
        return value
    if isinstance(value, Mapping):
        if isinstance(value.get(TAG_KEY), str):
            return _decode_element(value)
        return {key: from_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [from_wire(item) for item in value]
    return value


def decode(text: Union[str, bytes]) -> Document:
    """Decode pandoc JSON into a document.

    Parameters
    ----------
    text : str or bytes
        JSON text in the flat object form (API 1.17 and newer) or the
        legacy array form

    Returns
    -------
    Document
        The fully converted document

    Raises
    ------
    ParseError
        If the text is not valid UTF-8 JSON or not a pandoc document, or if
        a value has the wrong type for its position
    UnknownTagError
        If an element tag is not part of the element table
    ArityError
        If a payload, the metadata or the block list does not have the
        expected shape

    Examples
    --------
    >>> decode('[{"unMeta":{}},[]]').api_version
    Version('1.16')

    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"malformed JSON at line {exc.lineno} column {exc.colno}: {exc.msg}", original_error=exc
        ) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"invalid {exc.encoding} text at byte {exc.start}: {exc.reason}", original_error=exc) from exc

    if not isinstance(data, Mapping) and not is_legacy_document(data):
        raise ParseError(f"expected a pandoc document object or array, got {type(data).__name__}")
    try:
        return Document(data)
    except AmbiguousArgumentsError as exc:
        raise ParseError(exc.message, original_error=exc) from exc
    except PandocAstError:
        raise
    except (TypeError, ValueError, AttributeError, LookupError) as exc:
        raise ParseError(f"malformed pandoc document: {exc}", original_error=exc) from exc


__all__ = [
    "decode",
    "encode",
    "to_wire",
    "from_wire",
    "effective_release",
]
