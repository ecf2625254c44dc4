#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/ast/compat.py
"""Upgrade and downgrade rules between pandoc-types API revisions.

The in-memory tree always uses the newest shapes. Structures read from older
pandoc releases are upgraded before they become elements, and encoded
structures are downgraded for the pandoc release they are written for.

Read-time upgrades
------------------
- the legacy ``[{"unMeta": meta}, blocks]`` document array (API 1.16)
- ``Link`` and ``Image`` payloads without attribute slot

Write-time downgrades
---------------------
- ``SoftBreak`` becomes ``Space`` below pandoc 1.16
- ``Link`` and ``Image`` lose their attribute slot below pandoc 1.16
- ``LineBlock`` lines get leading spaces replaced by non-breaking spaces,
  and below pandoc 1.18 the block becomes a ``Para`` with ``LineBreak``
  between the lines
- documents with API 1.17 or newer are written as flat objects, older ones
  as the legacy array

The downgrade functions operate on freshly encoded wire structures and may
modify them in place.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pandocast.config import get_preferred_pandoc_version
from pandocast.constants import (
    API_VERSION_KEY,
    CONTENT_KEY,
    FLAT_DOCUMENT_API,
    LEGACY_API_VERSION,
    LEGACY_META_KEY,
    LINEBLOCK_RELEASE,
    LINK_ATTRIBUTES_RELEASE,
    NBSP,
    SOFTBREAK_RELEASE,
    TAG_KEY,
)
from pandocast.version import DEFAULT_RELEASE, Version, VersionLike

logger = logging.getLogger(__name__)

_LINK_TAGS = frozenset({"Link", "Image"})
_EMPTY_ATTRIBUTES: list[Any] = ["", [], []]


# ----------------------------------------------------------------------
# Read-time upgrades
# ----------------------------------------------------------------------


def is_legacy_document(data: Any) -> bool:
    """Return whether ``data`` has the legacy two-element document shape."""
    return (
        isinstance(data, (list, tuple))
        and len(data) == 2
        and (data[0] is None or isinstance(data[0], Mapping))
        and isinstance(data[1], (list, tuple))
    )


def upgrade_document(data: Any) -> dict[str, Any]:
    """Convert a legacy document array into the mapping document form.

    Parameters
    ----------
    data : list
        ``[{"unMeta": meta}, blocks]``

    Returns
    -------
    dict
        Mapping with ``meta``, ``blocks`` and ``api_version`` (1.16)

    """
    wrapper, blocks = data
    meta = (wrapper or {}).get(LEGACY_META_KEY) or {}
    logger.debug("Upgrading legacy document array to API %s", LEGACY_API_VERSION)
    return {"meta": meta, "blocks": blocks, "api_version": LEGACY_API_VERSION}


def upgrade_payload(tag: str, payload: Any) -> Any:
    """Upgrade a wire payload to the newest shape of its tag.

    ``Link`` and ``Image`` written by pandoc before 1.16 have no attribute
    slot; an empty attribute set is prepended.

    """
    if tag in _LINK_TAGS and isinstance(payload, (list, tuple)) and len(payload) == 2:
        logger.debug("Adding empty attributes to %s without attribute slot", tag)
        return [list(_EMPTY_ATTRIBUTES), *payload]
    return payload


# ----------------------------------------------------------------------
# Write-time downgrades
# ----------------------------------------------------------------------


def _wire(tag: str, payload: Any = None) -> dict[str, Any]:
    return {TAG_KEY: tag, CONTENT_KEY: [] if payload is None else payload}


def _protect_leading_spaces(line: Any) -> None:
    if not line or not isinstance(line[0], dict) or line[0].get(TAG_KEY) != "Str":
        return
    text = line[0].get(CONTENT_KEY, "")
    stripped = text.lstrip(" ")
    if len(stripped) != len(text):
        line[0][CONTENT_KEY] = NBSP * (len(text) - len(stripped)) + stripped


def _downgrade_line_block(wire: dict[str, Any], release: Version) -> dict[str, Any]:
    lines = wire[CONTENT_KEY]
    for line in lines:
        _protect_leading_spaces(line)
    if release >= LINEBLOCK_RELEASE:
        return wire

    logger.debug("Decomposing LineBlock into Para for pandoc %s", release)
    inlines: list[Any] = []
    for line in lines:
        inlines.extend(line)
        inlines.append(_wire("LineBreak"))
    if inlines:
        inlines.pop()
    return _wire("Para", inlines)


def downgrade(wire: dict[str, Any], release: Version) -> dict[str, Any]:
    """Apply the write-time rule of an encoded element for a target release.

    Parameters
    ----------
    wire : dict
        Encoded element ``{"t": tag, "c": payload}``
    release : Version
        Target pandoc release

    Returns
    -------
    dict
        The encoded element to write, possibly ``wire`` itself

    """
    tag = wire[TAG_KEY]
    if tag == "SoftBreak":
        return _wire("Space") if release < SOFTBREAK_RELEASE else wire
    if tag in _LINK_TAGS:
        if release < LINK_ATTRIBUTES_RELEASE:
            wire[CONTENT_KEY] = wire[CONTENT_KEY][1:]
        return wire
    if tag == "LineBlock":
        return _downgrade_line_block(wire, release)
    return wire


def document_wire(meta: dict[str, Any], blocks: list[Any], api_version: Version) -> Any:
    """Return the wire form of a document for its API version.

    API 1.17 and newer use ``{"blocks", "meta", "pandoc-api-version"}``;
    older APIs use ``[{"unMeta": meta}, blocks]``.

    """
    if api_version >= FLAT_DOCUMENT_API:
        return {"blocks": blocks, "meta": meta, API_VERSION_KEY: list(api_version.parts)}
    return [{LEGACY_META_KEY: meta}, blocks]


# ----------------------------------------------------------------------
# Target release
# ----------------------------------------------------------------------


def pandoc_version(document: Any = None, release: Optional[VersionLike] = None) -> Version:
    """Return (or set) the pandoc release used for encoding.

    Parameters
    ----------
    document : Document, optional
        With a document, return its minimum compatible pandoc release
    release : VersionLike, optional
        With a document, first set its API version to the minimum API
        required by this release

    Returns
    -------
    Version
        The document's release, or without a document the process-wide
        preferred release, falling back to pandoc 1.18

    Raises
    ------
    UnsupportedVersionError
        If ``release`` has no compatible API version

    Examples
    --------
    >>> str(pandoc_version())
    '1.18'

    """
    if document is not None:
        if release is not None:
            document.pandoc_version = release
        return document.pandoc_version
    preferred = get_preferred_pandoc_version()
    return preferred if preferred is not None else DEFAULT_RELEASE


def effective_release(explicit: Optional[VersionLike] = None, document: Any = None) -> Version:
    """Return the pandoc release an encode call targets.

    The explicit argument wins, then the process-wide preferred release,
    then the document's own release, then pandoc 1.18.

    """
    if explicit is not None:
        return Version(explicit)
    preferred = get_preferred_pandoc_version()
    if preferred is not None:
        return preferred
    if document is not None:
        return document.pandoc_version
    return DEFAULT_RELEASE


__all__ = [
    "is_legacy_document",
    "upgrade_document",
    "upgrade_payload",
    "downgrade",
    "document_wire",
    "pandoc_version",
    "effective_release",
]
