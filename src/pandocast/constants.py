#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the pandocast library.

This module centralizes the version numbers, wire-format keys and default
configuration values used across pandocast.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Version Compatibility - API/release floors and the compatibility table
3. Wire Format - JSON keys used by the pandoc AST
4. Encoding Defaults - Default JSON output settings
5. Coercion - Spellings accepted as boolean false
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

Category = Literal["block", "inline", "meta", "document"]

# Field kinds drive eager decoding and encode-time coercion of payload slots
FieldKind = Literal["value", "attr", "citations", "level", "list_attributes", "widths", "bool", "map"]

# =============================================================================
# Version Compatibility
# =============================================================================

# Oldest pandoc-types API using the {"t": ..., "c": ...} element encoding
PANDOC_API_MIN = "1.12.3"

# First pandoc release shipping PANDOC_API_MIN
PANDOC_BIN_MIN = "1.12.1"

# Pandoc release => minimum pandoc-types API required, first match wins.
# pandoc 1.18 ships api 1.17.0.4, which is compatible with api 1.17.
REQUIRED_API: tuple[tuple[str, str], ...] = (
    ("1.18", "1.17"),
    ("1.16", "1.16"),
    ("1.17", "1.16"),
)

# API assumed for documents that do not declare one
DEFAULT_API_VERSION = "1.17"

# API assumed for the legacy two-element array document form
LEGACY_API_VERSION = "1.16"

# First API whose documents serialize as a flat object
FLAT_DOCUMENT_API = "1.17"

# Releases introducing version-sensitive element shapes
SOFTBREAK_RELEASE = "1.16"
LINK_ATTRIBUTES_RELEASE = "1.16"
LINEBLOCK_RELEASE = "1.18"

# Environment variable holding the preferred pandoc release
PANDOC_VERSION_ENV = "PANDOC_VERSION"

# =============================================================================
# Wire Format
# =============================================================================

TAG_KEY = "t"
CONTENT_KEY = "c"
API_VERSION_KEY = "pandoc-api-version"
LEGACY_META_KEY = "unMeta"

# Accepted spellings of the API version in the mapping document form
API_VERSION_ALIASES: tuple[str, ...] = (API_VERSION_KEY, "pandoc_api_version", "api_version")

CITATION_WIRE_KEYS: dict[str, str] = {
    "id": "citationId",
    "prefix": "citationPrefix",
    "suffix": "citationSuffix",
    "mode": "citationMode",
    "note_num": "citationNoteNum",
    "hash": "citationHash",
}

DEFAULT_CITATION_ID = "missing"
DEFAULT_CITATION_MODE = "NormalCitation"
DEFAULT_CITATION_NOTE_NUM = 0
DEFAULT_CITATION_HASH = 1

CITATION_MODE_ALIASES: dict[str, str] = {
    "Normal": "NormalCitation",
    "NormalCitation": "NormalCitation",
    "AuthorInText": "AuthorInText",
    "SuppressAuthor": "SuppressAuthor",
}

NBSP = "\u00a0"

# =============================================================================
# Encoding Defaults
# =============================================================================

DEFAULT_JSON_INDENT: int | None = None
DEFAULT_JSON_ENSURE_ASCII = False

# =============================================================================
# Coercion
# =============================================================================

FALSE_TOKENS: frozenset[str] = frozenset({"", "0", "false", "FALSE"})
