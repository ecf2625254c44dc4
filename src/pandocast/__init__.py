"""pandocast - A Python library for the pandoc JSON abstract syntax tree.

pandocast reads, builds, queries, rewrites and writes documents in the JSON
format that pandoc uses to exchange documents with filters. It supports the
pandoc-types API revisions 1.12.3 through 1.17 and converts between their
wire shapes, so a filter written against the newest element shapes can talk
to older pandoc releases.

Key Features
------------
- One generic Element class driven by a declarative table of tags
- Attribute sets with multi-valued key/value pairs
- Eager decoding with upgrades of legacy document shapes
- Encoding for a chosen pandoc release with per-element downgrades
- walk, query and transform traversals with selector maps

Requirements
------------
- Python 3.10+

Examples
--------
A filter that turns emphasis into strong emphasis:

    >>> import sys
    >>> from pandocast import decode, element, encode, transform
    >>> doc = decode(sys.stdin.read())
    >>> transform(doc, {"Emph": lambda e: element("Strong", e.content)})
    >>> sys.stdout.write(encode(doc))

Configure the default target release with the ``PANDOC_VERSION``
environment variable or :func:`pandocast.config.set_preferred_pandoc_version`.

See Also
--------
pandocast.ast : element model, codec and traversals
pandocast.version : version numbers and the release/API table

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "pandocast requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from pandocast.ast import (
    AttributeSet,
    Citation,
    DefinitionPair,
    Document,
    Element,
    Selector,
    attributes,
    citation,
    decode,
    element,
    encode,
    metavalue,
    pandoc_version,
    query,
    stringify,
    transform,
    walk,
)
from pandocast.config import get_preferred_pandoc_version, set_preferred_pandoc_version
from pandocast.exceptions import (
    AmbiguousArgumentsError,
    ArityError,
    CoercionError,
    PandocAstError,
    ParseError,
    SelectorSyntaxError,
    SetterMisuseError,
    TransformError,
    UnknownTagError,
    UnsupportedVersionError,
    VersionFormatError,
)
from pandocast.options import EncodeOptions
from pandocast.version import (
    Version,
    minimum_api_for_release,
    minimum_release_for_api,
    parse_version_output,
)

__all__ = [
    "__version__",
    # Elements
    "Element",
    "Document",
    "AttributeSet",
    "Citation",
    "DefinitionPair",
    "element",
    "attributes",
    "citation",
    # Codec
    "decode",
    "encode",
    "EncodeOptions",
    # Traversal
    "walk",
    "query",
    "transform",
    "Selector",
    "stringify",
    "metavalue",
    # Versions
    "Version",
    "pandoc_version",
    "minimum_api_for_release",
    "minimum_release_for_api",
    "parse_version_output",
    "get_preferred_pandoc_version",
    "set_preferred_pandoc_version",
    # Exceptions
    "PandocAstError",
    "ArityError",
    "VersionFormatError",
    "UnknownTagError",
    "ParseError",
    "UnsupportedVersionError",
    "AmbiguousArgumentsError",
    "SetterMisuseError",
    "SelectorSyntaxError",
    "TransformError",
    "CoercionError",
]
