#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/options.py
"""Options for encoding documents to pandoc JSON.

This module provides the configuration object accepted by
:func:`pandocast.ast.serialization.encode`.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any, Optional

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from pandocast.constants import DEFAULT_JSON_ENSURE_ASCII, DEFAULT_JSON_INDENT
from pandocast.version import Version


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class EncodeOptions(CloneFrozenMixin):
    """Options for encoding documents to pandoc JSON.

    Keys are always sorted, so output is deterministic regardless of these
    options.

    Parameters
    ----------
    pandoc_version : Version, str or None, default = None
        Target pandoc release. None falls back to the process-wide preferred
        release, then to the release required by the document's API version.
    indent : int or None, default = None
        Number of spaces for JSON indentation. None for compact output.
    ensure_ascii : bool, default = False
        Whether to escape non-ASCII characters in JSON output

    Examples
    --------
    Encode for pandoc 1.16 with pretty printing:
        >>> options = EncodeOptions(pandoc_version="1.16", indent=2)

    """

    pandoc_version: Optional[Version] = field(
        default=None,
        metadata={"help": "Target pandoc release (e.g. 1.18)", "importance": "core"},
    )
    indent: int | None = field(
        default=DEFAULT_JSON_INDENT,
        metadata={"help": "JSON indentation spaces (None for compact)", "type": int, "importance": "advanced"},
    )
    ensure_ascii: bool = field(
        default=DEFAULT_JSON_ENSURE_ASCII,
        metadata={"help": "Escape non-ASCII characters in JSON", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Normalize the target release and validate numeric ranges.

        Raises
        ------
        VersionFormatError
            If pandoc_version cannot be parsed
        ValueError
            If indent is negative

        """
        if self.pandoc_version is not None and not isinstance(self.pandoc_version, Version):
            object.__setattr__(self, "pandoc_version", Version(self.pandoc_version))
        if self.indent is not None and self.indent < 0:
            raise ValueError(f"indent must be non-negative, got {self.indent}")


__all__ = ["CloneFrozenMixin", "EncodeOptions"]
