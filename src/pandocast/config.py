#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/config.py
"""Process-wide configuration for pandocast.

The only process-wide setting is the preferred pandoc release used when a
document is encoded without an explicit target. It is read once from the
``PANDOC_VERSION`` environment variable when this module is imported and can
be overridden with :func:`set_preferred_pandoc_version`.

Notes
-----
The preferred release is configuration, not shared state. Overriding it
from concurrent call sites is unsupported; pass ``pandoc_version=`` to
:func:`pandocast.ast.serialization.encode` or use
:class:`pandocast.options.EncodeOptions` for per-call control.

"""

from __future__ import annotations

import logging
import os
from typing import Optional

from pandocast.constants import PANDOC_VERSION_ENV
from pandocast.exceptions import VersionFormatError
from pandocast.version import Version, VersionLike

logger = logging.getLogger(__name__)


def _read_environment() -> Optional[Version]:
    env_value = os.environ.get(PANDOC_VERSION_ENV)
    if not env_value:
        return None
    try:
        return Version(env_value)
    except VersionFormatError as exc:
        logger.warning("Ignoring invalid %s=%r: %s", PANDOC_VERSION_ENV, env_value, exc.message)
        return None


_preferred_pandoc_version: Optional[Version] = _read_environment()


def get_preferred_pandoc_version() -> Optional[Version]:
    """Return the configured preferred pandoc release, or None if unset."""
    return _preferred_pandoc_version


def set_preferred_pandoc_version(version: Optional[VersionLike]) -> Optional[Version]:
    """Set the preferred pandoc release and return the previous value.

    Parameters
    ----------
    version : VersionLike or None
        The pandoc release to encode for by default; None clears the setting

    Returns
    -------
    Version or None
        The previously configured release

    Raises
    ------
    VersionFormatError
        If the version cannot be parsed

    """
    global _preferred_pandoc_version
    previous = _preferred_pandoc_version
    _preferred_pandoc_version = None if version is None else Version(version)
    logger.debug("Preferred pandoc version changed from %s to %s", previous, _preferred_pandoc_version)
    return previous


def reload_from_environment() -> Optional[Version]:
    """Re-read ``PANDOC_VERSION`` from the environment and return the new value."""
    global _preferred_pandoc_version
    _preferred_pandoc_version = _read_environment()
    return _preferred_pandoc_version


__all__ = [
    "get_preferred_pandoc_version",
    "set_preferred_pandoc_version",
    "reload_from_environment",
]
