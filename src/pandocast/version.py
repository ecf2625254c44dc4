#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pandocast/version.py
"""Version numbers and the pandoc release/API compatibility table.

Pandoc documents declare the version of the pandoc-types library they were
written with (the "API version"); pandoc executables are identified by their
release version. Each pandoc release only reads documents whose API version
matches the one it was built with, so pandocast needs to map between the two.

Examples
--------
Find the first release able to read a document:

    >>> from pandocast.version import minimum_api_for_release, minimum_release_for_api
    >>> str(minimum_release_for_api("1.17.0.4"))
    '1.18'

Find the API a release requires:

    >>> str(minimum_api_for_release("1.16.0.2"))
    '1.16'

"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Iterable
from typing import Any, Optional, Union

from packaging.version import InvalidVersion
from packaging.version import Version as PackagingVersion

from pandocast.constants import PANDOC_API_MIN, PANDOC_BIN_MIN, REQUIRED_API
from pandocast.exceptions import UnsupportedVersionError, VersionFormatError

logger = logging.getLogger(__name__)

_RELEASE_LINE_RE = re.compile(r"^\S*pandoc\S*\s+v?(\d+(?:\.\d+)*)", re.MULTILINE)
_API_LINE_RE = re.compile(r"pandoc-types\s+v?(\d+(?:\.\d+)*)")


@functools.total_ordering
class Version:
    """A dotted version number such as ``1.17.0.4``.

    Parsing and ordering are delegated to :class:`packaging.version.Version`,
    so missing trailing components compare as zero and
    ``Version("1.17") == Version("1.17.0")``. The number of components is
    kept, because a version without a minor part is not a valid pandoc API
    version. Pre-release, post-release, development and local segments are
    rejected.

    Parameters
    ----------
    value : Version, str, int, float or sequence of int
        The version to parse

    Raises
    ------
    VersionFormatError
        If the value is not a dotted sequence of non-negative integers

    """

    __slots__ = ("_version",)

    def __init__(self, value: Any):
        """Parse a version from any supported representation."""
        self._version: PackagingVersion = _parse(value)

    @property
    def parts(self) -> tuple[int, ...]:
        """Return the numeric components."""
        return self._version.release

    def match(self, other: Any) -> bool:
        """Return whether this version starts with the components of ``other``.

        ``Version("1.17.0.4").match("1.17")`` is true, while
        ``Version("1.17").match("1.17.0.4")`` is false.

        """
        prefix = _as_version(other).parts
        return self.parts[: len(prefix)] == prefix

    def __eq__(self, other: object) -> bool:
        try:
            other_version = _as_version(other)
        except VersionFormatError:
            return NotImplemented
        return self._version == other_version._version

    def __lt__(self, other: object) -> bool:
        try:
            other_version = _as_version(other)
        except VersionFormatError:
            return NotImplemented
        return self._version < other_version._version

    def __hash__(self) -> int:
        return hash(self._version)

    def __len__(self) -> int:
        return len(self.parts)

    def __iter__(self):
        return iter(self.parts)

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.parts)

    def __repr__(self) -> str:
        return f"Version('{self}')"


VersionLike = Union[Version, str, int, float, Iterable[int]]


def _parse_text(text: str, original: Any) -> PackagingVersion:
    try:
        parsed = PackagingVersion(text)
    except InvalidVersion as exc:
        raise VersionFormatError(f"invalid version: {original!r}", version=original, original_error=exc) from exc
    if parsed.epoch or parsed.pre or parsed.post is not None or parsed.dev is not None or parsed.local:
        raise VersionFormatError(f"invalid version: {original!r}", version=original)
    return parsed


def _parse(value: Any) -> PackagingVersion:
    if isinstance(value, Version):
        return value._version
    if isinstance(value, bool):
        raise VersionFormatError(f"invalid version: {value!r}", version=value)
    if isinstance(value, (int, float)):
        return _parse_text(str(value), value)
    if isinstance(value, str):
        return _parse_text(value, value)
    if isinstance(value, Iterable):
        parts = list(value)
        if not parts:
            raise VersionFormatError("invalid version: empty", version=value)
        try:
            numbers = [int(part) for part in parts]
        except (TypeError, ValueError) as exc:
            raise VersionFormatError(f"invalid version: {value!r}", version=value, original_error=exc) from exc
        if any(number < 0 for number in numbers):
            raise VersionFormatError(f"invalid version: {value!r}", version=value)
        return _parse_text(".".join(str(number) for number in numbers), value)
    raise VersionFormatError(f"invalid version: {value!r}", version=value)


def _as_version(value: Any) -> Version:
    return value if isinstance(value, Version) else Version(value)


API_MIN = Version(PANDOC_API_MIN)
BIN_MIN = Version(PANDOC_BIN_MIN)
_REQUIRED_API: tuple[tuple[Version, Version], ...] = tuple(
    (Version(release), Version(api)) for release, api in REQUIRED_API
)

# Release assumed when neither a document nor configuration names one
DEFAULT_RELEASE = _REQUIRED_API[0][0]


def minimum_release_for_api(api_version: VersionLike) -> Optional[Version]:
    """Return the oldest pandoc release compatible with an API version.

    Parameters
    ----------
    api_version : VersionLike
        A pandoc-types API version

    Returns
    -------
    Version or None
        The first release whose required API the version matches, the
        oldest supported release for APIs at or above the floor, or None
        for APIs below the floor.

    """
    api = _as_version(api_version)
    for release, required in _REQUIRED_API:
        if api.match(required):
            return release
    return BIN_MIN if api >= API_MIN else None


def minimum_api_for_release(release_version: VersionLike) -> Optional[Version]:
    """Return the minimum pandoc-types API version required by a pandoc release.

    Parameters
    ----------
    release_version : VersionLike
        A pandoc release version; it must have a major and a minor part

    Returns
    -------
    Version or None
        The required API version, or None if the release is unsupported
        or lacks a minor part.

    """
    release = _as_version(release_version)
    if len(release) <= 1:
        return None
    for candidate, required in _REQUIRED_API:
        if release.match(candidate):
            return required
    return API_MIN if release >= BIN_MIN else None


def require_release_for_api(api_version: VersionLike) -> Version:
    """Like :func:`minimum_release_for_api` but raise instead of returning None."""
    release = minimum_release_for_api(api_version)
    if release is None:
        raise UnsupportedVersionError(f"pandoc-types API {api_version} is not supported", version=api_version)
    return release


def require_api_for_release(release_version: VersionLike) -> Version:
    """Like :func:`minimum_api_for_release` but raise instead of returning None."""
    api = minimum_api_for_release(release_version)
    if api is None:
        raise UnsupportedVersionError(f"pandoc version {release_version} is not supported", version=release_version)
    return api


def parse_version_output(text: str) -> tuple[Version, Version]:
    """Extract release and API versions from ``pandoc --version`` output.

    Parameters
    ----------
    text : str
        Output of ``pandoc --version``

    Returns
    -------
    tuple of Version
        The release version and the API version. When the output does not
        mention pandoc-types, the API is derived from the release.

    Raises
    ------
    VersionFormatError
        If no release version can be found
    UnsupportedVersionError
        If the release predates the oldest supported pandoc

    Examples
    --------
    >>> release, api = parse_version_output("pandoc 1.18\\nCompiled with pandoc-types 1.17.0.4")
    >>> str(release), str(api)
    ('1.18', '1.17.0.4')

    """
    release_match = _RELEASE_LINE_RE.search(text)
    if not release_match:
        raise VersionFormatError(f"no pandoc version found in {text[:50]!r}", version=text)
    release = Version(release_match.group(1))

    api_match = _API_LINE_RE.search(text)
    if api_match:
        api = Version(api_match.group(1))
    else:
        api = require_api_for_release(release)
        logger.debug("No pandoc-types version reported, assuming API %s for pandoc %s", api, release)
    return release, api


__all__ = [
    "Version",
    "VersionLike",
    "API_MIN",
    "BIN_MIN",
    "DEFAULT_RELEASE",
    "minimum_release_for_api",
    "minimum_api_for_release",
    "require_release_for_api",
    "require_api_for_release",
    "parse_version_output",
]
