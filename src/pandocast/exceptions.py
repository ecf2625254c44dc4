#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the pandocast library.

This module defines specialized exception classes for the error conditions
that can occur while building, decoding, traversing and encoding pandoc
documents. Several of them also derive from the closest built-in exception
so that callers catching ``TypeError``, ``ValueError`` or ``AttributeError``
keep working.

Exception Hierarchy
-------------------
- PandocAstError (base exception)

  - ArityError (wrong number of constructor arguments; also TypeError)
    - VersionFormatError (version without a minor part or unparseable)

  - UnknownTagError (tag outside the element table; also ValueError)

  - ParseError (malformed wire JSON; also ValueError)

  - UnsupportedVersionError (no compatible API/release mapping)

  - AmbiguousArgumentsError (Document called with an unknown shape; also TypeError)

  - SetterMisuseError (assignment to a read-only accessor; also AttributeError)

  - SelectorSyntaxError (malformed selector expression; also ValueError)

  - TransformError (a transform result cannot be placed in the tree)

  - CoercionError (a scalar cannot be coerced for its slot; also ValueError)

"""

from typing import Any


class PandocAstError(Exception):
    """Base exception class for all pandocast-specific errors.

    Catching this will catch all library-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ArityError(PandocAstError, TypeError):
    """Exception raised when an element is built from the wrong number of arguments.

    Parameters
    ----------
    message : str
        Description of the arity mismatch
    tag : str, optional
        Element tag being constructed
    expected : int, optional
        Number of arguments the tag declares
    given : int, optional
        Number of arguments actually supplied

    """

    def __init__(
        self,
        message: str,
        tag: str | None = None,
        expected: int | None = None,
        given: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the arity error with the offending counts."""
        super().__init__(message, original_error=original_error)
        self.tag = tag
        self.expected = expected
        self.given = given


class VersionFormatError(ArityError):
    """Exception raised when a version has too few components or cannot be parsed.

    Parameters
    ----------
    message : str
        Description of the problem
    version : any, optional
        The rejected version value

    """

    def __init__(self, message: str, version: Any = None, original_error: Exception | None = None):
        """Initialize the version format error."""
        super().__init__(message, original_error=original_error)
        self.version = version


class UnknownTagError(PandocAstError, ValueError):
    """Exception raised for element tags outside the closed element table."""

    def __init__(self, tag: Any, message: str | None = None):
        """Initialize the error for the given tag."""
        if message is None:
            message = f"unknown element {tag!r}" if tag is not None else "undefined element"
        super().__init__(message)
        self.tag = tag


class ParseError(PandocAstError, ValueError):
    """Exception raised when wire JSON cannot be decoded into a document.

    The message describes the position in the input only; it never refers
    to the library's own source code.

    """


class UnsupportedVersionError(PandocAstError):
    """Exception raised when no API/release mapping exists for a version.

    Parameters
    ----------
    message : str
        Description of the problem
    version : any, optional
        The unsupported version

    """

    def __init__(self, message: str, version: Any = None, original_error: Exception | None = None):
        """Initialize the unsupported version error."""
        super().__init__(message, original_error=original_error)
        self.version = version


class AmbiguousArgumentsError(PandocAstError, TypeError):
    """Exception raised when Document() receives arguments it cannot interpret."""


class SetterMisuseError(PandocAstError, AttributeError):
    """Exception raised when a read-only accessor is assigned to."""

    def __init__(self, accessor: str, message: str | None = None):
        """Initialize the error for the named accessor."""
        if message is None:
            message = f"{accessor} is read-only"
        super().__init__(message)
        self.accessor = accessor


class SelectorSyntaxError(PandocAstError, ValueError):
    """Exception raised for malformed selector expressions.

    Parameters
    ----------
    message : str
        Description of the syntax problem
    selector : str, optional
        The full selector text

    """

    def __init__(self, message: str, selector: str | None = None):
        """Initialize the selector syntax error."""
        super().__init__(message)
        self.selector = selector


class TransformError(PandocAstError):
    """Exception raised when a transform result cannot be placed in the tree.

    This happens when a handler returns several elements for a position that
    holds exactly one element, such as a positional payload slot or a
    metadata mapping value.

    Parameters
    ----------
    message : str
        Description of the transform failure
    original_error : Exception, optional
        The underlying exception that caused the transform failure

    """


class CoercionError(PandocAstError, ValueError):
    """Exception raised when a value cannot be coerced to the type its slot requires.

    Parameters
    ----------
    message : str
        Description of the coercion failure
    field : str, optional
        Name of the slot being encoded
    value : any, optional
        The value that could not be coerced

    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the coercion error with field details."""
        super().__init__(message, original_error=original_error)
        self.field = field
        self.value = value


__all__ = [
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
