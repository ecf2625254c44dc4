"""Pytest configuration and shared fixtures for the pandocast test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import json
from typing import Generator

import pytest

from pandocast.ast import Document, element
from pandocast.config import set_preferred_pandoc_version

# Configure Hypothesis for property-based testing
try:
    from hypothesis import HealthCheck, Phase, Verbosity, settings

    # The autouse configuration fixture is safe to share between examples
    _suppressed = [HealthCheck.function_scoped_fixture]

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose, suppress_health_check=_suppressed)
    settings.register_profile("dev", max_examples=20, suppress_health_check=_suppressed)
    settings.register_profile(
        "debug",
        max_examples=10,
        verbosity=Verbosity.verbose,
        phases=[Phase.explicit, Phase.reuse, Phase.generate],
        suppress_health_check=_suppressed,
    )

    # Load profile from environment or use default
    import os

    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")


@pytest.fixture(autouse=True)
def no_preferred_pandoc_version() -> Generator[None, None, None]:
    """Run every test without a process-wide preferred pandoc release.

    Yields
    ------
    None
        The previous setting is restored after the test.

    """
    previous = set_preferred_pandoc_version(None)
    try:
        yield
    finally:
        set_preferred_pandoc_version(previous)


@pytest.fixture
def sample_document() -> Document:
    """Provide a small document touching most element kinds.

    Returns
    -------
    Document
        Document with metadata, a header, a paragraph with a link and a list.

    """
    return Document(
        {
            "title": element("MetaInlines", [element("Str", "Sample"), element("Space"), element("Str", "Title")]),
            "draft": element("MetaBool", False),
            "tags": element("MetaList", [element("MetaString", "a"), element("MetaString", "b")]),
        },
        [
            element("Header", 1, {"id": "intro", "class": "top"}, [element("Str", "Introduction")]),
            element(
                "Para",
                [
                    element("Str", "See"),
                    element("SoftBreak"),
                    element("Link", {"class": "ext"}, [element("Str", "pandoc")], ["https://pandoc.org", "Pandoc"]),
                    element("Emph", [element("Str", "now")]),
                ],
            ),
            element(
                "BulletList",
                [
                    [element("Plain", [element("Str", "one")])],
                    [element("Plain", [element("Code", {"class": "python"}, "two")])],
                ],
            ),
        ],
    )


@pytest.fixture
def pandoc_json() -> str:
    """Provide pandoc JSON as written by pandoc 1.18.

    Returns
    -------
    str
        JSON text of a document with API version 1.17.0.4.

    """
    return json.dumps(
        {
            "pandoc-api-version": [1, 17, 0, 4],
            "meta": {
                "author": {"t": "MetaInlines", "c": [{"t": "Str", "c": "Jane"}]},
            },
            "blocks": [
                {"t": "Header", "c": [2, ["sec", ["x", "y"], [["k", "v"]]], [{"t": "Str", "c": "Section"}]]},
                {
                    "t": "Para",
                    "c": [
                        {"t": "Str", "c": "Hello"},
                        {"t": "Space"},
                        {"t": "Emph", "c": [{"t": "Str", "c": "world"}]},
                    ],
                },
            ],
        }
    )
