"""Pytest configuration and shared fixtures for markweave tests."""

from pathlib import Path

import pytest
from bs4 import BeautifulSoup, Tag


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Pure logic tests with no I/O")
    config.addinivalue_line("markers", "integration: Filesystem or subprocess tests, such as running the CLI")
    config.addinivalue_line("markers", "e2e: End-to-end tests against an installed markweave command")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Apply default markers to tests without explicit markers.

    Tests should use explicit markers (@pytest.mark.unit, @pytest.mark.integration).
    Unmarked tests default to unit.
    """
    for item in items:
        # Skip if already has a category marker
        marker_names = [m.name for m in item.iter_markers()]
        if any(m in marker_names for m in ("unit", "integration", "e2e")):
            continue

        # Default unmarked tests to unit
        item.add_marker(pytest.mark.unit)


def _first_tag(html: str) -> Tag:
    tag = BeautifulSoup(html, "html.parser").find()
    assert isinstance(tag, Tag)
    return tag


@pytest.fixture
def first_tag():
    """Parse an HTML fragment and return its first element."""
    return _first_tag


@pytest.fixture
def html_file(tmp_path: Path) -> Path:
    """Create a temporary HTML file for CLI tests.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        Path to created HTML file.
    """
    html_file = tmp_path / "page.html"
    html_file.write_text(
        "<html><head><title>Ignored</title></head><body>"
        "<nav>Menu</nav>"
        "<h1>Title</h1>"
        '<p>See <a href="/docs">the docs</a>.</p>'
        "</body></html>",
        encoding="utf-8",
    )
    return html_file
