"""
Pytest fixtures for markdown2pdf tests.
"""

import os
from unittest.mock import AsyncMock, MagicMock

# Set environment variables BEFORE any imports from markdown2pdf so the
# cached settings never pick up a developer's real configuration.
os.environ["M2P_RENDER_DELAY_MS"] = "5000"
os.environ["M2P_DIAGRAM_RENDER_DELAY_MS"] = "10000"
os.environ["M2P_LOAD_TIMEOUT_MS"] = "60000"
os.environ.pop("M2P_OUTPUT_DIR", None)

import pytest


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings from the environment for every test."""
    from markdown2pdf.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    """Point M2P_OUTPUT_DIR at a fresh temporary directory."""
    out = tmp_path / "pdfs"
    monkeypatch.setenv("M2P_OUTPUT_DIR", str(out))
    return out


@pytest.fixture
def mock_page():
    """Playwright page mock for a document without diagrams."""
    page = AsyncMock()
    page.evaluate = AsyncMock(return_value=False)
    page.pdf = AsyncMock(return_value=b"%PDF-1.4 fake pdf content")
    return page


@pytest.fixture
def mock_playwright(mock_page):
    """
    Build an async_playwright() replacement returning mock_page.

    Returns the (factory, browser) pair so tests can assert on calls.
    """
    mock_browser = AsyncMock()
    mock_context = AsyncMock()
    mock_context.new_page = AsyncMock(return_value=mock_page)
    mock_browser.new_context = AsyncMock(return_value=mock_context)
    mock_browser.new_page = AsyncMock(return_value=mock_page)

    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(
        return_value=MagicMock(
            chromium=MagicMock(
                launch=AsyncMock(return_value=mock_browser)
            )
        )
    )
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory, mock_browser
