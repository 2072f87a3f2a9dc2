"""
PDF rendering of composed HTML documents using Playwright/Chromium.
"""

import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Tuple, Union

from .config import get_settings
from .errors import FilesystemError, RenderTimeoutError
from .models import RenderOptions

logger = logging.getLogger(__name__)

# Paper format name -> Playwright page.pdf() format
PDF_FORMATS = {
    "letter": "Letter",
    "legal": "Legal",
    "tabloid": "Tabloid",
    "a3": "A3",
    "a4": "A4",
    "a5": "A5",
}

DIAGRAM_FLAG_SCRIPT = "() => 'mermaidRendered' in window"
DIAGRAM_DONE_SCRIPT = "() => window.mermaidRendered === true"


def load_runnings(runnings_path: Union[str, Path, None], show_page_numbers: bool = False) -> Tuple[str, str]:
    """
    Load running header and footer templates.

    Args:
        runnings_path: JSON file with "header", "footer" and
            "footer_with_page_numbers" HTML templates
        show_page_numbers: Use the page-numbered footer

    Returns:
        Tuple of (header_template, footer_template); empty strings
        when no runnings file is configured

    Raises:
        FilesystemError: the file cannot be read or is not valid JSON
    """
    if not runnings_path:
        return "", ""

    try:
        runnings = json.loads(Path(runnings_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise FilesystemError(f"Cannot load runnings from {runnings_path}: {e}") from e

    header = runnings.get("header", "")
    footer = runnings.get("footer", "")
    if show_page_numbers:
        footer = runnings.get("footer_with_page_numbers", footer)
    return header, footer


async def _settle(page, render_delay: int) -> None:
    """Give client-side scripts up to render_delay ms to finish."""
    if await page.evaluate(DIAGRAM_FLAG_SCRIPT):
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        try:
            await page.wait_for_function(DIAGRAM_DONE_SCRIPT, timeout=render_delay)
            logger.debug("Diagram rendering finished")
        except PlaywrightTimeoutError:
            logger.warning(f"Diagrams did not finish within {render_delay}ms, capturing anyway")
    else:
        await page.wait_for_timeout(render_delay)


@asynccontextmanager
async def open_page():
    """Launch Chromium and yield a fresh page. The browser is closed on exit."""
    # Import here to avoid loading Playwright on startup
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=get_settings().headless)
        try:
            context = await browser.new_context()
            yield await context.new_page()
        finally:
            await browser.close()


async def check_browser() -> int:
    """
    Print a one-line document to make sure Chromium can produce PDFs.

    Returns:
        Size of the generated PDF in bytes (0 means the browser is unusable)
    """
    async with open_page() as page:
        await page.set_content("<html><body><h1>markdown2pdf</h1></body></html>")
        pdf_bytes = await page.pdf(format="Letter")
    return len(pdf_bytes or b"")


async def render_pdf(
    html_path: Union[str, Path],
    pdf_path: Union[str, Path],
    options: RenderOptions
) -> bool:
    """
    Print an HTML file to PDF with Chromium.

    Args:
        html_path: Composed HTML document on disk
        pdf_path: Where the PDF is written
        options: Paper geometry, runnings, stylesheets and timings

    Returns:
        True once the PDF has been written

    Raises:
        RenderTimeoutError: page load exceeded options.load_timeout
        FilesystemError: runnings cannot be loaded
    """
    from playwright.async_api import TimeoutError as PlaywrightTimeoutError

    header_template, footer_template = load_runnings(options.runnings_path, options.show_page_numbers)

    async with open_page() as page:
        try:
            await page.goto(
                Path(html_path).resolve().as_uri(),
                wait_until="networkidle",
                timeout=options.load_timeout
            )
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(options.load_timeout) from e

        await _settle(page, options.render_delay)

        if options.css_path:
            await page.add_style_tag(path=str(options.css_path))
        if options.highlight_css_path:
            await page.add_style_tag(path=str(options.highlight_css_path))
        await page.emulate_media(media="print")

        border = options.paper_border
        await page.pdf(
            path=str(pdf_path),
            format=PDF_FORMATS.get(options.paper_format.lower(), "Letter"),
            landscape=options.paper_orientation == "landscape",
            print_background=True,
            display_header_footer=bool(header_template or footer_template),
            header_template=header_template or "<span></span>",
            footer_template=footer_template or "<span></span>",
            margin={
                "top": border,
                "right": border,
                "bottom": border,
                "left": border
            }
        )

    logger.info(f"PDF written to {pdf_path}")
    return True
