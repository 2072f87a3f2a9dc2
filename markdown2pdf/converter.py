"""
Markdown to PDF conversion pipeline.

Ties together diagram protection, markdown rendering, document
composition, output path resolution and the Playwright renderer.
"""

import logging
from pathlib import Path
from typing import Optional

from .composer import compose_document
from .config import Markdown2PdfSettings, get_settings
from .diagrams import protect_diagrams, restore_diagrams
from .markdown_renderer import render_markdown
from .models import ConversionRequest, RenderOptions
from .paths import join_output_path, normalize_filename, prepare_output_path, resolve_output_dir
from .renderer import render_pdf
from .resources import TempFileRegistry, temp_files

logger = logging.getLogger(__name__)


def build_render_options(
    request: ConversionRequest,
    has_diagrams: bool,
    settings: Markdown2PdfSettings
) -> RenderOptions:
    """Derive renderer options for one request; diagrams get the longer settle delay."""
    render_delay = settings.diagram_render_delay_ms if has_diagrams else settings.render_delay_ms
    return RenderOptions(
        runnings_path=settings.runnings_path,
        css_path=settings.css_path,
        highlight_css_path=settings.highlight_css_path,
        paper_format=request.paperFormat,
        paper_orientation=request.paperOrientation,
        paper_border=request.paperBorder,
        show_page_numbers=settings.show_page_numbers,
        render_delay=render_delay,
        load_timeout=settings.load_timeout_ms,
    )


class MarkdownPdfConverter:
    """Converts a ConversionRequest into a PDF file on disk."""

    def __init__(
        self,
        settings: Optional[Markdown2PdfSettings] = None,
        registry: Optional[TempFileRegistry] = None
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = registry or temp_files

    def output_path_for(self, request: ConversionRequest) -> Path:
        """Requested (not yet de-duplicated) output path for a request."""
        output_dir = resolve_output_dir(self.settings.output_dir)
        return join_output_path(output_dir, normalize_filename(request.outputFilename))

    def build_document(self, request: ConversionRequest) -> tuple:
        """
        Render the request's markdown into a full HTML document.

        Returns:
            Tuple of (html document, whether it contains diagrams)
        """
        protected, has_diagrams = protect_diagrams(request.markdown)
        body = restore_diagrams(render_markdown(protected))
        document = compose_document(
            body,
            paper_format=request.paperFormat,
            paper_orientation=request.paperOrientation,
            watermark=request.watermark,
            has_diagrams=has_diagrams,
            mermaid_script_url=self.settings.mermaid_script_url,
        )
        return document, has_diagrams

    async def convert(self, request: ConversionRequest) -> Path:
        """
        Convert markdown to a PDF file.

        Args:
            request: Validated conversion request

        Returns:
            Absolute path of the written PDF

        Raises:
            InputValidationError: outputFilename points outside the output directory
            FilesystemError: output directory or temp file cannot be written
            RenderTimeoutError: the browser did not load the page in time
        """
        output_path = prepare_output_path(self.output_path_for(request))

        document, has_diagrams = self.build_document(request)
        options = build_render_options(request, has_diagrams, self.settings)

        logger.info(
            f"Converting markdown to PDF (format={options.paper_format}, "
            f"orientation={options.paper_orientation}, diagrams={has_diagrams}, "
            f"target={output_path})"
        )

        html_path = self.registry.create_html_file(document)
        try:
            await render_pdf(html_path, output_path, options)
        finally:
            self.registry.release(html_path)

        return output_path
