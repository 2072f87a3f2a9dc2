"""
markdown2pdf HTTP service - FastAPI application for markdown to PDF.

Exposes the create_pdf_from_markdown tool over HTTP, alongside a
health check that reports whether Playwright/Chromium can render.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from . import __version__
from .config import get_settings
from .converter import MarkdownPdfConverter
from .errors import FilesystemError, InputValidationError, RenderTimeoutError
from .models import ConversionRequest, ConversionResponse
from .renderer import check_browser
from .resources import temp_files

logger = logging.getLogger(__name__)

app = FastAPI(
    title="markdown2pdf",
    version=__version__,
    description="Markdown to PDF conversion using Playwright/Chromium"
)

MAX_CONCURRENT_RENDERS = get_settings().max_concurrent_renders

# Semaphore for rate limiting
_render_semaphore = asyncio.Semaphore(MAX_CONCURRENT_RENDERS)

# Playwright readiness state
_playwright_ready = False
_playwright_error: Optional[str] = None


# ============================================================================
# Startup / Shutdown Events
# ============================================================================

@app.on_event("startup")
async def check_browser_on_startup():
    """
    Print a test PDF through the renderer before accepting work.

    /health reports 503 until this has succeeded, so orchestration never
    routes conversions to an instance without a usable Chromium.
    """
    global _playwright_ready, _playwright_error

    temp_files.init()
    logger.info("markdown2pdf starting - checking Chromium...")

    try:
        size = await check_browser()
    except Exception as e:
        _playwright_ready = False
        _playwright_error = str(e)
        logger.error(f"❌ Chromium check failed: {_playwright_error}")
        return

    if size > 0:
        _playwright_ready = True
        _playwright_error = None
        logger.info(f"✅ Chromium check passed ({size} byte test PDF)")
    else:
        _playwright_ready = False
        _playwright_error = "Test PDF was empty"
        logger.error(f"❌ Chromium check failed: {_playwright_error}")


@app.on_event("shutdown")
async def drain_temp_files_on_shutdown():
    """Remove any temp HTML files left behind by interrupted renders."""
    temp_files.drain()


# ============================================================================
# Health Check Endpoint
# ============================================================================

class HealthResponse(BaseModel):
    """Service status, returned as the body (or 503 detail) of /health."""
    status: str
    version: str = __version__
    timestamp: datetime
    active_renders: int
    max_concurrent: int
    pending_temp_files: int
    playwright_ready: bool
    playwright_error: Optional[str] = None


def _health_status() -> HealthResponse:
    return HealthResponse(
        status="healthy" if _playwright_ready else "unhealthy",
        timestamp=datetime.now(timezone.utc),
        active_renders=MAX_CONCURRENT_RENDERS - _render_semaphore._value,
        max_concurrent=MAX_CONCURRENT_RENDERS,
        pending_temp_files=temp_files.active_count,
        playwright_ready=_playwright_ready,
        playwright_error=_playwright_error,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report readiness; 503 while Chromium is unusable."""
    health = _health_status()
    if not health.playwright_ready:
        raise HTTPException(status_code=503, detail=health.model_dump(mode="json"))
    return health


# ============================================================================
# Conversion Endpoint
# ============================================================================

@app.post("/create-pdf-from-markdown", response_model=ConversionResponse)
async def create_pdf_from_markdown(request: ConversionRequest) -> ConversionResponse:
    """
    Convert markdown to a PDF written under the configured output directory.

    Args:
        request: Markdown content and paper settings

    Returns:
        ConversionResponse with the absolute PDF path

    Raises:
        HTTPException: 400 for empty markdown or an outputFilename that
            leaves the output directory, 503 for overload, 504 for render
            timeouts, 500 for other failures
    """
    if not request.markdown or not request.markdown.strip():
        raise HTTPException(status_code=400, detail="Markdown content is required")

    # Check capacity
    if _render_semaphore._value <= 0:
        logger.warning("markdown2pdf overloaded, rejecting request")
        raise HTTPException(
            status_code=503,
            detail="Service overloaded. Too many concurrent PDF operations."
        )

    async with _render_semaphore:
        try:
            pdf_path = await MarkdownPdfConverter().convert(request)
        except InputValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except RenderTimeoutError as e:
            logger.error(f"PDF rendering timed out: {e}")
            raise HTTPException(status_code=504, detail=f"Failed to create PDF: {e}")
        except FilesystemError as e:
            logger.error(f"PDF output could not be written: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create PDF: {e}")
        except Exception as e:
            logger.error(f"PDF rendering failed: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create PDF: {e}")

    return ConversionResponse(
        success=True,
        pdf_path=str(pdf_path),
        message=f"Successfully created PDF at: {pdf_path}"
    )
