"""
Error types raised by the markdown to PDF pipeline.
"""

from typing import Optional


class Markdown2PdfError(Exception):
    """Base class for conversion errors."""


class InputValidationError(Markdown2PdfError):
    """Raised when tool arguments fail validation."""


class RenderTimeoutError(Markdown2PdfError):
    """Raised when the page load exceeds the configured timeout."""

    def __init__(self, timeout_ms: int, stage: str = "page load"):
        self.timeout_ms = timeout_ms
        self.stage = stage
        super().__init__(f"Rendering timed out during {stage} after {timeout_ms}ms")


class DiagramDecodeError(Markdown2PdfError):
    """Raised when a diagram placeholder cannot be decoded."""

    def __init__(self, payload: str, reason: Optional[str] = None):
        self.payload = payload
        super().__init__(f"Could not decode diagram placeholder: {reason or 'unknown error'}")


class FilesystemError(Markdown2PdfError):
    """Raised when the output directory or a file cannot be written."""


class HighlightError(Markdown2PdfError):
    """Raised when a code block cannot be highlighted."""
