"""
Request, response and render option models for markdown to PDF conversion.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from pydantic import BaseModel, Field

PaperFormat = Literal["letter", "a4", "a3", "a5", "legal", "tabloid"]
PaperOrientation = Literal["portrait", "landscape"]

PAPER_BORDER_PATTERN = r"^[0-9]+(\.[0-9]+)?(cm|mm|in|px)$"
WATERMARK_PATTERN = r"^[A-Z0-9\s-]*$"


class ConversionRequest(BaseModel):
    """Markdown to PDF tool call arguments."""
    markdown: str = Field(..., description="Markdown content to convert to PDF")
    outputFilename: str = Field(
        "output.pdf",
        description=(
            'The filename of the PDF file to be saved (e.g. "output.pdf"). '
            "The environment variable M2P_OUTPUT_DIR sets the output directory. "
            "If not set, it defaults to the user's HOME directory."
        )
    )
    paperFormat: PaperFormat = Field("letter", description="Paper format for the PDF (default: letter)")
    paperOrientation: PaperOrientation = Field(
        "portrait",
        description="Paper orientation for the PDF (default: portrait)"
    )
    paperBorder: str = Field(
        "2cm",
        pattern=PAPER_BORDER_PATTERN,
        description="Border margin for the PDF (default: 2cm). Use CSS units (cm, mm, in, px)"
    )
    watermark: str = Field(
        "",
        max_length=15,
        pattern=WATERMARK_PATTERN,
        description=(
            "Optional watermark text (max 15 characters, uppercase), "
            'e.g. "DRAFT", "PRELIMINARY", "CONFIDENTIAL", "FOR REVIEW"'
        )
    )


class ConversionResponse(BaseModel):
    """Markdown to PDF HTTP response."""
    success: bool = Field(..., description="Whether the PDF was written")
    pdf_path: str = Field(..., description="Absolute path of the generated PDF")
    message: str = Field(..., description="Human readable result message")


class ToolResult(BaseModel):
    """Text result of a tool call, flagged when it describes a failure."""
    text: str
    is_error: bool = False


@dataclass(frozen=True)
class RenderOptions:
    """Options handed to the PDF renderer for a single conversion."""
    runnings_path: Optional[str]
    css_path: Optional[str]
    highlight_css_path: Optional[str]
    paper_format: str = "letter"
    paper_orientation: str = "portrait"
    paper_border: str = "2cm"
    show_page_numbers: bool = False
    render_delay: int = 5000  # milliseconds
    load_timeout: int = 60000  # milliseconds
