"""
markdown2pdf Configuration Module

Centralized configuration management with Pydantic validation.
All settings are read from ``M2P_*`` environment variables and validated
on first access so misconfigurations fail fast.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

ASSETS_DIR = Path(__file__).resolve().parent / "assets"

DEFAULT_MERMAID_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/mermaid@10.6.0/dist/mermaid.min.js"


class Markdown2PdfSettings(BaseSettings):
    """
    Conversion service configuration with validation.

    All settings can be overridden via environment variables
    prefixed with ``M2P_`` (e.g. ``M2P_OUTPUT_DIR``).
    """

    # === Output ===
    output_dir: Optional[str] = Field(
        default=None,
        description="Directory for generated PDFs (defaults to $HOME, then the working directory)"
    )

    # === Rendering ===
    render_delay_ms: int = Field(
        default=5000,
        ge=0,
        le=120000,
        description="Settle delay after page load in milliseconds"
    )
    diagram_render_delay_ms: int = Field(
        default=10000,
        ge=0,
        le=120000,
        description="Settle delay used when the document contains mermaid diagrams"
    )
    load_timeout_ms: int = Field(
        default=60000,
        ge=1000,
        le=600000,
        description="Maximum time to wait for the page to load (1s-10min)"
    )
    headless: bool = Field(
        default=True,
        description="Run Chromium headless"
    )
    show_page_numbers: bool = Field(
        default=False,
        description="Print page numbers in the running footer"
    )
    mermaid_script_url: str = Field(
        default=DEFAULT_MERMAID_SCRIPT_URL,
        description="Script URL of the mermaid browser library"
    )
    runnings_path: str = Field(
        default=str(ASSETS_DIR / "runnings.json"),
        description="JSON file with running header/footer templates"
    )
    css_path: str = Field(
        default=str(ASSETS_DIR / "pdf.css"),
        description="Print stylesheet applied before PDF capture"
    )
    highlight_css_path: Optional[str] = Field(
        default=None,
        description="Optional extra stylesheet for highlighted code"
    )

    # === HTTP transport ===
    max_concurrent_renders: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum concurrent PDF renders over HTTP (1-20)"
    )

    # === Logging ===
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known value."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(allowed))}")
        return v_upper

    @field_validator("mermaid_script_url")
    @classmethod
    def validate_url_format(cls, v: str) -> str:
        """Basic URL format validation."""
        if not v.startswith(("http://", "https://", "file://")):
            raise ValueError(f"Invalid URL format: {v}")
        return v

    @field_validator("output_dir", "highlight_css_path")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty strings from the environment as unset."""
        if v is not None and not v.strip():
            return None
        return v

    class Config:
        env_prefix = "M2P_"
        case_sensitive = False  # M2P_OUTPUT_DIR = output_dir


@lru_cache()
def get_settings() -> Markdown2PdfSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for performance.
    Use this function to access configuration throughout the package.
    """
    return Markdown2PdfSettings()
