"""
The create_pdf_from_markdown tool, independent of any transport.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .converter import MarkdownPdfConverter
from .errors import InputValidationError
from .models import ConversionRequest, ToolResult

logger = logging.getLogger(__name__)

TOOL_NAME = "create_pdf_from_markdown"

TOOL_DESCRIPTION = (
    "Convert markdown content to PDF. Supports basic markdown elements like headers, lists, "
    "tables, code blocks, blockquotes, images, and mermaid diagrams. "
    "Note: Cannot handle LaTeX math equations."
)


def tool_input_schema() -> Dict[str, Any]:
    """JSON schema of the tool arguments, derived from ConversionRequest."""
    schema = ConversionRequest.model_json_schema()
    schema.pop("title", None)
    for prop in schema.get("properties", {}).values():
        prop.pop("title", None)
    return schema


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item.get("loc", ())) or "arguments"
        parts.append(f"{field}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)


def parse_request(arguments: Optional[Dict[str, Any]]) -> ConversionRequest:
    """
    Validate raw tool arguments.

    Raises:
        InputValidationError: a field is missing or malformed
    """
    try:
        return ConversionRequest.model_validate(arguments or {})
    except ValidationError as e:
        raise InputValidationError(_format_validation_error(e)) from e


async def create_pdf_from_markdown(
    arguments: Optional[Dict[str, Any]],
    converter: Optional[MarkdownPdfConverter] = None
) -> ToolResult:
    """
    Run the tool. Never raises; failures come back as error results.

    Args:
        arguments: Raw tool call arguments
        converter: Converter to use (a default one is created if omitted)

    Returns:
        ToolResult with the PDF path, or the error text with is_error set
    """
    try:
        request = parse_request(arguments)
    except InputValidationError as e:
        logger.warning(f"Rejected {TOOL_NAME} call: {e}")
        return ToolResult(text=f"Invalid arguments: {e}", is_error=True)

    try:
        converter = converter or MarkdownPdfConverter()
        pdf_path = await converter.convert(request)
    except InputValidationError as e:
        logger.warning(f"Rejected {TOOL_NAME} call: {e}")
        return ToolResult(text=f"Invalid arguments: {e}", is_error=True)
    except Exception as e:
        logger.error(f"Failed to create PDF: {e}")
        return ToolResult(text=f"Failed to create PDF: {e}", is_error=True)

    return ToolResult(text=f"Successfully created PDF at: {pdf_path}")
