"""
Unit tests for the create_pdf_from_markdown tool and its MCP transport.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError

from markdown2pdf.errors import FilesystemError, InputValidationError, RenderTimeoutError
from markdown2pdf.mcp_server import ToolCallError, handle_call_tool, handle_list_tools, server
from markdown2pdf.tool import (
    TOOL_NAME,
    create_pdf_from_markdown,
    parse_request,
    tool_input_schema,
)


def _converter(result=None, error=None):
    converter = MagicMock()
    converter.convert = AsyncMock(return_value=result, side_effect=error)
    return converter


def _call_request(name, arguments=None):
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments or {}),
    )


class TestToolSchema:
    """Tests for the advertised input schema."""

    def test_schema_fields(self):
        schema = tool_input_schema()
        assert schema["type"] == "object"
        assert schema["required"] == ["markdown"]
        assert set(schema["properties"]) == {
            "markdown", "outputFilename", "paperFormat",
            "paperOrientation", "paperBorder", "watermark",
        }

    def test_schema_constraints(self):
        props = tool_input_schema()["properties"]
        assert props["paperFormat"]["enum"] == ["letter", "a4", "a3", "a5", "legal", "tabloid"]
        assert props["paperOrientation"]["enum"] == ["portrait", "landscape"]
        assert props["watermark"]["maxLength"] == 15
        assert "pattern" in props["paperBorder"]
        assert props["paperFormat"]["default"] == "letter"


class TestParseRequest:
    """Tests for parse_request function."""

    def test_valid_arguments(self):
        request = parse_request({"markdown": "# Hi", "paperFormat": "a4"})
        assert request.paperFormat == "a4"

    def test_missing_markdown(self):
        with pytest.raises(InputValidationError, match="markdown"):
            parse_request({})

    def test_none_arguments(self):
        with pytest.raises(InputValidationError):
            parse_request(None)

    def test_long_watermark_rejected(self):
        with pytest.raises(InputValidationError, match="watermark"):
            parse_request({"markdown": "x", "watermark": "toolongwatermarktext"})


class TestCreatePdfFromMarkdown:
    """Tests for the transport-independent tool handler."""

    @pytest.mark.asyncio
    async def test_success_message(self, tmp_path):
        pdf = tmp_path / "output.pdf"
        result = await create_pdf_from_markdown({"markdown": "# Hi"}, converter=_converter(result=pdf))
        assert result.is_error is False
        assert result.text == f"Successfully created PDF at: {pdf}"

    @pytest.mark.asyncio
    async def test_invalid_watermark_never_reaches_pipeline(self):
        converter = _converter()
        result = await create_pdf_from_markdown(
            {"markdown": "x", "watermark": "toolongwatermarktext"},
            converter=converter
        )
        assert result.is_error is True
        assert result.text.startswith("Invalid arguments:")
        converter.convert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_border_rejected(self):
        converter = _converter()
        result = await create_pdf_from_markdown({"markdown": "x", "paperBorder": "wide"}, converter=converter)
        assert result.is_error is True
        converter.convert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout_becomes_error_result(self):
        converter = _converter(error=RenderTimeoutError(60000))
        result = await create_pdf_from_markdown({"markdown": "x"}, converter=converter)
        assert result.is_error is True
        assert result.text.startswith("Failed to create PDF:")
        assert "timed out" in result.text

    @pytest.mark.asyncio
    async def test_filesystem_error_becomes_error_result(self):
        converter = _converter(error=FilesystemError("Cannot create output directory /nope"))
        result = await create_pdf_from_markdown({"markdown": "x"}, converter=converter)
        assert result.is_error is True
        assert "/nope" in result.text

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_raise(self):
        converter = _converter(error=RuntimeError("browser crashed"))
        result = await create_pdf_from_markdown({"markdown": "x"}, converter=converter)
        assert result.is_error is True
        assert "browser crashed" in result.text

    @pytest.mark.asyncio
    async def test_escaping_filename_is_invalid_argument(self):
        converter = _converter(error=InputValidationError("outputFilename must not contain '..' segments"))
        result = await create_pdf_from_markdown({"markdown": "x", "outputFilename": "../x.pdf"}, converter=converter)
        assert result.is_error is True
        assert result.text.startswith("Invalid arguments:")


class TestMcpServer:
    """Tests for the MCP handlers."""

    @pytest.mark.asyncio
    async def test_list_tools(self):
        tools = await handle_list_tools()
        assert [t.name for t in tools] == [TOOL_NAME]
        assert "mermaid" in tools[0].description
        assert tools[0].inputSchema["required"] == ["markdown"]

    @pytest.mark.asyncio
    async def test_unknown_tool_is_method_not_found(self):
        """Test that the registered request handler raises a protocol error for unknown tools."""
        dispatch = server.request_handlers[types.CallToolRequest]
        with pytest.raises(McpError) as exc_info:
            await dispatch(_call_request("delete_everything"))
        assert exc_info.value.error.code == types.METHOD_NOT_FOUND
        assert "Unknown tool: delete_everything" == exc_info.value.error.message

    @pytest.mark.asyncio
    async def test_failure_through_dispatch_is_error_result(self):
        """Test that conversion failures still come back as isError tool results."""
        dispatch = server.request_handlers[types.CallToolRequest]
        with patch("markdown2pdf.tool.MarkdownPdfConverter", return_value=_converter(error=RenderTimeoutError(60000))):
            result = await dispatch(_call_request(TOOL_NAME, {"markdown": "# Hi"}))

        assert result.root.isError is True
        assert "Failed to create PDF" in result.root.content[0].text

    @pytest.mark.asyncio
    async def test_success_through_dispatch(self, tmp_path):
        pdf = tmp_path / "output.pdf"
        dispatch = server.request_handlers[types.CallToolRequest]
        with patch("markdown2pdf.tool.MarkdownPdfConverter", return_value=_converter(result=pdf)):
            result = await dispatch(_call_request(TOOL_NAME, {"markdown": "# Hi"}))

        assert result.root.isError is False
        assert result.root.content[0].text == f"Successfully created PDF at: {pdf}"

    @pytest.mark.asyncio
    async def test_success_returns_text_content(self, tmp_path):
        pdf = tmp_path / "output.pdf"
        with patch("markdown2pdf.tool.MarkdownPdfConverter", return_value=_converter(result=pdf)):
            content = await handle_call_tool(TOOL_NAME, {"markdown": "# Hi"})

        assert len(content) == 1
        assert content[0].type == "text"
        assert str(pdf) in content[0].text

    @pytest.mark.asyncio
    async def test_failure_raised_as_tool_error(self):
        with patch("markdown2pdf.tool.MarkdownPdfConverter", return_value=_converter(error=RenderTimeoutError(60000))):
            with pytest.raises(ToolCallError, match="Failed to create PDF"):
                await handle_call_tool(TOOL_NAME, {"markdown": "# Hi"})
