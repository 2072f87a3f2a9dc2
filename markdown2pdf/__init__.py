"""
markdown2pdf - Markdown to PDF conversion tool.

Exposes a single ``create_pdf_from_markdown`` tool that turns markdown
(with syntax-highlighted code and mermaid diagrams) into a paginated PDF
rendered by Playwright/Chromium. Served over MCP stdio or HTTP.
"""

__version__ = "2.0.3"
