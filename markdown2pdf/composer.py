"""
Builds the complete HTML document that Chromium prints to PDF.

Wraps the rendered markdown in a page box sized for the paper format,
adds the optional watermark overlay, highlight styles and, when the
document has diagrams, the mermaid bootstrap script.
"""

import html

from .config import DEFAULT_MERMAID_SCRIPT_URL
from .markdown_renderer import highlight_css

# Physical page box per paper format (width, height), portrait
PAGE_DIMENSIONS = {
    "letter": ("8.5in", "11in"),
    "legal": ("8.5in", "14in"),
    "tabloid": ("11in", "17in"),
    "a3": ("297mm", "420mm"),
    "a4": ("210mm", "297mm"),
    "a5": ("148mm", "210mm"),
}


def page_dimensions(paper_format: str) -> tuple:
    """Return (width, height) CSS lengths for a paper format, A4 for unknown ones."""
    return PAGE_DIMENSIONS.get(paper_format.lower(), PAGE_DIMENSIONS["a4"])


def build_mermaid_script(script_url: str = DEFAULT_MERMAID_SCRIPT_URL) -> str:
    """
    Build the script block that renders mermaid diagrams in the page.

    ``window.mermaidRendered`` always ends up true, whether rendering
    succeeds, fails or the library never loads, so the PDF renderer's
    wait is bounded.
    """
    return f"""
    <script>
      window.mermaidRendered = false;
    </script>
    <script src="{html.escape(script_url)}"></script>
    <script>
      document.addEventListener('DOMContentLoaded', function() {{
        try {{
          mermaid.initialize({{
            startOnLoad: false,
            theme: 'default',
            securityLevel: 'loose',
            flowchart: {{
              useMaxWidth: false,
              htmlLabels: true
            }}
          }});

          mermaid.run().then(function() {{
            window.mermaidRendered = true;
            document.dispatchEvent(new CustomEvent('mermaid-rendered'));
            console.log('Mermaid diagrams rendered successfully');
          }}).catch(function(err) {{
            console.error('Mermaid rendering error:', err);
            window.mermaidRendered = true;
            document.dispatchEvent(new CustomEvent('mermaid-error'));
          }});
        }} catch (error) {{
          console.error('Mermaid initialization error:', error);
          window.mermaidRendered = true;
          document.dispatchEvent(new CustomEvent('mermaid-error'));
        }}
      }});
    </script>
    """


def compose_document(
    content_html: str,
    paper_format: str = "letter",
    paper_orientation: str = "portrait",
    watermark: str = "",
    has_diagrams: bool = False,
    mermaid_script_url: str = DEFAULT_MERMAID_SCRIPT_URL
) -> str:
    """
    Build complete HTML document for PDF generation with embedded styles.

    Includes:
    - @page size directive for the paper format and orientation
    - Page box sized for the paper format
    - Rendered markdown content
    - Watermark overlay if present
    - Mermaid bootstrap script if the content has diagrams

    Args:
        content_html: HTML fragment rendered from markdown (trusted)
        paper_format: Paper format name ("letter", "a4", ...)
        paper_orientation: "portrait" or "landscape"
        watermark: Optional watermark text
        has_diagrams: Whether content_html holds mermaid containers
        mermaid_script_url: Where the mermaid library is loaded from

    Returns:
        Complete HTML document string
    """
    page_width, page_height = page_dimensions(paper_format)
    mermaid_script = build_mermaid_script(mermaid_script_url) if has_diagrams else ""

    document = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>
        @page {{
            margin: 20px;
            size: {paper_format} {paper_orientation};
        }}

        html, body {{
            margin: 0;
            padding: 0;
            width: 100%;
            height: 100%;
        }}

        .page {{
            position: relative;
            width: {page_width};
            height: {page_height};
            margin: 0;
            padding: 20px;
            box-sizing: border-box;
        }}

        .content {{
            position: relative;
            z-index: 1;
        }}

        .watermark {{
            position: absolute;
            left: 0;
            top: 0;
            right: 0;
            bottom: 0;
            display: flex;
            justify-content: center;
            align-items: center;
            font-size: calc({page_width} * 0.14);
            color: rgba(0, 0, 0, 0.15);
            font-family: Arial, sans-serif;
            white-space: nowrap;
            pointer-events: none;
            user-select: none;
            z-index: 0;
            transform: rotate(-45deg);
        }}

        /* Mermaid styling */
        .mermaid {{
            text-align: center;
            margin: 20px 0;
        }}

        .mermaid-error {{
            color: red;
            border: 1px solid red;
            padding: 10px;
            margin: 10px 0;
        }}

        /* Code highlighting */
{highlight_css("pre")}
    </style>
    {mermaid_script}
</head>
<body>
    <div class="page">
        <div class="content">
            {content_html}
        </div>
"""

    if watermark:
        document += f"""
        <div class="watermark">{html.escape(watermark)}</div>
"""

    document += """
    </div>
</body>
</html>
"""

    return document
