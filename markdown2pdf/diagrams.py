"""
Protection of mermaid diagram blocks across markdown rendering.

Mermaid fences are swapped for opaque placeholder tokens before the
markdown engine runs, then swapped back for ``<div class="mermaid">``
containers in the generated HTML.
"""

import base64
import binascii
import html
import logging
import re
from typing import Tuple

from .errors import DiagramDecodeError

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "MERMAID_DIAGRAM_PLACEHOLDER_"

# Group 1 is the container prefix (list indent, "> " quote markers).
# Non-greedy so each fence closes at its own ``` line.
_MERMAID_FENCE_RE = re.compile(
    r"^([ \t>]*)```mermaid[ \t]*\r?\n([\s\S]*?)^[ \t>]*```[ \t]*\r?$",
    re.MULTILINE
)

# A placeholder alone in a paragraph, or bare inside other markup
_PLACEHOLDER_RE = re.compile(
    r"<p>\s*" + PLACEHOLDER_PREFIX + r"([A-Za-z0-9+/=]*)\s*</p>"
    r"|" + PLACEHOLDER_PREFIX + r"([A-Za-z0-9+/=]*)"
)

DIAGRAM_ERROR_HTML = '<div class="mermaid-error">Error processing diagram</div>'


def encode_placeholder(source: str) -> str:
    """Build the placeholder token for one diagram's source."""
    encoded = base64.b64encode(source.encode("utf-8")).decode("ascii")
    return f"{PLACEHOLDER_PREFIX}{encoded}"


def decode_placeholder(payload: str) -> str:
    """
    Decode the base64 payload of a placeholder back into diagram source.

    Raises:
        DiagramDecodeError: payload is not valid base64 or not UTF-8
    """
    try:
        return base64.b64decode(payload, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise DiagramDecodeError(payload, str(e)) from e


def _strip_prefix(block: str, prefix: str) -> str:
    """Remove the fence's container prefix from each line of its body."""
    if not prefix:
        return block
    bare = prefix.rstrip()
    lines = []
    for line in block.splitlines():
        if line.startswith(prefix):
            line = line[len(prefix):]
        elif bare and line.startswith(bare):
            line = line[len(bare):]
        lines.append(line)
    return "\n".join(lines)


def protect_diagrams(markdown_text: str) -> Tuple[str, bool]:
    """
    Replace every ```mermaid fenced block with a placeholder token.

    Args:
        markdown_text: Raw markdown

    Returns:
        Tuple of (protected markdown, whether any diagram was found)
    """
    found = False

    def _replace(match: re.Match) -> str:
        nonlocal found
        found = True
        prefix = match.group(1)
        source = _strip_prefix(match.group(2), prefix).strip()
        # Own paragraph inside the same container (list item, blockquote)
        blank = prefix.rstrip()
        return f"{blank}\n{prefix}{encode_placeholder(source)}\n{blank}"

    protected = _MERMAID_FENCE_RE.sub(_replace, markdown_text)
    return protected, found


def restore_diagrams(html_content: str) -> str:
    """
    Replace placeholder tokens in rendered HTML with mermaid containers.

    A token that fails to decode is replaced by an error marker; the
    remaining diagrams are restored normally.
    """
    def _replace(match: re.Match) -> str:
        payload = match.group(1) if match.group(1) is not None else match.group(2)
        try:
            source = decode_placeholder(payload)
        except DiagramDecodeError as e:
            logger.error(f"Error decoding mermaid diagram: {e}")
            return DIAGRAM_ERROR_HTML
        return f'<div class="mermaid">{html.escape(source, quote=False)}</div>'

    return _PLACEHOLDER_RE.sub(_replace, html_content)
