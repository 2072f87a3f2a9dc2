"""
Markdown to HTML rendering with Pygments syntax highlighting.
"""

import logging
from typing import Optional

from markdown_it import MarkdownIt
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from .errors import HighlightError

logger = logging.getLogger(__name__)

# Bare spans; markdown-it wraps them in <pre><code class="language-...">
_FORMATTER = HtmlFormatter(nowrap=True)


def _highlight_with_language(code: str, language: str) -> str:
    try:
        lexer = get_lexer_by_name(language, stripall=False)
    except ClassNotFound as e:
        raise HighlightError(f"Unknown language '{language}'") from e
    try:
        return highlight(code, lexer, _FORMATTER)
    except Exception as e:
        raise HighlightError(f"Highlighting as '{language}' failed: {e}") from e


def _highlight_auto(code: str) -> str:
    try:
        return highlight(code, guess_lexer(code), _FORMATTER)
    except Exception as e:
        raise HighlightError(f"Language auto-detection failed: {e}") from e


def highlight_code(code: str, language: Optional[str] = None, attrs: Optional[str] = None) -> str:
    """
    Highlight a fenced code block.

    Tries the fence language first, then automatic detection. Returns an
    empty string when both fail, which makes markdown-it emit the escaped
    plain code instead.

    Args:
        code: Raw code block content
        language: Language tag from the fence info string (may be empty)
        attrs: Remaining fence attributes (unused)

    Returns:
        Highlighted HTML spans, or "" for plain output
    """
    if language:
        try:
            return _highlight_with_language(code, language)
        except HighlightError as e:
            logger.debug(f"{e}; falling back to auto-detection")
    try:
        return _highlight_auto(code)
    except HighlightError as e:
        logger.debug(f"{e}; emitting plain code")
    return ""


def build_markdown_parser() -> MarkdownIt:
    """Create a markdown-it parser: default rule set, single newlines become <br>."""
    return MarkdownIt("default", {"breaks": True, "highlight": highlight_code})


def render_markdown(markdown_text: str) -> str:
    """
    Convert markdown text to an HTML fragment.

    Args:
        markdown_text: Markdown with diagram placeholders already in place

    Returns:
        HTML fragment (no <html>/<body> wrapper)
    """
    return build_markdown_parser().render(markdown_text)


def highlight_css(selector: str = "pre") -> str:
    """Return Pygments style rules scoped to the given selector."""
    return _FORMATTER.get_style_defs(selector)
