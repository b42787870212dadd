"""Markdown rendering for marksite.

Documents are converted with mistune. Per-document options switch on two
extras:

- math: mistune's math plugin, which wraps `$...$` and `$$...$$` in
  `<span class="math">` / `<div class="math">`. Nothing is typeset here;
  the KaTeX scripts in the page head render the markup in the browser.
- code: Pygments highlighting of fenced code blocks with a language tag.

Key classes:
- MarkdownRenderer: Converts a Markdown body to an HTML fragment.
"""

from __future__ import annotations

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_all_styles
from pygments.util import ClassNotFound

from .errors import ConversionError

HIGHLIGHT_CSS_CLASS = "highlight"
BASE_PLUGINS = ["strikethrough", "footnotes", "table", "url"]


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer that highlights fenced code with Pygments."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with highlighted code, or a plain escaped block when
            the language is missing or unknown to Pygments.
        """
        lang = info.split(None, 1)[0] if info and info.strip() else None
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass=HIGHLIGHT_CSS_CLASS)
                return highlight(code, lexer, formatter)
        return super().block_code(code, info)


class MarkdownRenderer:
    """Renders Markdown content to HTML.

    Attributes:
        math: Enable the math plugin.
        code: Highlight fenced code blocks.
    """

    def __init__(self, math: bool = False, code: bool = False):
        self.math = math
        self.code = code

    def _create(self) -> mistune.Markdown:
        plugins = list(BASE_PLUGINS)
        if self.math:
            plugins.append("math")
        renderer = _HighlightRenderer() if self.code else mistune.HTMLRenderer(escape=False)
        return mistune.create_markdown(renderer=renderer, plugins=plugins)

    def render(self, content: str) -> str:
        """Render Markdown content to an HTML fragment.

        Raises:
            ConversionError: If the Markdown engine fails.
        """
        markdown = self._create()
        try:
            return markdown(content)
        except Exception as exc:
            raise ConversionError(
                None, f"converting markdown -> html: {type(exc).__name__}: {exc}", exc
            ) from exc


def highlight_stylesheet(theme: str) -> str:
    """Return the CSS rules for a Pygments highlight theme.

    Raises:
        ConversionError: If no Pygments style has that name.
    """
    try:
        formatter = HtmlFormatter(style=theme, cssclass=HIGHLIGHT_CSS_CLASS)
    except ClassNotFound as exc:
        raise ConversionError(None, f"unknown highlight theme: {theme}", exc) from exc
    return formatter.get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")


def has_highlight_theme(theme: str) -> bool:
    """Whether Pygments ships a style with this name."""
    return theme in set(get_all_styles())
