"""Document building for marksite.

A document is one Markdown file in the source tree. Building it reads the
source, parses its option block, converts the body with mistune, renders the
page skeleton and writes the result to the mirrored path in the output tree
(`docs/intro.md` -> `out/docs/intro.html`).

Key classes:
- PageBuilder: Builds a single document into the output tree.
"""

from __future__ import annotations

import json
from pathlib import Path

from .console import Reporter
from .errors import AssetIOError, BuildError, StylesheetNotFound, with_source
from .html_utils import prettify_html, stylesheet_href
from .options import DEFAULT_HIGHLIGHT_THEME, DocumentOptions, parse_document
from .renderers import MarkdownRenderer, has_highlight_theme, highlight_stylesheet
from .templates import PageContext, TemplateEngine
from .utils import atomic_write_text, ensure_dir, output_path_for


class PageBuilder:
    """Builds HTML pages from Markdown documents.

    Attributes:
        source_root: Root of the source tree.
        output_dir: Root of the output tree.
        pretty: Re-indent pages before writing.
        engine: Skeleton renderer.
        reporter: Progress output.
    """

    def __init__(
        self,
        source_root: Path,
        output_dir: Path,
        pretty: bool = False,
        engine: TemplateEngine | None = None,
        reporter: Reporter | None = None,
    ):
        self.source_root = source_root
        self.output_dir = output_dir
        self.pretty = pretty
        self.engine = engine or TemplateEngine()
        self.reporter = reporter or Reporter()

    def build(self, path: Path) -> Path:
        """Build one document.

        Args:
            path: Markdown source file under source_root.

        Returns:
            Path of the written HTML file.

        Raises:
            BuildError: Any subclass, with source_path set to the document.
        """
        try:
            return self._build(path)
        except BuildError as exc:
            with_source(exc, path)
            raise

    def _build(self, path: Path) -> Path:
        self.reporter.processing(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise AssetIOError(path, f"cannot read document: {exc}", exc) from exc

        parsed = parse_document(text)
        options = parsed.options
        if options:
            self.reporter.detail("parsed options", json.dumps(options.values))

        dest = output_path_for(self.source_root, self.output_dir, path)
        if ensure_dir(dest.parent):
            self.reporter.detail("created directory", dest.parent)

        content = MarkdownRenderer(math=options.math, code=options.code).render(parsed.body)
        self.reporter.detail("converted markdown -> html")

        html = self.engine.render_page(self._page_context(path, options, content))
        if self.pretty:
            html = prettify_html(html)

        atomic_write_text(dest, html)
        self.reporter.detail("wrote html file", dest)
        return dest

    def _page_context(self, path: Path, options: DocumentOptions, content: str) -> PageContext:
        stylesheet = None
        if options.style:
            self._check_stylesheet(path, options.style)
            stylesheet = stylesheet_href(options.style)
            self.reporter.detail("imported styles", options.style)

        if options.math:
            self.reporter.detail("including math support")

        highlight_css = None
        theme = options.code_theme
        if theme:
            if not has_highlight_theme(theme):
                self.reporter.detail(
                    f"unknown highlight theme, using {DEFAULT_HIGHLIGHT_THEME}", theme
                )
                theme = DEFAULT_HIGHLIGHT_THEME
            highlight_css = highlight_stylesheet(theme)
            self.reporter.detail("including syntax highlighting", theme)

        return PageContext(
            content=content,
            title=options.title,
            stylesheet=stylesheet,
            math=options.math,
            highlight_css=highlight_css,
        )

    def _check_stylesheet(self, path: Path, style: str) -> None:
        """Ensure the stylesheet named by a document exists.

        Relative names resolve against the document's folder; names starting
        with `/` resolve against the source root.
        """
        if style.startswith("/"):
            target = self.source_root / style.lstrip("/")
        else:
            target = path.parent / style
        if not target.is_file():
            raise StylesheetNotFound(path, f"stylesheet not found: {style} (looked for {target})")
