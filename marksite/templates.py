"""Page skeleton rendering for marksite.

Every page is rendered through one Jinja2 skeleton shipped with the package
(templates/page.html.jinja). The head has a fixed sequence of optional
slots, each either rendered or left out:

1. <title>
2. stylesheet link
3. KaTeX stylesheet and scripts (math)
4. Pygments theme rules (code highlighting)

The body is the HTML fragment produced by the Markdown renderer.

Key classes:
- PageContext: Typed values for the skeleton's slots.
- TemplateEngine: Renders a PageContext to a full HTML document.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

_TEMPLATES_DIR = Path(__file__).parent / "templates"
PAGE_TEMPLATE = "page.html.jinja"

KATEX_VERSION = "0.16.9"
KATEX_CSS = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist/katex.min.css"
KATEX_JS = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist/katex.min.js"
KATEX_AUTO_RENDER_JS = (
    f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist/contrib/auto-render.min.js"
)


@dataclass(frozen=True)
class PageContext:
    """Values for the page skeleton.

    Attributes:
        content: Rendered body HTML.
        title: Page title, escaped on output.
        stylesheet: href of the page stylesheet.
        math: Include KaTeX.
        highlight_css: Pygments rules for the highlight theme.
    """

    content: str
    title: str | None = None
    stylesheet: str | None = None
    math: bool = False
    highlight_css: str | None = None


class TemplateEngine:
    """Renders pages into the HTML skeleton using Jinja2."""

    def __init__(self, templates_dir: Path = _TEMPLATES_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "html.jinja"]),
        )
        self.env.globals.update(
            katex_css=KATEX_CSS,
            katex_js=KATEX_JS,
            katex_auto_render_js=KATEX_AUTO_RENDER_JS,
        )

    def render_page(self, page: PageContext) -> str:
        """Render a page with the skeleton.

        Args:
            page: Values for the skeleton's slots.

        Returns:
            Complete HTML document.
        """
        template = self.env.get_template(PAGE_TEMPLATE)
        return template.render(
            title=page.title,
            stylesheet=page.stylesheet,
            math=page.math,
            highlight_css=Markup(page.highlight_css) if page.highlight_css else None,
            content=Markup(page.content),
        )
