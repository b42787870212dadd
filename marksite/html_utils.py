"""HTML utility functions for marksite.

Functions:
    stylesheet_href: Rewrite a stylesheet option to the URL of its compiled CSS.
    prettify_html: Re-indent a rendered page.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from bs4 import BeautifulSoup

from .utils import STYLESHEET_SOURCE_SUFFIXES


def stylesheet_href(style: str) -> str:
    """Return the href a page uses to link the stylesheet named in its options.

    Sass and SCSS sources are compiled to CSS next to themselves in the output
    tree, so only the suffix changes.

    Examples:
        >>> stylesheet_href("styles/theme.scss")
        'styles/theme.css'

        >>> stylesheet_href("plain.css")
        'plain.css'
    """
    path = PurePosixPath(style.replace("\\", "/"))
    if path.suffix.lower() in STYLESHEET_SOURCE_SUFFIXES:
        path = path.with_suffix(".css")
    return str(path)


def prettify_html(html: str) -> str:
    """Re-indent an HTML document, one tag per line.

    Contents of <pre> and <textarea> keep their whitespace.
    """
    soup = BeautifulSoup(html, "html.parser")
    return soup.prettify()
