"""Console reporting for marksite.

Build progress is printed with click, one categorized line per step:

    processing: /site/index.md
      parsed options: {"title": "Home"}
      wrote html file
    done! generated 1 static files
"""

from __future__ import annotations

import click

from .errors import BuildError


class Reporter:
    """Writes categorized, colorized progress lines.

    Attributes:
        quiet: Suppress everything except errors.
    """

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def _echo(self, message: str) -> None:
        if not self.quiet:
            click.echo(message)

    def banner(self, name: str, version: str) -> None:
        self._echo(f"{click.style(name, fg='green')} v{version}")

    def info(self, label: str, value: object = "") -> None:
        self._echo(f"{click.style(label + ':', fg='cyan')} {value}".rstrip())

    def processing(self, path: object) -> None:
        self.info("processing", path)

    def detail(self, label: str, value: object = "") -> None:
        text = f"  {label}:" if value != "" else f"  {label}"
        self._echo(f"{click.style(text, fg='yellow')} {value}".rstrip())

    def done(self, message: str) -> None:
        self._echo(f"{click.style('done!', fg='green')} {message}")

    def error(self, message: str) -> None:
        click.echo(f"{click.style('  error:', fg='red', bold=True)} {message}", err=True)

    def build_error(self, exc: BuildError) -> None:
        """Report a build error with its category, file and line."""
        click.echo(click.style(f"{exc.category}:", fg="red", bold=True), err=True)
        if exc.source_path is not None:
            click.echo(click.style(f"  File: {exc.source_path}", fg="yellow"), err=True)
        line = getattr(exc, "line", None)
        if line is not None:
            click.echo(click.style(f"  Line: {line}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
