"""Command-line interface for marksite.

    marksite [-s|--serve] [-p|--port N] [--ws-port N] [-k|--keep-going] PATH

Builds PATH into PATH/out. With --serve, keeps serving the output tree over
HTTP and rebuilds each source file as it changes.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__
from .console import Reporter
from .errors import BuildError


@click.command()
@click.version_option(version=__version__, prog_name="marksite")
@click.option("-s", "--serve", is_flag=True, help="Serve the site after building")
@click.option(
    "-p",
    "--port",
    type=int,
    required=False,
    help="Port to run the web server on (overrides marksite.yaml, default 3000)",
)
@click.option(
    "--ws-port",
    type=int,
    required=False,
    help="Port for the live reload websocket server (default: port + 1)",
)
@click.option(
    "-k",
    "--keep-going",
    is_flag=True,
    help="Keep building past failing files and report them at the end",
)
@click.argument("path", metavar="PATH", type=click.Path(path_type=Path))
def cli(serve: bool, port: int | None, ws_port: int | None, keep_going: bool, path: Path):
    """Build the directory PATH into PATH/out."""
    from .build import SiteBuilder

    reporter = Reporter()
    try:
        builder = SiteBuilder(path, reporter=reporter)
        result = builder.build(keep_going=keep_going or None)
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        reporter.build_error(exc)
        raise SystemExit(1) from None

    if not result.ok:
        click.echo(
            click.style(f"Build failed for {len(result.failures)} file(s):", fg="red", bold=True),
            err=True,
        )
        for failure in result.failures:
            reporter.build_error(failure)
        raise SystemExit(1)

    if serve:
        from .server import DevServer

        server = DevServer(builder, http_port=port, ws_port=ws_port)
        server.start()


def main():
    """Entry point for the CLI application."""
    cli()
