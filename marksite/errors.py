"""Error types raised while building a marksite site.

Every failure that can stop a build derives from BuildError, which carries the
source file that triggered it. The CLI reports these with their category
(the class name) and exits non-zero; the dev server reports them and keeps
serving.
"""

from __future__ import annotations

from pathlib import Path


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        prefix = f"{source_path}: " if source_path is not None else ""
        super().__init__(f"{prefix}{message}")

    @property
    def category(self) -> str:
        return type(self).__name__


class InputNotFound(BuildError):
    """The source directory does not exist, or a path lies outside it."""


class OptionParseError(BuildError):
    """The front-matter block of a document could not be parsed."""

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        line: int | None = None,
        original_error: Exception | None = None,
    ):
        self.line = line
        super().__init__(source_path, message, original_error)


class MalformedOption(OptionParseError):
    """A front-matter line is not a `key = value` assignment."""


class ConversionError(BuildError):
    """The Markdown engine or page rendering failed."""


class StylesheetTranspileError(BuildError):
    """The Sass compiler rejected a stylesheet source."""

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        line: int | None = None,
        original_error: Exception | None = None,
    ):
        self.line = line
        super().__init__(source_path, message, original_error)


class StylesheetNotFound(BuildError):
    """A document references a stylesheet that does not exist."""


class AssetIOError(BuildError):
    """Reading, copying or writing a file failed."""


class DirectoryCreateError(BuildError):
    """An output directory could not be created."""


def with_source(exc: BuildError, source_path: Path) -> BuildError:
    """Attach a source path to an error raised without one."""
    if exc.source_path is None:
        exc.source_path = source_path
        exc.args = (f"{source_path}: {exc.message}",)
    return exc
