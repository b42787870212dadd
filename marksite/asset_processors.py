"""Asset processors for marksite.

Each processor handles one kind of asset. The registry picks the first
processor (by priority) that accepts a file.

Key classes:
- SassProcessor: Compiles .sass/.scss sources to .css with libsass.
- StaticAssetProcessor: Copies any other file byte-for-byte.
- AssetProcessorRegistry: Registry for managing asset processors.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path

import sass

from .errors import AssetIOError, StylesheetTranspileError
from .utils import atomic_copy, atomic_write_text, is_stylesheet_source

# libsass reports positions as "on line 3:7 of stdin".
_SASS_LINE_RE = re.compile(r"on line (\d+)")


class BaseAssetProcessor(ABC):
    """Base class for asset processors."""

    @property
    @abstractmethod
    def priority(self) -> int:
        """Return processor priority (higher = checked first)."""
        ...

    @abstractmethod
    def can_process(self, path: Path) -> bool:
        """Check if this processor can handle the given asset."""
        ...

    @abstractmethod
    def process(self, source: Path, dest: Path) -> None:
        """Write the processed asset to dest.

        The destination directory must already exist.

        Raises:
            BuildError: If the asset cannot be processed.
        """
        ...


def compile_stylesheet(source: Path) -> str:
    """Compile a Sass or SCSS file to CSS.

    Imports resolve relative to the source file's directory.

    Args:
        source: .sass (indented syntax) or .scss file.

    Returns:
        Compiled CSS in expanded style.

    Raises:
        StylesheetTranspileError: If libsass rejects the source.
        AssetIOError: If the source cannot be read.
    """
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise AssetIOError(source, f"cannot read stylesheet: {exc}", exc) from exc
    try:
        return sass.compile(
            string=text,
            indented=source.suffix.lower() == ".sass",
            include_paths=[str(source.parent)],
            output_style="expanded",
        )
    except sass.CompileError as exc:
        message = str(exc).strip()
        match = _SASS_LINE_RE.search(message)
        line = int(match.group(1)) if match else None
        location = f" (line {line})" if line is not None else ""
        raise StylesheetTranspileError(
            source, f"transpiling styles{location}: {message}", line=line, original_error=exc
        ) from exc


class SassProcessor(BaseAssetProcessor):
    """Compiles Sass and SCSS sources to CSS."""

    @property
    def priority(self) -> int:
        return 90

    def can_process(self, path: Path) -> bool:
        return is_stylesheet_source(path)

    def process(self, source: Path, dest: Path) -> None:
        css = compile_stylesheet(source)
        atomic_write_text(dest, css)


class StaticAssetProcessor(BaseAssetProcessor):
    """Copies static assets without modification.

    This is the fallback processor for anything that is not a stylesheet
    source (images, fonts, plain CSS, scripts).
    """

    @property
    def priority(self) -> int:
        return 0  # Lowest priority - fallback

    def can_process(self, path: Path) -> bool:
        """Accept any file as a fallback."""
        return True

    def process(self, source: Path, dest: Path) -> None:
        atomic_copy(source, dest)


class AssetProcessorRegistry:
    """Registry for managing asset processors."""

    def __init__(self):
        """Initialize an empty registry."""
        self._processors: list[BaseAssetProcessor] = []

    def register(self, processor: BaseAssetProcessor) -> None:
        """Register a new processor.

        Processors are stored sorted by priority (highest first).
        """
        self._processors.append(processor)
        self._processors.sort(key=lambda p: p.priority, reverse=True)

    def get_processor(self, path: Path) -> BaseAssetProcessor | None:
        """Get the first processor that can handle a file, or None."""
        for processor in self._processors:
            if processor.can_process(path):
                return processor
        return None

    def process(self, source: Path, dest: Path) -> None:
        """Process an asset using the appropriate processor.

        Raises:
            AssetIOError: If no registered processor accepts the file.
        """
        processor = self.get_processor(source)
        if processor is None:
            raise AssetIOError(source, "no processor accepts this asset")
        processor.process(source, dest)


def create_default_registry() -> AssetProcessorRegistry:
    """Create a registry with the Sass compiler and the static fallback."""
    registry = AssetProcessorRegistry()
    registry.register(SassProcessor())
    registry.register(StaticAssetProcessor())
    return registry
