"""Source tree traversal for marksite.

The walker enumerates every file under the source root, skipping the output
directory, and classifies each one as a Markdown document or an asset. The
same classify() is used by the dev server's watcher so full builds and
incremental rebuilds always agree on how a path is handled.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .errors import InputNotFound
from .utils import is_markdown


class FileKind(enum.Enum):
    DOCUMENT = "document"
    ASSET = "asset"


@dataclass(frozen=True)
class FileEntry:
    """A source file and how it is built.

    Attributes:
        path: Absolute path to the source file.
        kind: Whether the file is a document or an asset.
    """

    path: Path
    kind: FileKind

    @property
    def is_document(self) -> bool:
        return self.kind is FileKind.DOCUMENT


def classify(path: Path) -> FileKind:
    """Classify a path by suffix: `.md` is a document, anything else an asset."""
    return FileKind.DOCUMENT if is_markdown(path) else FileKind.ASSET


def _walk(directory: Path, excluded: set[Path]) -> Iterable[Path]:
    for child in sorted(directory.iterdir(), key=lambda p: p.name):
        if child in excluded:
            continue
        if child.is_dir():
            yield from _walk(child, excluded)
        else:
            yield child


def walk_tree(root: Path, exclude: Iterable[Path] = ()) -> list[FileEntry]:
    """Enumerate all files under root, depth-first in name order.

    Args:
        root: Source root directory.
        exclude: Paths (files or directories) to skip, typically the output
            directory and the site config file.

    Returns:
        FileEntry for every file found.

    Raises:
        InputNotFound: If root is not an existing directory.
        OSError: If a directory cannot be read.
    """
    root = root.resolve()
    if not root.is_dir():
        raise InputNotFound(root, "source directory does not exist")
    excluded = {Path(p).resolve() for p in exclude}
    return [FileEntry(path, classify(path)) for path in _walk(root, excluded)]


def partition(entries: Iterable[FileEntry]) -> tuple[list[FileEntry], list[FileEntry]]:
    """Split entries into (documents, assets), preserving order."""
    documents: list[FileEntry] = []
    assets: list[FileEntry] = []
    for entry in entries:
        (documents if entry.is_document else assets).append(entry)
    return documents, assets
