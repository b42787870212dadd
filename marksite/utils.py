"""Utility functions for marksite.

Path classification, output-path mapping and the filesystem helpers shared by
the page builder and the asset pipeline.

Key functions:
    is_markdown: Check if a path is a Markdown document.
    is_stylesheet_source: Check if a path is a Sass/SCSS source.
    output_path_for: Map a source path to its mirrored output path.
    ensure_dir: Create an output directory on demand.
    atomic_write_text: Replace a file's contents in one rename.
    atomic_copy: Copy a file into place in one rename.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .errors import AssetIOError, DirectoryCreateError

OUTPUT_DIRNAME = "out"
MARKDOWN_SUFFIX = ".md"
STYLESHEET_SOURCE_SUFFIXES = (".sass", ".scss")


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == MARKDOWN_SUFFIX


def is_stylesheet_source(path: Path) -> bool:
    """Check if a path is a Sass or SCSS source that compiles to CSS."""
    return path.suffix.lower() in STYLESHEET_SOURCE_SUFFIXES


def output_name(path: Path) -> Path:
    """Rewrite a source filename to the name it has in the output tree.

    Examples:
        >>> output_name(Path("docs/index.md"))
        PosixPath('docs/index.html')

        >>> output_name(Path("theme.scss"))
        PosixPath('theme.css')
    """
    if is_markdown(path):
        return path.with_suffix(".html")
    if is_stylesheet_source(path):
        return path.with_suffix(".css")
    return path


def output_path_for(source_root: Path, output_dir: Path, path: Path) -> Path:
    """Map a file under the source root to its mirrored output path.

    Args:
        source_root: Root of the source tree.
        output_dir: Root of the output tree.
        path: Source file.

    Returns:
        Destination path under output_dir.
    """
    rel = path.relative_to(source_root)
    return output_dir / output_name(rel)


def ensure_dir(path: Path) -> bool:
    """Ensure a directory exists, creating parents as needed.

    Args:
        path: Directory to create.

    Returns:
        True if the directory was created by this call.

    Raises:
        DirectoryCreateError: If the directory cannot be created.
    """
    if path.is_dir():
        return False
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreateError(path, f"cannot create directory: {exc}", exc) from exc
    return True


def _temp_path(dest: Path) -> Path:
    return dest.with_name(f".{dest.name}.{os.getpid()}.tmp")


def atomic_write_text(dest: Path, text: str) -> None:
    """Write text to dest through a temporary file and os.replace.

    Readers of dest see either the previous file or the complete new one.

    Raises:
        AssetIOError: If the file cannot be written.
    """
    tmp = _temp_path(dest)
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, dest)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise AssetIOError(dest, f"cannot write file: {exc}", exc) from exc


def atomic_copy(source: Path, dest: Path) -> None:
    """Copy source to dest byte-for-byte through a temporary file.

    Raises:
        AssetIOError: If the file cannot be copied.
    """
    tmp = _temp_path(dest)
    try:
        shutil.copy2(source, tmp)
        os.replace(tmp, dest)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise AssetIOError(source, f"cannot copy asset: {exc}", exc) from exc
