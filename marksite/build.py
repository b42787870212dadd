"""Site building for marksite.

This module ties the pipeline together: it loads the optional site
configuration, walks the source tree once, builds every document and then
every asset into `<source>/out`, and reports what was produced.

Key functions:
- load_config: Loads site configuration from marksite.yaml.
- build_site: Builds the entire site in one call.

Key classes:
- SiteBuilder: Full builds and single-path rebuilds for one source tree.
- BuildResult: Immutable summary of a build pass.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from . import __version__
from .assets import AssetPipeline
from .console import Reporter
from .content import PageBuilder
from .errors import BuildError, InputNotFound
from .tree import FileEntry, FileKind, classify, partition, walk_tree
from .utils import OUTPUT_DIRNAME, ensure_dir

CONFIG_FILENAME = "marksite.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "port": 3000,
    "ws_port": None,
    "pretty": False,
    "keep_going": False,
}


@dataclass(frozen=True)
class BuildResult:
    """Result of a full build pass.

    Attributes:
        generated_files: Number of documents written.
        copied_assets: Number of assets copied or transpiled.
        elapsed: Wall-clock duration in seconds.
        output_dir: Directory where the site was built.
        failures: Errors collected when the pass continued past them.
    """

    generated_files: int
    copied_assets: int
    elapsed: float
    output_dir: Path
    failures: tuple[BuildError, ...] = ()

    @property
    def ok(self) -> bool:
        """True when every file was built."""
        return not self.failures


def load_config(source_root: Path) -> dict[str, Any]:
    """Load site configuration from marksite.yaml.

    Args:
        source_root: Root of the source tree.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = source_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    return config


class SiteBuilder:
    """Builds one source tree into its output tree.

    Attributes:
        source_root: Resolved root of the source tree.
        output_dir: `<source_root>/out`.
        config: Site configuration.
        reporter: Progress output.
        pages: Document builder.
        assets: Asset pipeline.
    """

    def __init__(
        self,
        source_root: Path,
        config: dict[str, Any] | None = None,
        reporter: Reporter | None = None,
    ):
        source_root = Path(source_root).resolve()
        if not source_root.is_dir():
            raise InputNotFound(source_root, "source directory does not exist")
        self.source_root = source_root
        self.output_dir = source_root / OUTPUT_DIRNAME
        self.config_path = source_root / CONFIG_FILENAME
        self.config = config if config is not None else load_config(source_root)
        self.reporter = reporter or Reporter()
        self.pages = PageBuilder(
            source_root,
            self.output_dir,
            pretty=bool(self.config.get("pretty", False)),
            reporter=self.reporter,
        )
        self.assets = AssetPipeline(source_root, self.output_dir, reporter=self.reporter)

    def is_ignored(self, path: Path) -> bool:
        """Check if a path is outside the build: the output tree or the config file."""
        if path == self.config_path:
            return True
        try:
            path.relative_to(self.output_dir)
            return True
        except ValueError:
            return False

    def build(self, keep_going: bool | None = None) -> BuildResult:
        """Build every document and asset.

        Args:
            keep_going: Continue past failing files and collect them in the
                result instead of raising. Defaults to the `keep_going`
                config value.

        Returns:
            BuildResult with counts, duration and collected failures.

        Raises:
            BuildError: On the first failing file unless keep_going is set.
        """
        if keep_going is None:
            keep_going = bool(self.config.get("keep_going", False))
        started = time.perf_counter()
        self.reporter.banner("marksite", __version__)
        self.reporter.info("base directory", self.source_root)
        ensure_dir(self.output_dir)

        entries = walk_tree(self.source_root, exclude=(self.output_dir, self.config_path))
        documents, assets = partition(entries)

        generated = 0
        copied = 0
        failures: list[BuildError] = []
        for entry in documents + assets:
            try:
                self._build_entry(entry)
            except BuildError as exc:
                if not keep_going:
                    raise
                self.reporter.error(str(exc))
                failures.append(exc)
                continue
            if entry.is_document:
                generated += 1
            else:
                copied += 1

        result = BuildResult(
            generated_files=generated,
            copied_assets=copied,
            elapsed=time.perf_counter() - started,
            output_dir=self.output_dir,
            failures=tuple(failures),
        )
        self._report(result)
        return result

    def rebuild(self, path: Path) -> Path:
        """Rebuild a single source file, classified like the full walk does.

        Args:
            path: File under source_root. Symlinks are not followed, so the
                output path mirrors the link, as in the full walk.

        Returns:
            Path of the written output file.

        Raises:
            InputNotFound: If path lies outside source_root.
        """
        path = Path(path).absolute()
        if not path.is_relative_to(self.source_root):
            raise InputNotFound(path, f"not under the source directory {self.source_root}")
        ensure_dir(self.output_dir)
        return self._build_entry(FileEntry(path, classify(path)))

    def _build_entry(self, entry: FileEntry) -> Path:
        if entry.kind is FileKind.DOCUMENT:
            return self.pages.build(entry.path)
        return self.assets.copy(entry.path)

    def _report(self, result: BuildResult) -> None:
        self.reporter.done(f"generated {result.generated_files} static files")
        self.reporter.done(f"copied {result.copied_assets} static assets")
        self.reporter.done(f"site generated in {result.output_dir}")
        if result.failures:
            self.reporter.error(f"{len(result.failures)} file(s) failed to build")
        self.reporter.done(f"in {result.elapsed:.2f} seconds")


def build_site(
    source_root: Path,
    keep_going: bool | None = None,
    config: dict[str, Any] | None = None,
    reporter: Reporter | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        source_root: Root of the source tree.
        keep_going: Continue past failing files (see SiteBuilder.build).
        config: Configuration to use instead of marksite.yaml.
        reporter: Progress output.

    Returns:
        BuildResult for the pass.
    """
    builder = SiteBuilder(source_root, config=config, reporter=reporter)
    return builder.build(keep_going=keep_going)
