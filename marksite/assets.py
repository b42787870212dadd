"""Asset pipeline for marksite.

Every non-document file in the source tree is an asset. The pipeline maps it
to its mirrored place in the output tree, creates the destination folder on
demand and hands it to the processor registry: Sass and SCSS sources are
compiled to `.css`, everything else is copied unchanged.
"""

from __future__ import annotations

from pathlib import Path

from .asset_processors import AssetProcessorRegistry, SassProcessor, create_default_registry
from .console import Reporter
from .errors import BuildError, with_source
from .utils import ensure_dir, output_path_for


class AssetPipeline:
    """Copies or transpiles assets into the output tree.

    Attributes:
        source_root: Root of the source tree.
        output_dir: Root of the output tree.
        processor_registry: Registry of asset processors.
        reporter: Progress output.
    """

    def __init__(
        self,
        source_root: Path,
        output_dir: Path,
        processor_registry: AssetProcessorRegistry | None = None,
        reporter: Reporter | None = None,
    ):
        self.source_root = source_root
        self.output_dir = output_dir
        self.processor_registry = processor_registry or create_default_registry()
        self.reporter = reporter or Reporter()

    def copy(self, path: Path) -> Path:
        """Process one asset.

        Args:
            path: Asset file under source_root.

        Returns:
            Path of the written output file.

        Raises:
            BuildError: Any subclass, with source_path set to the asset.
        """
        self.reporter.processing(path)
        dest = output_path_for(self.source_root, self.output_dir, path)
        try:
            if ensure_dir(dest.parent):
                self.reporter.detail("created directory", dest.parent)
            processor = self.processor_registry.get_processor(path)
            self.processor_registry.process(path, dest)
        except BuildError as exc:
            with_source(exc, path)
            raise
        if isinstance(processor, SassProcessor):
            self.reporter.detail("transpiled styles", path)
        self.reporter.detail("copied asset", dest)
        return dest
