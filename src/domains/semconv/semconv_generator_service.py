"""
Semantic Convention Generator Service

Business logic behind the ``semconv`` commands: load the registry, build the
catalog, render it and either write it or compare it with existing output.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from domains.semconv.catalog import MetricCatalog
from domains.semconv.catalog_writer import CatalogWriter, FileDrift
from domains.semconv.config import GeneratorConfig
from domains.semconv.constant_emitter import ConstantEmitter, RenderedFile
from domains.semconv.naming import IdentifierNormalizer
from domains.semconv.registry_loader import RegistryLoader
from domains.semconv.spec_version import resolve_registry
from utils.logging.logging_manager import LogManager


@dataclass
class GenerationResult:
    catalog: MetricCatalog
    files: List[RenderedFile]
    output_dir: str
    spec_version: Optional[str] = None
    written: List[str] = field(default_factory=list)
    drifts: List[FileDrift] = field(default_factory=list)


class SemconvGeneratorService:
    """Runs the registry -> catalog -> rendered files pipeline."""

    def __init__(self, config: GeneratorConfig, loader: Optional[RegistryLoader] = None):
        self.logger = LogManager.get_instance().get_logger("SemconvGeneratorService")
        self.config = config
        self.loader = loader or RegistryLoader()
        self.normalizer = IdentifierNormalizer(
            extra_initialisms=config.extra_initialisms,
            extra_replacements=config.extra_replacements,
        )

    def build_catalog(self, registry_path: str) -> MetricCatalog:
        definitions = self.loader.load(registry_path)
        self.logger.info(f"Loaded {len(definitions)} metric definitions from {registry_path}")
        return MetricCatalog.build(definitions, self.normalizer)

    def render(
        self,
        input_path: str,
        spec_version: Optional[str] = None,
        latest: bool = False,
        output_dir: Optional[str] = None,
    ) -> GenerationResult:
        """Loads and renders without writing anything.

        Args:
            input_path (str): Registry file, directory or URL.
            spec_version (Optional[str]): Tag to generate, or a label for non-git inputs.
            latest (bool): Use the highest release tag of the registry repository.
            output_dir (Optional[str]): Exact output folder; defaults to the configured
                folder plus the spec version.
        """
        with resolve_registry(input_path, spec_version=spec_version, latest=latest) as (registry_path, version):
            catalog = self.build_catalog(registry_path)

        files = ConstantEmitter(self.config, spec_version=version).render(catalog)
        return GenerationResult(
            catalog=catalog,
            files=files,
            output_dir=output_dir or self.config.output_path_for(version),
            spec_version=version,
        )

    def generate(self, input_path: str, **kwargs) -> GenerationResult:
        """Renders the catalog and writes it. Nothing is written unless every file rendered."""
        result = self.render(input_path, **kwargs)
        result.written = CatalogWriter(result.output_dir).write(result.files)
        self.logger.info(
            f"Generated {len(result.catalog)} metrics into {len(result.written)} file(s) under {result.output_dir}"
        )
        return result

    def check(self, input_path: str, **kwargs) -> GenerationResult:
        """Renders the catalog and compares it with the files already in the output folder."""
        result = self.render(input_path, **kwargs)
        result.drifts = CatalogWriter(result.output_dir).check(result.files)
        return result

    @staticmethod
    def summarize(result: GenerationResult) -> Dict[str, Any]:
        """Counts per namespace, instrument and stability for the summary report."""
        entries = list(result.catalog)
        return {
            "spec_version": result.spec_version,
            "digest": result.catalog.digest(),
            "total_metrics": len(entries),
            "deprecated_metrics": len(result.catalog.deprecated()),
            "without_description": sum(1 for e in entries if e.description is None),
            "by_namespace": {ns: len(items) for ns, items in result.catalog.by_namespace().items()},
            "by_instrument": dict(sorted(Counter(e.definition.instrument.value for e in entries).items())),
            "by_stability": dict(sorted(Counter(e.definition.stability.value for e in entries).items())),
            "files": [f.path for f in result.files],
            "output_dir": result.output_dir,
        }
