"""
Constant Emitter

Renders a ``MetricCatalog`` into source text. Compiled targets (go, python)
go through Jinja2 templates; the json target is a loaded-data table written
with ``JSONManager.dumps``. Rendering never touches the filesystem and never
embeds timestamps, so the same catalog always renders to the same bytes.
"""

import json
import os
import textwrap
from dataclasses import dataclass
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from domains.semconv.catalog import CatalogEntry, MetricCatalog
from domains.semconv.config import GeneratorConfig
from domains.semconv.error import TemplateRenderError
from utils.data.json_manager import JSONManager
from utils.logging.logging_manager import LogManager

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")

# Split output puts each root namespace in its own <namespace>conv package
NAMESPACE_PACKAGE_SUFFIX = "conv"

GENERATED_NOTICE = "Code generated from semantic convention specification. DO NOT EDIT."
MISSING_DESCRIPTION_NOTE = (
    "NOTE: The description (brief) for this metric is not defined in the semantic-conventions repository."
)

# target -> (built-in template, comment prefix, indentation inside the constant block)
TEMPLATE_TARGETS = {
    "go": ("go.j2", "//", "\t"),
    "python": ("python.j2", "#", ""),
}


@dataclass(frozen=True)
class RenderedFile:
    """A generated file, relative to the output folder."""

    path: str
    content: str


def literal(value: str) -> str:
    """Double-quoted string literal valid in both Go and Python."""
    return json.dumps(value, ensure_ascii=False)


def _lower_first(text: str) -> str:
    # Keep leading acronyms such as "CPU" intact
    if len(text) > 1 and text[1].isupper():
        return text
    return text[:1].lower() + text[1:]


class ConstantEmitter:
    """Turns a catalog into one or more ``RenderedFile`` objects."""

    def __init__(self, config: GeneratorConfig, spec_version: Optional[str] = None):
        self.config = config
        self.spec_version = spec_version
        self.logger = LogManager.get_instance().get_logger("ConstantEmitter")

    def render(self, catalog: MetricCatalog) -> list[RenderedFile]:
        """Renders the whole catalog; with ``split_by_namespace`` one file per root namespace.

        Raises:
            TemplateRenderError: If the template is missing or fails to render.
        """
        digest = catalog.digest()
        filename = self.config.output_filename

        if not self.config.split_by_namespace:
            files = [RenderedFile(filename, self._render_file(list(catalog), self.config.package_name, digest))]
        else:
            files = [
                RenderedFile(
                    f"{namespace}{NAMESPACE_PACKAGE_SUFFIX}/{filename}",
                    self._render_file(entries, f"{namespace}{NAMESPACE_PACKAGE_SUFFIX}", digest),
                )
                for namespace, entries in catalog.by_namespace().items()
            ]

        self.logger.debug(f"Rendered {len(files)} {self.config.target} file(s) for {len(catalog)} metrics")
        return sorted(files, key=lambda f: f.path)

    def _render_file(self, entries: list[CatalogEntry], package_name: str, digest: str) -> str:
        if self.config.target == "json":
            return self.render_table(entries, digest)
        return self.render_source(entries, package_name, digest)

    def render_table(self, entries: list[CatalogEntry], digest: str) -> str:
        """The json target: a table the loader can read back."""
        metrics = []
        for entry in entries:
            record = entry.definition.to_record()
            record["constants"] = dict(entry.constants())
            metrics.append(record)
        document: dict[str, Any] = {"digest": digest, "metrics": metrics}
        if self.spec_version:
            document["spec_version"] = self.spec_version
        return JSONManager.dumps(document)

    def render_source(self, entries: list[CatalogEntry], package_name: str, digest: str) -> str:
        template_name, prefix, indent = TEMPLATE_TARGETS[self.config.target]
        if self.config.template:
            search_path = os.path.dirname(os.path.abspath(self.config.template))
            template_name = os.path.basename(self.config.template)
        else:
            search_path = TEMPLATES_DIR

        context = {
            "header_lines": self.header_lines(prefix, digest),
            "package_name": package_name,
            "spec_version": self.spec_version,
            "digest": digest,
            "metrics": [self._metric_context(entry, prefix, indent) for entry in entries],
        }

        environment = Environment(
            loader=FileSystemLoader(search_path),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            autoescape=False,
        )
        try:
            return environment.get_template(template_name).render(**context)
        except (TemplateError, OSError) as e:
            raise TemplateRenderError(template=os.path.join(search_path, template_name), error=e) from e

    def header_lines(self, prefix: str, digest: str) -> list[str]:
        lines = []
        if self.config.license_header:
            lines.extend(self._comment(line, prefix) for line in self.config.license_header)
            lines.append("")
        lines.append(self._comment(GENERATED_NOTICE, prefix))
        if self.spec_version:
            lines.append(self._comment(f"Spec version: {self.spec_version}", prefix))
        lines.append(self._comment(f"Registry digest: {digest}", prefix))
        return lines

    def comment_block(self, entry: CatalogEntry) -> list[str]:
        """Uncommented text of the block written above a metric's constants."""
        definition = entry.definition
        summary = f'{entry.constant_base} is the metric conforming to the "{definition.identifier}" semantic conventions.'
        if entry.description:
            summary = f"{summary} It represents the {_lower_first(entry.description.rstrip('.'))}."

        lines = [summary]
        lines.append(f"Instrument: {definition.instrument.value}")
        lines.append(f"Unit: {definition.unit}")
        lines.append(f"Stability: {definition.stability.value}")
        if definition.is_deprecated:
            deprecation = f"Deprecated: Replaced by `{definition.deprecated_by}`."
            if definition.deprecation_note:
                deprecation = f"{deprecation} {definition.deprecation_note}"
            lines.append(deprecation)
        if entry.description is None:
            lines.append(MISSING_DESCRIPTION_NOTE)
        return lines

    def _metric_context(self, entry: CatalogEntry, prefix: str, indent: str) -> dict[str, Any]:
        block = self.comment_block(entry)
        width = max(self.config.comment_width - len(indent) - len(prefix) - 1, 20)
        # Only the summary sentence is wrapped; the attribute lines stay one per line
        summary = textwrap.wrap(block[0], width=width, break_long_words=False, break_on_hyphens=False)

        constants = [(name, literal(value)) for name, value in entry.constants()]
        return {
            "identifier": entry.identifier,
            "comment_lines": [self._comment(line, prefix) for line in summary + block[1:]],
            "constants": constants,
            "name_width": max(len(name) for name, _ in constants),
        }

    @staticmethod
    def _comment(text: str, prefix: str) -> str:
        return f"{prefix} {text}" if text else prefix
