"""Validated, ordered set of metric definitions ready for rendering."""

import hashlib
import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from domains.semconv.error import DuplicateIdentifierError, RegistryLoadError
from domains.semconv.models import MetricDefinition
from domains.semconv.naming import IdentifierNormalizer
from utils.data.json_manager import JSONManager
from utils.logging.logging_manager import LogManager

NAME_SUFFIX = "Name"
UNIT_SUFFIX = "Unit"
DESCRIPTION_SUFFIX = "Description"


def _as_sentence(text: str) -> str:
    text = text.rstrip()
    return text if text.endswith((".", "!", "?")) else f"{text}."


def _mentions(text: str, identifier: str) -> bool:
    """Whether ``text`` names ``identifier`` as a whole, not as a prefix of a longer one."""
    return re.search(rf"(?<![\w.]){re.escape(identifier)}(?!\.?\w)", text) is not None


@dataclass(frozen=True)
class CatalogEntry:
    """A metric definition paired with its constant base name."""

    definition: MetricDefinition
    constant_base: str

    @property
    def identifier(self) -> str:
        return self.definition.identifier

    @property
    def name_constant(self) -> str:
        return f"{self.constant_base}{NAME_SUFFIX}"

    @property
    def unit_constant(self) -> str:
        return f"{self.constant_base}{UNIT_SUFFIX}"

    @property
    def description_constant(self) -> Optional[str]:
        if self.description is None:
            return None
        return f"{self.constant_base}{DESCRIPTION_SUFFIX}"

    @property
    def description(self) -> Optional[str]:
        """Text of the description constant.

        Deprecated entries always get one, and it always names the
        replacement; other entries carry the registry text or nothing.
        """
        definition = self.definition
        if not definition.is_deprecated:
            return definition.description
        replacement = definition.deprecated_by
        if definition.description and _mentions(definition.description, replacement):
            return definition.description

        notice = f"Deprecated, use `{replacement}` instead."
        if definition.deprecation_note and definition.deprecation_note not in (definition.description or ""):
            notice = f"{notice} {definition.deprecation_note}"
        if definition.description:
            return f"{_as_sentence(definition.description)} {notice}"
        return notice

    def constants(self) -> list[tuple[str, str]]:
        """(constant name, value) pairs in emission order."""
        pairs = [
            (self.name_constant, self.definition.identifier),
            (self.unit_constant, self.definition.unit),
        ]
        if self.description is not None:
            pairs.append((self.description_constant, self.description))
        return pairs


class MetricCatalog:
    """Immutable catalog built from registry definitions.

    Entries are sorted by identifier so the rendered output only depends on
    the registry content, never on file or entry order.
    """

    def __init__(self, entries: list[CatalogEntry]):
        self._entries = tuple(sorted(entries, key=lambda e: e.identifier))
        self._by_identifier = {entry.identifier: entry for entry in self._entries}

    @classmethod
    def build(
        cls,
        definitions: Iterable[MetricDefinition],
        normalizer: Optional[IdentifierNormalizer] = None,
    ) -> "MetricCatalog":
        """Validates definitions and assigns constant names.

        Raises:
            RegistryLoadError: If there are no definitions at all.
            DuplicateIdentifierError: If an identifier is declared twice.
            NamingCollisionError: If two identifiers share a constant name.
            InvalidConstantNameError: If an identifier has no valid constant name.
        """
        logger = LogManager.get_instance().get_logger("MetricCatalog")
        normalizer = normalizer or IdentifierNormalizer()
        definitions = list(definitions)

        if not definitions:
            raise RegistryLoadError("Registry contains no metric definitions", source="<registry>")

        counts = Counter(d.identifier for d in definitions)
        duplicates = sorted(identifier for identifier, count in counts.items() if count > 1)
        if duplicates:
            identifier = duplicates[0]
            sources = [d.source or "<unknown>" for d in definitions if d.identifier == identifier]
            raise DuplicateIdentifierError(identifier=identifier, sources=sources)

        names = normalizer.assign(sorted(counts))
        catalog = cls([CatalogEntry(definition=d, constant_base=names[d.identifier]) for d in definitions])

        for entry in catalog.deprecated():
            if entry.definition.deprecated_by not in catalog:
                logger.warning(
                    f"Metric '{entry.identifier}' is replaced by '{entry.definition.deprecated_by}', "
                    "which is not defined in this registry"
                )

        logger.debug(f"Catalog built with {len(catalog)} metrics in {len(catalog.namespaces())} namespaces")
        return catalog

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_identifier

    def get(self, identifier: str) -> Optional[CatalogEntry]:
        return self._by_identifier.get(identifier)

    def deprecated(self) -> list[CatalogEntry]:
        return [entry for entry in self._entries if entry.definition.is_deprecated]

    def namespaces(self) -> list[str]:
        return sorted({entry.definition.namespace for entry in self._entries})

    def by_namespace(self) -> dict[str, list[CatalogEntry]]:
        """Entries grouped by emitting subsystem, both levels sorted."""
        grouped: dict[str, list[CatalogEntry]] = {}
        for entry in self._entries:
            grouped.setdefault(entry.definition.namespace, []).append(entry)
        return dict(sorted(grouped.items()))

    def digest(self) -> str:
        """Short SHA-256 of the canonical catalog content."""
        canonical = JSONManager.dumps([entry.definition.to_record() for entry in self._entries])
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
