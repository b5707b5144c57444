"""
Semantic Convention Registry Loader

Reads metric definitions from a registry snapshot.

Accepted sources:
- a single .yaml/.yml/.json file
- a directory, walked recursively; files are read in sorted path order
- an http(s) URL of a single registry file

Accepted document shapes:
- upstream semantic-convention YAML: a top-level ``groups`` list, of which
  only ``type: metric`` groups are used (``metric_name``, ``instrument``,
  ``unit``, ``brief``, ``stability``, ``deprecated``)
- a flat table: a top-level ``metrics`` list (or a bare list) of records
  with ``identifier``/``id``, ``instrument``, ``unit``, ``description``,
  ``stability``, ``deprecated_by``, ``deprecation_note``; this is what the
  json target writes
"""

import json
import os
import re
import tempfile
from typing import Any, Optional

import requests
import yaml
from pydantic import ValidationError

from domains.semconv.error import RegistryEntryError, RegistryLoadError
from domains.semconv.models import MetricDefinition
from utils.data.json_manager import JSONManager
from utils.file_manager import FileManager
from utils.logging.logging_manager import LogManager

REGISTRY_EXTENSIONS = (".yaml", ".yml", ".json")
BACKQUOTED = re.compile(r"`([^`]+)`")


class RegistryLoader:
    """Loads ``MetricDefinition`` records from registry files."""

    def __init__(self, download_timeout: int = 30):
        self.logger = LogManager.get_instance().get_logger("RegistryLoader")
        self.download_timeout = download_timeout

    def load(self, source: str) -> list[MetricDefinition]:
        """Loads every metric definition found at ``source``.

        Args:
            source (str): File path, directory path or http(s) URL.

        Returns:
            list[MetricDefinition]: Definitions in source order.

        Raises:
            RegistryLoadError: If the source is missing, unreadable or has the wrong shape.
            RegistryEntryError: If an entry is malformed.
        """
        if FileManager.is_url(source):
            return self._load_url(source)

        if FileManager.is_folder(source):
            files = FileManager.list_files(source, REGISTRY_EXTENSIONS, recursive=True)
            self.logger.info(f"Loading registry directory {source} ({len(files)} files)")
            definitions = []
            for file_path in files:
                definitions.extend(self.load_file(file_path, label=os.path.relpath(file_path, source)))
            return definitions

        if FileManager.file_exists(source):
            return self.load_file(source)

        raise RegistryLoadError("Registry source not found", source=source)

    def _load_url(self, url: str) -> list[MetricDefinition]:
        self.logger.info(f"Downloading registry from {url}")
        with tempfile.TemporaryDirectory(prefix="semconv-registry-") as tmp_dir:
            try:
                file_path = FileManager.download_file(url, tmp_dir, timeout=self.download_timeout)
            except (requests.exceptions.RequestException, OSError, ValueError) as e:
                raise RegistryLoadError("Failed to download registry", source=url, error=e) from e
            return self.load_file(file_path, label=url)

    def load_file(self, file_path: str, label: Optional[str] = None) -> list[MetricDefinition]:
        """Parses one registry file.

        Args:
            file_path (str): Path to the file.
            label (Optional[str]): Name used in errors and on the definitions' ``source``.
        """
        label = label or file_path
        document = self._parse(file_path, label)
        definitions = self.parse_document(document, label)
        self.logger.debug(f"Read {len(definitions)} metric definitions from {label}")
        return definitions

    def _parse(self, file_path: str, label: str) -> Any:
        try:
            if file_path.lower().endswith(".json"):
                return JSONManager.read_json(file_path)
            with open(file_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise RegistryLoadError("Failed to parse registry file", source=label, error=e) from e

    def parse_document(self, document: Any, label: str) -> list[MetricDefinition]:
        """Extracts metric definitions from an already parsed document."""
        if document is None:
            return []

        if isinstance(document, list):
            return [self._from_record(record, label, index) for index, record in enumerate(document)]

        if not isinstance(document, dict):
            raise RegistryLoadError(
                f"Expected a mapping or a list at the top level, got {type(document).__name__}",
                source=label,
            )

        if "groups" in document:
            groups = document["groups"] or []
            if not isinstance(groups, list):
                raise RegistryLoadError("'groups' must be a list", source=label)
            return [
                self._from_group(group, label, index)
                for index, group in enumerate(groups)
                if isinstance(group, dict) and group.get("type") == "metric"
            ]

        if "metrics" in document:
            records = document["metrics"] or []
            if not isinstance(records, list):
                raise RegistryLoadError("'metrics' must be a list", source=label)
            return [self._from_record(record, label, index) for index, record in enumerate(records)]

        raise RegistryLoadError("Document has neither a 'groups' nor a 'metrics' list", source=label)

    def _from_group(self, group: dict, label: str, index: int) -> MetricDefinition:
        entry = group.get("metric_name") or group.get("id") or index
        deprecated_by, note = self._parse_deprecation(group.get("deprecated"), label, entry)
        return self._build(
            {
                "identifier": group.get("metric_name"),
                "instrument": group.get("instrument"),
                "unit": group.get("unit"),
                "description": group.get("brief"),
                "stability": group.get("stability"),
                "deprecated_by": deprecated_by,
                "deprecation_note": note,
            },
            label,
            entry,
        )

    def _from_record(self, record: Any, label: str, index: int) -> MetricDefinition:
        if not isinstance(record, dict):
            raise RegistryEntryError("Metric record must be a mapping", source=label, entry=index)
        identifier = record.get("identifier", record.get("id"))
        return self._build(
            {
                "identifier": identifier,
                "instrument": record.get("instrument"),
                "unit": record.get("unit"),
                "description": record.get("description"),
                "stability": record.get("stability"),
                "deprecated_by": record.get("deprecated_by"),
                "deprecation_note": record.get("deprecation_note"),
            },
            label,
            identifier or index,
        )

    def _build(self, fields: dict[str, Any], label: str, entry: Any) -> MetricDefinition:
        try:
            return MetricDefinition(**fields, source=label)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'entry'}: {error['msg']}"
                for error in e.errors()
            )
            raise RegistryEntryError(f"Malformed metric entry: {problems}", source=label, entry=entry) from e

    @staticmethod
    def _parse_deprecation(deprecated: Any, label: str, entry: Any) -> tuple[Optional[str], Optional[str]]:
        """Returns (replacement, note) for the ``deprecated`` field of a group.

        The field is either text such as "Replaced by `x`. Note: ..." or a
        mapping such as {reason: renamed, renamed_to: x, note: ...}.
        """
        if deprecated is None or deprecated is False:
            return None, None

        if isinstance(deprecated, str):
            match = BACKQUOTED.search(deprecated)
            if not match:
                raise RegistryEntryError(
                    f"Deprecation '{deprecated}' does not name a replacement", source=label, entry=entry
                )
            note = deprecated[match.end():].lstrip(". \n\t") or None
            return match.group(1).strip(), note

        if isinstance(deprecated, dict):
            replacement = deprecated.get("renamed_to")
            if not replacement:
                raise RegistryEntryError(
                    f"Deprecation with reason '{deprecated.get('reason', 'unknown')}' does not name a replacement",
                    source=label,
                    entry=entry,
                )
            return str(replacement), deprecated.get("note")

        raise RegistryEntryError("Deprecation does not name a replacement", source=label, entry=entry)
