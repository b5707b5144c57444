import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from domains.semconv.error import RegistryEntryError, RegistryLoadError
from domains.semconv.registry_loader import RegistryLoader


@pytest.fixture
def loader():
    return RegistryLoader()


def test_loads_metric_groups_only(loader, registry_file):
    definitions = loader.load(str(registry_file))
    assert [d.identifier for d in definitions] == [
        "http.server.request.duration",
        "system.disk.io",
        "db.client.connections.create_time",
        "db.client.connection.create_time",
    ]
    assert all(d.source == str(registry_file) for d in definitions)


def test_group_fields_are_mapped(loader, registry_file):
    by_id = {d.identifier: d for d in loader.load(str(registry_file))}

    duration = by_id["http.server.request.duration"]
    assert duration.instrument.value == "histogram"
    assert duration.unit == "s"
    assert duration.description == "Duration of HTTP server requests."
    assert duration.stability.value == "stable"

    disk_io = by_id["system.disk.io"]
    assert disk_io.description is None
    assert disk_io.stability.value == "development"


def test_deprecation_string_is_split_into_replacement_and_note(loader, registry_file):
    by_id = {d.identifier: d for d in loader.load(str(registry_file))}
    deprecated = by_id["db.client.connections.create_time"]
    assert deprecated.deprecated_by == "db.client.connection.create_time"
    assert deprecated.deprecation_note == "Note: the unit also changed from `ms` to `s`."


def test_deprecation_mapping(loader, write_yaml):
    path = write_yaml(
        "registry.yaml",
        """
        groups:
          - type: metric
            metric_name: http.server.duration
            instrument: histogram
            unit: ms
            deprecated:
              reason: renamed
              renamed_to: http.server.request.duration
              note: Unit changed to seconds.
        """,
    )
    [definition] = loader.load(str(path))
    assert definition.deprecated_by == "http.server.request.duration"
    assert definition.deprecation_note == "Unit changed to seconds."


def test_deprecation_without_replacement_is_fatal(loader, write_yaml):
    path = write_yaml(
        "registry.yaml",
        """
        groups:
          - type: metric
            metric_name: http.server.duration
            instrument: histogram
            unit: ms
            deprecated: "Removed."
        """,
    )
    with pytest.raises(RegistryEntryError):
        loader.load(str(path))


def test_deprecation_mapping_without_rename_is_fatal(loader, write_yaml):
    path = write_yaml(
        "registry.yaml",
        """
        groups:
          - type: metric
            metric_name: http.server.duration
            instrument: histogram
            unit: ms
            deprecated:
              reason: obsoleted
        """,
    )
    with pytest.raises(RegistryEntryError):
        loader.load(str(path))


def test_missing_unit_is_fatal_with_context(loader, write_yaml):
    path = write_yaml(
        "registry.yaml",
        """
        groups:
          - type: metric
            metric_name: http.server.duration
            instrument: histogram
        """,
    )
    with pytest.raises(RegistryEntryError) as excinfo:
        loader.load(str(path))
    assert excinfo.value.metadata["entry"] == "http.server.duration"
    assert "unit" in excinfo.value.message


def test_missing_identifier_is_fatal(loader, write_yaml):
    path = write_yaml("registry.yaml", "metrics:\n  - instrument: counter\n    unit: '1'\n")
    with pytest.raises(RegistryEntryError) as excinfo:
        loader.load(str(path))
    assert excinfo.value.metadata["entry"] == 0


def test_flat_metrics_records(loader, write_yaml):
    path = write_yaml(
        "registry.yml",
        """
        metrics:
          - id: system.disk.io
            instrument: counter
            unit: By
          - identifier: system.disk.merged
            instrument: counter
            unit: "{operation}"
            deprecated_by: system.disk.operations
        """,
    )
    definitions = loader.load(str(path))
    assert [d.identifier for d in definitions] == ["system.disk.io", "system.disk.merged"]
    assert definitions[1].deprecated_by == "system.disk.operations"


def test_top_level_list_and_json(loader, tmp_path):
    path = tmp_path / "registry.json"
    path.write_text(json.dumps([{"id": "a.b", "instrument": "gauge", "unit": "1"}]), encoding="utf-8")
    [definition] = loader.load(str(path))
    assert definition.identifier == "a.b"


def test_directory_is_read_recursively_in_sorted_order(loader, write_yaml, tmp_path):
    write_yaml("model/system/metrics.yaml", "metrics:\n  - {id: system.disk.io, instrument: counter, unit: By}\n")
    write_yaml("model/http/metrics.yml", "metrics:\n  - {id: http.x, instrument: counter, unit: '1'}\n")
    write_yaml("model/.hidden/metrics.yaml", "metrics:\n  - {id: hidden.x, instrument: counter, unit: '1'}\n")
    (tmp_path / "model" / "README.md").write_text("not a registry", encoding="utf-8")

    definitions = loader.load(str(tmp_path / "model"))
    assert [d.identifier for d in definitions] == ["http.x", "system.disk.io"]
    assert definitions[0].source == "http/metrics.yml"


def test_empty_document_has_no_definitions(loader, write_yaml):
    assert loader.load(str(write_yaml("empty.yaml", ""))) == []


def test_missing_source(loader, tmp_path):
    with pytest.raises(RegistryLoadError):
        loader.load(str(tmp_path / "nope.yaml"))


def test_invalid_yaml(loader, write_yaml):
    with pytest.raises(RegistryLoadError):
        loader.load(str(write_yaml("bad.yaml", "groups: [\n")))


def test_wrong_shape(loader, write_yaml):
    with pytest.raises(RegistryLoadError):
        loader.load(str(write_yaml("odd.yaml", "attributes: []\n")))
    with pytest.raises(RegistryLoadError):
        loader.load(str(write_yaml("scalar.yaml", "42\n")))


def test_url_is_downloaded(loader):
    response = MagicMock()
    response.iter_content.return_value = [b"metrics:\n  - {id: a.b, instrument: counter, unit: '1'}\n"]
    with patch("utils.file_manager.requests.get", return_value=response) as get:
        definitions = loader.load("https://example.com/registry/metrics.yaml")

    get.assert_called_once()
    assert get.call_args[0][0] == "https://example.com/registry/metrics.yaml"
    assert [d.identifier for d in definitions] == ["a.b"]
    assert definitions[0].source == "https://example.com/registry/metrics.yaml"


def test_failed_download(loader):
    with patch("utils.file_manager.requests.get", side_effect=requests.exceptions.ConnectionError("down")):
        with pytest.raises(RegistryLoadError):
            loader.load("https://example.com/metrics.yaml")
