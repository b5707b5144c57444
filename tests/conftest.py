"""Shared fixtures for semconv-toolkit tests."""

import os
import tempfile
import textwrap
from pathlib import Path

import pytest

# The LogManager singleton is created when log_config is first imported
os.environ["LOG_OUTPUT"] = "console"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="semconv-logs-"))

import log_config  # noqa: E402,F401


REGISTRY_YAML = textwrap.dedent(
    """
    groups:
      - id: metric.http.server.request.duration
        type: metric
        metric_name: http.server.request.duration
        stability: stable
        brief: "Duration of HTTP server requests."
        instrument: histogram
        unit: "s"
      - id: metric.system.disk.io
        type: metric
        metric_name: system.disk.io
        stability: experimental
        brief: ""
        instrument: counter
        unit: "By"
      - id: metric.db.client.connections.create_time
        type: metric
        metric_name: db.client.connections.create_time
        brief: "The time it took to create a new connection"
        instrument: histogram
        unit: "ms"
        deprecated: "Replaced by `db.client.connection.create_time`. Note: the unit also changed from `ms` to `s`."
      - id: metric.db.client.connection.create_time
        type: metric
        metric_name: db.client.connection.create_time
        brief: "The time it took to create a new connection"
        instrument: histogram
        unit: "s"
      - id: registry.http
        type: attribute_group
        brief: "Not a metric"
    """
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test in its own folder with no generator settings inherited from the shell."""
    for key in list(os.environ):
        if key.startswith("SEMCONV_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def registry_file(tmp_path) -> Path:
    path = tmp_path / "registry" / "metrics.yaml"
    path.parent.mkdir(parents=True)
    path.write_text(REGISTRY_YAML, encoding="utf-8")
    return path


@pytest.fixture
def write_yaml(tmp_path):
    """Writes a dedented YAML document below tmp_path and returns its path."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write
