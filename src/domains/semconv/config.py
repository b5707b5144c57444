"""Configuration for constant catalog generation."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from config import Config
from domains.semconv.error import ConfigurationError
from utils.logging.logging_manager import LogManager

SUPPORTED_TARGETS = ("go", "python", "json")

TARGET_EXTENSIONS = {
    "go": "go",
    "python": "py",
    "json": "json",
}

DEFAULT_LICENSE_HEADER = [
    "Copyright The OpenTelemetry Authors",
    "SPDX-License-Identifier: Apache-2.0",
]


def _parse_bool(value: str) -> bool:
    text = value.strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"'{value}' is not a boolean")


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_mapping(value: str) -> Dict[str, str]:
    mapping = {}
    for item in _parse_list(value):
        key, sep, replacement = item.partition("=")
        if not sep or not key.strip() or not replacement.strip():
            raise ValueError(f"'{item}' is not a KEY=VALUE pair")
        mapping[key.strip()] = replacement.strip()
    return mapping


def _parse_lines(value: str) -> List[str]:
    # A literal "\n" separates lines when the variable is set on one line
    return value.replace("\\n", "\n").splitlines()


@dataclass
class GeneratorConfig:
    """Settings for a generation run.

    Values come from a YAML file, ``SEMCONV_*`` environment variables and
    finally the command line, each overriding the previous one.
    """

    # Output language: go, python or json
    target: str = "go"

    # Package (go) or logical module name written into the header
    package_name: str = "semconv"

    # Root folder for generated files; the spec version is appended when known
    output_dir: str = field(default_factory=lambda: Config.SEMCONV_OUTPUT_DIR)

    # File name inside the output folder; defaults to metric.<ext>
    filename: Optional[str] = None

    # Custom Jinja2 template replacing the built-in one for go/python
    template: Optional[str] = None

    # Column at which comment blocks are wrapped
    comment_width: int = 80

    # One file per root namespace (<namespace>conv/<filename>)
    split_by_namespace: bool = False

    # Lines written as a comment at the top of every generated file
    license_header: List[str] = field(default_factory=lambda: list(DEFAULT_LICENSE_HEADER))

    # Naming rule extensions
    extra_initialisms: List[str] = field(default_factory=list)
    extra_replacements: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def load_from_file(cls, config_path: str) -> "GeneratorConfig":
        """Load configuration from a YAML file.

        Raises:
            ConfigurationError: If the file is missing, unparsable or has unknown keys.
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError("Config file not found", path=config_path)

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError("Failed to read config file", path=config_path, error=e) from e

        if not isinstance(config_data, dict):
            raise ConfigurationError("Config file must contain a mapping", path=config_path)

        LogManager.get_instance().get_logger("GeneratorConfig").debug(f"Loaded generator config from {config_path}")
        return cls._from_dict(config_data, source=config_path)

    @classmethod
    def load_from_env(cls, base: Optional["GeneratorConfig"] = None) -> "GeneratorConfig":
        """Apply ``SEMCONV_*`` environment variables on top of ``base`` (or defaults)."""
        config = replace(base) if base else cls()

        env_mappings = {
            "SEMCONV_TARGET": ("target", str),
            "SEMCONV_PACKAGE": ("package_name", str),
            "SEMCONV_FILENAME": ("filename", str),
            "SEMCONV_TEMPLATE": ("template", str),
            "SEMCONV_COMMENT_WIDTH": ("comment_width", int),
            "SEMCONV_SPLIT_BY_NAMESPACE": ("split_by_namespace", _parse_bool),
            "SEMCONV_EXTRA_INITIALISMS": ("extra_initialisms", _parse_list),
            "SEMCONV_EXTRA_REPLACEMENTS": ("extra_replacements", _parse_mapping),
            "SEMCONV_LICENSE_HEADER": ("license_header", _parse_lines),
        }

        for env_var, (key, type_func) in env_mappings.items():
            value = os.getenv(env_var)
            if value is None or value == "":
                continue
            try:
                setattr(config, key, type_func(value))
            except (ValueError, TypeError) as e:
                raise ConfigurationError(f"Invalid value for {env_var}: {value}", error=e) from e

        return config

    @classmethod
    def _from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "GeneratorConfig":
        """Create configuration from a dictionary; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}", path=source)

        config = cls()
        for key, value in data.items():
            if key == "license_header" and isinstance(value, str):
                value = value.splitlines()
            setattr(config, key, value)
        return config

    def with_overrides(self, **overrides: Any) -> "GeneratorConfig":
        """Returns a copy where every non-None override replaces the configured value."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})

    @property
    def extension(self) -> str:
        return TARGET_EXTENSIONS[self.target]

    @property
    def output_filename(self) -> str:
        return self.filename or f"metric.{self.extension}"

    def output_path_for(self, spec_version: Optional[str] = None) -> str:
        """Folder the catalog is written to for a given spec version."""
        if spec_version:
            return os.path.join(self.output_dir, spec_version)
        return self.output_dir

    def save_to_file(self, config_path: str) -> None:
        """Save current configuration to a YAML file."""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, indent=2, sort_keys=True)

        LogManager.get_instance().get_logger("GeneratorConfig").info(f"Configuration saved to {config_path}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: Listing every invalid value.
        """
        errors = []

        if self.target not in SUPPORTED_TARGETS:
            errors.append(f"target must be one of {', '.join(SUPPORTED_TARGETS)}")
        if not isinstance(self.package_name, str) or not self.package_name.isidentifier():
            errors.append("package_name must be a valid identifier")
        if not self.output_dir:
            errors.append("output_dir must not be empty")
        if self.filename is not None and (not self.filename or os.sep in self.filename):
            errors.append("filename must be a plain file name")
        if not isinstance(self.comment_width, int) or self.comment_width < 40:
            errors.append("comment_width must be an integer of at least 40")
        if self.template is not None and self.target == "json":
            errors.append("template cannot be combined with the json target")
        if not isinstance(self.license_header, list) or not all(isinstance(line, str) for line in self.license_header):
            errors.append("license_header must be a list of strings")
        if not isinstance(self.extra_initialisms, list):
            errors.append("extra_initialisms must be a list")
        if not isinstance(self.extra_replacements, dict):
            errors.append("extra_replacements must be a mapping")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")


def load_config(config_path: Optional[str] = None) -> GeneratorConfig:
    """Load configuration with fallback hierarchy.

    An explicit path wins, then the first standard location that exists,
    then defaults. Environment variables are applied on top in every case.
    """
    config = None

    if config_path:
        config = GeneratorConfig.load_from_file(config_path)
    else:
        standard_paths = [
            "config/semconv.yml",
            "config/semconv.yaml",
            "semconv.yml",
            "semconv.yaml",
        ]
        for path in standard_paths:
            if Path(path).exists():
                config = GeneratorConfig.load_from_file(path)
                break

    return GeneratorConfig.load_from_env(config)
