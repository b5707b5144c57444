"""Metric definition model.

A ``MetricDefinition`` is one record of the upstream registry after
validation. Instances are immutable; a catalog is rebuilt from a fresh
registry snapshot rather than edited.
"""

import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

IDENTIFIER_PATTERN = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z0-9_]+)*$")


class InstrumentKind(str, Enum):
    """Aggregation semantics of a metric."""

    COUNTER = "counter"
    UPDOWNCOUNTER = "updowncounter"
    HISTOGRAM = "histogram"
    GAUGE = "gauge"


class Stability(str, Enum):
    """Lifecycle marker of a metric identifier."""

    STABLE = "stable"
    DEVELOPMENT = "development"

    @classmethod
    def parse(cls, value: Any) -> "Stability":
        # Older registries call development metrics "experimental" or leave it out
        if value is None:
            return cls.DEVELOPMENT
        if isinstance(value, Stability):
            return value
        text = str(value).strip().lower()
        if text in ("experimental", ""):
            return cls.DEVELOPMENT
        return cls(text)


class MetricDefinition(BaseModel):
    """Model for validating one registry metric entry.

    Attributes:
        identifier (str): Globally unique dotted metric name.
        instrument (InstrumentKind): Aggregation semantics.
        unit (str): Unit of measure.
        description (Optional[str]): Registry description; None when undefined.
        stability (Stability): Lifecycle marker.
        deprecated_by (Optional[str]): Replacement identifier, set only on deprecated entries.
        deprecation_note (Optional[str]): Extra deprecation text from the registry.
        source (Optional[str]): Where the entry was read from; not part of the record.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    identifier: str = Field(..., description="Dotted metric name, e.g. 'http.server.request.duration'.")
    instrument: InstrumentKind = Field(..., description="Instrument kind.")
    unit: str = Field(..., description="UCUM-like unit token, e.g. 's', 'By', '{request}'.")
    description: Optional[str] = Field(None, description="Human readable text; None when undefined.")
    stability: Stability = Field(Stability.DEVELOPMENT, description="Lifecycle marker.")
    deprecated_by: Optional[str] = Field(None, description="Identifier replacing this metric.")
    deprecation_note: Optional[str] = Field(None, description="Extra text attached to the deprecation.")
    source: Optional[str] = Field(None, exclude=True, description="File the entry was read from.")

    @field_validator("identifier", mode="before")
    @classmethod
    def validate_identifier(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("identifier is required")
        value = value.strip()
        if not IDENTIFIER_PATTERN.match(value):
            raise ValueError(
                f"identifier '{value}' must be dot-separated segments of lower-case letters, digits and '_'"
            )
        return value

    @field_validator("unit", mode="before")
    @classmethod
    def validate_unit(cls, value: Any) -> str:
        # YAML reads a bare `unit: 1` as an integer
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str) or not value.strip():
            raise ValueError("unit is required")
        return value.strip()

    @field_validator("instrument", mode="before")
    @classmethod
    def normalize_instrument(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("stability", mode="before")
    @classmethod
    def normalize_stability(cls, value: Any) -> Stability:
        return Stability.parse(value)

    @field_validator("description", "deprecation_note", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("must be a string")
        value = " ".join(value.split())
        return value or None

    @field_validator("deprecated_by", mode="before")
    @classmethod
    def strip_reference(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("deprecated_by must be a metric identifier")
        return value.strip().strip("`")

    @model_validator(mode="after")
    def validate_deprecation(self) -> "MetricDefinition":
        if self.deprecated_by is not None:
            if not self.deprecated_by:
                raise ValueError("deprecated entries must name their replacement")
            if self.deprecated_by == self.identifier:
                raise ValueError("a metric cannot be replaced by itself")
        elif self.deprecation_note is not None:
            raise ValueError("deprecation_note is only allowed on deprecated entries")
        return self

    @property
    def namespace(self) -> str:
        """Root segment of the identifier: the subsystem emitting the metric."""
        return self.identifier.split(".", 1)[0]

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated_by is not None

    def to_record(self) -> dict[str, Any]:
        """Flat, JSON-ready form; absent optional fields are left out."""
        return self.model_dump(mode="json", exclude_none=True)
