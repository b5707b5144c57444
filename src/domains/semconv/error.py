"""Errors raised while turning a metric registry into a constant catalog.

Every error here is fatal for a generation run: the catalog is either
emitted completely or not at all.
"""

from utils.error.base_custom_error import BaseCustomError


class GenerationError(BaseCustomError):
    """Base class for all catalog generation errors."""

    pass


class RegistryLoadError(GenerationError):
    """Raised when a registry source cannot be read or has the wrong shape."""

    def __init__(self, message: str, source: str, error: Exception | None = None):
        super().__init__(message, source=source, original_error=error)


class RegistryEntryError(GenerationError):
    """Raised when a single registry entry is malformed."""

    def __init__(self, message: str, source: str | None = None, entry: str | int | None = None):
        super().__init__(message, source=source, entry=entry)


class DuplicateIdentifierError(GenerationError):
    """Raised when two registry entries declare the same metric identifier."""

    def __init__(self, identifier: str, sources: list[str]):
        super().__init__(
            f"Metric identifier '{identifier}' is defined more than once",
            identifier=identifier,
            sources=", ".join(sources),
        )


class NamingCollisionError(GenerationError):
    """Raised when distinct identifiers normalize to the same constant name."""

    def __init__(self, constant_name: str, identifiers: list[str]):
        super().__init__(
            f"Identifiers {', '.join(repr(i) for i in identifiers)} all normalize to '{constant_name}'",
            constant_name=constant_name,
        )
        self.constant_name = constant_name
        self.identifiers = identifiers


class InvalidConstantNameError(GenerationError):
    """Raised when an identifier cannot be turned into a valid constant name."""

    def __init__(self, identifier: str, constant_name: str):
        super().__init__(
            f"Identifier '{identifier}' normalizes to '{constant_name}', which is not a valid constant name",
            identifier=identifier,
        )


class TemplateRenderError(GenerationError):
    """Raised when a target template cannot be loaded or rendered."""

    def __init__(self, template: str, error: Exception):
        super().__init__(f"Failed to render template '{template}'", original_error=error)


class SpecVersionError(GenerationError):
    """Raised when a specification version cannot be resolved or checked out."""

    def __init__(self, message: str, repository: str | None = None, version: str | None = None):
        super().__init__(message, repository=repository, version=version)


class ConfigurationError(GenerationError):
    """Raised when the generator configuration is unreadable or invalid."""

    def __init__(self, message: str, path: str | None = None, error: Exception | None = None):
        super().__init__(message, path=path, original_error=error)
