"""
Module: exceptions

Purpose: Domain-specific exception hierarchy for page and project builds.

Every validation error is raised before the first file is written. Filesystem
errors (OSError and friends) are never wrapped and reach the caller unchanged.
"""

from typing import Any


class PlotPagesError(Exception):
    """Base exception for all plotpages errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class ConfigurationError(PlotPagesError):
    """Raised for an invalid or unknown configuration value (e.g. a data format)."""

    def __init__(
        self,
        message: str,
        *,
        option: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if option is not None:
            ctx["option"] = option
        if value is not None:
            ctx["value"] = value
        super().__init__(message, context=ctx)
        self.option = option
        self.value = value


class MissingDatasetError(PlotPagesError):
    """Raised when a visual element references a dataset the page does not hold."""

    def __init__(
        self,
        message: str,
        *,
        dataset_name: str,
        element_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["dataset_name"] = dataset_name
        if element_id is not None:
            ctx["element_id"] = element_id
        super().__init__(message, context=ctx)
        self.dataset_name = dataset_name
        self.element_id = element_id


class IdentifierError(PlotPagesError):
    """Base class for identifier collisions."""

    def __init__(
        self,
        message: str,
        *,
        identifier: str,
        originals: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["identifier"] = identifier
        if originals is not None:
            ctx["originals"] = originals
        super().__init__(message, context=ctx)
        self.identifier = identifier
        self.originals = originals or []


class DuplicateIdentifierError(IdentifierError):
    """Raised when two visual elements on one page share an identifier."""


class AmbiguousIdentifierError(IdentifierError):
    """Raised when distinct names collapse to the same sanitized name."""


class SchemaConflictError(PlotPagesError):
    """Raised when pages of one project declare a dataset name with different schemas."""

    def __init__(
        self,
        message: str,
        *,
        dataset_name: str,
        schemas: list[list[str]] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["dataset_name"] = dataset_name
        if schemas is not None:
            ctx["schemas"] = schemas
        super().__init__(message, context=ctx)
        self.dataset_name = dataset_name
        self.schemas = schemas or []
