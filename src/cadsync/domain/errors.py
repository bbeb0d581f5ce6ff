"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class SourceUnavailableError(DomainError):
    """A data source could not be reached or read."""

    def __init__(self, source: str, detail: str):
        super().__init__(source_unavailable(source, detail))
        self.source = source


class PersistenceError(DomainError):
    """The terminal batch write of a run failed; nothing was committed."""

    def __init__(self, source: str, detail: str):
        super().__init__(persistence_failed(source, detail))
        self.source = source


def source_unavailable(source: str, detail: str) -> str:
    """Return message for an unreachable data source."""
    return f"Data source '{source}' is unavailable: {detail}"


def persistence_failed(source: str, detail: str) -> str:
    """Return message for a failed batch write."""
    return f"Batch write to '{source}' failed, no changes were committed: {detail}"


def invalid_setting(name: str, value: str, expected: str) -> str:
    """Return message for a configuration value that cannot be used."""
    return f"Invalid value '{value}' for {name}: expected {expected}"


def form_not_found(form_id: int) -> str:
    """Return message for a form with no declared fields."""
    return f"Form {form_id} has no declared fields"
