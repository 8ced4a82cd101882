"""Exceptions raised by the catalog and service wiring.

Parsing and matching never raise to callers; these cover the layers
underneath them.
"""


class SetlistServiceError(Exception):
    """Base exception for the quick-set service."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class CatalogLookupError(SetlistServiceError):
    """A catalog query could not be answered."""

    def __init__(self, message: str, operation: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.operation = operation


class CatalogUnavailableError(CatalogLookupError):
    """The catalog has no open database connection."""


class ServiceInitializationError(SetlistServiceError):
    """Raised when a dependency cannot be constructed at startup."""
