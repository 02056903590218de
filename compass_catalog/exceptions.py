"""Exceptions raised by the Compass catalog generator."""

from __future__ import annotations


class CompassCatalogError(Exception):
    """Base class for generator errors."""


class ConfigurationError(CompassCatalogError):
    """Invalid or incomplete generator configuration."""


class ComponentShapeError(CompassCatalogError):
    """Raw component record cannot be turned into a ComponentConfig."""


class CatalogWriteError(CompassCatalogError):
    """Catalog store refused to write a record."""


class CompassApiError(CompassCatalogError):
    """HTTP-level failure talking to the Compass or Teams GraphQL API."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status

    @classmethod
    def from_status(cls, status: int, service: str = "Compass API") -> "CompassApiError":
        """Build an error with a message specific to the HTTP status."""
        if status == 401:
            message = f"{service} authentication failed: invalid email or API token"
        elif status == 403:
            message = f"{service} authorization failed: insufficient permissions"
        elif status == 429:
            message = f"{service} rate limit exceeded: too many requests"
        else:
            message = f"{service} request failed with status {status}"
        return cls(message, status=status)


class CompassGraphQLError(CompassApiError):
    """GraphQL response carried errors or no data."""
