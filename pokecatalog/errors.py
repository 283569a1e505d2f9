"""Error taxonomy for the catalog core.

Every failure the core reports derives from ``CatalogError`` so the
presentation layer can catch one base class and translate the kind into a
user-facing message.
"""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog failures.

    ``resource`` is the name or URL the failure concerns, when known.
    """

    def __init__(self, message: str, *, resource: Optional[str] = None) -> None:
        super().__init__(message)
        self.resource = resource


class NotFound(CatalogError):
    """The requested resource is absent both locally and upstream."""


class TransportError(CatalogError):
    """Connection failure, timeout, or an unexpected HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        resource: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, resource=resource)
        self.status_code = status_code


class DecodeError(CatalogError):
    """The response body is not a JSON object."""


class MalformedRecord(CatalogError):
    """The payload decodes but is semantically invalid."""


class StoreError(CatalogError):
    """The local store could not persist a record."""
