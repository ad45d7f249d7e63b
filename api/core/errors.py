"""
Error taxonomy for the catalogue.

Services and stores raise these; routers translate them into HTTP errors with
`to_http_exception`.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class CatalogError(Exception):
    """Base exception for all catalogue errors."""


class ValidationError(CatalogError):
    """Bad caller input: missing field, malformed id, empty image."""


class NotFoundError(CatalogError):
    """An item position or an image name does not exist."""


class InvalidPathError(CatalogError):
    """A requested filename is unsafe or not an accepted image name."""

    def __init__(self, requested_name: str, reason: str):
        self.requested_name = requested_name
        self.reason = reason
        super().__init__(f"Invalid image path {requested_name!r}: {reason}")


class StorageError(CatalogError):
    """Raised when a filesystem operation on a backing store fails."""

    def __init__(self, operation: str, path: str, cause: Exception | None = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        msg = f"Storage error during {operation}: {path}"
        if cause:
            msg += f" ({cause})"
        super().__init__(msg)


class DeserializationError(CatalogError):
    """Raised when the item store exists but its content cannot be parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt item store {path}: {reason}")


def to_http_exception(exc: CatalogError) -> HTTPException:
    """
    Map a catalogue error onto the HTTP status the client should see.

    Server-class errors never leak filesystem paths into the response.
    """
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, InvalidPathError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid image path: {exc.reason}")
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, DeserializationError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Item store is corrupt.",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Storage failure.",
    )
