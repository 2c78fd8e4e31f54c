# portfolio/core/errors.py
"""
Error taxonomy for catalog ingestion and reads.

Every error carries the HTTP status it maps to; `portfolio.main` renders
them as `{"ok": false, "error": <message>}`. Nothing here is retried.
"""

from fastapi import status


class CatalogError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Missing or malformed submission field (user-correctable)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid submission"


class Unauthorized(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class VariantGenerationFailure(CatalogError):
    """Image could not be decoded, resized or re-encoded."""

    default_message = "Image processing failed"


class StoreWriteFailure(CatalogError):
    """
    Catalog document could not be read, parsed or written during an append.

    Assets written before the failure are left in place.
    """

    default_message = "Catalog update failed"


class StoreUnavailable(CatalogError):
    """Catalog document could not be read or parsed (read side)."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Catalog unavailable"


class IngestionFailure(CatalogError):
    default_message = "Upload failed"


class NotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
