"""Exception hierarchy shared by the clients, services and HTTP layer."""

from __future__ import annotations

from typing import Optional


class StorefrontError(Exception):
    pass


class ValidationError(StorefrontError):
    """Raised when user input (form or JSON body) is missing or malformed."""


class MetadataError(StorefrontError):
    """Raised by the metadata client when a lookup cannot be completed."""


class ProductSourceError(StorefrontError):
    """Raised when the product source is unreachable or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
