"""Failure taxonomy of the data access layer and its conversion to display text."""
from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class for every failure the views are expected to catch."""


class RequestFailed(CatalogError):
    """A backend answered with a non-2xx status or an unusable response.

    ``status`` is None when no response could be read at all.
    """

    def __init__(self, status: Optional[int], body: str = "") -> None:
        super().__init__(f"HTTP {status}: {body}" if status is not None else body)
        self.status = status
        self.body = body


class ServiceUnreachable(CatalogError):
    """The transport could not reach a backend at all."""

    def __init__(self, service: str, url: str, port: Optional[int] = None) -> None:
        self.service = service
        self.url = url
        self.port = port
        where = f" on port {port}" if port is not None else f" at {url}"
        super().__init__(f"Make sure the {service} is running{where}.")


class NotFound(CatalogError):
    def __init__(self, product_id: int) -> None:
        super().__init__("Product not found")
        self.product_id = product_id


class NotSaved(CatalogError):
    """The mock store could not persist a mutation."""


class NotLoaded(CatalogError):
    """The mock store exists but could not be read or parsed."""


class ValidationFailed(CatalogError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


def describe_error(exc: Exception, fallback: str) -> str:
    """Single line shown in a banner or toast for ``exc``."""
    if isinstance(exc, RequestFailed) and exc.status is None:
        return f"{fallback} ({exc.body})" if exc.body else fallback
    if isinstance(exc, RequestFailed):
        detail = f"HTTP {exc.status}: {exc.body}" if exc.body else f"HTTP {exc.status}"
        return f"{fallback} ({detail})"
    if isinstance(exc, ServiceUnreachable):
        return f"{fallback} {exc}"
    if isinstance(exc, ValidationFailed):
        return exc.message
    if isinstance(exc, CatalogError) and str(exc):
        return f"{fallback.rstrip('.')}: {exc}"
    return fallback
