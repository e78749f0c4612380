"""Data access layer: mock store, REST backends and the audience facades."""

from .api import AdminAPI, MainAPI, build_admin_api, build_main_api
from .errors import CatalogError, NotFound, NotSaved, RequestFailed, ServiceUnreachable, ValidationFailed
from .product_store import ProductStore

__all__ = [
    "AdminAPI",
    "MainAPI",
    "build_admin_api",
    "build_main_api",
    "CatalogError",
    "NotFound",
    "NotSaved",
    "RequestFailed",
    "ServiceUnreachable",
    "ValidationFailed",
    "ProductStore",
]
