"""Data access layer used by the views, one facade per audience."""
from __future__ import annotations

from typing import List, Optional

import httpx

from ..config import DashboardConfig
from ..data.records import Product, ProductDraft
from .backends import HttpProductBackend, MockProductBackend, ProductBackend
from .local_storage import LocalStorage
from .product_store import ProductStore


class AdminAPI:
    """Product management operations for the admin audience."""

    def __init__(self, backend: ProductBackend) -> None:
        self.backend = backend

    async def list_products(self) -> List[Product]:
        return await self.backend.list_products()

    async def create_product(self, draft: ProductDraft) -> Product:
        return await self.backend.create_product(draft)

    async def update_product(
        self, product_id: int, title: Optional[str] = None, image: Optional[str] = None
    ) -> Product:
        fields = {}
        if title is not None:
            fields["title"] = title
        if image is not None:
            fields["image"] = image
        return await self.backend.update_product(product_id, fields)

    async def delete_product(self, product_id: int) -> None:
        await self.backend.delete_product(product_id)


class MainAPI:
    """Read and like operations for end users."""

    def __init__(self, backend: ProductBackend) -> None:
        self.backend = backend

    async def list_products(self) -> List[Product]:
        return await self.backend.list_products()

    async def like_product(self, product_id: int) -> Product:
        return await self.backend.like_product(product_id)


def build_product_store(config: DashboardConfig) -> ProductStore:
    return ProductStore(LocalStorage(config.mock.store_path), slot=config.mock.slot)


def build_admin_api(
    config: DashboardConfig,
    store: Optional[ProductStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AdminAPI:
    if config.use_mock:
        return AdminAPI(MockProductBackend(store or build_product_store(config), delay=config.mock.admin_delay))
    return AdminAPI(HttpProductBackend(config.admin, config.http_timeout, transport=transport))


def build_main_api(
    config: DashboardConfig,
    store: Optional[ProductStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> MainAPI:
    if config.use_mock:
        return MainAPI(MockProductBackend(store or build_product_store(config), delay=config.mock.main_delay))
    return MainAPI(HttpProductBackend(config.main, config.http_timeout, transport=transport))
