"""Shared fixtures: a temp mock store, recording backends and a manual clock."""
from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

from catalog_dashboard.data.records import Product, seed_products
from catalog_dashboard.service.api import AdminAPI, MainAPI
from catalog_dashboard.service.backends import MockProductBackend
from catalog_dashboard.service.errors import NotFound
from catalog_dashboard.service.local_storage import LocalStorage
from catalog_dashboard.service.product_store import ProductStore


class ManualClock:
    """Stand-in for ``asyncio.sleep`` and the loop clock.

    Sleepers wake only on ``advance``; ``time`` reads the virtual clock.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._sleepers: List[Tuple[float, asyncio.Future]] = []

    def time(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self._sleepers.append((self.now + delay, future))
        await future

    async def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [entry for entry in self._sleepers if entry[0] <= self.now]
        self._sleepers = [entry for entry in self._sleepers if entry[0] > self.now]
        for _, future in due:
            if not future.done():
                future.set_result(None)
        await settle()


async def settle(rounds: int = 20) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeCatalogBackend:
    """In-memory end-user backend with optional gates to hold calls open."""

    def __init__(self, products: List[Product]) -> None:
        self.products = products
        self.list_calls = 0
        self.like_calls: List[int] = []
        self.list_gate: Optional[asyncio.Event] = None
        self.like_gate: Optional[asyncio.Event] = None
        self.list_error: Optional[Exception] = None
        self.like_error: Optional[Exception] = None

    async def list_products(self) -> List[Product]:
        self.list_calls += 1
        snapshot = [replace(product) for product in self.products]
        gate = self.list_gate
        if gate is not None:
            await gate.wait()
        if self.list_error is not None:
            raise self.list_error
        return snapshot

    async def like_product(self, product_id: int) -> Product:
        self.like_calls.append(product_id)
        gate = self.like_gate
        if gate is not None:
            await gate.wait()
        if self.like_error is not None:
            raise self.like_error
        for product in self.products:
            if product.id == product_id:
                product.likes += 1
                return replace(product)
        raise NotFound(product_id)


class RecordingBackend:
    """Wraps a backend, recording each call and optionally failing it."""

    def __init__(self, inner: MockProductBackend) -> None:
        self.inner = inner
        self.calls: List[str] = []
        self.fail_with: Optional[Exception] = None

    def __getattr__(self, name: str):
        target = getattr(self.inner, name)

        async def call(*args, **kwargs):
            self.calls.append(name)
            if self.fail_with is not None:
                raise self.fail_with
            return await target(*args, **kwargs)

        return call


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "local_storage.json"


@pytest.fixture()
def store(storage_path: Path) -> ProductStore:
    return ProductStore(LocalStorage(storage_path))


@pytest.fixture()
def mock_backend(store: ProductStore) -> MockProductBackend:
    return MockProductBackend(store, delay=0)


@pytest.fixture()
def recording_backend(mock_backend: MockProductBackend) -> RecordingBackend:
    return RecordingBackend(mock_backend)


@pytest.fixture()
def admin_api(recording_backend: RecordingBackend) -> AdminAPI:
    return AdminAPI(recording_backend)


@pytest.fixture()
def catalog_backend() -> FakeCatalogBackend:
    return FakeCatalogBackend(seed_products())


@pytest.fixture()
def main_api(catalog_backend: FakeCatalogBackend) -> MainAPI:
    return MainAPI(catalog_backend)
