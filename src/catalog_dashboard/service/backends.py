"""Storage/transport strategies behind the data access layer.

``MockProductBackend`` serves products from the persisted mock store with a
simulated network delay. ``HttpProductBackend`` talks to one REST audience:

* ``GET    {base}``            list products
* ``POST   {base}``            create ``{title, image}``
* ``PUT    {base}/{id}``       update ``{title?, image?}``
* ``DELETE {base}/{id}``       delete
* ``POST   {base}/{id}/like``  increment the like counter
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Tuple

import httpx
from pydantic import ValidationError

from ..config import ServiceEndpoint
from ..data.records import DRAFT_FIELDS, Product, ProductDraft, next_product_id
from ..data.schemas import ProductPayload
from .errors import NotFound, RequestFailed, ServiceUnreachable
from .product_store import ProductStore

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class ProductBackend(Protocol):
    async def list_products(self) -> List[Product]: ...

    async def create_product(self, draft: ProductDraft) -> Product: ...

    async def update_product(self, product_id: int, fields: Dict[str, str]) -> Product: ...

    async def delete_product(self, product_id: int) -> None: ...

    async def like_product(self, product_id: int) -> Product: ...


def _find_index(products: List[Product], product_id: int) -> int:
    for index, product in enumerate(products):
        if product.id == product_id:
            return index
    raise NotFound(product_id)


class MockProductBackend:
    """Backend semantics reproduced on top of the local ``ProductStore``."""

    def __init__(self, store: ProductStore, delay: float = 0.5, sleep: Sleep = asyncio.sleep) -> None:
        self.store = store
        self.delay = delay
        self._sleep = sleep

    async def _latency(self) -> None:
        if self.delay > 0:
            await self._sleep(self.delay)

    async def list_products(self) -> List[Product]:
        await self._latency()
        return self.store.load()

    async def create_product(self, draft: ProductDraft) -> Product:
        await self._latency()

        def append(products: List[Product]) -> Product:
            created = Product(
                id=next_product_id(products),
                title=draft.title,
                image=draft.image,
                likes=0,
            )
            products.append(created)
            return created

        created = self.store.mutate(append)
        logger.info("Mock store created product %s", created.id)
        return created

    async def update_product(self, product_id: int, fields: Dict[str, str]) -> Product:
        await self._latency()

        def merge(products: List[Product]) -> Product:
            index = _find_index(products, product_id)
            current = products[index]
            products[index] = Product(
                id=current.id,
                title=fields.get("title", current.title),
                image=fields.get("image", current.image),
                likes=current.likes,
            )
            return products[index]

        return self.store.mutate(merge)

    async def delete_product(self, product_id: int) -> None:
        await self._latency()

        def remove(products: List[Product]) -> None:
            products[:] = [product for product in products if product.id != product_id]

        self.store.mutate(remove)

    async def like_product(self, product_id: int) -> Product:
        await self._latency()

        def increment(products: List[Product]) -> Product:
            product = products[_find_index(products, product_id)]
            product.likes += 1
            return product

        return self.store.mutate(increment)


class HttpProductBackend:
    """REST client for one audience's ``/api/products`` resource."""

    def __init__(
        self,
        endpoint: ServiceEndpoint,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def _request(self, method: str, path: str = "", json: Optional[Dict[str, Any]] = None) -> Tuple[int, Any]:
        url = f"{self.endpoint.base_url}{path}"
        logger.info("%s %s", method, url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self.transport,
                headers={"Content-Type": "application/json"},
            ) as client:
                response = await client.request(method, url, json=json)
        except httpx.TransportError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise ServiceUnreachable(self.endpoint.name, url, self.endpoint.port) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise RequestFailed(None, f"{type(exc).__name__}: {exc}") from exc

        logger.info("%s %s", response.status_code, url)
        if response.is_error:
            logger.error("Error response from %s: %s", url, response.text)
            raise RequestFailed(response.status_code, response.text)
        if not response.content:
            return response.status_code, None
        try:
            return response.status_code, response.json()
        except ValueError as exc:
            raise RequestFailed(response.status_code, f"invalid JSON body: {response.text}") from exc

    def _to_product(self, status: int, data: Any) -> Product:
        try:
            return ProductPayload.model_validate(data).to_record()
        except ValidationError as exc:
            raise RequestFailed(status, f"unexpected product payload: {exc}") from exc

    async def list_products(self) -> List[Product]:
        status, data = await self._request("GET")
        if not isinstance(data, list):
            raise RequestFailed(status, f"expected a product list, got {type(data).__name__}")
        return [self._to_product(status, row) for row in data]

    async def create_product(self, draft: ProductDraft) -> Product:
        return self._to_product(*await self._request("POST", json=draft.to_dict()))

    async def update_product(self, product_id: int, fields: Dict[str, str]) -> Product:
        payload = {key: value for key, value in fields.items() if key in DRAFT_FIELDS}
        return self._to_product(*await self._request("PUT", f"/{product_id}", json=payload))

    async def delete_product(self, product_id: int) -> None:
        await self._request("DELETE", f"/{product_id}")

    async def like_product(self, product_id: int) -> Product:
        return self._to_product(*await self._request("POST", f"/{product_id}/like"))
