"""End-user catalog view: polled listing plus optimistic likes."""
from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Set

from ..data.records import Product
from ..service.api import MainAPI
from ..service.errors import CatalogError, describe_error
from .notifications import Notifier
from .polling import Clock, PeriodicTask, Sleep

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load products."
LIKE_FAILED = "Failed to like product. Please try again."
LIKED = "Product liked!"


class CatalogView:
    """State behind the catalog page.

    Every listing and like request takes a sequence stamp when issued. A
    response only replaces a product if no newer response for that product has
    been applied, and a listing only changes membership if it is the newest
    listing seen. Items with a like in flight are displayed with one extra like
    until the request settles. A like response that carries more likes than
    the stored record is applied even when an older read landed after it was
    issued, since like counts only grow.
    """

    def __init__(
        self,
        api: MainAPI,
        notifier: Optional[Notifier] = None,
        poll_interval: float = 5.0,
        sleep: Sleep = asyncio.sleep,
        clock: Optional[Clock] = None,
        on_refresh: Optional[Callable[["CatalogView"], None]] = None,
    ) -> None:
        self.api = api
        self.on_refresh = on_refresh
        self.notifier = notifier or Notifier()
        self.loading = True
        self.error: Optional[str] = None
        self.liking: Set[int] = set()
        self.like_error: Optional[CatalogError] = None
        self._order: List[int] = []
        self._server: Dict[int, Product] = {}
        self._stamps: Dict[int, int] = {}
        self._listing_stamp = 0
        self._sequence = itertools.count(1)
        self._closed = False
        self._poller = PeriodicTask(self.load, poll_interval, sleep=sleep, clock=clock, name="catalog-poll")

    @property
    def products(self) -> List[Product]:
        shown = []
        for product_id in self._order:
            product = self._server[product_id]
            if product_id in self.liking:
                product = replace(product, likes=product.likes + 1)
            shown.append(product)
        return shown

    def is_liking(self, product_id: int) -> bool:
        return product_id in self.liking

    def start(self) -> None:
        self._closed = False
        self._poller.start()

    async def stop(self) -> None:
        self._closed = True
        await self._poller.stop()

    async def load(self) -> None:
        stamp = next(self._sequence)
        try:
            self.error = None
            products = await self.api.list_products()
        except CatalogError as exc:
            if not self._closed:
                self.error = describe_error(exc, LOAD_FAILED)
            logger.warning("Catalog load failed: %s", exc)
        else:
            if self._closed:
                return
            self._apply_listing(stamp, products)
        finally:
            self.loading = False
        if self.on_refresh is not None and not self._closed:
            self.on_refresh(self)

    async def like(self, product_id: int) -> bool:
        """Like ``product_id``; returns False if ignored or failed."""
        if product_id in self.liking:
            logger.debug("Like for product %s already in flight", product_id)
            return False

        stamp = next(self._sequence)
        self.like_error = None
        self.liking.add(product_id)
        try:
            updated = await self.api.like_product(product_id)
        except CatalogError as exc:
            logger.warning("Like for product %s failed: %s", product_id, exc)
            self.like_error = exc
            if not self._closed:
                self.notifier.error(LIKE_FAILED)
            return False
        finally:
            self.liking.discard(product_id)

        if not self._closed:
            self._apply_product(stamp, updated)
            self.notifier.success(LIKED)
        return True

    def _apply_product(self, stamp: int, product: Product) -> None:
        if product.id not in self._server:
            return
        newest = self._stamps.get(product.id, 0)
        if newest > stamp and product.likes <= self._server[product.id].likes:
            logger.debug("Dropping stale record for product %s", product.id)
            return
        self._server[product.id] = product
        self._stamps[product.id] = max(newest, stamp)

    def _apply_listing(self, stamp: int, products: List[Product]) -> None:
        if stamp < self._listing_stamp:
            logger.debug("Dropping stale listing %s (newest is %s)", stamp, self._listing_stamp)
            return
        self._listing_stamp = stamp

        server: Dict[int, Product] = {}
        stamps: Dict[int, int] = {}
        for product in products:
            current = self._server.get(product.id)
            if current is not None and self._stamps.get(product.id, 0) > stamp:
                server[product.id] = current
                stamps[product.id] = self._stamps[product.id]
            else:
                server[product.id] = product
                stamps[product.id] = stamp
        self._order = [product.id for product in products]
        self._server = server
        self._stamps = stamps
