"""Persisted mock store holding the product collection in one storage slot."""
from __future__ import annotations

import json
import logging
from threading import Lock
from typing import Callable, Iterable, List, TypeVar

from ..data.records import Product, product_from_dict, products_to_dicts, seed_products
from .errors import NotLoaded, NotSaved
from .local_storage import LocalStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProductStore:
    """JSON product catalog kept in a single named slot of ``LocalStorage``."""

    def __init__(self, storage: LocalStorage, slot: str = "products_data") -> None:
        self.storage = storage
        self.slot = slot
        self._lock = Lock()

    def load(self) -> List[Product]:
        """Stored collection, or the seed catalog when nothing was saved yet.

        The seed is not persisted here; the first mutation writes it out.
        Unreadable or corrupt contents raise ``NotLoaded``.
        """
        try:
            raw = self.storage.get_item(self.slot)
            if raw is None:
                return seed_products()
            return [product_from_dict(row) for row in json.loads(raw)]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Could not read products from %s: %s", self.storage.path, exc)
            raise NotLoaded(f"Could not read {self.storage.path}") from exc

    def save(self, products: Iterable[Product]) -> None:
        payload = json.dumps(products_to_dicts(products))
        try:
            self.storage.set_item(self.slot, payload)
        except OSError as exc:
            logger.error("Could not persist products to %s: %s", self.storage.path, exc)
            raise NotSaved(f"Could not write {self.storage.path}") from exc

    def reset(self) -> None:
        with self._lock:
            self.storage.remove_item(self.slot)

    def mutate(self, change: Callable[[List[Product]], T]) -> T:
        """Load, apply ``change`` in place, then rewrite the whole collection.

        Nothing is written when ``change`` raises.
        """
        with self._lock:
            products = self.load()
            result = change(products)
            self.save(products)
        return result
