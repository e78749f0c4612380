"""Product records exchanged between the views, the mock store and the backends."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Mapping


@dataclass
class Product:
    id: int
    title: str
    image: str
    likes: int = 0

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class ProductDraft:
    """Payload of a create call; updates send any subset of these fields."""

    title: str
    image: str

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


DRAFT_FIELDS = ("title", "image")


def product_from_dict(row: Mapping[str, object]) -> Product:
    return Product(
        id=int(row["id"]),
        title=str(row["title"]),
        image=str(row["image"]),
        likes=int(row.get("likes") or 0),
    )


def products_to_dicts(products: Iterable[Product]) -> List[Dict[str, object]]:
    return [product.to_dict() for product in products]


def next_product_id(products: Iterable[Product]) -> int:
    return max([0] + [product.id for product in products]) + 1


def seed_products() -> List[Product]:
    """Sample catalog returned by the mock store before anything is saved."""
    return [
        Product(
            id=1,
            title="Wireless Bluetooth Headphones",
            image="https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=500",
            likes=42,
        ),
        Product(
            id=2,
            title="Smart Watch Series 5",
            image="https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=500",
            likes=38,
        ),
        Product(
            id=3,
            title="Premium Coffee Maker",
            image="https://images.unsplash.com/photo-1517668808822-9ebb02f2a0e6?w=500",
            likes=25,
        ),
    ]
