"""Pydantic schemas for product payloads crossing an HTTP boundary."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .records import Product


class ProductPayload(BaseModel):
    id: int
    title: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    likes: int = Field(default=0, ge=0)

    def to_record(self) -> Product:
        return Product(
            id=self.id,
            title=self.title.strip(),
            image=self.image.strip(),
            likes=self.likes,
        )

    @classmethod
    def from_record(cls, record: Product) -> "ProductPayload":
        return cls(id=record.id, title=record.title, image=record.image, likes=record.likes)
