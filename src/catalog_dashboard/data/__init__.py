"""Product records and payload schemas."""

from .records import Product, ProductDraft, seed_products

__all__ = ["Product", "ProductDraft", "seed_products"]
