"""Product catalog and admin dashboard over a mock store or two REST services."""

from .config import DashboardConfig
from .data.records import Product, ProductDraft

__all__ = ["DashboardConfig", "Product", "ProductDraft"]
