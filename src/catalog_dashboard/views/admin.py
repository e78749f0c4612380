"""Admin dashboard view and the product form it shares between create and edit."""
from __future__ import annotations

import logging
from typing import List, Optional

from ..data.records import Product, ProductDraft
from ..service.api import AdminAPI
from ..service.errors import CatalogError, ValidationFailed, describe_error
from .notifications import Notifier

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load products."
SAVE_FAILED = "Failed to save product"
DELETE_FAILED = "Failed to delete product"


class ProductForm:
    """Create form when ``product`` is None, edit form otherwise."""

    def __init__(self, api: AdminAPI, product: Optional[Product] = None) -> None:
        self.api = api
        self.product = product
        self.title = product.title if product else ""
        self.image = product.image if product else ""
        self.error: Optional[str] = None
        self.saving = False

    @property
    def is_edit(self) -> bool:
        return self.product is not None

    def validate(self) -> ProductDraft:
        if not self.title.strip():
            raise ValidationFailed("title", "Title is required")
        if not self.image.strip():
            raise ValidationFailed("image", "Image URL is required")
        return ProductDraft(title=self.title, image=self.image)

    async def submit(self) -> Optional[Product]:
        """Validate and save; returns the saved product or None with ``error`` set."""
        try:
            draft = self.validate()
        except ValidationFailed as exc:
            self.error = exc.message
            return None

        self.saving = True
        self.error = None
        try:
            if self.product is not None:
                return await self.api.update_product(self.product.id, title=draft.title, image=draft.image)
            return await self.api.create_product(draft)
        except CatalogError as exc:
            logger.warning("Saving product failed: %s", exc)
            self.error = describe_error(exc, SAVE_FAILED)
            return None
        finally:
            self.saving = False


class AdminView:
    def __init__(self, api: AdminAPI, notifier: Optional[Notifier] = None) -> None:
        self.api = api
        self.notifier = notifier or Notifier()
        self.products: List[Product] = []
        self.loading = True
        self.error: Optional[str] = None
        self.form: Optional[ProductForm] = None

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.products = await self.api.list_products()
        except CatalogError as exc:
            logger.warning("Admin load failed: %s", exc)
            self.error = describe_error(exc, LOAD_FAILED)
        finally:
            self.loading = False

    def find(self, product_id: int) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def open_create_form(self) -> ProductForm:
        self.form = ProductForm(self.api)
        return self.form

    def open_edit_form(self, product: Product) -> ProductForm:
        self.form = ProductForm(self.api, product)
        return self.form

    def close_form(self) -> None:
        self.form = None

    async def submit(self, form: Optional[ProductForm] = None) -> Optional[Product]:
        form = form or self.form
        if form is None:
            raise ValueError("no product form is open")
        saved = await form.submit()
        if saved is not None:
            self.close_form()
            await self.load()
        return saved

    async def delete(self, product_id: int, confirmed: bool = True) -> bool:
        if not confirmed:
            return False
        try:
            await self.api.delete_product(product_id)
        except CatalogError as exc:
            logger.warning("Deleting product %s failed: %s", product_id, exc)
            self.notifier.error(describe_error(exc, DELETE_FAILED))
            return False
        await self.load()
        return True
