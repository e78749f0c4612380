"""FastAPI application serving the admin dashboard and the user catalog pages."""
from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, Form, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from catalog_dashboard.config import DashboardConfig
from catalog_dashboard.data.schemas import ProductPayload
from catalog_dashboard.logging_config import setup_logging
from catalog_dashboard.router import Route, build_router
from catalog_dashboard.service.errors import CatalogError, NotFound, RequestFailed, ValidationFailed
from catalog_dashboard.views.admin import AdminView, ProductForm
from catalog_dashboard.views.catalog import CatalogView
from catalog_dashboard.views.notifications import Notifier

APP_DIR = Path(__file__).resolve().parent

config = DashboardConfig.from_env()
setup_logging(config.log_level, config.log_file)

app = FastAPI(title="Product Catalog Dashboard")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
templates = Jinja2Templates(directory=str(APP_DIR / "templates"))
router = build_router(config)


def _render(request: Request, route: Route, view, notifier: Notifier, status_code: int = status.HTTP_200_OK):
    return templates.TemplateResponse(
        request,
        route.template,
        {
            "route": route,
            "routes": router.routes,
            "view": view,
            "toasts": notifier.drain(),
            "refresh_seconds": max(1, math.ceil(config.poll_interval)),
            "using_mock": config.use_mock,
        },
        status_code=status_code,
    )


def _redirect(path: str) -> RedirectResponse:
    return RedirectResponse(url=path, status_code=status.HTTP_303_SEE_OTHER)


async def _admin_view(notifier: Notifier) -> AdminView:
    view = router.resolve("/admin").create_view(notifier)
    await view.load()
    return view


def _failure_status(form: ProductForm) -> int:
    try:
        form.validate()
    except ValidationFailed:
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_502_BAD_GATEWAY


def _like_failure_status(exc: Optional[CatalogError]) -> int:
    if isinstance(exc, NotFound) or (isinstance(exc, RequestFailed) and exc.status == status.HTTP_404_NOT_FOUND):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_502_BAD_GATEWAY


@app.get("/")
def index(request: Request):
    route = router.resolve("/")
    notifier = Notifier()
    return _render(request, route, route.create_view(notifier), notifier)


@app.get("/admin")
async def admin_page(request: Request, edit: Optional[int] = None, create: bool = False):
    notifier = Notifier()
    view = await _admin_view(notifier)
    if create:
        view.open_create_form()
    elif edit is not None:
        product = view.find(edit)
        if product is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        view.open_edit_form(product)
    return _render(request, router.resolve("/admin"), view, notifier)


@app.post("/admin/products")
async def create_product(request: Request, title: str = Form(""), image: str = Form("")):
    notifier = Notifier()
    view: AdminView = router.resolve("/admin").create_view(notifier)
    form = view.open_create_form()
    form.title, form.image = title, image
    if await view.submit(form) is not None:
        return _redirect("/admin")
    await view.load()
    return _render(request, router.resolve("/admin"), view, notifier, _failure_status(form))


@app.post("/admin/products/{product_id}")
async def update_product(request: Request, product_id: int, title: str = Form(""), image: str = Form("")):
    notifier = Notifier()
    view = await _admin_view(notifier)
    product = view.find(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    form = view.open_edit_form(product)
    form.title, form.image = title, image
    if await view.submit(form) is not None:
        return _redirect("/admin")
    await view.load()
    return _render(request, router.resolve("/admin"), view, notifier, _failure_status(form))


@app.post("/admin/products/{product_id}/delete")
async def delete_product(request: Request, product_id: int):
    notifier = Notifier()
    view: AdminView = router.resolve("/admin").create_view(notifier)
    if await view.delete(product_id):
        return _redirect("/admin")
    await view.load()
    return _render(request, router.resolve("/admin"), view, notifier, status.HTTP_502_BAD_GATEWAY)


@app.get("/catalog")
async def catalog_page(request: Request):
    route = router.resolve("/catalog")
    notifier = Notifier()
    view: CatalogView = route.create_view(notifier)
    await view.load()
    return _render(request, route, view, notifier)


@app.post("/catalog/products/{product_id}/like")
async def like_product(request: Request, product_id: int):
    route = router.resolve("/catalog")
    notifier = Notifier()
    view: CatalogView = route.create_view(notifier)
    if await view.like(product_id):
        return _redirect("/catalog")
    failure_status = _like_failure_status(view.like_error)
    await view.load()
    return _render(request, route, view, notifier, failure_status)


@app.get("/api/catalog", response_model=List[ProductPayload])
async def api_catalog() -> List[ProductPayload]:
    view: CatalogView = router.resolve("/catalog").create_view(Notifier())
    await view.load()
    if view.error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=view.error)
    return [ProductPayload.from_record(product) for product in view.products]


app.mount("/static", StaticFiles(directory=APP_DIR / "static"), name="static")
