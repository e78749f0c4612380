"""Path to page mapping for the three top-level views."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .config import DashboardConfig
from .service.api import build_admin_api, build_main_api, build_product_store
from .service.product_store import ProductStore
from .views.admin import AdminView
from .views.catalog import CatalogView
from .views.home import HomeView
from .views.notifications import Notifier


class RouteNotFound(LookupError):
    pass


@dataclass
class Route:
    path: str
    name: str
    title: str
    template: str
    view_factory: Callable[[Notifier], Any]

    def create_view(self, notifier: Optional[Notifier] = None) -> Any:
        return self.view_factory(notifier or Notifier())


class Router:
    def __init__(self) -> None:
        self._routes: Dict[str, Route] = {}

    def add(self, route: Route) -> None:
        if route.path in self._routes:
            raise ValueError(f"Duplicate route: {route.path}")
        self._routes[route.path] = route

    def resolve(self, path: str) -> Route:
        normalized = "/" + path.strip("/")
        try:
            return self._routes[normalized]
        except KeyError:
            raise RouteNotFound(path) from None

    @property
    def routes(self) -> List[Route]:
        return list(self._routes.values())


def build_router(config: DashboardConfig, store: Optional[ProductStore] = None, transport=None) -> Router:
    """Default router: ``/`` home, ``/admin`` admin dashboard, ``/catalog`` user catalog."""
    if store is None and config.use_mock:
        store = build_product_store(config)
    admin_api = build_admin_api(config, store=store, transport=transport)
    main_api = build_main_api(config, store=store, transport=transport)

    router = Router()
    router.add(
        Route(
            path="/",
            name="home",
            title="Product Management System",
            template="home.html",
            view_factory=lambda notifier: HomeView(using_mock=config.use_mock, poll_interval=config.poll_interval),
        )
    )
    router.add(
        Route(
            path="/admin",
            name="admin",
            title="Admin Dashboard",
            template="admin.html",
            view_factory=lambda notifier: AdminView(admin_api, notifier),
        )
    )
    router.add(
        Route(
            path="/catalog",
            name="catalog",
            title="Product Catalog",
            template="catalog.html",
            view_factory=lambda notifier: CatalogView(main_api, notifier, poll_interval=config.poll_interval),
        )
    )
    return router
