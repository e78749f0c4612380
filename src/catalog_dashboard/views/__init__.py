"""View models owning page state for the dashboard."""

from .admin import AdminView, ProductForm
from .catalog import CatalogView
from .home import HomeView
from .notifications import Notifier, Toast
from .polling import PeriodicTask

__all__ = ["AdminView", "ProductForm", "CatalogView", "HomeView", "Notifier", "Toast", "PeriodicTask"]
