"""Configuration models for the catalog dashboard."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit


TRUTHY = {"1", "true", "yes"}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass
class ServiceEndpoint:
    """One REST backend audience, identified by the base URL of its products resource."""

    name: str
    base_url: str

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    @property
    def port(self) -> Optional[int]:
        parts = urlsplit(self.base_url)
        if parts.port is not None:
            return parts.port
        return {"http": 80, "https": 443}.get(parts.scheme)


@dataclass
class MockSettings:
    """Local mock store used in place of both backends."""

    store_path: Path = Path("data/local_storage.json")
    slot: str = "products_data"
    admin_delay: float = 0.5
    main_delay: float = 0.3


@dataclass
class DashboardConfig:
    """Aggregate configuration for the dashboard and its data access layer."""

    use_mock: bool = False
    admin: ServiceEndpoint = field(
        default_factory=lambda: ServiceEndpoint("admin service", "http://localhost:8000/api/products")
    )
    main: ServiceEndpoint = field(
        default_factory=lambda: ServiceEndpoint("catalog service", "http://localhost:8001/api/products")
    )
    mock: MockSettings = field(default_factory=MockSettings)
    poll_interval: float = 5.0
    http_timeout: float = 10.0
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        mock = MockSettings(
            store_path=Path(os.environ.get("CATALOG_STORE_PATH", "data/local_storage.json")),
        )
        delay = _env_float("CATALOG_MOCK_DELAY", None)
        if delay is not None:
            mock.admin_delay = delay
            mock.main_delay = delay
        return cls(
            use_mock=_env_flag("CATALOG_USE_MOCK"),
            admin=ServiceEndpoint(
                "admin service",
                os.environ.get("ADMIN_API_URL", "http://localhost:8000/api/products"),
            ),
            main=ServiceEndpoint(
                "catalog service",
                os.environ.get("MAIN_API_URL", "http://localhost:8001/api/products"),
            ),
            mock=mock,
            poll_interval=_env_float("CATALOG_POLL_INTERVAL", 5.0),
            http_timeout=_env_float("CATALOG_HTTP_TIMEOUT", 10.0),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_file=os.environ.get("LOG_FILE") or None,
        )
