"""Poll the user catalog and print like counts until interrupted."""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from catalog_dashboard.config import DashboardConfig
from catalog_dashboard.logging_config import setup_logging
from catalog_dashboard.service.api import build_main_api
from catalog_dashboard.views.catalog import CatalogView


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--mock", action="store_true", help="Read from the local mock store.")
    parser.add_argument(
        "--store-path",
        type=Path,
        default=None,
        help="Local storage file used with --mock.",
    )
    parser.add_argument("--interval", type=float, default=None, help="Seconds between refreshes.")
    parser.add_argument("--duration", type=float, default=None, help="Stop after this many seconds.")
    parser.add_argument("--log-level", default=None)
    return parser.parse_args()


def print_catalog(view: CatalogView) -> None:
    if view.error:
        print(view.error)
        return
    for product in view.products:
        print(f"{product.id:>4}  {product.likes:>6}  {product.title}")
    print("-" * 40)


async def watch(config: DashboardConfig, duration: Optional[float] = None) -> None:
    view = CatalogView(build_main_api(config), poll_interval=config.poll_interval, on_refresh=print_catalog)
    view.start()
    try:
        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)
    finally:
        await view.stop()


def main() -> None:
    args = parse_args()
    config = DashboardConfig.from_env()
    if args.mock:
        config.use_mock = True
    if args.store_path is not None:
        config.mock.store_path = args.store_path
    if args.interval is not None:
        config.poll_interval = args.interval
    setup_logging(args.log_level or config.log_level, config.log_file)

    try:
        asyncio.run(watch(config, args.duration))
    except KeyboardInterrupt:
        print("Stopped.")


if __name__ == "__main__":
    main()
