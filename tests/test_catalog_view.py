import asyncio

import pytest

from catalog_dashboard.service.api import MainAPI
from catalog_dashboard.service.backends import MockProductBackend
from catalog_dashboard.service.errors import NotFound, RequestFailed, ServiceUnreachable
from catalog_dashboard.views.catalog import LIKE_FAILED, LIKED, CatalogView

from conftest import FakeCatalogBackend, ManualClock, settle


def _likes(view: CatalogView, product_id: int) -> int:
    return next(product.likes for product in view.products if product.id == product_id)


@pytest.mark.asyncio
async def test_polling_loads_immediately_then_every_interval(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend, clock: ManualClock
) -> None:
    view = CatalogView(main_api, poll_interval=5.0, sleep=clock.sleep, clock=clock.time)

    view.start()
    await settle()
    assert catalog_backend.list_calls == 1
    assert not view.loading

    await clock.advance(4.0)
    assert catalog_backend.list_calls == 1

    await clock.advance(1.0)
    assert catalog_backend.list_calls == 2

    await clock.advance(5.0)
    assert catalog_backend.list_calls == 3

    await view.stop()
    await clock.advance(30.0)
    assert catalog_backend.list_calls == 3


@pytest.mark.asyncio
async def test_poll_picks_up_server_changes(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend, clock: ManualClock
) -> None:
    view = CatalogView(main_api, sleep=clock.sleep, clock=clock.time)
    view.start()
    await settle()
    assert _likes(view, 1) == 42

    catalog_backend.products[0].likes = 50
    await clock.advance(5.0)

    assert _likes(view, 1) == 50
    await view.stop()


@pytest.mark.asyncio
async def test_load_failure_sets_banner_and_retry_clears_it(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    catalog_backend.list_error = ServiceUnreachable("catalog service", "http://localhost:8001/api/products", 8001)

    await view.load()

    assert view.error == "Failed to load products. Make sure the catalog service is running on port 8001."
    assert view.products == []

    catalog_backend.list_error = None
    await view.load()

    assert view.error is None
    assert len(view.products) == 3


@pytest.mark.asyncio
async def test_like_shows_optimistic_count_then_confirms(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    await view.load()
    catalog_backend.like_gate = asyncio.Event()

    pending = asyncio.ensure_future(view.like(1))
    await settle()
    assert _likes(view, 1) == 43
    assert view.is_liking(1)

    catalog_backend.like_gate.set()
    assert await pending is True

    assert _likes(view, 1) == 43
    assert not view.is_liking(1)
    assert view.notifier.toasts[-1].message == LIKED


@pytest.mark.asyncio
async def test_failed_like_rolls_back_and_notifies(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    await view.load()
    before = _likes(view, 2)
    catalog_backend.like_gate = asyncio.Event()
    catalog_backend.like_error = RequestFailed(500, "boom")

    pending = asyncio.ensure_future(view.like(2))
    await settle()
    assert _likes(view, 2) == before + 1

    catalog_backend.like_gate.set()
    assert await pending is False

    assert _likes(view, 2) == before
    toast = view.notifier.toasts[-1]
    assert toast.level == "error"
    assert toast.message == LIKE_FAILED


@pytest.mark.asyncio
async def test_duplicate_like_on_same_item_is_ignored(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    await view.load()
    catalog_backend.like_gate = asyncio.Event()

    first = asyncio.ensure_future(view.like(1))
    await settle()
    assert await view.like(1) is False

    catalog_backend.like_gate.set()
    await first

    assert catalog_backend.like_calls == [1]
    assert _likes(view, 1) == 43


@pytest.mark.asyncio
async def test_likes_on_different_items_run_concurrently(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    await view.load()
    catalog_backend.like_gate = asyncio.Event()

    likes = [asyncio.ensure_future(view.like(product_id)) for product_id in (1, 3)]
    await settle()
    assert view.liking == {1, 3}

    catalog_backend.like_gate.set()
    assert await asyncio.gather(*likes) == [True, True]
    assert (_likes(view, 1), _likes(view, 3)) == (43, 26)


@pytest.mark.asyncio
async def test_stale_poll_does_not_overwrite_newer_like(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    await view.load()

    gate = asyncio.Event()
    catalog_backend.list_gate = gate
    slow_poll = asyncio.ensure_future(view.load())
    await settle()
    catalog_backend.list_gate = None

    assert await view.like(1) is True
    assert _likes(view, 1) == 43

    gate.set()
    await slow_poll

    assert _likes(view, 1) == 43
    assert _likes(view, 2) == 38


@pytest.mark.asyncio
async def test_older_listing_arriving_late_is_dropped(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    first_gate = asyncio.Event()
    catalog_backend.list_gate = first_gate
    older = asyncio.ensure_future(view.load())
    await settle()

    catalog_backend.list_gate = None
    catalog_backend.products.pop()
    await view.load()
    assert [product.id for product in view.products] == [1, 2]

    first_gate.set()
    await older

    assert [product.id for product in view.products] == [1, 2]


@pytest.mark.asyncio
async def test_results_after_stop_are_dropped(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    gate = asyncio.Event()
    catalog_backend.list_gate = gate

    pending = asyncio.ensure_future(view.load())
    await settle()
    await view.stop()
    gate.set()
    await pending

    assert view.products == []


@pytest.mark.asyncio
async def test_on_refresh_called_after_each_load(main_api: MainAPI) -> None:
    refreshed = []
    view = CatalogView(main_api, on_refresh=lambda current: refreshed.append(len(current.products)))

    await view.load()
    await view.load()

    assert refreshed == [3, 3]


@pytest.mark.asyncio
async def test_like_through_mock_store_persists(mock_backend: MockProductBackend) -> None:
    view = CatalogView(MainAPI(mock_backend))
    await view.load()

    assert await view.like(2) is True

    assert _likes(view, 2) == 39
    assert mock_backend.store.load()[1].likes == 39


@pytest.mark.asyncio
async def test_like_answer_survives_poll_that_read_before_it(
    main_api: MainAPI, catalog_backend: FakeCatalogBackend
) -> None:
    view = CatalogView(main_api)
    await view.load()

    gate = asyncio.Event()
    catalog_backend.like_gate = gate
    pending_like = asyncio.ensure_future(view.like(1))
    await settle()

    await view.load()
    assert _likes(view, 1) == 43

    gate.set()
    assert await pending_like is True

    assert _likes(view, 1) == 43
    assert view.like_error is None


@pytest.mark.asyncio
async def test_failed_like_keeps_the_error(main_api: MainAPI) -> None:
    view = CatalogView(main_api)
    await view.load()

    assert await view.like(99) is False

    assert isinstance(view.like_error, NotFound)


@pytest.mark.asyncio
async def test_corrupt_mock_store_shows_banner(mock_backend: MockProductBackend, storage_path) -> None:
    storage_path.write_text("{not json", encoding="utf-8")
    view = CatalogView(MainAPI(mock_backend))

    await view.load()

    assert view.error == f"Failed to load products: Could not read {storage_path}"
    assert view.products == []
    assert not view.loading
