"""Tests for infinite-scroll and full-load controllers."""

import asyncio
from collections.abc import Callable

import pytest

from cardtable.models.card import CatalogCard
from cardtable.table.pagination import (
    FullLoadController,
    InfiniteScrollController,
    PageResult,
    ScrollPosition,
    cap_full_load,
)

CatalogFactory = Callable[..., CatalogCard]

NEAR_BOTTOM = ScrollPosition(scroll_top=1650, scroll_height=2000, client_height=200)
FAR_FROM_BOTTOM = ScrollPosition(scroll_top=0, scroll_height=2000, client_height=200)


class TestShouldLoad:
    def test_near_bottom(self) -> None:
        async def loader(page: int) -> PageResult:
            return PageResult(records=[], has_more=False)

        controller = InfiniteScrollController(loader)

        assert NEAR_BOTTOM.remaining == 150
        assert controller.should_load(NEAR_BOTTOM)
        assert not controller.should_load(FAR_FROM_BOTTOM)

    def test_threshold_is_inclusive(self) -> None:
        async def loader(page: int) -> PageResult:
            return PageResult(records=[], has_more=False)

        controller = InfiniteScrollController(loader)

        assert controller.should_load(ScrollPosition(1600, 2000, 200))
        assert not controller.should_load(ScrollPosition(1599, 2000, 200))

    def test_nothing_more(self) -> None:
        async def loader(page: int) -> PageResult:
            return PageResult(records=[], has_more=False)

        controller = InfiniteScrollController(loader, has_more=False)

        assert not controller.should_load(NEAR_BOTTOM)


class TestLoadMore:
    async def test_appends_pages(self, make_catalog_card: CatalogFactory) -> None:
        pages = {
            1: PageResult([make_catalog_card(1), make_catalog_card(2)], has_more=True),
            2: PageResult([make_catalog_card(3)], has_more=False),
        }
        requested: list[int] = []

        async def loader(page: int) -> PageResult:
            requested.append(page)
            return pages[page]

        controller = InfiniteScrollController(loader)

        assert await controller.on_scroll(NEAR_BOTTOM)
        assert await controller.on_scroll(NEAR_BOTTOM)
        assert not await controller.on_scroll(NEAR_BOTTOM)

        assert requested == [1, 2]
        assert [r.id for r in controller.records] == [1, 2, 3]
        assert controller.has_more is False

    async def test_concurrent_triggers_make_one_request(
        self, make_catalog_card: CatalogFactory
    ) -> None:
        """Scroll events during an in-flight load are discarded, not queued."""
        release = asyncio.Event()
        calls = 0

        async def loader(page: int) -> PageResult:
            nonlocal calls
            calls += 1
            await release.wait()
            return PageResult([make_catalog_card(page)], has_more=True)

        controller = InfiniteScrollController(loader)

        first = asyncio.create_task(controller.on_scroll(NEAR_BOTTOM))
        await asyncio.sleep(0)
        assert controller.loading_more

        second = await controller.on_scroll(NEAR_BOTTOM)
        release.set()
        await first

        assert second is False
        assert calls == 1
        assert controller.loading_more is False
        assert len(controller.records) == 1

    async def test_failure_leaves_records(self, make_catalog_card: CatalogFactory) -> None:
        async def loader(page: int) -> PageResult:
            raise ConnectionError("network down")

        controller = InfiniteScrollController(loader, records=[make_catalog_card(1)], next_page=2)

        await controller.load_more()

        assert [r.id for r in controller.records] == [1]
        assert controller.loading_more is False
        assert isinstance(controller.last_error, ConnectionError)
        assert controller.next_page == 2
        assert controller.should_load(NEAR_BOTTOM)

    def test_append_dedupes(self, make_catalog_card: CatalogFactory) -> None:
        async def loader(page: int) -> PageResult:
            return PageResult(records=[], has_more=False)

        controller = InfiniteScrollController(loader, records=[make_catalog_card(1)])

        added = controller.append([make_catalog_card(1), make_catalog_card(2)], has_more=True)

        assert added == 1
        assert [r.id for r in controller.records] == [1, 2]

    def test_reset(self, make_catalog_card: CatalogFactory) -> None:
        async def loader(page: int) -> PageResult:
            return PageResult(records=[], has_more=False)

        controller = InfiniteScrollController(
            loader, records=[make_catalog_card(1)], has_more=False, next_page=4
        )

        controller.reset()

        assert controller.records == []
        assert controller.has_more is True
        assert controller.next_page == 1

    async def test_reset_discards_in_flight_page(self, make_catalog_card: CatalogFactory) -> None:
        release = asyncio.Event()
        requested: list[int] = []

        async def loader(page: int) -> PageResult:
            requested.append(page)
            if len(requested) == 1:
                await release.wait()
                return PageResult([make_catalog_card(1)], has_more=True)
            return PageResult([make_catalog_card(7)], has_more=False)

        controller = InfiniteScrollController(loader)
        stale = asyncio.create_task(controller.load_more())
        await asyncio.sleep(0)

        controller.reset()
        assert controller.loading_more is False
        assert await controller.load_more() is True

        release.set()
        assert await stale is False

        assert requested == [1, 1]
        assert [r.id for r in controller.records] == [7]
        assert controller.has_more is False
        assert controller.next_page == 2
        assert controller.loading_more is False


class TestFullLoad:
    async def test_loads_once_with_cap(self, make_catalog_card: CatalogFactory) -> None:
        limits: list[int] = []

        async def loader(limit: int) -> list[CatalogCard]:
            limits.append(limit)
            return [make_catalog_card(i) for i in range(5)]

        controller = FullLoadController(loader, limit=3)

        records = await controller.load()

        assert limits == [3]
        assert len(records) == 3
        assert controller.loaded is True

    async def test_failure_keeps_previous(self, make_catalog_card: CatalogFactory) -> None:
        responses: list[list[CatalogCard] | Exception] = [
            [make_catalog_card(1)],
            TimeoutError("slow"),
        ]

        async def loader(limit: int) -> list[CatalogCard]:
            result = responses.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        controller = FullLoadController(loader)
        await controller.load()

        records = await controller.load()

        assert [r.id for r in records] == [1]
        assert isinstance(controller.last_error, TimeoutError)
        assert controller.loading is False


def test_cap_full_load(make_catalog_card: CatalogFactory) -> None:
    records = [make_catalog_card(i) for i in range(4)]

    assert len(cap_full_load(records, limit=2)) == 2
    assert len(cap_full_load(records, limit=10)) == 4


@pytest.mark.parametrize("remaining", [0, 200])
def test_remaining_boundary(remaining: int) -> None:
    position = ScrollPosition(scroll_top=1800 - remaining, scroll_height=2000, client_height=200)

    assert position.remaining == remaining
