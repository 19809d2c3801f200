"""
Pagination controllers.

A table loads its records in exactly one of two modes:

- FULL: one request fetches the whole record set (capped at
  FULL_LOAD_LIMIT) and all filtering and sorting happens locally.
- INFINITE: pages are requested as the user scrolls near the bottom;
  the server owns the order.

The controllers decide *when* to load and merge what comes back. The
network call itself belongs to the hosting page, passed in as a callback.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from cardtable.config import FULL_LOAD_LIMIT, LOAD_MORE_THRESHOLD_PX
from cardtable.models.card import CardBase

logger = logging.getLogger(__name__)


class PaginationMode(str, Enum):
    FULL = "full"
    INFINITE = "infinite"


@dataclass(frozen=True, slots=True)
class ScrollPosition:
    """Scroll metrics of the table's scroll container, in pixels."""

    scroll_top: float
    scroll_height: float
    client_height: float

    @property
    def remaining(self) -> float:
        return self.scroll_height - self.scroll_top - self.client_height


@dataclass(frozen=True, slots=True)
class PageResult:
    """One page returned by the hosting page's loader."""

    records: Sequence[CardBase]
    has_more: bool


PageLoader = Callable[[int], Awaitable[PageResult]]
FullLoader = Callable[[int], Awaitable[Sequence[CardBase]]]


class InfiniteScrollController:
    """
    Load-more trigger with a reentrancy guard.

    A scroll event that lands within `threshold_px` of the bottom starts at
    most one load. Triggers that arrive while a load is in flight are
    discarded, not queued. In-flight requests are not cancelled.
    """

    def __init__(
        self,
        load_page: PageLoader,
        *,
        threshold_px: float = LOAD_MORE_THRESHOLD_PX,
        records: Sequence[CardBase] = (),
        has_more: bool = True,
        next_page: int = 1,
    ):
        self._load_page = load_page
        self.threshold_px = threshold_px
        self._records: list[CardBase] = list(records)
        self.has_more = has_more
        self.next_page = next_page
        self.loading_more = False
        self.last_error: Exception | None = None
        # Bumped by reset(); pages requested under an older value are dropped
        self._generation = 0

    @property
    def records(self) -> list[CardBase]:
        return list(self._records)

    def should_load(self, position: ScrollPosition) -> bool:
        """Near the bottom, more is available, and nothing is in flight."""
        return (
            self.has_more
            and not self.loading_more
            and position.remaining <= self.threshold_px
        )

    async def on_scroll(self, position: ScrollPosition) -> bool:
        """
        Handle a scroll event.

        Returns:
            True if this event started a load whose outcome was applied.
        """
        if not self.should_load(position):
            return False
        return await self.load_more()

    async def load_more(self) -> bool:
        """
        Fetch and append the next page unless a load is already running.

        Returns:
            True if a request ran and its outcome was applied. A page that
            arrives after `reset()` belongs to the old sort or search and is
            discarded, and this returns False.
        """
        if self.loading_more or not self.has_more:
            return False

        generation = self._generation
        self.loading_more = True
        page = self.next_page
        try:
            result = await self._load_page(page)
        except Exception as e:
            if generation != self._generation:
                logger.debug("Ignoring failure of page %d from before the last reset", page)
                return False
            # Records stay as they were; the next scroll may retry
            self.last_error = e
            logger.warning("Loading page %d failed: %s", page, e)
            return True
        finally:
            if generation == self._generation:
                self.loading_more = False

        if generation != self._generation:
            logger.debug("Discarding page %d loaded before the last reset", page)
            return False

        self.last_error = None
        self.next_page = page + 1
        self.append(result.records, result.has_more)
        return True

    def append(self, records: Sequence[CardBase], has_more: bool) -> int:
        """
        Merge a page into the loaded records.

        Records already present (same id) are skipped so overlapping pages
        never duplicate rows. Existing rows keep their positions, so the
        user's scroll offset stays valid.

        Returns:
            Number of records added.
        """
        seen = {r.id for r in self._records}
        added = 0
        for record in records:
            if record.id in seen:
                continue
            seen.add(record.id)
            self._records.append(record)
            added += 1
        self.has_more = has_more
        return added

    def reset(self) -> None:
        """
        Drop loaded records, e.g. after the sort or search changes upstream.

        A request still in flight is not cancelled, but its page will be
        discarded and a new first-page load may start right away.
        """
        self._generation += 1
        self.loading_more = False
        self._records = []
        self.has_more = True
        self.next_page = 1
        self.last_error = None


def cap_full_load(records: Sequence[CardBase], limit: int = FULL_LOAD_LIMIT) -> list[CardBase]:
    """Apply the full-load record cap, logging when records are dropped."""
    if len(records) > limit:
        logger.warning("Full load returned %d records; keeping the first %d", len(records), limit)
        return list(records[:limit])
    return list(records)


class FullLoadController:
    """
    Single-request loader for tables that filter and sort locally.

    The loader is called once with the record cap. A second load while the
    first is in flight is ignored. A failed load leaves the previous records
    in place.
    """

    def __init__(self, load_all: FullLoader, *, limit: int = FULL_LOAD_LIMIT):
        self._load_all = load_all
        self.limit = limit
        self._records: list[CardBase] = []
        self.loading = False
        self.loaded = False
        self.last_error: Exception | None = None

    @property
    def records(self) -> list[CardBase]:
        return list(self._records)

    async def load(self) -> list[CardBase]:
        """Fetch the whole record set, capped at `limit`."""
        if self.loading:
            return self.records

        self.loading = True
        try:
            fetched = await self._load_all(self.limit)
        except Exception as e:
            self.last_error = e
            logger.warning("Full load failed: %s", e)
            return self.records
        finally:
            self.loading = False

        self.last_error = None
        self._records = cap_full_load(fetched, self.limit)
        self.loaded = True
        return self.records
