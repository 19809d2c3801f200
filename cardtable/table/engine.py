"""
Card table engine.

One engine drives every card table (catalog, collection, list detail). The
hosting page supplies records or loaders plus a TableConfig; the engine keeps
search, filter, sort, column and selection state and derives the rows to
show. Data flows one way: records -> filter -> sort -> rows. Records are
never mutated.

Example:
    engine = CardTableEngine(TableConfig.collection(), records=cards)
    engine.set_search_query("auto")
    engine.toggle_sort("print_run")
    view = engine.view()
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass

import httpx

from cardtable.models.card import CardBase
from cardtable.models.columns import ColumnDef, get_table_columns
from cardtable.models.failure import CardFetchError
from cardtable.services.card_source import fetch_all_cards, fetch_card_page
from cardtable.services.preferences_client import fetch_visible_columns, save_visible_columns
from cardtable.table.actions import ActionContext, BulkSelection, RowActionDispatcher
from cardtable.table.debounce import Debouncer
from cardtable.table.export import CsvBlob, export_csv_blob
from cardtable.table.filtering import StatFilter, StructuralFilters, filter_records
from cardtable.table.layout import ColumnLayout, VisibleColumns
from cardtable.table.options import TableConfig
from cardtable.table.pagination import (
    FullLoadController,
    FullLoader,
    InfiniteScrollController,
    PageResult,
    PaginationMode,
    ScrollPosition,
    cap_full_load,
)
from cardtable.table.sorting import SortDirection, next_sort_state, sort_records

logger = logging.getLogger(__name__)

# Builds one page request from (page, sort_field, direction)
SortedPageLoader = Callable[[int, str, SortDirection], Awaitable[PageResult]]
Notify = Callable[[str], None]


@dataclass(frozen=True)
class TableView:
    """Everything a renderer needs for one frame of the table."""

    rows: list[CardBase]
    columns: list[ColumnDef]
    total_count: int
    sort_field: str
    sort_direction: SortDirection
    query: str
    loading: bool
    has_more: bool

    @property
    def row_count(self) -> int:
        return len(self.rows)


class CardTableEngine:
    """
    Stateful table model parametrized by capability flags.

    In FULL pagination mode records are loaded once and sorted locally. In
    INFINITE mode pages are requested in the active sort order and the
    engine never re-sorts them; changing the sort drops the loaded pages.
    """

    def __init__(
        self,
        config: TableConfig | None = None,
        records: Sequence[CardBase] = (),
        *,
        is_authenticated: bool = False,
        visible_columns: Iterable[str] | None = None,
        load_all: FullLoader | None = None,
        load_page: SortedPageLoader | None = None,
        notify: Notify | None = None,
    ):
        self.config = config or TableConfig()
        self.query = ""
        self.filters = StructuralFilters()
        self.sort_field = self.config.default_sort_field
        self.sort_direction = self.config.default_sort_direction

        self.visible = VisibleColumns(self.config.table_name, visible_columns)
        self.layout = ColumnLayout.for_columns(get_table_columns(self.config.table_name).values())
        self.bulk = BulkSelection()
        self.actions = RowActionDispatcher(
            ActionContext(
                is_authenticated=is_authenticated,
                view_mode=self.config.view_mode,
                show_remove_from_list=self.config.show_remove_from_list,
            )
        )

        self._notify = notify
        self._records: list[CardBase] = cap_full_load(records)
        self._search_debouncer = Debouncer(self.set_search_query)

        self._full_loader: FullLoadController | None = None
        self._scroller: InfiniteScrollController | None = None
        if self.config.pagination == PaginationMode.INFINITE:
            if load_page is not None:
                self._scroller = InfiniteScrollController(
                    lambda page: load_page(page, self.sort_field, self.sort_direction),
                    records=self._records,
                )
        elif load_all is not None:
            self._full_loader = FullLoadController(load_all)

    # ----- records -----

    @property
    def records(self) -> list[CardBase]:
        if self._scroller is not None:
            return self._scroller.records
        return list(self._records)

    def set_records(self, records: Sequence[CardBase], *, has_more: bool = False) -> None:
        """
        Replace the record set wholesale, e.g. after a page-level fetch.

        In INFINITE mode the records count as the first page and `has_more`
        says whether the server has further pages. FULL mode ignores it.
        """
        if self._scroller is not None:
            self._scroller.reset()
            self._scroller.append(records, has_more=has_more)
            if records:
                self._scroller.next_page = 2
        else:
            self._records = cap_full_load(records)
        self.bulk.clear()

    @property
    def loading(self) -> bool:
        if self._scroller is not None:
            return self._scroller.loading_more
        return self._full_loader is not None and self._full_loader.loading

    @property
    def has_more(self) -> bool:
        return self._scroller is not None and self._scroller.has_more

    async def load(self) -> None:
        """
        Initial load.

        FULL mode fetches everything once; INFINITE mode fetches the first
        page. Failures leave the table as it was and are reported through
        `notify`.
        """
        if self._scroller is not None:
            if await self._scroller.load_more():
                self._report(self._scroller.last_error)
            return

        if self._full_loader is None:
            logger.debug("No full loader configured; records are supplied by the host")
            return

        records = await self._full_loader.load()
        if self._full_loader.last_error is None:
            self._records = records
        self._report(self._full_loader.last_error)

    async def on_scroll(self, position: ScrollPosition) -> bool:
        """Forward a scroll event; returns True if a load ran and was applied."""
        if self._scroller is None:
            return False
        applied = await self._scroller.on_scroll(position)
        if applied:
            self._report(self._scroller.last_error)
        return applied

    def _report(self, error: Exception | None) -> None:
        if error is None:
            return
        logger.warning("Failed to load cards: %s", error)
        if self._notify is not None:
            self._notify(f"Failed to load cards: {error}")

    # ----- search and filters -----

    def set_search_query(self, query: str) -> None:
        self.query = query

    def set_search_query_debounced(self, query: str) -> None:
        """Apply the query after typing pauses; only the last value in a burst counts."""
        self._search_debouncer.trigger(query)

    async def flush_search(self) -> None:
        await self._search_debouncer.flush()

    def set_filters(self, filters: StructuralFilters) -> None:
        self.filters = filters

    def set_team_filter(self, team_ids: Iterable[int]) -> None:
        self.filters = StructuralFilters.build(team_ids, self.filters.stat_filter)

    def set_stat_filter(self, stat_filter: StatFilter | str | None) -> None:
        self.filters = StructuralFilters.build(self.filters.team_ids, stat_filter)

    # ----- sorting -----

    def _resolve_sort_field(self, key: str) -> str | None:
        """
        Map a header column id to the record field it sorts by.

        Keys that are not column ids are taken as record fields already
        (e.g. "series_name"). Returns None for a column that is not sortable.
        """
        column = get_table_columns(self.config.table_name).get(key)
        if column is None:
            return key
        if not column.sortable:
            return None
        return column.sort_field or key

    def _apply_sort(self, field: str, direction: SortDirection) -> None:
        self.sort_field = field
        self.sort_direction = direction
        if self._scroller is not None:
            self._scroller.reset()

    def toggle_sort(self, key: str) -> tuple[str, SortDirection]:
        """
        Header click, by column id or record field.

        Clicks on a non-sortable column are ignored. In INFINITE mode the
        loaded pages were ordered by the previous sort, so they are dropped;
        call `load()` to fetch the first page again.
        """
        field = self._resolve_sort_field(key)
        if field is None:
            logger.debug("Column %s is not sortable", key)
            return self.sort_field, self.sort_direction
        self._apply_sort(*next_sort_state(self.sort_field, self.sort_direction, field))
        return self.sort_field, self.sort_direction

    def set_sort(
        self, key: str, direction: SortDirection | str = SortDirection.ASC
    ) -> tuple[str, SortDirection]:
        """Set the sort outright; same column mapping and page reset as `toggle_sort`."""
        field = self._resolve_sort_field(key)
        if field is None:
            logger.debug("Column %s is not sortable", key)
            return self.sort_field, self.sort_direction
        self._apply_sort(field, SortDirection(direction))
        return self.sort_field, self.sort_direction

    # ----- columns -----

    @property
    def column_ids(self) -> list[str]:
        return self.visible.ordered()

    def toggle_column(self, column_id: str) -> bool:
        return self.visible.toggle(column_id)

    def reset_columns(self) -> None:
        self.visible.reset()

    async def load_column_preferences(
        self,
        token: str | None,
        client: httpx.AsyncClient | None = None,
    ) -> list[str]:
        """Replace the visible set with the user's saved columns (or the defaults)."""
        columns = await fetch_visible_columns(self.config.table_name, token, client=client)
        self.visible.replace(columns)
        return self.visible.ordered()

    async def save_column_preferences(
        self,
        token: str | None,
        client: httpx.AsyncClient | None = None,
    ) -> bool:
        return await save_visible_columns(
            self.config.table_name, self.visible.ordered(), token, client=client
        )

    # ----- selection -----

    def set_bulk_selection_mode(self, enabled: bool) -> None:
        self.bulk.set_mode(enabled)
        self.actions.context.bulk_selection_mode = enabled

    def set_authenticated(self, is_authenticated: bool) -> None:
        self.actions.context.is_authenticated = is_authenticated

    # ----- derived view -----

    def rows(self) -> list[CardBase]:
        """Records after filtering and sorting."""
        filtered = filter_records(
            self.records,
            self.query,
            self.filters,
            include_collection_fields=self.config.is_collection_view,
        )
        return sort_records(
            filtered,
            self.sort_field,
            self.sort_direction,
            server_ordered=self.config.server_ordered,
        )

    def view(self) -> TableView:
        return TableView(
            rows=self.rows(),
            columns=self.visible.definitions(),
            total_count=len(self.records),
            sort_field=self.sort_field,
            sort_direction=self.sort_direction,
            query=self.query,
            loading=self.loading,
            has_more=self.has_more,
        )

    def export(self, filename: str | None = None) -> CsvBlob:
        """
        Export the rows currently shown, in the visible column order.

        Raises:
            ExportError: If the CSV cannot be produced
        """
        return export_csv_blob(
            self.rows(),
            self.column_ids,
            view_mode=self.config.view_mode,
            filename=filename or self.config.download_filename,
        )


def card_source_page_loader(
    endpoint: str,
    *,
    limit: int | None = None,
    token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> SortedPageLoader:
    """
    Page loader for INFINITE tables backed by a card endpoint.

    The endpoint must return pages in the requested sort order.
    """

    async def load(page: int, sort_field: str, direction: SortDirection) -> PageResult:
        result = await fetch_card_page(
            endpoint, page, limit, sort_field, direction, token=token, client=client
        )
        if not result.ok:
            raise CardFetchError(result.error)
        return PageResult(records=result.cards, has_more=result.has_more)

    return load


def card_source_full_loader(
    endpoint: str,
    *,
    token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> FullLoader:
    """Full loader for FULL tables backed by a card endpoint."""

    async def load(limit: int) -> list[CardBase]:
        result = await fetch_all_cards(endpoint, limit, token=token, client=client)
        if not result.ok:
            raise CardFetchError(result.error)
        return list(result.cards)

    return load
