"""Card table engine: filtering, sorting, layout, pagination, export and row actions."""

from cardtable.table.actions import (
    ActionContext,
    BulkSelection,
    RowAction,
    RowActionDispatcher,
)
from cardtable.table.debounce import Debouncer
from cardtable.table.engine import (
    CardTableEngine,
    TableView,
    card_source_full_loader,
    card_source_page_loader,
)
from cardtable.table.export import CsvBlob, export_csv, export_csv_blob, format_currency
from cardtable.table.filtering import StatFilter, StructuralFilters, filter_records
from cardtable.table.layout import ColumnLayout, VisibleColumns
from cardtable.table.options import TableConfig, ViewMode
from cardtable.table.pagination import (
    FullLoadController,
    InfiniteScrollController,
    PageResult,
    PaginationMode,
    ScrollPosition,
)
from cardtable.table.sorting import SortDirection, next_sort_state, sort_records

__all__ = [
    "ActionContext",
    "BulkSelection",
    "CardTableEngine",
    "ColumnLayout",
    "CsvBlob",
    "Debouncer",
    "FullLoadController",
    "InfiniteScrollController",
    "PageResult",
    "PaginationMode",
    "RowAction",
    "RowActionDispatcher",
    "ScrollPosition",
    "SortDirection",
    "StatFilter",
    "StructuralFilters",
    "TableConfig",
    "TableView",
    "ViewMode",
    "VisibleColumns",
    "card_source_full_loader",
    "card_source_page_loader",
    "export_csv",
    "export_csv_blob",
    "filter_records",
    "format_currency",
    "next_sort_state",
    "sort_records",
]
