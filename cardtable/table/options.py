"""
Table configuration.

One engine serves every card table on the site. What differs between the
catalog, collection and list-detail tables is captured here as capability
flags rather than as separate table implementations.
"""

from dataclasses import dataclass
from enum import Enum

from cardtable.models.columns import TableName
from cardtable.table.pagination import PaginationMode
from cardtable.table.sorting import SortDirection


class ViewMode(str, Enum):
    """Which kind of page hosts the table."""

    CATALOG = "catalog"
    COLLECTION = "collection"
    LIST = "list"


@dataclass(frozen=True)
class TableConfig:
    """
    Capability flags for one table instance.

    Attributes:
        view_mode: Catalog, collection or list-detail page
        pagination: FULL (load everything, sort locally) or INFINITE
            (server-ordered pages)
        default_sort_field: Initial sort column
        default_sort_direction: Initial sort direction
        show_remove_from_list: Offer "remove from list" per row
        download_filename: CSV filename, without extension
    """

    view_mode: ViewMode = ViewMode.CATALOG
    pagination: PaginationMode = PaginationMode.FULL
    default_sort_field: str = "sort_order"
    default_sort_direction: SortDirection = SortDirection.ASC
    show_remove_from_list: bool = False
    download_filename: str = "cards"

    @property
    def table_name(self) -> TableName:
        if self.view_mode == ViewMode.COLLECTION:
            return TableName.COLLECTION_TABLE
        return TableName.CARD_TABLE

    @property
    def is_collection_view(self) -> bool:
        return self.view_mode == ViewMode.COLLECTION

    @property
    def server_ordered(self) -> bool:
        return self.pagination == PaginationMode.INFINITE

    @classmethod
    def catalog(cls, **overrides: object) -> "TableConfig":
        return cls(**{"view_mode": ViewMode.CATALOG, **overrides})  # type: ignore[arg-type]

    @classmethod
    def collection(cls, **overrides: object) -> "TableConfig":
        defaults: dict[str, object] = {
            "view_mode": ViewMode.COLLECTION,
            "default_sort_field": "series_name",
            "download_filename": "my-collection",
        }
        return cls(**{**defaults, **overrides})  # type: ignore[arg-type]

    @classmethod
    def list_detail(cls, **overrides: object) -> "TableConfig":
        defaults: dict[str, object] = {
            "view_mode": ViewMode.LIST,
            "default_sort_field": "series_name",
            "show_remove_from_list": True,
        }
        return cls(**{**defaults, **overrides})  # type: ignore[arg-type]
