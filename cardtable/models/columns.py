"""
Table column registry.

Declarative column definitions for the card and collection tables. Each
table name maps to an ordered registry of column id -> ColumnDef; the
registry order is the left-to-right render order.

Column properties:
    label: Header text in the table and the column picker
    default_visible: Shown when the user has no saved preference
    always_visible: User configuration can never hide this column
    mobile_visible: Shown by default on narrow screens
    sortable: Header click sorts by `sort_field`
    width: Initial width in pixels, or "auto"
    requires_auth: Only meaningful for signed-in users
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

ColumnWidth = int | Literal["auto"]


class TableName(str, Enum):
    """Tables whose column visibility can be customized."""

    CARD_TABLE = "card_table"
    COLLECTION_TABLE = "collection_table"


@dataclass(frozen=True, slots=True)
class ColumnDef:
    """A single column definition."""

    id: str
    label: str
    default_visible: bool = True
    always_visible: bool = False
    mobile_visible: bool = False
    sortable: bool = False
    width: ColumnWidth = "auto"
    description: str = ""
    sort_field: str | None = None
    requires_auth: bool = False


CARD_TABLE_COLUMNS: dict[str, ColumnDef] = {
    "card_number": ColumnDef(
        id="card_number",
        label="Card #",
        always_visible=True,
        mobile_visible=True,
        sortable=True,
        width=120,
        description="Card number from the series",
        sort_field="card_number",
    ),
    "player": ColumnDef(
        id="player",
        label="Player(s)",
        always_visible=True,
        mobile_visible=True,
        sortable=True,
        width=200,
        description="Player names and teams",
        sort_field="player_name",
    ),
    "series": ColumnDef(
        id="series",
        label="Series",
        sortable=True,
        description="Series name",
        sort_field="series_name",
    ),
    "color": ColumnDef(
        id="color",
        label="Color",
        description="Card color/parallel",
    ),
    "print_run": ColumnDef(
        id="print_run",
        label="Print Run",
        sortable=True,
        width=120,
        description="Numbered print run (e.g., /99)",
        sort_field="print_run",
    ),
    "auto": ColumnDef(
        id="auto",
        label="Auto",
        sortable=True,
        width=80,
        description="Autograph indicator",
        sort_field="is_autograph",
    ),
    "relic": ColumnDef(
        id="relic",
        label="Relic",
        sortable=True,
        width=80,
        description="Relic/memorabilia indicator",
        sort_field="is_relic",
    ),
    "sp": ColumnDef(
        id="sp",
        label="SP",
        sortable=True,
        width=80,
        description="Short print indicator",
        sort_field="is_short_print",
    ),
    "attributes": ColumnDef(
        id="attributes",
        label="Attributes",
        default_visible=False,
        width=140,
        description="RC, AUTO, RELIC and SP tags together",
    ),
    "notes": ColumnDef(
        id="notes",
        label="Notes",
        default_visible=False,
        description="Additional card notes",
    ),
    "production_code": ColumnDef(
        id="production_code",
        label="Production Code",
        default_visible=False,
        width=150,
        description="Series production code",
    ),
    "owned": ColumnDef(
        id="owned",
        label="Owned",
        mobile_visible=True,
        width=60,
        description="Number of copies you own",
        requires_auth=True,
    ),
}

COLLECTION_TABLE_COLUMNS: dict[str, ColumnDef] = {
    "card_number": CARD_TABLE_COLUMNS["card_number"],
    "player": CARD_TABLE_COLUMNS["player"],
    "series": CARD_TABLE_COLUMNS["series"],
    "serial_number": ColumnDef(
        id="serial_number",
        label="Serial #",
        sortable=True,
        width=100,
        description="Serial number on your card (e.g., 45/99)",
        sort_field="serial_number",
    ),
    "location": ColumnDef(
        id="location",
        label="Location",
        sortable=True,
        width=150,
        description="Where the card is stored",
        sort_field="location_name",
    ),
    "grade": ColumnDef(
        id="grade",
        label="Grade",
        default_visible=False,
        sortable=True,
        width=100,
        description="Grading score",
        sort_field="grade",
    ),
    "grading_agency": ColumnDef(
        id="grading_agency",
        label="Grading Agency",
        default_visible=False,
        sortable=True,
        width=120,
        description="Who graded the card (PSA, BGS, etc.)",
        sort_field="grading_agency_abbr",
    ),
    "purchase_price": ColumnDef(
        id="purchase_price",
        label="Purchase Price",
        default_visible=False,
        sortable=True,
        width=120,
        description="How much you paid for the card",
        sort_field="purchase_price",
    ),
    "estimated_value": ColumnDef(
        id="estimated_value",
        label="Estimated Value",
        default_visible=False,
        sortable=True,
        width=140,
        description="Estimated current value",
        sort_field="estimated_value",
    ),
    "current_value": ColumnDef(
        id="current_value",
        label="Current Value",
        default_visible=False,
        sortable=True,
        width=120,
        description="Latest market value",
        sort_field="current_value",
    ),
    "color": CARD_TABLE_COLUMNS["color"],
    "print_run": CARD_TABLE_COLUMNS["print_run"],
    "auto": CARD_TABLE_COLUMNS["auto"],
    "relic": CARD_TABLE_COLUMNS["relic"],
    "sp": CARD_TABLE_COLUMNS["sp"],
    "attributes": CARD_TABLE_COLUMNS["attributes"],
    "aftermarket_autograph": ColumnDef(
        id="aftermarket_autograph",
        label="Aftermarket Auto",
        default_visible=False,
        width=140,
        description="Card signed after production",
    ),
    "is_special": ColumnDef(
        id="is_special",
        label="Favorite",
        sortable=True,
        width=90,
        description="Marked as favorite card",
        sort_field="is_favorite",
    ),
    "date_added": ColumnDef(
        id="date_added",
        label="Date Added",
        default_visible=False,
        sortable=True,
        width=120,
        description="When you added this card",
        sort_field="date_added",
    ),
    "notes": ColumnDef(
        id="notes",
        label="Notes",
        default_visible=False,
        description="Your personal notes",
    ),
    "production_code": CARD_TABLE_COLUMNS["production_code"],
}

TABLE_COLUMNS: dict[TableName, dict[str, ColumnDef]] = {
    TableName.CARD_TABLE: CARD_TABLE_COLUMNS,
    TableName.COLLECTION_TABLE: COLLECTION_TABLE_COLUMNS,
}


def get_table_columns(table_name: TableName | str) -> dict[str, ColumnDef]:
    """
    Get the column registry for a table.

    Raises:
        ValueError: If table_name is not a known table
    """
    return TABLE_COLUMNS[TableName(table_name)]


def get_default_visible_columns(table_name: TableName | str) -> list[str]:
    """Column ids shown when the user has no saved preference, in render order."""
    return [col.id for col in get_table_columns(table_name).values() if col.default_visible]


def get_mobile_visible_columns(table_name: TableName | str) -> list[str]:
    """Column ids shown by default on narrow screens, in render order."""
    return [col.id for col in get_table_columns(table_name).values() if col.mobile_visible]


def get_always_visible_columns(table_name: TableName | str) -> list[str]:
    """Column ids the user can never hide."""
    return [col.id for col in get_table_columns(table_name).values() if col.always_visible]


def sanitize_visible_columns(table_name: TableName | str, column_ids: list[str]) -> list[str]:
    """
    Normalize a requested visible-columns list against the registry.

    Unknown ids are dropped, duplicates collapse, always-visible columns are
    added back, and the result follows registry order.
    """
    columns = get_table_columns(table_name)
    requested = set(column_ids)
    return [
        col.id for col in columns.values() if col.always_visible or col.id in requested
    ]
