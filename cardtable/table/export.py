"""
CSV export of the filtered, sorted rows.

The header mirrors the visible columns left to right. Collection views
prepend a fixed Code column (the copy's random code) and every export ends
with a fixed Notes column unless notes are already visible. Every field is
quoted and embedded quotes are doubled.
"""

import csv
import io
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from cardtable.models.card import CardBase, CatalogCard, CollectionCard
from cardtable.models.columns import TableName, get_table_columns
from cardtable.models.failure import ExportError, KnownError
from cardtable.table.options import ViewMode

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"
DEFAULT_FILENAME = "cards"

ColumnRenderer = Callable[[CardBase], str]


@dataclass(frozen=True, slots=True)
class CsvBlob:
    """A finished CSV download."""

    filename: str
    content: str
    media_type: str = CSV_MEDIA_TYPE


def format_currency(value: float | None) -> str:
    """US dollar amount, e.g. "$1,234.56". None renders empty; 0 renders "$0.00"."""
    if value is None:
        return ""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _flag(code: str, attr: str) -> ColumnRenderer:
    return lambda r: code if getattr(r, attr, False) else ""


def _collection_field(render: Callable[[CollectionCard], str]) -> ColumnRenderer:
    """Renderer for a copy-specific field; catalog rows render empty."""
    return lambda r: render(r) if isinstance(r, CollectionCard) else ""


def _serial(record: CardBase) -> str:
    if isinstance(record, CollectionCard):
        return record.serial_display
    return record.print_run_display


def _owned(record: CardBase) -> str:
    if isinstance(record, CatalogCard):
        return str(record.owned_count)
    return ""


def _date_added(record: CollectionCard) -> str:
    return record.date_added.date().isoformat() if record.date_added else ""


COLUMN_RENDERERS: dict[str, ColumnRenderer] = {
    "card_number": lambda r: r.card_number,
    "player": lambda r: r.player_display,
    "series": lambda r: r.series_name,
    "color": lambda r: r.color_name,
    "print_run": lambda r: r.print_run_display,
    "serial_number": _serial,
    "auto": _flag("AUTO", "is_autograph"),
    "relic": _flag("RELIC", "is_relic"),
    "sp": _flag("SP", "is_short_print"),
    "attributes": lambda r: " ".join(r.attribute_codes()),
    "notes": lambda r: r.notes,
    "production_code": lambda r: r.series.production_code,
    "owned": _owned,
    "location": _collection_field(lambda r: r.location_name),
    "grade": _collection_field(lambda r: r.grade_display),
    "grading_agency": _collection_field(lambda r: r.grading_agency_name or r.grading_agency_abbr),
    "purchase_price": _collection_field(lambda r: format_currency(r.purchase_price)),
    "estimated_value": _collection_field(lambda r: format_currency(r.estimated_value)),
    "current_value": _collection_field(lambda r: format_currency(r.current_value)),
    "aftermarket_autograph": _collection_field(lambda r: _yes_no(r.aftermarket_autograph)),
    "is_special": _collection_field(lambda r: _yes_no(r.is_favorite)),
    "date_added": _collection_field(_date_added),
}

CODE_COLUMN: tuple[str, ColumnRenderer] = (
    "Code",
    _collection_field(lambda r: r.random_code),
)
NOTES_COLUMN: tuple[str, ColumnRenderer] = ("Notes", COLUMN_RENDERERS["notes"])


def _table_for(view_mode: ViewMode) -> TableName:
    if view_mode == ViewMode.COLLECTION:
        return TableName.COLLECTION_TABLE
    return TableName.CARD_TABLE


def export_columns(
    column_ids: Sequence[str],
    *,
    view_mode: ViewMode | str,
) -> list[tuple[str, ColumnRenderer]]:
    """
    Resolve the (header, renderer) pairs for an export.

    Column ids missing from the table's registry are skipped.
    """
    view_mode = ViewMode(view_mode)
    registry = get_table_columns(_table_for(view_mode))

    columns: list[tuple[str, ColumnRenderer]] = []
    if view_mode == ViewMode.COLLECTION:
        columns.append(CODE_COLUMN)

    for column_id in column_ids:
        col = registry.get(column_id)
        renderer = COLUMN_RENDERERS.get(column_id)
        if col is None or renderer is None:
            logger.debug("Skipping unknown export column: %s", column_id)
            continue
        columns.append((col.label, renderer))

    if "notes" not in column_ids:
        columns.append(NOTES_COLUMN)
    return columns


def export_csv(
    records: Sequence[CardBase],
    column_ids: Sequence[str],
    *,
    view_mode: ViewMode | str = ViewMode.CATALOG,
) -> str:
    """
    Render records as CSV text.

    Args:
        records: Rows in display order (already filtered and sorted)
        column_ids: Visible column ids, left to right
        view_mode: Hosting view; collection views get the Code column

    Raises:
        ExportError: If any row cannot be rendered. No partial text is
            returned.
    """
    try:
        columns = export_columns(column_ids, view_mode=view_mode)
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow([header for header, _ in columns])
        for record in records:
            writer.writerow([render(record) for _, render in columns])
    except KnownError:
        raise
    except Exception as e:
        logger.exception("CSV export of %d records failed", len(records))
        raise ExportError(detail=str(e)) from e

    logger.info("Exported %d records across %d columns", len(records), len(columns))
    return buffer.getvalue()


def csv_filename(filename: str | None) -> str:
    """Append ".csv" unless the name already ends with it. Path and quote characters are dropped."""
    name = re.sub(r'["\\/\r\n]', "", filename or "").strip() or DEFAULT_FILENAME
    if name.lower().endswith(".csv"):
        return name
    return f"{name}.csv"


def export_csv_blob(
    records: Sequence[CardBase],
    column_ids: Sequence[str],
    *,
    view_mode: ViewMode | str = ViewMode.CATALOG,
    filename: str | None = None,
) -> CsvBlob:
    """Render records as a downloadable CSV file."""
    content = export_csv(records, column_ids, view_mode=view_mode)
    return CsvBlob(filename=csv_filename(filename), content=content)
