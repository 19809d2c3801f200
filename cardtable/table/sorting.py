"""
Sort engine for card tables.

Orders filtered records by a clicked column. Each sort field has its own
key: card numbers sort naturally ("1, 1A, 2, 10"), numeric fields put
missing values last in both directions, and boolean attributes sort
"most interesting first" when ascending.

Ties on the primary key fall through a fixed chain, always ascending:
series name -> card number -> player name. The link matching the primary
field is skipped. Records tied on every key keep their input order, so
re-sorting an already sorted list never moves anything.

Server-paginated infinite-scroll views are never re-sorted here: the API
returns pages in the requested order and re-sorting would shuffle rows that
are already on screen as new pages arrive.
"""

import re
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any, TypeVar

from cardtable.models.card import CardBase

R = TypeVar("R", bound=CardBase)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


TIE_BREAK_CHAIN = ("series_name", "card_number", "player_name")

NUMERIC_FIELDS = frozenset(
    {
        "print_run",
        "sort_order",
        "owned_count",
        "serial_number",
        "purchase_price",
        "estimated_value",
        "current_value",
        "grade",
        "photo_count",
    }
)

BOOLEAN_FIELDS = frozenset(
    {
        "is_rookie",
        "is_autograph",
        "is_relic",
        "is_short_print",
        "is_favorite",
        "aftermarket_autograph",
    }
)

_DIGIT_RUN = re.compile(r"(\d+)")


def card_number_key(card_number: str) -> tuple[Any, ...]:
    """
    Natural sort key for card numbers.

    Digit runs compare as integers and text runs case-insensitively, so
    "2" < "10" and "1" < "1A" < "1B" < "2". The raw lowercased value is the
    final element to keep "01" and "1" apart deterministically.
    """
    lowered = card_number.strip().lower()
    parts: list[tuple[int, int, str]] = []
    for chunk in _DIGIT_RUN.split(lowered):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk))
    return (tuple(parts), lowered)


def _string_key(value: Any) -> str:
    if value is None:
        return ""
    return str(value).lower()


def _numeric_value(record: CardBase, field: str) -> float | None:
    value = getattr(record, field, None)
    if value is None or isinstance(value, bool):
        return None
    return float(value)


def _date_value(record: CardBase, field: str) -> float | None:
    value = getattr(record, field, None)
    if value is None:
        return None
    return float(value.timestamp())


def field_key(field: str) -> Callable[[CardBase], Any]:
    """
    Build the sort key for a field.

    The key returns None for "absent" values, which sort_records always
    places last regardless of direction.
    """
    if field == "card_number":
        return lambda r: card_number_key(r.card_number)
    if field == "series_name":
        return lambda r: r.series.name.lower()
    if field == "player_name":
        return lambda r: r.player_display.lower()
    if field == "team_name":
        return lambda r: r.team_display.lower()
    if field == "color":
        return lambda r: r.color_name.lower()
    if field in NUMERIC_FIELDS:
        return lambda r: _numeric_value(r, field)
    if field == "date_added":
        return lambda r: _date_value(r, field)
    if field in BOOLEAN_FIELDS:
        # False sorts first, so "not value" puts True rows first when ascending
        return lambda r: not bool(getattr(r, field, False))
    return lambda r: _string_key(getattr(r, field, None))


def sort_records(
    records: Sequence[R],
    field: str,
    direction: SortDirection | str = SortDirection.ASC,
    *,
    server_ordered: bool = False,
) -> list[R]:
    """
    Sort card records by a column.

    Args:
        records: Filtered records
        field: Sort field (e.g. "card_number", "print_run", "is_autograph")
        direction: "asc" or "desc"
        server_ordered: Records come from a server-sorted infinite-scroll
            feed; return them in their existing order.

    Returns:
        A new, sorted list. The input is never mutated.
    """
    if server_ordered:
        return list(records)

    descending = SortDirection(direction) == SortDirection.DESC

    # Stable sorts applied from lowest precedence to highest
    result = list(records)
    for tie_field in reversed(TIE_BREAK_CHAIN):
        if tie_field != field:
            result.sort(key=field_key(tie_field))

    key = field_key(field)
    keyed = [(key(record), record) for record in result]
    present = [(k, r) for k, r in keyed if k is not None]
    absent = [r for k, r in keyed if k is None]

    present.sort(key=lambda pair: pair[0], reverse=descending)
    return [r for _, r in present] + absent


def next_sort_state(
    current_field: str,
    current_direction: SortDirection | str,
    clicked_field: str,
) -> tuple[str, SortDirection]:
    """
    Header click behavior.

    Clicking the active column flips its direction; clicking another column
    sorts by it ascending.
    """
    if clicked_field == current_field:
        if SortDirection(current_direction) == SortDirection.ASC:
            return current_field, SortDirection.DESC
        return current_field, SortDirection.ASC
    return clicked_field, SortDirection.ASC
