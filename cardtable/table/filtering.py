"""
Filter engine for card tables.

Reduces a record list to the rows matching a free-text search and the
structural filters (team chips, stat tabs) chosen on the page.

INVARIANTS:
- Filtering only removes records, never adds or reorders them
- Input records are never mutated
- Idempotent: filtering an already-filtered list with the same arguments
  returns it unchanged
- Blank query and empty filters -> input returned as a new list
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

from cardtable.models.card import CardBase, CollectionCard

# Typed text matches an attribute when it is a substring of one of its
# keywords, so "aut" finds autographs and "rc" finds rookies.
ATTRIBUTE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "is_rookie": ("rookie", "rc"),
    "is_autograph": ("autograph", "auto"),
    "is_relic": ("relic",),
    "is_short_print": ("short print", "sp"),
}

AFTERMARKET_KEYWORDS = ("aftermarket", "am auto")

R = TypeVar("R", bound=CardBase)


class StatFilter(str, Enum):
    """Exclusive attribute tabs shown on player pages."""

    ROOKIE = "rookie"
    AUTOGRAPH = "autograph"
    RELIC = "relic"
    NUMBERED = "numbered"


@dataclass(frozen=True)
class StructuralFilters:
    """
    Non-text filters.

    Attributes:
        team_ids: Keep records with at least one of these teams. Empty = all.
        stat_filter: Keep only records with this attribute. None = all.
    """

    team_ids: frozenset[int] = field(default_factory=frozenset)
    stat_filter: StatFilter | None = None

    @classmethod
    def build(
        cls,
        team_ids: Iterable[int] | None = None,
        stat_filter: StatFilter | str | None = None,
    ) -> "StructuralFilters":
        return cls(
            team_ids=frozenset(team_ids or ()),
            stat_filter=StatFilter(stat_filter) if stat_filter else None,
        )

    @property
    def is_empty(self) -> bool:
        return not self.team_ids and self.stat_filter is None


def filter_records(
    records: Sequence[R],
    query: str = "",
    filters: StructuralFilters | None = None,
    *,
    include_collection_fields: bool = False,
) -> list[R]:
    """
    Filter card records.

    All filters are ANDed together: team filter, then stat filter, then the
    text query.

    Args:
        records: Records in display order
        query: Free text, matched case-insensitively as a substring
        filters: Team and stat filters
        include_collection_fields: Also search owned-copy fields (serial,
            location, grade, prices). Enabled for collection views only.

    Returns:
        Matching records, in input order.
    """
    result = list(records)

    if filters is not None:
        if filters.team_ids:
            result = [r for r in result if r.team_ids & filters.team_ids]
        if filters.stat_filter is not None:
            result = [r for r in result if matches_stat_filter(r, filters.stat_filter)]

    needle = query.strip().lower()
    if needle:
        result = [
            r
            for r in result
            if matches_query(r, needle, include_collection_fields=include_collection_fields)
        ]

    return result


def matches_stat_filter(record: CardBase, stat_filter: StatFilter) -> bool:
    if stat_filter == StatFilter.ROOKIE:
        return record.is_rookie
    if stat_filter == StatFilter.AUTOGRAPH:
        return record.is_autograph
    if stat_filter == StatFilter.RELIC:
        return record.is_relic
    if stat_filter == StatFilter.NUMBERED:
        return record.print_run is not None and record.print_run > 0
    return True


def matches_query(
    record: CardBase,
    needle: str,
    *,
    include_collection_fields: bool = False,
) -> bool:
    """
    Check one record against an already-lowercased search needle.

    Looks at the searchable text fields first, then the attribute keywords.
    """
    for text in _searchable_text(record, include_collection_fields):
        if needle in text.lower():
            return True

    for attribute, keywords in ATTRIBUTE_KEYWORDS.items():
        if getattr(record, attribute) and any(needle in kw for kw in keywords):
            return True

    if (
        include_collection_fields
        and isinstance(record, CollectionCard)
        and record.aftermarket_autograph
        and any(needle in kw for kw in AFTERMARKET_KEYWORDS)
    ):
        return True

    return False


def _searchable_text(record: CardBase, include_collection_fields: bool) -> list[str]:
    texts = [record.card_number, record.series.name, record.color_name, record.notes]

    for pt in record.player_teams:
        texts.extend(
            (
                pt.player.first_name,
                pt.player.last_name,
                pt.player.display_name or "",
                pt.team.name,
                pt.team.abbreviation,
            )
        )

    if record.print_run:
        texts.append(str(record.print_run))

    if include_collection_fields and isinstance(record, CollectionCard):
        texts.extend(
            (
                record.random_code,
                record.location_name,
                record.grading_agency_name,
                record.grading_agency_abbr,
            )
        )
        for number in (
            record.serial_number,
            record.grade,
            record.purchase_price,
            record.estimated_value,
            record.current_value,
        ):
            if number is not None:
                texts.append(_number_text(number))

    return [t for t in texts if t]


def _number_text(value: float | int) -> str:
    """Stringify like the API does: 25.0 -> "25", 19.99 -> "19.99"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
