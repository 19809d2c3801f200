"""
Parser for card records returned by the card API.

Wire format (one record, catalog view):
    {
        "card_id": 101,
        "card_number": "12",
        "card_player_teams": [
            {"player": {"first_name": "Mike", "last_name": "Trout"},
             "team": {"team_id": 7, "name": "Los Angeles Angels", "abbreviation": "LAA"}}
        ],
        "series_rel": {"name": "2024 Topps Chrome", "slug": "2024-topps-chrome"},
        "color_rel": {"color": "Gold", "hex_color": "#FFD700"},
        "print_run": 50,
        "is_rookie": false, "is_autograph": true, "is_relic": false, "is_short_print": false,
        "user_card_count": 2
    }

Collection-view records additionally carry "user_card_id" plus copy-specific
fields (serial_number, purchase_price, location_name, grade, ...).

Malformed input never raises: a missing or wrongly-typed field falls back to
its empty default so one bad record cannot abort a whole table.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from cardtable.models.card import (
    CardColor,
    CardKind,
    CardRecord,
    CatalogCard,
    CollectionCard,
    Player,
    PlayerTeam,
    Series,
    Team,
)

logger = logging.getLogger(__name__)


def parse_card_records(
    items: Iterable[Any],
    kind: CardKind | None = None,
) -> list[CardRecord]:
    """
    Parse a list of wire records.

    Args:
        items: Decoded JSON array from the card API
        kind: Force a record variant. None infers it per record.

    Returns:
        Parsed records in input order. Items that are not JSON objects are
        skipped with a warning.
    """
    records: list[CardRecord] = []
    skipped = 0

    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            skipped += 1
            continue
        records.append(parse_card_record(item, kind, fallback_id=f"row-{index}"))

    if skipped:
        logger.warning("Skipped %d card records that were not objects", skipped)

    return records


def parse_card_record(
    data: Mapping[str, Any],
    kind: CardKind | None = None,
    fallback_id: int | str = "",
) -> CardRecord:
    """Parse one wire record into a CatalogCard or CollectionCard."""
    if kind is None:
        kind = infer_card_kind(data)

    base: dict[str, Any] = {
        "card_number": _as_str(data.get("card_number")),
        "player_teams": _parse_player_teams(data.get("card_player_teams")),
        "series": _parse_series(data.get("series_rel")),
        "color": _parse_color(data.get("color_rel")),
        "print_run": _as_positive_int(data.get("print_run")),
        "is_rookie": _as_bool(data.get("is_rookie")),
        "is_autograph": _as_bool(data.get("is_autograph")),
        "is_relic": _as_bool(data.get("is_relic")),
        "is_short_print": _as_bool(data.get("is_short_print")),
        "notes": _as_str(data.get("notes")),
    }

    if kind == CardKind.COLLECTION:
        return CollectionCard(
            id=_first_present(data, "user_card_id", "id", default=fallback_id),
            card_id=_as_int(data.get("card_id")),
            serial_number=_as_int(data.get("serial_number")),
            purchase_price=_as_float(data.get("purchase_price")),
            estimated_value=_as_float(data.get("estimated_value")),
            current_value=_as_float(data.get("current_value")),
            location_name=_as_str(data.get("location_name")),
            grade=_as_float(data.get("grade")),
            grading_agency_name=_as_str(data.get("grading_agency_name")),
            grading_agency_abbr=_as_str(data.get("grading_agency_abbr")),
            is_favorite=_as_bool(data.get("is_special", data.get("is_favorite"))),
            aftermarket_autograph=_as_bool(data.get("aftermarket_autograph")),
            date_added=_as_datetime(data.get("date_added")),
            photo_count=_as_int(data.get("photo_count")) or 0,
            random_code=_as_str(data.get("random_code")),
            **base,
        )

    owned_count = _as_int(data.get("user_card_count", data.get("owned_count"))) or 0
    return CatalogCard(
        id=_first_present(data, "card_id", "id", default=fallback_id),
        owned_count=max(owned_count, 0),
        sort_order=_as_int(data.get("sort_order")),
        **base,
    )


def infer_card_kind(data: Mapping[str, Any]) -> CardKind:
    """Collection records are the ones carrying a user card id."""
    if data.get("user_card_id") is not None:
        return CardKind.COLLECTION
    return CardKind.CATALOG


def _parse_player_teams(value: Any) -> tuple[PlayerTeam, ...]:
    if not isinstance(value, list):
        return ()

    pairs: list[PlayerTeam] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        # Older endpoints nest the relation one level deeper
        nested = entry.get("player_team_rel")
        nested = nested if isinstance(nested, Mapping) else {}
        player = entry.get("player") or nested.get("player_rel")
        team = entry.get("team") or nested.get("team_rel")
        pairs.append(PlayerTeam(player=_parse_player(player), team=_parse_team(team)))
    return tuple(pairs)


def _parse_player(value: Any) -> Player:
    if not isinstance(value, Mapping):
        return Player()
    return Player(
        first_name=_as_str(value.get("first_name")),
        last_name=_as_str(value.get("last_name")),
        display_name=_as_str(value.get("name")) or None,
    )


def _parse_team(value: Any) -> Team:
    if not isinstance(value, Mapping):
        return Team()
    return Team(
        team_id=_as_int(value.get("team_id")),
        name=_as_str(value.get("name")),
        abbreviation=_as_str(value.get("abbreviation")),
        primary_color=_as_str(value.get("primary_color")) or None,
        secondary_color=_as_str(value.get("secondary_color")) or None,
    )


def _parse_series(value: Any) -> Series:
    if not isinstance(value, Mapping):
        return Series()
    return Series(
        name=_as_str(value.get("name")),
        slug=_as_str(value.get("slug")),
        set_name=_as_str(value.get("set_name")),
        year=_as_int(value.get("year")),
        production_code=_as_str(value.get("production_code")),
    )


def _parse_color(value: Any) -> CardColor | None:
    if not isinstance(value, Mapping):
        return None
    name = _as_str(value.get("color", value.get("name")))
    if not name:
        return None
    return CardColor(name=name, hex_color=_as_str(value.get("hex_color")) or None)


def _first_present(data: Mapping[str, Any], *keys: str, default: int | str) -> int | str:
    for key in keys:
        value = data.get(key)
        if isinstance(value, (int, str)) and not isinstance(value, bool) and value != "":
            return value
    return default


def _as_str(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_positive_int(value: Any) -> int | None:
    number = _as_int(value)
    if number is None or number <= 0:
        return None
    return number


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        # API timestamps end in "Z"
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
