"""
REST clients for the card API.

Card fetching and per-user table preferences. All failures are soft.
"""

from cardtable.services.card_source import FetchResult, fetch_all_cards, fetch_card_page
from cardtable.services.preferences_client import (
    fetch_visible_columns,
    reset_visible_columns,
    save_visible_columns,
)

__all__ = [
    "FetchResult",
    "fetch_all_cards",
    "fetch_card_page",
    "fetch_visible_columns",
    "reset_visible_columns",
    "save_visible_columns",
]
