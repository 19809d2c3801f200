"""
Card record fetching.

The hosting page owns the card endpoint (catalog search, a player's cards, a
user's collection, a list). These helpers call it and parse the response:

    {"cards": [...], "total": 1234, "has_more": true}

Failures are soft. A FetchResult always comes back; on failure it holds no
cards and an error message for the host to show.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from cardtable.config import FULL_LOAD_LIMIT, settings
from cardtable.models.card import CardKind, CardRecord
from cardtable.parsers.card_records import parse_card_records
from cardtable.services.http import api_url, auth_headers, client_scope

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Outcome of one card fetch."""

    cards: list[CardRecord] = field(default_factory=list)
    error: str | None = None
    total: int | None = None
    has_more: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


async def fetch_card_page(
    endpoint: str,
    page: int = 1,
    limit: int | None = None,
    sort_field: str | None = None,
    direction: str = "asc",
    *,
    query: str | None = None,
    kind: CardKind | None = None,
    token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> FetchResult:
    """
    Fetch one page of a server-ordered card feed.

    Args:
        endpoint: Card endpoint path or absolute URL
        page: 1-based page number
        limit: Page size. Defaults to settings.page_size.
        sort_field: Server-side sort column
        direction: "asc" or "desc"
        query: Optional server-side search text
        kind: Force the record variant. None infers it.
        token: Bearer token for user-specific fields (owned counts)
        client: Optional httpx client for connection reuse
    """
    limit = limit or settings.page_size
    params: dict[str, Any] = {
        "page": page,
        "limit": limit,
        "sortDirection": "desc" if direction == "desc" else "asc",
    }
    if sort_field:
        params["sortField"] = sort_field
    if query:
        params["search"] = query

    return await _fetch(
        endpoint, params, kind=kind, token=token, client=client, page_info=(page, limit)
    )


async def fetch_all_cards(
    endpoint: str,
    limit: int = FULL_LOAD_LIMIT,
    *,
    kind: CardKind | None = None,
    token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> FetchResult:
    """
    Fetch the whole record set in one request for local filtering and sorting.

    At most `limit` records are kept.
    """
    result = await _fetch(endpoint, {"limit": limit}, kind=kind, token=token, client=client)
    if len(result.cards) > limit:
        logger.warning(
            "Endpoint returned %d records; keeping the first %d", len(result.cards), limit
        )
        result.cards = result.cards[:limit]
    result.has_more = False
    return result


async def _fetch(
    endpoint: str,
    params: dict[str, Any],
    *,
    kind: CardKind | None,
    token: str | None,
    client: httpx.AsyncClient | None,
    page_info: tuple[int, int] | None = None,
) -> FetchResult:
    url = api_url(endpoint)
    try:
        async with client_scope(client) as http:
            response = await http.get(url, params=params, headers=auth_headers(token))
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPStatusError as e:
        logger.warning("Card fetch from %s failed with status %d", url, e.response.status_code)
        return FetchResult(error=f"Card API returned status {e.response.status_code}")
    except httpx.HTTPError as e:
        logger.warning("Card fetch from %s failed: %s", url, e)
        return FetchResult(error=f"Could not reach the card API: {e}")
    except ValueError as e:
        logger.warning("Card fetch from %s returned invalid JSON: %s", url, e)
        return FetchResult(error="Card API returned an invalid response")

    return _parse_payload(payload, kind, page_info)


def _parse_payload(
    payload: Any,
    kind: CardKind | None,
    page_info: tuple[int, int] | None = None,
) -> FetchResult:
    items: Any = None
    total: Any = None
    has_more: bool | None = None
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        items = payload.get("cards")
        total = payload.get("total")
        flag = payload.get("has_more", payload.get("hasMore"))
        if flag is not None:
            has_more = bool(flag)

    if not isinstance(items, list):
        logger.warning("Card response has no cards array")
        return FetchResult(error="Card API returned an invalid response")

    result = FetchResult(
        cards=parse_card_records(items, kind),
        total=total if isinstance(total, int) and not isinstance(total, bool) else None,
    )
    if has_more is not None:
        result.has_more = has_more
    elif page_info is not None:
        result.has_more = _infer_has_more(result, *page_info)
    return result


def _infer_has_more(result: FetchResult, page: int, limit: int) -> bool:
    """Without an explicit flag: use the total if given, else a full page means maybe more."""
    if result.total is not None:
        return page * limit < result.total
    return len(result.cards) >= limit
