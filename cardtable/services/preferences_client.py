"""
Client for the per-user table preference endpoints.

Column visibility is a convenience, never a blocker: every failure here
(anonymous viewer, network error, malformed body) falls back to the
registry defaults and is logged rather than raised.
"""

import logging
from collections.abc import Sequence

import httpx

from cardtable.models.columns import (
    TableName,
    get_default_visible_columns,
    sanitize_visible_columns,
)
from cardtable.services.http import api_url, auth_headers, client_scope

logger = logging.getLogger(__name__)

PREFERENCES_PATH = "/api/user/table-preferences"


async def fetch_visible_columns(
    table_name: TableName | str,
    token: str | None,
    *,
    client: httpx.AsyncClient | None = None,
    base_url: str | None = None,
) -> list[str]:
    """
    Load the user's visible columns for a table.

    Args:
        table_name: card_table or collection_table
        token: Bearer token; None for anonymous viewers
        client: Optional httpx client for connection reuse
        base_url: API base URL. Defaults to settings.api_base_url.

    Returns:
        Saved column ids sanitized against the registry, or the registry
        defaults when nothing usable is saved.
    """
    table = TableName(table_name)
    defaults = get_default_visible_columns(table)

    if not token:
        logger.info("Anonymous viewer; using default columns for %s", table.value)
        return defaults

    url = api_url(f"{PREFERENCES_PATH}/{table.value}", base_url)
    try:
        async with client_scope(client) as http:
            response = await http.get(url, headers=auth_headers(token))
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to load column preferences for %s: %s", table.value, e)
        return defaults

    visible = data.get("visible_columns") if isinstance(data, dict) else None
    if not isinstance(visible, list) or not visible:
        return defaults

    return sanitize_visible_columns(table, [str(c) for c in visible])


async def save_visible_columns(
    table_name: TableName | str,
    column_ids: Sequence[str],
    token: str | None,
    *,
    column_order: Sequence[str] | None = None,
    client: httpx.AsyncClient | None = None,
    base_url: str | None = None,
) -> bool:
    """
    Save the user's visible columns for a table.

    Returns:
        True if the server accepted the preference.
    """
    table = TableName(table_name)
    if not token:
        logger.info("Anonymous viewer; not saving column preferences for %s", table.value)
        return False

    payload: dict[str, object] = {
        "table_name": table.value,
        "visible_columns": list(column_ids),
    }
    if column_order is not None:
        payload["column_order"] = list(column_order)

    try:
        async with client_scope(client) as http:
            response = await http.post(
                api_url(PREFERENCES_PATH, base_url),
                json=payload,
                headers=auth_headers(token),
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Failed to save column preferences for %s: %s", table.value, e)
        return False

    return True


async def reset_visible_columns(
    table_name: TableName | str,
    token: str | None,
    *,
    client: httpx.AsyncClient | None = None,
    base_url: str | None = None,
) -> bool:
    """Delete the saved preference so the table falls back to defaults."""
    table = TableName(table_name)
    if not token:
        return False

    try:
        async with client_scope(client) as http:
            response = await http.delete(
                api_url(f"{PREFERENCES_PATH}/{table.value}", base_url),
                headers=auth_headers(token),
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Failed to reset column preferences for %s: %s", table.value, e)
        return False

    return True
