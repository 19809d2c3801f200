"""Shared httpx plumbing for the card API clients."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from cardtable.config import settings


@asynccontextmanager
async def client_scope(client: httpx.AsyncClient | None = None) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield the caller's client, or a short-lived one closed on exit.

    Passing a client lets callers reuse connections across requests.
    """
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.request_timeout) as owned:
        yield owned


def api_url(path: str, base_url: str | None = None) -> str:
    """Absolute URLs pass through; paths are joined onto the API base URL."""
    if path.startswith(("http://", "https://")):
        return path
    base = (base_url or settings.api_base_url).rstrip("/")
    return f"{base}/{path.lstrip('/')}"


def auth_headers(token: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}
