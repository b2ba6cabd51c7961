"""HTTP gateway for website fetches. One attempt per call, no retries."""

from __future__ import annotations

import httpx

from vidyapith_content.settings import Settings


def build_client(settings: Settings) -> httpx.AsyncClient:
    limits = httpx.Limits(max_connections=8, max_keepalive_connections=4)
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.http_timeout_s,
        limits=limits,
        follow_redirects=True,
    )


async def _get(client: httpx.AsyncClient, url: str, *, accept: str) -> httpx.Response:
    response = await client.get(url, headers={"Accept": accept})
    response.raise_for_status()
    return response


async def get_text(client: httpx.AsyncClient, url: str) -> str:
    """Fetch an HTML page as text."""
    response = await _get(client, url, accept="text/html,application/xhtml+xml;q=0.9,*/*;q=0.8")
    return response.text


async def get_bytes(client: httpx.AsyncClient, url: str) -> bytes:
    """Fetch a binary document (calendar PDF)."""
    response = await _get(client, url, accept="application/pdf,application/octet-stream,*/*")
    return response.content
