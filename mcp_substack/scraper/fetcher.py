"""Async HTTP fetcher for Substack pages."""

from __future__ import annotations

import httpx

from mcp_substack.config import settings
from mcp_substack.events import EventLog, record_event
from mcp_substack.scraper.models import RawPage

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def build_client() -> httpx.AsyncClient:
    """Return an ``httpx.AsyncClient`` configured from :data:`settings`."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent, "Accept": _ACCEPT},
        timeout=httpx.Timeout(settings.timeout),
        follow_redirects=True,
    )


async def fetch_page(
    url: str,
    client: httpx.AsyncClient | None = None,
    events: EventLog | None = None,
) -> RawPage:
    """GET *url* and return a :class:`RawPage`.

    The status code is recorded but not checked: a 4xx/5xx page is still
    handed to the extractor, whose marker check decides what it is.  No retry
    is attempted.

    Raises:
        httpx.HTTPError: On DNS, connection, timeout or protocol failures.
    """
    record_event(events, "fetch.started", url=url)

    if client is None:
        async with build_client() as owned:
            response = await owned.get(url)
    else:
        response = await client.get(url)

    record_event(
        events,
        "fetch.response",
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=dict(response.headers),
    )
    html = response.text
    record_event(events, "fetch.body", length=len(html))

    return RawPage(
        url=str(response.url),
        html=html,
        status_code=response.status_code,
        headers=dict(response.headers),
    )
