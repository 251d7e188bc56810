"""Fetch-then-extract for a single, already validated Substack URL."""

from __future__ import annotations

import httpx

from mcp_substack.events import EventLog, record_event
from mcp_substack.scraper.extractor import extract_article
from mcp_substack.scraper.fetcher import fetch_page
from mcp_substack.scraper.models import Article


async def fetch_and_extract(
    url: str,
    client: httpx.AsyncClient | None = None,
    events: EventLog | None = None,
) -> Article:
    """Download *url* and return its :class:`Article`.

    The caller is expected to have run :func:`validate_url` first; the URL
    shape is not checked again here.  Errors from the fetcher and extractor
    propagate unchanged.
    """
    raw = await fetch_page(url, client=client, events=events)
    article = extract_article(raw, events=events)
    record_event(events, "article.extracted", url=url, body_length=len(article.body))
    return article
