"""Content extraction: turns a :class:`RawPage` into an :class:`Article`."""

from __future__ import annotations

from typing import Dict, Iterator

from bs4 import Tag

from mcp_substack.events import EventLog, record_event
from mcp_substack.exceptions import NotSubstackContentError, PaywalledContentError
from mcp_substack.scraper.dom import Document, parse_document, text_of
from mcp_substack.scraper.models import Article, RawPage


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

MARKER_SELECTORS: Dict[str, str] = {
    "meta": 'meta[content*="substack"]',
    "script": 'script[src*="substack"]',
    "post_content": ".post-content",
    "subscriber_only": ".subscriber-only",
}

_BLOCK_SELECTOR = "p, h2, h3"
_CONTAINER_CLASSES = frozenset({"post-content", "body"})

PARAGRAPH_SEPARATOR = "\n\n"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _is_container(element: Tag) -> bool:
    """True for ``article`` elements and ``.post-content`` / ``.body`` elements."""
    if element.name == "article":
        return True
    return not _CONTAINER_CLASSES.isdisjoint(element.get("class") or ())


def find_markers(doc: Document) -> Dict[str, int]:
    """Count each Substack page marker present in *doc*."""
    return {name: doc.count(selector) for name, selector in MARKER_SELECTORS.items()}


def extract_title(doc: Document) -> str:
    return doc.first_text("h1") or doc.first_text("h1.post-title")


def extract_subtitle(doc: Document) -> str:
    return doc.first_text(".subtitle")


def extract_author(doc: Document) -> str:
    """Byline text, falling back to the subscriber-only anchor.

    Pages without an ``.author-name`` element yield the subscribe link's
    text here instead of a person's name.
    """
    return doc.first_text(".author-name") or doc.first_text("a.subscriber-only")


def iter_body_blocks(doc: Document) -> Iterator[str]:
    """Yield the trimmed text of each body paragraph and heading.

    Blocks are every ``p``/``h2``/``h3`` nested inside an ``article``,
    ``.post-content`` or ``.body`` element, in document order.  An element
    inside several nested containers is yielded once.
    """
    for element in doc.select(_BLOCK_SELECTOR):
        if any(_is_container(parent) for parent in element.parents if isinstance(parent, Tag)):
            yield text_of(element)


def build_body(doc: Document) -> str:
    return "".join(block + PARAGRAPH_SEPARATOR for block in iter_body_blocks(doc))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_article(raw: RawPage, events: EventLog | None = None) -> Article:
    """Classify *raw* as a Substack post and extract its text fields.

    The page is parsed whatever its status code; the marker check is the
    only gate.

    Raises:
        NotSubstackContentError: None of the Substack markers are present.
        PaywalledContentError: No body blocks were found, which is how
            subscriber-only posts render to anonymous readers.
    """
    doc = parse_document(raw.html)

    markers = find_markers(doc)
    record_event(events, "markers.checked", url=raw.url, **markers)
    if not any(markers.values()):
        raise NotSubstackContentError(f"No Substack markers found at {raw.url}")

    title = extract_title(doc)
    subtitle = extract_subtitle(doc)
    author = extract_author(doc)
    record_event(events, "article.metadata", title=title, subtitle=subtitle, author=author)

    body = build_body(doc)
    record_event(
        events,
        "article.body",
        extracted_length=len(body),
        first_chars=body[:100] + "...",
    )
    if not body:
        raise PaywalledContentError(f"No readable body text at {raw.url}")

    return Article(title=title, subtitle=subtitle, author=author, body=body)
