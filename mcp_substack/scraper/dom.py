"""Narrow DOM query wrapper over BeautifulSoup.

The extractor only needs "select by CSS, read trimmed text", so that is
all :class:`Document` exposes.
"""

from __future__ import annotations

from typing import Iterator

from bs4 import BeautifulSoup, Tag


# Whitespace and line terminators as ECMAScript's String.prototype.trim sees
# them. str.strip() also drops \x1c-\x1f and \x85, which browsers keep.
_TRIM_CHARS = (
    "\t\n\v\f\r \u00a0\u1680\u2000\u2001\u2002\u2003"
    "\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def text_of(element: Tag | None) -> str:
    """Return the trimmed text content of *element*, or ``""``."""
    if element is None:
        return ""
    return element.get_text().strip(_TRIM_CHARS)


class Document:
    """A parsed HTML document queryable with CSS selectors."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    def select(self, selector: str) -> Iterator[Tag]:
        """Lazily yield elements matching *selector* in document order."""
        return self._soup.css.iselect(selector)

    def first(self, selector: str) -> Tag | None:
        return self._soup.select_one(selector)

    def first_text(self, selector: str) -> str:
        """Trimmed text of the first match for *selector*, or ``""``."""
        return text_of(self.first(selector))

    def count(self, selector: str) -> int:
        return sum(1 for _ in self.select(selector))


def parse_document(html: str) -> Document:
    """Parse *html* into a :class:`Document`.  Never raises on bad markup."""
    return Document(BeautifulSoup(html, "html.parser"))
