"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a structural URL check.  Truthy when the URL is admissible."""

    url: object
    admissible: bool
    reason: Optional[str] = None
    host: str = ""
    path: str = ""

    def __bool__(self) -> bool:
        return self.admissible


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Article:
    """Plain-text fields extracted from a Substack post."""

    title: str
    subtitle: str
    author: str
    body: str

    def to_text(self) -> str:
        """Render the article the way the ``download_substack`` tool returns it."""
        return (
            f"Title: {self.title}\n"
            f"Author: {self.author}\n"
            f"Subtitle: {self.subtitle}\n\n"
            f"{self.body}"
        )
