"""Scraper package — URL check, fetch & Substack content extraction."""

from mcp_substack.scraper.extractor import extract_article
from mcp_substack.scraper.fetcher import fetch_page
from mcp_substack.scraper.models import Article, RawPage, ValidationResult
from mcp_substack.scraper.pipeline import fetch_and_extract
from mcp_substack.scraper.validator import validate_url

__all__ = [
    "validate_url",
    "fetch_page",
    "extract_article",
    "fetch_and_extract",
    "Article",
    "RawPage",
    "ValidationResult",
]
