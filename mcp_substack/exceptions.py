"""Error types raised by the Substack download pipeline.

Transport failures are not wrapped: they surface as ``httpx.HTTPError``
subclasses straight from the fetcher.
"""

from __future__ import annotations


class SubstackError(Exception):
    """Base class for content-level failures of a download request."""


class NotSubstackContentError(SubstackError):
    """The fetched document carries none of the Substack page markers."""


class PaywalledContentError(SubstackError):
    """The document is a Substack page but none of its body blocks matched."""


class UnknownToolError(Exception):
    """A caller asked for a tool this server does not provide."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name
