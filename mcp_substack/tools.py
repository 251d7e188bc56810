"""The ``download_substack`` tool: listing, dispatch and response envelope.

``call_tool`` is what a transport invokes.  Content-level failures never
escape it; they come back as a :class:`ToolResult` with ``isError`` set.
The one exception is an unknown tool name, which raises
:class:`~mcp_substack.exceptions.UnknownToolError` so the transport can
reject the call outright.
"""

from __future__ import annotations

import traceback
from typing import Any, Literal, Mapping

import httpx
from pydantic import BaseModel, ConfigDict, Field

from mcp_substack.events import EventLog, record_event
from mcp_substack.exceptions import (
    NotSubstackContentError,
    PaywalledContentError,
    UnknownToolError,
)
from mcp_substack.scraper.pipeline import fetch_and_extract
from mcp_substack.scraper.validator import validate_url

TOOL_NAME = "download_substack"
TOOL_DESCRIPTION = "Download and parse content from a Substack post"

INVALID_URL_MESSAGE = "Invalid URL format. Please provide a valid Substack post URL."
NOT_SUBSTACK_MESSAGE = "This URL doesn't appear to be a Substack post."
PAYWALLED_MESSAGE = (
    "This appears to be a subscriber-only post. I cannot access the full content."
)
ERROR_PREFIX = "Error processing Substack post: "


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])

    @classmethod
    def failure(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        return self.content[0].text


class ToolSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

def list_tools(events: EventLog | None = None) -> list[ToolSpec]:
    """Return the tools this server exposes."""
    record_event(events, "tools.listed")
    return [
        ToolSpec(
            name=TOOL_NAME,
            description=TOOL_DESCRIPTION,
            input_schema={
                "type": "object",
                "properties": {
                    "url": {"type": "string", "description": "URL of the Substack post"},
                },
                "required": ["url"],
            },
        )
    ]


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

async def download_substack(
    url: Any,
    events: EventLog | None = None,
    client: httpx.AsyncClient | None = None,
) -> ToolResult:
    """Validate, fetch and extract *url*, folding every failure into a result."""
    try:
        record_event(events, "request.processing", url=url)
        if not validate_url(url, events=events):
            record_event(events, "request.invalid_url", url=url)
            return ToolResult.failure(INVALID_URL_MESSAGE)

        article = await fetch_and_extract(url, client=client, events=events)
    except NotSubstackContentError:
        record_event(events, "request.not_substack", url=url)
        return ToolResult.failure(NOT_SUBSTACK_MESSAGE)
    except PaywalledContentError:
        record_event(events, "request.paywalled", url=url)
        return ToolResult.failure(PAYWALLED_MESSAGE)
    except Exception as exc:
        record_event(
            events,
            "request.failed",
            error=str(exc),
            stack=traceback.format_exc(),
        )
        return ToolResult.failure(f"{ERROR_PREFIX}{exc}")

    record_event(events, "request.succeeded", url=url)
    return ToolResult.success(article.to_text())


async def call_tool(
    name: str,
    arguments: Mapping[str, Any] | None = None,
    events: EventLog | None = None,
    client: httpx.AsyncClient | None = None,
) -> ToolResult:
    """Run tool *name* with *arguments*.

    Raises:
        UnknownToolError: *name* is not a tool this server provides.
    """
    record_event(events, "request.received", name=name, arguments=arguments)

    if name != TOOL_NAME:
        record_event(events, "request.unknown_tool", name=name)
        raise UnknownToolError(name)

    url = (arguments or {}).get("url")
    return await download_substack(url, events=events, client=client)
