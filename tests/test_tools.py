"""Tests for the ``download_substack`` tool dispatcher and its envelope.

HTTP traffic is mocked with ``respx``; the inadmissible-URL cases assert that
no request is attempted at all.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from mcp_substack.events import EventLog
from mcp_substack.exceptions import UnknownToolError
from mcp_substack.tools import (
    ERROR_PREFIX,
    INVALID_URL_MESSAGE,
    NOT_SUBSTACK_MESSAGE,
    PAYWALLED_MESSAGE,
    TOOL_NAME,
    ToolResult,
    call_tool,
    list_tools,
)

_URL = "https://foo.substack.com/p/my-post"

_SIMPLE_POST = (
    '<html><head><meta content="substack"></head><body>'
    "<h1>My Title</h1>"
    '<div class="post-content"><p>Hello</p></div>'
    "</body></html>"
)

_BANNER_ONLY = (
    "<html><body><h1>Locked</h1>"
    '<div class="post-content"><div class="subscriber-only">Subscribe to read</div></div>'
    "</body></html>"
)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListTools:
    def test_single_tool_listed(self) -> None:
        tools = list_tools()
        assert [t.name for t in tools] == [TOOL_NAME]

    def test_input_schema_requires_url(self) -> None:
        spec = list_tools()[0]
        assert spec.input_schema["required"] == ["url"]
        assert spec.input_schema["properties"]["url"]["type"] == "string"

    def test_serialises_camel_case(self) -> None:
        payload = list_tools()[0].model_dump(by_alias=True)
        assert "inputSchema" in payload
        assert payload["description"] == "Download and parse content from a Substack post"


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

class TestToolResult:
    def test_success_has_no_error_flag(self) -> None:
        payload = ToolResult.success("hi").model_dump(by_alias=True)
        assert payload == {"content": [{"type": "text", "text": "hi"}], "isError": False}

    def test_failure_sets_error_flag(self) -> None:
        result = ToolResult.failure("nope")
        assert result.is_error is True
        assert result.text == "nope"


# ---------------------------------------------------------------------------
# call_tool scenarios
# ---------------------------------------------------------------------------

class TestCallTool:
    async def test_success_text(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_SIMPLE_POST))
            result = await call_tool(TOOL_NAME, {"url": _URL})

        assert result.is_error is False
        assert len(result.content) == 1
        assert result.content[0].type == "text"
        assert result.text == "Title: My Title\nAuthor: \nSubtitle: \n\nHello\n\n"

    async def test_inadmissible_url_makes_no_request(self) -> None:
        with respx.mock(assert_all_called=False) as mock:
            route = mock.get("https://example.com/about")
            result = await call_tool(TOOL_NAME, {"url": "https://example.com/about"})

        assert not route.called
        assert result.is_error is True
        assert result.text == INVALID_URL_MESSAGE

    @pytest.mark.parametrize("arguments", [{}, {"url": None}, {"url": "::::"}, None])
    async def test_missing_or_malformed_url(self, arguments) -> None:
        result = await call_tool(TOOL_NAME, arguments)
        assert result.is_error is True
        assert result.text == INVALID_URL_MESSAGE

    async def test_not_substack_document(self) -> None:
        url = "https://blog.example.com/p/lookalike"
        with respx.mock:
            respx.get(url).mock(
                return_value=httpx.Response(200, text="<html><article><p>x</p></article></html>")
            )
            result = await call_tool(TOOL_NAME, {"url": url})

        assert result.is_error is True
        assert result.text == NOT_SUBSTACK_MESSAGE

    async def test_paywalled_post(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_BANNER_ONLY))
            result = await call_tool(TOOL_NAME, {"url": _URL})

        assert result.is_error is True
        assert result.text == PAYWALLED_MESSAGE

    async def test_connection_refused(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
            result = await call_tool(TOOL_NAME, {"url": _URL})

        assert result.is_error is True
        assert result.text.startswith(ERROR_PREFIX)
        assert "Connection refused" in result.text

    async def test_server_error_page_with_markers_still_extracts(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(503, text=_SIMPLE_POST))
            result = await call_tool(TOOL_NAME, {"url": _URL})

        assert result.is_error is False

    async def test_unknown_tool_raises(self) -> None:
        with pytest.raises(UnknownToolError, match="Unknown tool: delete_everything"):
            await call_tool("delete_everything", {"url": _URL})


class TestRequestLogging:
    async def test_lifecycle_events_recorded(self, tmp_path) -> None:
        log_path = tmp_path / "debug.log"
        with EventLog(log_path, to_stderr=False) as events:
            with respx.mock:
                respx.get(_URL).mock(return_value=httpx.Response(200, text=_SIMPLE_POST))
                await call_tool(TOOL_NAME, {"url": _URL}, events=events)

        text = log_path.read_text(encoding="utf-8")
        for event in (
            "request.received",
            "url.validated",
            "fetch.response",
            "markers.checked",
            "article.extracted",
            "request.succeeded",
        ):
            assert event in text

    async def test_failure_recorded_with_error(self, tmp_path) -> None:
        log_path = tmp_path / "debug.log"
        with EventLog(log_path, to_stderr=False) as events:
            with respx.mock:
                respx.get(_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
                await call_tool(TOOL_NAME, {"url": _URL}, events=events)

        text = log_path.read_text(encoding="utf-8")
        assert "request.failed" in text
        assert "Connection refused" in text
