"""Tool endpoints.

Routes
------
GET  /tools         → list_tools
POST /tools/call    Body: {"name": "...", "arguments": {...}}   → call_tool
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from mcp_substack.exceptions import UnknownToolError
from mcp_substack.tools import ToolResult, ToolSpec, call_tool, list_tools

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ToolCallRequest(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolListResponse(BaseModel):
    tools: list[ToolSpec]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=ToolListResponse)
def list_tools_endpoint(request: Request) -> dict[str, Any]:
    """List the tools this server provides."""
    return {"tools": list_tools(events=request.app.state.events)}


@router.post("/call", response_model=ToolResult)
async def call_tool_endpoint(body: ToolCallRequest, request: Request) -> ToolResult:
    """Run a tool.

    Content failures (bad URL, not Substack, paywalled, fetch errors) come
    back as a 200 with ``isError: true``.  An unknown tool name is a 404.
    """
    try:
        return await call_tool(
            body.name,
            body.arguments,
            events=request.app.state.events,
        )
    except UnknownToolError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
