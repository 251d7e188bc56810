"""mcp-substack CLI — entry-point for local use and for running the server.

Usage:
    python cli/main.py --help

Commands:
    check   → structural URL check only (no network)
    fetch   → run the download_substack tool once and print the result
    tools   → print the tool listing as JSON
    serve   → run the HTTP tool server under uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from mcp_substack.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
from typing import Optional

import typer

from mcp_substack.config import settings
from mcp_substack.events import EventLog, install_fault_hooks
from mcp_substack.scraper.validator import validate_url
from mcp_substack.tools import TOOL_NAME, call_tool, list_tools

app = typer.Typer(
    name="mcp-substack",
    help="Download Substack posts as plain text.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# URL check
# ---------------------------------------------------------------------------
@app.command("check")
def check(
    url: str = typer.Argument(..., help="URL to check."),
) -> None:
    """Check whether a URL looks like a Substack post (no network access)."""
    with EventLog() as events:
        result = validate_url(url, events=events)

    if result:
        typer.echo(f"[check] admissible  host={result.host!r}  path={result.path!r}")
        return
    typer.echo(f"[check] rejected: {result.reason}")
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------
@app.command("fetch")
def fetch(
    url: str = typer.Argument(..., help="Substack post URL."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the text to this file instead of stdout."
    ),
) -> None:
    """Download a Substack post and print its title, author, subtitle and body."""
    with EventLog() as events:
        result = asyncio.run(call_tool(TOOL_NAME, {"url": url}, events=events))

    if result.is_error:
        typer.echo(f"[fetch] {result.text}", err=True)
        raise typer.Exit(1)

    if output is not None:
        output.write_text(result.text, encoding="utf-8")
        typer.echo(f"[fetch] Wrote {len(result.text)} characters to {output}")
        return
    typer.echo(result.text)


# ---------------------------------------------------------------------------
# Tool listing
# ---------------------------------------------------------------------------
@app.command("tools")
def tools() -> None:
    """Print the tool listing as JSON."""
    specs = [spec.model_dump(by_alias=True) for spec in list_tools()]
    typer.echo(json.dumps({"tools": specs}, indent=2))


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option(settings.server_host, help="Interface to bind."),
    port: int = typer.Option(settings.server_port, help="Port to listen on."),
) -> None:
    """Run the HTTP tool server."""
    import uvicorn

    from mcp_substack.api.app import create_app

    with EventLog() as events:
        install_fault_hooks(events)
        typer.echo(f"[serve] Listening on http://{host}:{port}  (log: {events.log_path})")
        uvicorn.run(create_app(events), host=host, port=port)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
