"""FastAPI application factory.

Lifespan
--------
On startup the app opens the process :class:`~mcp_substack.events.EventLog`
(stored on ``app.state.events``) and routes unhandled asyncio errors to it.
On shutdown the log is flushed and closed.

Routers
-------
    /tools     — tool listing and tool calls
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from mcp_substack import __version__
from mcp_substack.api.routers import tools as tools_router
from mcp_substack.events import EventLog, loop_exception_handler


def _make_lifespan(events: EventLog | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the event log on startup and close it on shutdown.

        A log that was already open when the app started belongs to the
        caller and is left open.
        """
        log = events or EventLog()
        owns_log = not log.is_open
        log.open()
        log.record("server.starting", version=__version__)
        asyncio.get_running_loop().set_exception_handler(loop_exception_handler(log))
        app.state.events = log
        log.record("server.ready")
        try:
            yield
        finally:
            log.record("server.stopped")
            if owns_log:
                log.close()

    return lifespan


def create_app(events: EventLog | None = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Pass *events* to supply a pre-built log (tests use one pointed at a
    temporary file); otherwise one is built from settings at startup.
    """
    app = FastAPI(
        title="mcp-substack",
        description=(
            "Single-tool server that downloads a Substack post and returns "
            "its title, author, subtitle and body as plain text."
        ),
        version=__version__,
        lifespan=_make_lifespan(events),
    )

    app.include_router(tools_router.router, prefix="/tools", tags=["tools"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn mcp_substack.api.app:app
app = create_app()
