"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from mcp_substack.api import app

    uvicorn mcp_substack.api:app
"""

from mcp_substack.api.app import app, create_app

__all__ = ["app", "create_app"]
