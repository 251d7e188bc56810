"""Centralised settings for the mcp-substack server.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Diagnostic log
    # ------------------------------------------------------------------
    log_path: Path = field(
        default_factory=lambda: Path(
            os.environ.get("MCP_SUBSTACK_LOG", Path.home() / "mcp-substack-debug.log")
        )
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("MCP_SUBSTACK_LOG_LEVEL", "DEBUG")
    )
    log_to_stderr: bool = field(
        default_factory=lambda: _env_flag("MCP_SUBSTACK_LOG_STDERR", "true")
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "MCP_SUBSTACK_USER_AGENT",
            "Mozilla/5.0 (compatible; mcp-substack/0.1; +https://substack.com)",
        )
    )

    # ------------------------------------------------------------------
    # HTTP transport
    # ------------------------------------------------------------------
    server_host: str = field(
        default_factory=lambda: os.environ.get("MCP_SUBSTACK_HOST", "127.0.0.1")
    )
    server_port: int = field(
        default_factory=lambda: int(os.environ.get("MCP_SUBSTACK_PORT", "8765"))
    )

    @property
    def timeout(self) -> float | None:
        """Transport timeout in seconds, or ``None`` when disabled (``0``)."""
        return self.request_timeout if self.request_timeout > 0 else None


# Module-level singleton — import this everywhere:
#   from mcp_substack.config import settings
settings = Settings()
