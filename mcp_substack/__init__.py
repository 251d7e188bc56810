"""mcp-substack: download Substack posts as plain text."""

__version__ = "0.1.0"
