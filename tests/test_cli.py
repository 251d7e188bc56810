"""Tests for the mcp-substack CLI."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from cli.main import app
from mcp_substack.tools import ToolResult

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_log(tmp_path, monkeypatch):
    """Point the event log at a temp file and keep stderr quiet."""
    monkeypatch.setattr("mcp_substack.config.settings.log_path", tmp_path / "debug.log")
    monkeypatch.setattr("mcp_substack.config.settings.log_to_stderr", False)
    return tmp_path / "debug.log"


def test_check_admissible():
    result = runner.invoke(app, ["check", "https://foo.substack.com/p/x"])
    assert result.exit_code == 0
    assert "admissible" in result.output
    assert "foo.substack.com" in result.output


def test_check_rejected(isolated_log):
    result = runner.invoke(app, ["check", "https://example.com/about"])
    assert result.exit_code == 1
    assert "not a Substack URL" in result.output
    assert "url.validated" in isolated_log.read_text(encoding="utf-8")


def test_fetch_prints_text():
    fake = AsyncMock(return_value=ToolResult.success("Title: T\nAuthor: \nSubtitle: \n\nHi\n\n"))
    with patch("cli.main.call_tool", new=fake):
        result = runner.invoke(app, ["fetch", "https://foo.substack.com/p/x"])

    assert result.exit_code == 0
    assert "Title: T" in result.output
    assert fake.await_args.args[:2] == ("download_substack", {"url": "https://foo.substack.com/p/x"})


def test_fetch_writes_output_file(tmp_path):
    out = tmp_path / "post.txt"
    fake = AsyncMock(return_value=ToolResult.success("Title: T\n"))
    with patch("cli.main.call_tool", new=fake):
        result = runner.invoke(app, ["fetch", "https://foo.substack.com/p/x", "-o", str(out)])

    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8") == "Title: T\n"


def test_fetch_failure_exits_nonzero():
    fake = AsyncMock(return_value=ToolResult.failure("This URL doesn't appear to be a Substack post."))
    with patch("cli.main.call_tool", new=fake):
        result = runner.invoke(app, ["fetch", "https://foo.substack.com/p/x"])

    assert result.exit_code == 1


def test_tools_lists_json():
    result = runner.invoke(app, ["tools"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["tools"][0]["name"] == "download_substack"
    assert "inputSchema" in payload["tools"][0]


def test_serve_opens_log_before_installing_fault_hooks():
    seen = {}

    def _record_state(events):
        seen["open_at_install"] = events.is_open
        seen["events"] = events

    with patch("cli.main.install_fault_hooks", side_effect=_record_state), patch(
        "uvicorn.run"
    ) as run:
        result = runner.invoke(app, ["serve", "--port", "9999"])

    assert result.exit_code == 0
    assert seen["open_at_install"] is True
    run.assert_called_once()
    assert run.call_args.kwargs["port"] == 9999
    assert seen["events"].is_open is False
