"""Tests for prior_mcp.utils."""

from pathlib import Path

from prior_mcp.utils import detect_host, get_prior_home


class TestGetPriorHome:
    def test_env_override(self, isolated_env):
        assert get_prior_home() == isolated_env

    def test_defaults_to_dot_prior(self, monkeypatch):
        monkeypatch.delenv("PRIOR_DATA_DIR", raising=False)
        assert get_prior_home() == Path.home() / ".prior"


class TestDetectHost:
    def test_unknown_without_markers(self):
        assert detect_host() == "unknown"

    def test_cursor(self, monkeypatch):
        monkeypatch.setenv("CURSOR_SESSION", "abc")
        assert detect_host() == "cursor"

    def test_vscode(self, monkeypatch):
        monkeypatch.setenv("VSCODE_PID", "1234")
        assert detect_host() == "vscode"

    def test_windsurf(self, monkeypatch):
        monkeypatch.setenv("WINDSURF_SESSION", "1")
        assert detect_host() == "windsurf"

    def test_openclaw(self, monkeypatch):
        monkeypatch.setenv("OPENCLAW_SESSION", "1")
        assert detect_host() == "openclaw"

    def test_cursor_wins_over_vscode(self, monkeypatch):
        """Cursor is VS Code based and sets both."""
        monkeypatch.setenv("VSCODE_PID", "1234")
        monkeypatch.setenv("CURSOR_TRACE_ID", "t")
        assert detect_host() == "cursor"

    def test_empty_marker_ignored(self, monkeypatch):
        monkeypatch.setenv("CURSOR_SESSION", "")
        assert detect_host() == "unknown"
