"""Tests for the prior-mcp command-line entry point."""

from unittest.mock import patch

import pytest

from prior_mcp.__main__ import build_parser, main


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.api_url is None
        assert args.log_level == "INFO"
        assert args.auto_register is None

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("PRIOR_LOG_LEVEL", "DEBUG")
        assert build_parser().parse_args([]).log_level == "DEBUG"

    def test_flags(self):
        args = build_parser().parse_args(
            ["--api-url", "https://x.test", "--log-level", "warning", "--auto-register"]
        )
        assert args.api_url == "https://x.test"
        assert args.log_level == "warning"
        assert args.auto_register is True

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])
        assert "prior-mcp" in capsys.readouterr().out


class TestMain:
    def test_starts_server_with_options(self, isolated_env):
        with patch("prior_mcp.mcp.server.main") as mcp_main:
            main(["--api-url", "https://x.test", "--auto-register"])
        mcp_main.assert_called_once_with(api_url="https://x.test", auto_register=True)
        assert (isolated_env / "logs").is_dir()
