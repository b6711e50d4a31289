"""Tests for prior_mcp.logging_config module."""

import logging

import pytest

from prior_mcp.logging_config import log_tool_call, setup_prior_logging


@pytest.fixture
def log_dir(isolated_env):
    """Logs go to <PRIOR_DATA_DIR>/logs."""
    return isolated_env / "logs"


class TestSetupPriorLogging:
    """Tests for setup_prior_logging."""

    def test_returns_logger(self, log_dir):
        logger = setup_prior_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "prior_mcp"

    def test_creates_log_directory(self, log_dir):
        """Should create the logs directory if it doesn't exist."""
        assert not log_dir.exists()
        setup_prior_logging()
        assert log_dir.exists()

    def test_log_file_named_with_date(self, log_dir):
        setup_prior_logging()
        log_files = list(log_dir.glob("local-*.log"))
        assert len(log_files) == 1

    def test_default_level_info(self, log_dir):
        logger = setup_prior_logging()
        assert logger.level == logging.INFO

    def test_custom_level_case_insensitive(self, log_dir):
        logger = setup_prior_logging(level="debug")
        assert logger.level == logging.DEBUG

    def test_invalid_level_falls_back_to_info(self, log_dir):
        logger = setup_prior_logging(level="LOUD")
        assert logger.level == logging.INFO

    def test_debug_adds_console_handler(self, log_dir):
        """DEBUG level should add a StreamHandler in addition to FileHandler."""
        logger = setup_prior_logging(level="DEBUG")
        stream_handlers = [
            h
            for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ]
        assert len(stream_handlers) == 1

    def test_info_no_console_handler(self, log_dir):
        """stdout belongs to the MCP transport; INFO adds no console handler."""
        logger = setup_prior_logging(level="INFO")
        stream_handlers = [
            h
            for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ]
        assert stream_handlers == []

    def test_no_duplicate_handlers(self, log_dir):
        logger1 = setup_prior_logging(level="DEBUG")
        logger2 = setup_prior_logging(level="DEBUG")
        assert logger1 is logger2
        assert len(logger1.handlers) == 2

    def test_log_format(self, log_dir):
        logger = setup_prior_logging()
        logger.info("format check")
        for h in logger.handlers:
            h.flush()
        content = next(log_dir.glob("local-*.log")).read_text()
        assert " | INFO | prior_mcp | format check" in content

    def test_child_loggers_propagate_to_file(self, log_dir):
        setup_prior_logging()
        logging.getLogger("prior_mcp.client").warning("child message")
        for h in logging.getLogger("prior_mcp").handlers:
            h.flush()
        content = next(log_dir.glob("local-*.log")).read_text()
        assert "| WARNING | prior_mcp.client | child message" in content


class TestLogToolCall:
    """Tests for log_tool_call."""

    def test_creates_event_log_file(self, log_dir):
        log_tool_call("prior_search", "ok")
        assert len(list(log_dir.glob("tool-events-*.log"))) == 1

    def test_event_line_format(self, log_dir):
        log_tool_call("prior_feedback", "error", error="ApiError")
        content = next(log_dir.glob("tool-events-*.log")).read_text()
        assert "| prior_feedback | error | error=ApiError" in content

    def test_no_details_suffix_when_empty(self, log_dir):
        log_tool_call("prior_status", "ok")
        line = next(log_dir.glob("tool-events-*.log")).read_text().strip()
        assert line.endswith("| prior_status | ok")

    def test_appends(self, log_dir):
        log_tool_call("prior_search", "ok")
        log_tool_call("prior_get", "ok")
        lines = next(log_dir.glob("tool-events-*.log")).read_text().strip().split("\n")
        assert len(lines) == 2
        assert "prior_search" in lines[0]
        assert "prior_get" in lines[1]
