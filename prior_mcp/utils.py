"""Shared helpers: data directory resolution and host detection."""

import os
from pathlib import Path

DATA_DIR_ENV = "PRIOR_DATA_DIR"


def get_prior_home() -> Path:
    """Get the Prior data directory.

    Uses PRIOR_DATA_DIR when set, otherwise ~/.prior.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".prior"


# Checked in order; first non-empty variable wins.
_HOST_MARKERS = (
    ("cursor", ("CURSOR_TRACE_ID", "CURSOR_SESSION")),
    ("vscode", ("VSCODE_PID", "VSCODE_CWD")),
    ("windsurf", ("WINDSURF_SESSION",)),
    ("openclaw", ("OPENCLAW_SESSION",)),
)


def detect_host() -> str:
    """Guess which MCP host launched this process from its environment.

    Returns:
        One of "cursor", "vscode", "windsurf", "openclaw", or "unknown".
    """
    for host, env_vars in _HOST_MARKERS:
        if any(os.environ.get(var) for var in env_vars):
            return host
    return "unknown"
