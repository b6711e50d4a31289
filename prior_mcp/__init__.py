"""
Prior MCP - Knowledge exchange tools for AI agents.

Exposes the Prior knowledge base to MCP hosts: search verified fixes,
contribute solutions, and close the loop with feedback.
"""

try:
    from importlib.metadata import version

    __version__ = version("prior-mcp")
except Exception:
    __version__ = "0.5.0"

from .client import ApiError, ConfigurationError, PriorApiClient, PriorError  # noqa: E402
from .credentials import CredentialRecord, CredentialStore  # noqa: E402

__all__ = [
    "PriorApiClient",
    "PriorError",
    "ApiError",
    "ConfigurationError",
    "CredentialRecord",
    "CredentialStore",
]
