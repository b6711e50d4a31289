"""Handler registry for MCP tools.

Merges HANDLERS and VALIDATORS from all sub-modules into unified dicts.
"""

from typing import Callable, Dict

from prior_mcp.mcp.handlers.agent import CREDENTIAL_OPTIONAL_TOOLS  # noqa: F401 - re-export
from prior_mcp.mcp.handlers.agent import HANDLERS as _AGENT_H
from prior_mcp.mcp.handlers.agent import VALIDATORS as _AGENT_V
from prior_mcp.mcp.handlers.knowledge import HANDLERS as _KNOWLEDGE_H
from prior_mcp.mcp.handlers.knowledge import VALIDATORS as _KNOWLEDGE_V

HANDLERS: Dict[str, Callable] = {
    **_KNOWLEDGE_H,
    **_AGENT_H,
}

VALIDATORS: Dict[str, Callable] = {
    **_KNOWLEDGE_V,
    **_AGENT_V,
}
