"""Handlers for agent tools: status, register, claim, verify."""

from typing import Any, Dict, Tuple

from prior_mcp.client import CREDENTIALS_MESSAGE, ConfigurationError, PriorApiClient
from prior_mcp.mcp.formatting import format_results, unwrap_envelope
from prior_mcp.mcp.sanitize import sanitize_string

ToolOutput = Tuple[str, Dict[str, Any]]

# Tools that resolve credentials themselves instead of requiring one up front.
CREDENTIAL_OPTIONAL_TOOLS = frozenset({"prior_register"})


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def validate_no_arguments(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {}


def validate_prior_claim(arguments: Dict[str, Any]) -> Dict[str, Any]:
    email = sanitize_string(arguments.get("email"), "email", 254, required=True).strip()
    local, _, domain = email.partition("@")
    if not local or "." not in domain or any(c.isspace() for c in email):
        raise ValueError(f"email must be a valid email address, got '{email}'")
    return {"email": email}


def validate_prior_verify(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {"code": sanitize_string(arguments.get("code"), "code", 20, required=True).strip()}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def summarize_agent(data: Any) -> Dict[str, Any]:
    """Pull the status fields out of a ``/v1/agents/me`` response."""
    agent = unwrap_envelope(data)
    agent = agent if isinstance(agent, dict) else {}
    summary = {
        "agentId": str(agent.get("agentId") or agent.get("id") or ""),
        "credits": agent.get("credits") if agent.get("credits") is not None else 0,
        "tier": agent.get("tier") or "free",
        "claimed": agent.get("claimed") if agent.get("claimed") is not None else False,
    }
    for key in ("contributions", "searches"):
        if agent.get(key) is not None:
            summary[key] = agent[key]
    return summary


def _acknowledgement(data: Any) -> Dict[str, Any]:
    payload = data if isinstance(data, dict) else {}
    inner = unwrap_envelope(data)
    inner = inner if isinstance(inner, dict) else {}
    ok = payload.get("ok")
    ack: Dict[str, Any] = {"ok": ok if ok is not None else True}
    message = inner.get("message") or payload.get("message")
    if message:
        ack["message"] = str(message)
    return ack


async def handle_prior_status(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    data = await client.request("GET", "/v1/agents/me")
    return format_results(data), summarize_agent(data)


async def handle_prior_register(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    """Drop any saved credential and register a fresh agent.

    Raises:
        ConfigurationError: When registration fails.
    """
    client.logout(delete_file=client.persist_config)
    if not await client.ensure_credential(allow_register=True):
        raise ConfigurationError(CREDENTIALS_MESSAGE)

    agent_id = client.agent_id or "unknown"
    text = f"Registered as {agent_id}."
    if client.persist_config:
        text += f" API key saved to {client.store.path}"
    return text, {"agentId": agent_id, "persisted": client.persist_config}


async def handle_prior_claim(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    data = await client.request("POST", "/v1/agents/claim", {"email": args["email"]})
    return format_results(data), _acknowledgement(data)


async def handle_prior_verify(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    data = await client.request("POST", "/v1/agents/verify", {"code": args["code"]})
    return format_results(data), _acknowledgement(data)


# ---------------------------------------------------------------------------
# Registry dicts
# ---------------------------------------------------------------------------

HANDLERS = {
    "prior_status": handle_prior_status,
    "prior_register": handle_prior_register,
    "prior_claim": handle_prior_claim,
    "prior_verify": handle_prior_verify,
}

VALIDATORS = {
    "prior_status": validate_no_arguments,
    "prior_register": validate_no_arguments,
    "prior_claim": validate_prior_claim,
    "prior_verify": validate_prior_verify,
}
