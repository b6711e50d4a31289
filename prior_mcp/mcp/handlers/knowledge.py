"""Handlers for knowledge tools: search, contribute, feedback, retract, get."""

from typing import Any, Dict, Tuple
from urllib.parse import quote

from prior_mcp.client import PriorApiClient
from prior_mcp.mcp.formatting import (
    build_feedback_actions,
    format_results,
    shape_nudge,
    unwrap_envelope,
)
from prior_mcp.mcp.sanitize import (
    sanitize_array,
    sanitize_object,
    sanitize_string,
    validate_enum,
    validate_number,
)
from prior_mcp.mcp.tool_definitions import FEEDBACK_OUTCOMES, TTL_VALUES
from prior_mcp.utils import detect_host

ToolOutput = Tuple[str, Dict[str, Any]]

# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def validate_prior_search(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["query"] = sanitize_string(arguments.get("query"), "query", 2000, required=True)
    max_results = validate_number(arguments.get("maxResults"), "maxResults", 1, 10)
    sanitized["maxResults"] = int(max_results) if max_results is not None else None
    max_tokens = validate_number(arguments.get("maxTokens"), "maxTokens", 1, 5000)
    sanitized["maxTokens"] = int(max_tokens) if max_tokens is not None else None
    sanitized["minQuality"] = validate_number(arguments.get("minQuality"), "minQuality", 0.0, 1.0)
    sanitized["context"] = sanitize_object(
        arguments.get("context"),
        "context",
        string_fields={"runtime": 100, "os": 100, "shell": 100, "taskType": 100},
        array_fields={"tools": 50},
    )
    return sanitized


def validate_prior_contribute(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["title"] = sanitize_string(arguments.get("title"), "title", 200, required=True)
    sanitized["content"] = sanitize_string(
        arguments.get("content"), "content", 10000, required=True
    )
    if arguments.get("tags") is None:
        raise ValueError("tags is required")
    sanitized["tags"] = sanitize_array(arguments.get("tags"), "tags", 100, 10)
    if not sanitized["tags"]:
        raise ValueError("tags must contain at least one tag")
    sanitized["model"] = (
        sanitize_string(arguments.get("model"), "model", 100, required=False) or "unknown"
    )
    sanitized["problem"] = sanitize_string(
        arguments.get("problem"), "problem", 5000, required=False
    )
    sanitized["solution"] = sanitize_string(
        arguments.get("solution"), "solution", 5000, required=False
    )
    sanitized["errorMessages"] = sanitize_array(
        arguments.get("errorMessages"), "errorMessages", 2000, 20
    )
    sanitized["failedApproaches"] = sanitize_array(
        arguments.get("failedApproaches"), "failedApproaches", 2000, 20
    )
    sanitized["environment"] = sanitize_object(
        arguments.get("environment"),
        "environment",
        string_fields={
            "language": 100,
            "languageVersion": 50,
            "framework": 100,
            "frameworkVersion": 50,
            "runtime": 100,
            "runtimeVersion": 50,
            "os": 100,
        },
        array_fields={"tools": 50},
    )
    sanitized["effort"] = sanitize_object(
        arguments.get("effort"),
        "effort",
        number_fields=["tokensUsed", "durationSeconds", "toolCalls"],
    )
    ttl = arguments.get("ttl")
    sanitized["ttl"] = validate_enum(ttl, "ttl", TTL_VALUES) if ttl else None
    return sanitized


def validate_prior_feedback(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["entryId"] = sanitize_string(arguments.get("entryId"), "entryId", 100, required=True)
    sanitized["outcome"] = validate_enum(
        arguments.get("outcome"), "outcome", FEEDBACK_OUTCOMES, required=True
    )
    reason = arguments.get("reason")
    if sanitized["outcome"] == "not_useful" and (
        reason is None or (isinstance(reason, str) and not reason.strip())
    ):
        raise ValueError(
            "reason is required for not_useful: describe what you tried and why it didn't work"
        )
    sanitized["reason"] = sanitize_string(reason, "reason", 2000, required=False)
    sanitized["notes"] = sanitize_string(arguments.get("notes"), "notes", 2000, required=False)
    sanitized["correctionId"] = sanitize_string(
        arguments.get("correctionId"), "correctionId", 100, required=False
    )

    correction = arguments.get("correction")
    if correction is not None:
        if not isinstance(correction, dict):
            raise ValueError(f"correction must be an object, got {type(correction).__name__}")
        shaped = {
            "content": sanitize_string(
                correction.get("content"), "correction.content", 10000, required=True
            )
        }
        title = sanitize_string(correction.get("title"), "correction.title", 200, required=False)
        if title:
            shaped["title"] = title
        tags = sanitize_array(correction.get("tags"), "correction.tags", 100, 10)
        if tags:
            shaped["tags"] = tags
        sanitized["correction"] = shaped
    else:
        sanitized["correction"] = None
    return sanitized


def validate_entry_id(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": sanitize_string(arguments.get("id"), "id", 100, required=True)}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _entry_path(entry_id: str) -> str:
    return f"/v1/knowledge/{quote(entry_id, safe='')}"


def _without_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def _shape_search_result(r: Any) -> Dict[str, Any]:
    r = r if isinstance(r, dict) else {}
    entry_id = str(r.get("id") or "")
    return _without_none(
        {
            "id": entry_id,
            "title": str(r.get("title") or ""),
            "content": str(r.get("content") or ""),
            "tags": r.get("tags") if isinstance(r.get("tags"), list) else None,
            "qualityScore": r.get("qualityScore"),
            "relevanceScore": r.get("relevanceScore"),
            "failedApproaches": (
                r.get("failedApproaches") if isinstance(r.get("failedApproaches"), list) else None
            ),
            "feedbackActions": build_feedback_actions(entry_id),
        }
    )


async def handle_prior_search(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    body: Dict[str, Any] = {"query": args["query"]}
    context = dict(args.get("context") or {})
    if not context.get("runtime"):
        context["runtime"] = detect_host()
    body["context"] = context
    if args.get("maxResults"):
        body["maxResults"] = args["maxResults"]
    if args.get("maxTokens"):
        body["maxTokens"] = args["maxTokens"]
    if args.get("minQuality") is not None:
        body["minQuality"] = args["minQuality"]

    data = await client.request("POST", "/v1/knowledge/search", body)
    inner = unwrap_envelope(data)
    inner = inner if isinstance(inner, dict) else {}

    raw_results = inner.get("results")
    results = [_shape_search_result(r) for r in raw_results] if isinstance(raw_results, list) else []

    text = format_results(data)

    contribution_prompt = inner.get("contributionPrompt")
    if contribution_prompt:
        contribution_prompt = f"{contribution_prompt} Use `prior_contribute` to save your solution."

    nudge, nudge_text = shape_nudge(inner.get("nudge"))
    text += nudge_text

    structured = _without_none(
        {
            "results": results,
            "searchId": inner.get("searchId"),
            "creditsUsed": inner.get("creditsUsed") or 1,
            "contributionPrompt": contribution_prompt or None,
            "agentHint": inner.get("agentHint") or None,
            "doNotTry": inner.get("doNotTry") or None,
            "nudge": nudge,
        }
    )
    return text, structured


async def handle_prior_contribute(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    body: Dict[str, Any] = {
        "title": args["title"],
        "content": args["content"],
        "tags": args["tags"],
        "model": args.get("model") or "unknown",
    }
    for key in (
        "problem",
        "solution",
        "errorMessages",
        "failedApproaches",
        "environment",
        "effort",
        "ttl",
    ):
        if args.get(key):
            body[key] = args[key]

    data = await client.request("POST", "/v1/knowledge/contribute", body)
    entry = unwrap_envelope(data)
    entry = entry if isinstance(entry, dict) else {}
    structured = _without_none(
        {
            "id": str(entry.get("id") or entry.get("shortId") or ""),
            "status": entry.get("status") or "active",
            "creditsEarned": entry.get("creditsEarned"),
        }
    )
    return format_results(data), structured


async def handle_prior_feedback(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    body: Dict[str, Any] = {"outcome": args["outcome"]}
    for key in ("reason", "notes", "correctionId", "correction"):
        if args.get(key):
            body[key] = args[key]

    data = await client.request("POST", f"{_entry_path(args['entryId'])}/feedback", body)
    result = unwrap_envelope(data)
    result = result if isinstance(result, dict) else {}
    ok = data.get("ok") if isinstance(data, dict) else None

    structured: Dict[str, Any] = {
        "ok": ok if ok is not None else True,
        "creditsRefunded": result.get("creditsRefunded") or result.get("creditRefund") or 0,
    }
    # Resubmission updates the earlier feedback in place and reports what it replaced.
    if result.get("previousOutcome") is not None:
        structured["previousOutcome"] = result["previousOutcome"]
    return format_results(data), structured


async def handle_prior_retract(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    data = await client.request("DELETE", _entry_path(args["id"]))
    payload = data if isinstance(data, dict) else {}
    ok = payload.get("ok")
    structured = {
        "ok": ok if ok is not None else True,
        "message": payload.get("message") or "Entry retracted",
    }
    return format_results(data), structured


async def handle_prior_get(args: Dict[str, Any], client: PriorApiClient) -> ToolOutput:
    data = await client.request("GET", _entry_path(args["id"]))
    return format_results(data), {"entry": unwrap_envelope(data)}


# ---------------------------------------------------------------------------
# Registry dicts
# ---------------------------------------------------------------------------

HANDLERS = {
    "prior_search": handle_prior_search,
    "prior_contribute": handle_prior_contribute,
    "prior_feedback": handle_prior_feedback,
    "prior_retract": handle_prior_retract,
    "prior_get": handle_prior_get,
}

VALIDATORS = {
    "prior_search": validate_prior_search,
    "prior_contribute": validate_prior_contribute,
    "prior_feedback": validate_prior_feedback,
    "prior_retract": validate_entry_id,
    "prior_get": validate_entry_id,
}
