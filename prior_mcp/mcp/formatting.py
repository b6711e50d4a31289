"""Response shaping for Prior tool results.

Pure functions that turn raw API payloads into the text and structured
pieces returned to the agent:

- ``format_results``: pretty JSON plus a feedback reminder for search results
- ``build_feedback_actions``: ready-to-send prior_feedback params per entry
- ``expand_nudge_tokens``: ``[PRIOR:*]`` placeholders to tool-call hints
- ``shape_nudge``: the server nudge attached to search responses
"""

import json
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple


def unwrap_envelope(payload: Any) -> Any:
    """Strip the ``{ok, data, error}`` API envelope, if present.

    Returns ``payload["data"]`` when ``payload`` is a dict whose ``data``
    value is a dict or list; otherwise returns ``payload`` unchanged. This is
    the only place the two response shapes are reconciled.
    """
    if isinstance(payload, dict):
        inner = payload.get("data")
        if isinstance(inner, (dict, list)):
            return inner
    return payload


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _id_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_results(data: Any) -> str:
    """Render an API response as JSON, with a feedback reminder for searches.

    The reminder is only appended when the unwrapped payload has a non-empty
    ``results`` list whose *first* element carries a non-empty ``id``. Later
    elements never enable it on their own.
    """
    text = to_json(data)

    inner = unwrap_envelope(data)
    results = inner.get("results") if isinstance(inner, dict) else None
    if not isinstance(results, list) or not results:
        return text

    # NOTE: gated on the first result only, even if later ones have IDs.
    top = results[0]
    if not isinstance(top, dict):
        return text
    top_id = top.get("id")
    if top_id is None or top_id == "":
        return text

    top_id = _id_text(top_id)
    ids = ", ".join(
        _id_text(r.get("id")) if isinstance(r, dict) and r.get("id") else "" for r in results
    )
    return text + (
        "\n\n---\nYou already paid 1 credit for this search. "
        "Get it back — call prior_feedback with ONE of:\n"
        f'  worked: prior_feedback(entryId="{top_id}", outcome="useful")\n'
        f'  didn\'t work: prior_feedback(entryId="{top_id}", outcome="not_useful", reason="describe why")\n'
        f'  wrong result: prior_feedback(entryId="{top_id}", outcome="irrelevant")\n'
        f"All result IDs: {ids}"
    )


def build_feedback_actions(entry_id: str) -> Dict[str, Dict[str, str]]:
    """Pre-built prior_feedback parameters for one entry.

    ``not_useful`` carries an empty ``reason`` for the agent to fill in.
    """
    return {
        "useful": {"entryId": entry_id, "outcome": "useful"},
        "not_useful": {"entryId": entry_id, "outcome": "not_useful", "reason": ""},
        "irrelevant": {"entryId": entry_id, "outcome": "irrelevant"},
    }


# =============================================================================
# NUDGE TOKENS
# =============================================================================


class NudgeToken(Enum):
    """Placeholder tokens the server embeds in nudge messages."""

    CONTRIBUTE = "CONTRIBUTE"
    CONTRIBUTE_PREFILLED = "CONTRIBUTE <attrs>"
    FEEDBACK = "FEEDBACK"
    FEEDBACK_USEFUL = "FEEDBACK:useful"
    FEEDBACK_NOT_USEFUL = "FEEDBACK:not_useful"
    FEEDBACK_IRRELEVANT = "FEEDBACK:irrelevant"
    STATUS = "STATUS"


_TOKEN_RENDERERS: Dict[NudgeToken, Callable[[Optional[str]], str]] = {
    NudgeToken.CONTRIBUTE: lambda _: "`prior_contribute(...)`",
    NudgeToken.CONTRIBUTE_PREFILLED: lambda attrs: f"`prior_contribute({attrs})`",
    NudgeToken.FEEDBACK: lambda _: "`prior_feedback(...)`",
    NudgeToken.FEEDBACK_USEFUL: lambda _: '`prior_feedback(entryId: "...", outcome: "useful")`',
    NudgeToken.FEEDBACK_NOT_USEFUL: lambda _: (
        '`prior_feedback(entryId: "...", outcome: "not_useful", reason: "...")`'
    ),
    NudgeToken.FEEDBACK_IRRELEVANT: lambda _: (
        '`prior_feedback(entryId: "...", outcome: "irrelevant")`'
    ),
    NudgeToken.STATUS: lambda _: "`prior_status()`",
}

# Matches any [PRIOR:...] candidate; classification happens in _classify_token.
_TOKEN_PATTERN = re.compile(r"\[PRIOR:([^\[\]]+)\]")
_PREFILL_PREFIX = "CONTRIBUTE "


def _classify_token(body: str) -> Tuple[Optional[NudgeToken], Optional[str]]:
    if body.startswith(_PREFILL_PREFIX):
        attrs = body[len(_PREFILL_PREFIX) :]
        if not attrs:
            return None, None
        return NudgeToken.CONTRIBUTE_PREFILLED, attrs
    try:
        return NudgeToken(body), None
    except ValueError:
        return None, None


def render_token(token: NudgeToken, attrs: Optional[str] = None) -> str:
    return _TOKEN_RENDERERS[token](attrs)


def expand_nudge_tokens(message: str) -> str:
    """Replace ``[PRIOR:*]`` tokens with MCP tool-call hints.

    Unknown bracketed text is left as-is.
    """
    if not message:
        return message

    def _replace(match: "re.Match[str]") -> str:
        token, attrs = _classify_token(match.group(1))
        if token is None:
            return match.group(0)
        return render_token(token, attrs)

    return _TOKEN_PATTERN.sub(_replace, message)


def shape_previous_results(previous: Any) -> List[Dict[str, Any]]:
    if not isinstance(previous, list):
        return []
    shaped = []
    for r in previous:
        if not isinstance(r, dict):
            continue
        entry_id = r.get("id")
        shaped.append(
            {
                "id": entry_id,
                "title": r.get("title"),
                "feedbackActions": build_feedback_actions(entry_id),
            }
        )
    return shaped


def shape_nudge(raw_nudge: Any) -> Tuple[Optional[Dict[str, Any]], str]:
    """Build the structured nudge and its text block.

    Returns:
        ``(nudge, text_suffix)``. Both are empty (``None``, ``""``) when the
        raw nudge is missing or has no message.
    """
    if not isinstance(raw_nudge, dict) or not raw_nudge.get("message"):
        return None, ""

    message = expand_nudge_tokens(str(raw_nudge["message"]))
    context = raw_nudge.get("context")
    previous = shape_previous_results(
        context.get("previousResults") if isinstance(context, dict) else None
    )

    nudge: Dict[str, Any] = {
        "kind": raw_nudge.get("kind") or "",
        "template": raw_nudge.get("template") or "",
        "message": message,
        "context": context,
    }
    if previous:
        nudge["previousResults"] = previous

    text = f"\n\n💡 {message}"
    if previous:
        text += "\n  Previous results:"
        for r in previous:
            text += f'\n    - "{r["title"]}" → prior_feedback(entryId: "{r["id"]}", outcome: "useful")'
    return nudge, text
