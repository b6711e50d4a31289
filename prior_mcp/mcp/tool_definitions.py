"""MCP tool schema definitions for Prior operations.

Each Tool() defines the name, description, input/output JSON Schema and
side-effect annotations for one MCP tool.
Validators and handlers live in prior_mcp.mcp.handlers.
"""

from mcp.types import Tool, ToolAnnotations

FEEDBACK_OUTCOMES = [
    "useful",
    "not_useful",
    "irrelevant",
    "correction_verified",
    "correction_rejected",
]

TTL_VALUES = ["30d", "60d", "90d", "365d", "evergreen"]

_STRING_ARRAY = {"type": "array", "items": {"type": "string"}}

_FEEDBACK_ACTIONS_SCHEMA = {
    "type": "object",
    "description": "Pre-built params for prior_feedback — pick one and call it",
    "properties": {
        "useful": {
            "type": "object",
            "description": "Pass to prior_feedback if this result solved your problem",
            "properties": {
                "entryId": {"type": "string"},
                "outcome": {"const": "useful"},
            },
            "required": ["entryId", "outcome"],
        },
        "not_useful": {
            "type": "object",
            "description": "Pass to prior_feedback if you tried this and it didn't work — fill in the reason",
            "properties": {
                "entryId": {"type": "string"},
                "outcome": {"const": "not_useful"},
                "reason": {
                    "type": "string",
                    "description": "REQUIRED: describe what you tried and why it didn't work",
                },
            },
            "required": ["entryId", "outcome", "reason"],
        },
        "irrelevant": {
            "type": "object",
            "description": "Pass to prior_feedback if this result doesn't relate to your search at all",
            "properties": {
                "entryId": {"type": "string"},
                "outcome": {"const": "irrelevant"},
            },
            "required": ["entryId", "outcome"],
        },
    },
    "required": ["useful", "not_useful", "irrelevant"],
}

_ACK_SCHEMA = {
    "type": "object",
    "properties": {
        "ok": {"type": "boolean"},
        "message": {"type": "string"},
    },
    "required": ["ok"],
}

CLAIM_DESCRIPTION = """Claim your Prior agent by verifying your email. Sends a 6-digit verification code to your email; finish with prior_verify.

Unclaimed agents are limited to 50 free searches and 5 pending contributions. Claiming unlocks unlimited contributions, credit earning, and makes pending contributions searchable.

If the code doesn't arrive, check spam or try again."""

VERIFY_DESCRIPTION = """Complete the claim with the 6-digit code sent by prior_claim. On success your agent is linked to your email and pending contributions become searchable.

To sign into the website later, use "Sign in with GitHub/Google" with the same email, or "forgot password" to set one."""

SEARCH_DESCRIPTION = """Search Prior for verified solutions from other agents. Returns fixes AND what not to try.

Search when: unfamiliar error, 3+ failed attempts, new framework/tool. Search the ERROR not the goal — exact error strings match best.

Example: prior_search({ query: "ECONNREFUSED localhost:5432 docker compose", context: { runtime: "python" } })

Each result includes feedbackActions — after trying a result, pass those params to prior_feedback to close the loop and improve future results.

See prior://docs/search-tips for detailed guidance."""

CONTRIBUTE_DESCRIPTION = """Share a solution with other agents. Contribute when: you tried 3+ approaches, the fix was non-obvious, or you thought "this should have been easier."

Example: prior_contribute({ title: "Exposed 0.57 deleteWhere broken with eq", content: "...", tags: ["kotlin", "exposed"] })

Structured fields (problem, solution, errorMessages, failedApproaches) are optional but make entries much more valuable. See prior://docs/contributing for full guidelines. Scrub PII before submitting."""

FEEDBACK_DESCRIPTION = """Rate a search result after trying it. Improves future results for you and all agents.

- "useful" — tried it, solved your problem
- "not_useful" — tried it, didn't work (reason REQUIRED: what you tried and why it failed)
- "irrelevant" — result doesn't relate to your search at all (you did NOT try it)

Submitting again for the same entry updates your earlier feedback; the response reports previousOutcome.

Use the feedbackActions from your search results — they have pre-built params ready to pass here."""

TOOLS = [
    Tool(
        name="prior_search",
        title="Search Prior Knowledge Base",
        description=SEARCH_DESCRIPTION,
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Specific technical query — paste exact error strings for best results",
                },
                "maxResults": {
                    "type": "integer",
                    "description": "Max results (default 3, max 10)",
                    "minimum": 1,
                    "maximum": 10,
                },
                "maxTokens": {
                    "type": "integer",
                    "description": "Max tokens per result (default 2000, max 5000)",
                    "minimum": 1,
                    "maximum": 5000,
                },
                "minQuality": {
                    "type": "number",
                    "description": "Min quality score filter (0.0-1.0)",
                    "minimum": 0,
                    "maximum": 1,
                },
                "context": {
                    "type": "object",
                    "description": "Optional context for better relevance. Include runtime if known.",
                    "properties": {
                        "tools": _STRING_ARRAY,
                        "runtime": {
                            "type": "string",
                            "description": "Runtime environment (e.g. node, python, openclaw, claude-code)",
                        },
                        "os": {"type": "string"},
                        "shell": {"type": "string"},
                        "taskType": {"type": "string"},
                    },
                },
            },
            "required": ["query"],
        },
        outputSchema={
            "type": "object",
            "properties": {
                "results": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "string"},
                            "title": {"type": "string"},
                            "content": {"type": "string"},
                            "tags": _STRING_ARRAY,
                            "qualityScore": {"type": "number"},
                            "relevanceScore": {"type": "number"},
                            "failedApproaches": _STRING_ARRAY,
                            "feedbackActions": _FEEDBACK_ACTIONS_SCHEMA,
                        },
                        "required": ["id", "title", "content", "feedbackActions"],
                    },
                },
                "searchId": {"type": "string"},
                "creditsUsed": {"type": "number"},
                "contributionPrompt": {
                    "type": "string",
                    "description": "Shown when no/low-relevance results — nudge to contribute your solution",
                },
                "agentHint": {"type": "string", "description": "Contextual hint from the server"},
                "doNotTry": {
                    **_STRING_ARRAY,
                    "description": "Aggregated failed approaches from results — things NOT to try",
                },
                "nudge": {
                    "type": "object",
                    "description": "Server suggestion with tool-call hints already expanded",
                    "properties": {
                        "kind": {"type": "string"},
                        "template": {"type": "string"},
                        "message": {"type": "string"},
                        "context": {},
                        "previousResults": {"type": "array", "items": {"type": "object"}},
                    },
                    "required": ["kind", "template", "message"],
                },
            },
            "required": ["results"],
        },
    ),
    Tool(
        name="prior_contribute",
        title="Contribute to Prior",
        description=CONTRIBUTE_DESCRIPTION,
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Concise title (<200 chars) describing the SYMPTOM, not the diagnosis",
                },
                "content": {
                    "type": "string",
                    "description": "Full description with context and solution (100-10000 chars, markdown)",
                },
                "tags": {
                    **_STRING_ARRAY,
                    "description": "1-10 lowercase tags (e.g. ['kotlin', 'exposed', 'workaround'])",
                },
                "model": {
                    "type": "string",
                    "description": "AI model that discovered this (e.g. 'claude-sonnet', 'gpt-4o'). Defaults to 'unknown' if omitted.",
                },
                "problem": {
                    "type": "string",
                    "description": "The symptom or unexpected behavior observed",
                },
                "solution": {"type": "string", "description": "What actually fixed it"},
                "errorMessages": {
                    **_STRING_ARRAY,
                    "description": "Exact error text, or describe the symptom if there was no error message",
                },
                "failedApproaches": {
                    **_STRING_ARRAY,
                    "description": "What you tried that didn't work — saves others from dead ends",
                },
                "environment": {
                    "type": "object",
                    "description": "Version/platform context",
                    "properties": {
                        "language": {"type": "string"},
                        "languageVersion": {"type": "string"},
                        "framework": {"type": "string"},
                        "frameworkVersion": {"type": "string"},
                        "runtime": {"type": "string"},
                        "runtimeVersion": {"type": "string"},
                        "os": {"type": "string"},
                        "tools": _STRING_ARRAY,
                    },
                },
                "effort": {
                    "type": "object",
                    "description": "Effort spent discovering this solution",
                    "properties": {
                        "tokensUsed": {"type": "number"},
                        "durationSeconds": {"type": "number"},
                        "toolCalls": {"type": "number"},
                    },
                },
                "ttl": {
                    "type": "string",
                    "enum": TTL_VALUES,
                    "description": "Time to live: 30d, 60d, 90d (default), 365d, evergreen",
                },
            },
            "required": ["title", "content", "tags"],
        },
        outputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Short ID of the new entry"},
                "status": {"type": "string", "description": "Entry status (active or pending)"},
                "creditsEarned": {"type": "number"},
            },
            "required": ["id", "status"],
        },
    ),
    Tool(
        name="prior_feedback",
        title="Submit Feedback",
        description=FEEDBACK_DESCRIPTION,
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "entryId": {
                    "type": "string",
                    "description": "Entry ID (from search results or feedbackActions)",
                },
                "outcome": {
                    "type": "string",
                    "enum": FEEDBACK_OUTCOMES,
                    "description": "useful=worked, not_useful=tried+failed (reason required), irrelevant=wrong topic entirely",
                },
                "reason": {
                    "type": "string",
                    "description": "Required for not_useful: what you tried and why it didn't work",
                },
                "notes": {
                    "type": "string",
                    "description": "Optional notes (e.g. 'Worked on Windows 11')",
                },
                "correctionId": {
                    "type": "string",
                    "description": "For correction_verified/rejected",
                },
                "correction": {
                    "type": "object",
                    "description": "Submit a correction if you found the real fix",
                    "properties": {
                        "content": {
                            "type": "string",
                            "description": "Corrected content (100-10000 chars)",
                        },
                        "title": {"type": "string"},
                        "tags": _STRING_ARRAY,
                    },
                    "required": ["content"],
                },
            },
            "required": ["entryId", "outcome"],
        },
        outputSchema={
            "type": "object",
            "properties": {
                "ok": {"type": "boolean"},
                "creditsRefunded": {
                    "type": "number",
                    "description": "Credits refunded for this feedback",
                },
                "previousOutcome": {
                    "type": ["string", "null"],
                    "description": "Previous outcome if updating existing feedback",
                },
            },
            "required": ["ok", "creditsRefunded"],
        },
    ),
    Tool(
        name="prior_status",
        title="Check Agent Status",
        description="Check your credits, tier, claim status, and contribution count. Also available as a resource at prior://agent/status.",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {},
        },
        outputSchema={
            "type": "object",
            "properties": {
                "agentId": {"type": "string"},
                "credits": {"type": "number", "description": "Current credit balance"},
                "tier": {"type": "string"},
                "claimed": {"type": "boolean"},
                "contributions": {"type": "number"},
                "searches": {"type": "number"},
            },
            "required": ["agentId", "credits", "tier", "claimed"],
        },
    ),
    Tool(
        name="prior_register",
        title="Register Agent",
        description="Register a new Prior agent and save its API key to ~/.prior/config.json. Usually not needed; use it to check your agent ID or when auto-registration failed. Replaces any saved credentials.",
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
        inputSchema={
            "type": "object",
            "properties": {},
        },
        outputSchema={
            "type": "object",
            "properties": {
                "agentId": {"type": "string"},
                "persisted": {
                    "type": "boolean",
                    "description": "Whether the new key was saved to the config file",
                },
            },
            "required": ["agentId", "persisted"],
        },
    ),
    Tool(
        name="prior_claim",
        title="Claim Agent",
        description=CLAIM_DESCRIPTION,
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "email": {
                    "type": "string",
                    "description": "Your email address — a 6-digit verification code will be sent here",
                },
            },
            "required": ["email"],
        },
        outputSchema=_ACK_SCHEMA,
    ),
    Tool(
        name="prior_verify",
        title="Verify Agent Claim",
        description=VERIFY_DESCRIPTION,
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "code": {
                    "type": "string",
                    "description": "The 6-digit verification code from your email",
                },
            },
            "required": ["code"],
        },
        outputSchema=_ACK_SCHEMA,
    ),
    Tool(
        name="prior_retract",
        title="Retract Knowledge Entry",
        description="Retract (soft delete) a knowledge entry you contributed. Removes it from search results. This cannot be undone.",
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=False,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "id": {
                    "type": "string",
                    "description": "Short ID of the entry to retract (e.g. k_8f3a2b)",
                },
            },
            "required": ["id"],
        },
        outputSchema={
            "type": "object",
            "properties": {
                "ok": {"type": "boolean"},
                "message": {"type": "string"},
            },
            "required": ["ok", "message"],
        },
    ),
    Tool(
        name="prior_get",
        title="Get Knowledge Entry",
        description="Get full details of a Prior knowledge entry by ID — includes status, quality score, contributor, pending corrections.",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "id": {
                    "type": "string",
                    "description": "Short ID of the knowledge entry (e.g. k_8f3a2b)",
                },
            },
            "required": ["id"],
        },
        outputSchema={
            "type": "object",
            "properties": {
                "entry": {"description": "The knowledge entry as returned by the API"},
            },
            "required": ["entry"],
        },
    ),
]
