"""HTTP client for the Prior API.

Owns the process's credential and configuration. Credential resolution
happens once, at construction:

1. Explicit ``api_key`` argument
2. ``PRIOR_API_KEY`` environment variable
3. ``~/.prior/config.json`` (only when ``persist_config`` is enabled)

With no credential the client either refuses to construct
(``ConfigurationError``) or, when ``auto_register`` is enabled, defers to
``ensure_credential()``.
"""

import asyncio
import json
import logging
import os
from typing import Any, Optional

import httpx

from prior_mcp import __version__
from prior_mcp.credentials import CredentialRecord, CredentialStore
from prior_mcp.utils import detect_host

logger = logging.getLogger(__name__)

VERSION = __version__
DEFAULT_API_URL = "https://api.cg3.io"
DEFAULT_USER_AGENT = f"prior-mcp/{VERSION}"

API_URL_ENV = "PRIOR_API_URL"
API_KEY_ENV = "PRIOR_API_KEY"

REGISTER_AGENT_NAME = "prior-mcp-agent"

CREDENTIALS_MESSAGE = (
    "No Prior API key configured. "
    "Get your key at https://prior.cg3.io/account and set the PRIOR_API_KEY environment variable, "
    "or add it to ~/.prior/config.json. See prior://docs/api-keys for setup instructions."
)


class PriorError(Exception):
    """Base class for Prior client errors."""


class ConfigurationError(PriorError):
    """No usable credential could be resolved."""


class ApiError(PriorError):
    """The Prior API answered with a non-success HTTP status.

    The response body is kept verbatim as text; it is never parsed.
    """

    def __init__(self, status: int, body: str):
        super().__init__(f"API error {status}: {body}")
        self.status = status
        self.body = body


class PriorApiClient:
    """Thin async wrapper around the Prior HTTP API.

    Args:
        api_url: Base URL (default: PRIOR_API_URL or https://api.cg3.io).
        api_key: Pre-set API key. Takes precedence over env and config file.
        agent_id: Pre-set agent ID.
        persist_config: Read and write ~/.prior/config.json (default: True).
        user_agent: User-Agent override.
        auto_register: Allow construction without a key and register a new
            agent on first use via ``ensure_credential()``.
        store: Credential store override (defaults to the standard path).
        http_client: Pre-built ``httpx.AsyncClient``; the caller keeps
            ownership of it.
        require_credential: Raise ``ConfigurationError`` when no credential
            resolves (default: True). Pass False for callers that register
            explicitly.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        agent_id: Optional[str] = None,
        persist_config: bool = True,
        user_agent: Optional[str] = None,
        auto_register: bool = False,
        store: Optional[CredentialStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        require_credential: bool = True,
    ):
        self.api_url = (api_url or os.environ.get(API_URL_ENV) or DEFAULT_API_URL).rstrip("/")
        self.persist_config = persist_config
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.auto_register = auto_register
        self.store = store or CredentialStore()

        self._api_key: Optional[str] = api_key or os.environ.get(API_KEY_ENV) or None
        self._agent_id: Optional[str] = agent_id

        if not self._api_key:
            self._reload_from_store()

        if not self._api_key and not self.auto_register and require_credential:
            raise ConfigurationError(CREDENTIALS_MESSAGE)

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=None)
        self._register_lock = asyncio.Lock()

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def agent_id(self) -> Optional[str]:
        return self._agent_id

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    def logout(self, delete_file: bool = False) -> None:
        """Forget the cached credential, optionally removing the config file."""
        self._api_key = None
        self._agent_id = None
        self.store.clear(delete_file=delete_file)

    async def ensure_credential(self, allow_register: Optional[bool] = None) -> Optional[str]:
        """Return a usable API key, registering a new agent if allowed.

        Args:
            allow_register: Overrides ``auto_register`` for this call.

        Returns:
            The API key, or None when none is configured and registration is
            disabled or failed. Never raises.
        """
        if self._api_key:
            return self._api_key

        # Another process may have written the config since startup
        if self._reload_from_store():
            return self._api_key

        if not (self.auto_register if allow_register is None else allow_register):
            return None

        async with self._register_lock:
            # A concurrent call may have registered while this one waited
            if self._api_key:
                return self._api_key
            return await self._register()

    def _reload_from_store(self) -> bool:
        if not self.persist_config:
            return False
        record = self.store.load()
        if not record:
            return False
        self._api_key = record.api_key
        self._agent_id = record.agent_id
        return True

    async def _register(self) -> Optional[str]:
        try:
            raw = await self.request(
                "POST",
                "/v1/agents/register",
                {"agentName": REGISTER_AGENT_NAME, "host": detect_host()},
            )
        except (PriorError, httpx.HTTPError) as e:
            logger.warning("Prior agent registration failed: %s", e)
            return None

        data = raw.get("data") if isinstance(raw, dict) and isinstance(raw.get("data"), dict) else raw
        if not isinstance(data, dict):
            logger.warning("Prior agent registration returned an unexpected payload")
            return None

        new_key = data.get("apiKey") or data.get("api_key") or data.get("key")
        new_id = data.get("agentId") or data.get("agent_id") or data.get("id") or ""
        if not new_key:
            logger.warning("Prior agent registration response carried no API key")
            return None

        self._api_key = str(new_key)
        self._agent_id = str(new_id)
        if self.persist_config:
            try:
                self.store.save(CredentialRecord(api_key=self._api_key, agent_id=self._agent_id))
            except OSError as e:
                logger.warning("Could not persist Prior credentials: %s", e)
        logger.info("Registered new Prior agent %s", self._agent_id or "(unknown id)")
        return self._api_key

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        api_key: Optional[str] = None,
    ) -> Any:
        """Send one request to the Prior API.

        Args:
            method: HTTP method.
            path: Path relative to the base URL (e.g. "/v1/agents/me").
            body: JSON-serializable request body.
            api_key: Key to use instead of the cached one.

        Returns:
            The parsed JSON body, or the raw text if it is not JSON.

        Raises:
            ApiError: On any non-2xx status.
            httpx.HTTPError: On transport failures.
        """
        key = api_key or self._api_key
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }
        if key:
            headers["Authorization"] = f"Bearer {key}"

        content = json.dumps(body) if body is not None else None
        logger.debug("%s %s", method, path)
        response = await self._http.request(
            method, f"{self.api_url}{path}", headers=headers, content=content
        )

        text = response.text
        if not response.is_success:
            logger.debug("%s %s -> HTTP %s", method, path, response.status_code)
            raise ApiError(response.status_code, text)

        try:
            return json.loads(text)
        except ValueError:
            return text
