"""Local credential storage for the Prior API key.

A single JSON file (``~/.prior/config.json``) holds ``{"apiKey", "agentId"}``.
Records are always replaced wholesale; there is no cross-process locking,
so the last writer wins.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from prior_mcp.utils import get_prior_home

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """Get the path to the credential file."""
    return get_prior_home() / "config.json"


@dataclass(frozen=True)
class CredentialRecord:
    """API key and agent ID pair authorizing requests to Prior."""

    api_key: str
    agent_id: str = ""

    def to_dict(self) -> dict:
        return {"apiKey": self.api_key, "agentId": self.agent_id}

    @classmethod
    def from_dict(cls, data: dict) -> Optional["CredentialRecord"]:
        api_key = data.get("apiKey")
        if not isinstance(api_key, str) or not api_key:
            return None
        agent_id = data.get("agentId")
        return cls(api_key=api_key, agent_id=agent_id if isinstance(agent_id, str) else "")


class CredentialStore:
    """Reads and writes the local credential record.

    Args:
        path: Location of the credential file. Defaults to
            ``get_config_path()`` resolved at construction time.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else get_config_path()
        self._cached: Optional[CredentialRecord] = None

    @property
    def cached(self) -> Optional[CredentialRecord]:
        """The last record loaded or saved by this store, if any."""
        return self._cached

    def load(self) -> Optional[CredentialRecord]:
        """Load the credential record from disk.

        Never raises: a missing, unreadable, or malformed file yields None.

        Returns:
            The stored CredentialRecord, or None.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.debug("Ignoring unreadable credential file %s: %s", self.path, e)
            return None

        if not isinstance(data, dict):
            logger.debug("Ignoring credential file %s: not a JSON object", self.path)
            return None

        record = CredentialRecord.from_dict(data)
        if record is not None:
            self._cached = record
        return record

    def save(self, record: CredentialRecord) -> None:
        """Replace the credential file with ``record``.

        The record is written to a temporary file in the same directory and
        moved into place, so readers never observe a partial write.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=".config-", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record.to_dict(), f, indent=2)
            # Owner read/write only
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        self._cached = record
        logger.info("Saved Prior credentials to %s", self.path)

    def clear(self, delete_file: bool = False) -> None:
        """Forget cached credentials, optionally deleting the file as well."""
        self._cached = None
        if not delete_file:
            return
        try:
            self.path.unlink()
            logger.info("Removed Prior credentials at %s", self.path)
        except FileNotFoundError:
            pass
