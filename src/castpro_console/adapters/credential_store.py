"""Durable storage for the admin credential."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

CREDENTIAL_KEY = "admin_token"
IDENTITY_KEY = "admin_identity"


class CredentialStore(Protocol):
    """Process-wide key-value storage that survives restarts."""

    def read(self) -> dict[str, object]:
        """Return every stored entry."""

    def write(self, entries: dict[str, object]) -> None:
        """Replace the stored entries."""

    def clear(self) -> None:
        """Remove every stored entry."""


@dataclass
class FileCredentialStore(CredentialStore):
    """Credential store backed by a JSON file."""

    path: Path

    def read(self) -> dict[str, object]:
        """Read the credential file, treating a missing or corrupt file as empty."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable credential file at %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def write(self, entries: dict[str, object]) -> None:
        """Write entries atomically with owner-only permissions."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(entries), encoding="utf-8")
        tmp_path.chmod(0o600)
        tmp_path.replace(self.path)

    def clear(self) -> None:
        """Delete the credential file if present."""
        self.path.unlink(missing_ok=True)


def _credential_from(entries: dict[str, object]) -> str | None:
    token = entries.get(CREDENTIAL_KEY)
    if isinstance(token, str) and token:
        return token
    return None


def read_credential(store: CredentialStore) -> str | None:
    """Return the non-empty credential held by a store."""
    return _credential_from(store.read())
