"""Session store for the admin credential."""

import logging
from dataclasses import dataclass
from typing import Protocol

from castpro_console.adapters.credential_store import (
    CREDENTIAL_KEY,
    IDENTITY_KEY,
    CredentialStore,
    read_credential,
)
from castpro_console.domain.sessions import AdminIdentity, Session
from castpro_console.errors import ConsoleError

logger = logging.getLogger(__name__)


class AuthClient(Protocol):
    """Backend credential endpoints."""

    async def login(self, email: str, password: str) -> Session:
        """Exchange credentials for a session."""

    async def logout(self) -> None:
        """Invalidate the current credential on the backend."""


@dataclass
class SessionStore:
    """Owns the lifecycle of the process-wide admin session.

    The durable store is the single source of truth: every read goes back to
    it, so a credential cleared by the gateway is seen immediately.
    """

    credential_store: CredentialStore
    auth_client: AuthClient

    async def login(self, email: str, password: str) -> Session:
        """Log in and persist the returned credential."""
        session = await self.auth_client.login(email, password)
        entries: dict[str, object] = {CREDENTIAL_KEY: session.credential}
        if session.admin is not None:
            entries[IDENTITY_KEY] = {
                "id": session.admin.id,
                "name": session.admin.name,
                "email": session.admin.email,
            }
        self.credential_store.write(entries)
        logger.info("Admin session started")
        return session

    async def logout(self) -> None:
        """Invalidate on the backend if possible, then always clear locally."""
        try:
            await self.auth_client.logout()
        except ConsoleError as exc:
            logger.warning("Backend logout failed, clearing locally: %s", exc.message)
        finally:
            self.clear()

    def current_session(self) -> Session | None:
        """Return the stored session without a network round trip."""
        entries = self.credential_store.read()
        credential = entries.get(CREDENTIAL_KEY)
        if not isinstance(credential, str) or not credential:
            return None
        return Session(credential=credential, admin=_identity_from(entries))

    def is_authenticated(self) -> bool:
        """Presence check only; validity is discovered by the gateway."""
        return read_credential(self.credential_store) is not None

    def clear(self) -> None:
        """Forget the stored credential."""
        self.credential_store.clear()


def _identity_from(entries: dict[str, object]) -> AdminIdentity | None:
    raw = entries.get(IDENTITY_KEY)
    if not isinstance(raw, dict):
        return None
    return AdminIdentity(id=raw.get("id"), name=raw.get("name"), email=raw.get("email"))
