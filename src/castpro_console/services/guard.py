"""Authorization guard for protected views."""

from dataclasses import dataclass
from typing import Protocol

from castpro_console.services.navigation import (
    DASHBOARD_PATH,
    LOGIN_PATH,
    Navigator,
    ViewTicket,
)


class SessionPresence(Protocol):
    def is_authenticated(self) -> bool:
        """Return True when a credential is stored."""


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of a guard check."""

    allowed: bool
    redirect_to: str | None = None
    ticket: ViewTicket | None = None


@dataclass
class AuthorizationGuard:
    """Presence-only gate consulted before any protected view renders."""

    sessions: SessionPresence
    navigator: Navigator

    def authorize(self, path: str) -> GuardDecision:
        """Allow the view when a session is present, otherwise send to login."""
        if not self.sessions.is_authenticated():
            return GuardDecision(allowed=False, redirect_to=LOGIN_PATH)
        return GuardDecision(allowed=True, ticket=self.navigator.begin_view(path))

    def authorize_login_page(self) -> GuardDecision:
        """Inverse check: an authenticated admin skips the login form."""
        if self.sessions.is_authenticated():
            return GuardDecision(allowed=False, redirect_to=DASHBOARD_PATH)
        return GuardDecision(allowed=True, ticket=self.navigator.begin_view(LOGIN_PATH))
