"""Top-level navigation controller."""

import logging
from dataclasses import dataclass, field

from castpro_console.errors import NavigationInterrupted

logger = logging.getLogger(__name__)

LOGIN_PATH = "/admin/login"
DASHBOARD_PATH = "/admin/dashboard"
CASTING_CALLS_PATH = "/admin/casting-calls"
APPLICATIONS_PATH = "/admin/applications"


@dataclass(frozen=True)
class ViewTicket:
    """Issued when a view starts rendering; stale once a hard redirect happens."""

    path: str
    generation: int


@dataclass
class Navigator:
    """Tracks the current location and evicts views on hard redirects."""

    location: str = DASHBOARD_PATH
    generation: int = 0
    history: list[str] = field(default_factory=list)

    def begin_view(self, path: str) -> ViewTicket:
        """Record a soft navigation and hand out a ticket for the view."""
        self.location = path
        return ViewTicket(path=path, generation=self.generation)

    def hard_redirect(self, path: str) -> None:
        """Navigate away, invalidating every ticket issued so far."""
        self.generation += 1
        self.location = path
        self.history.append(path)
        logger.info("Hard redirect to %s", path)

    def ensure_current(self, ticket: ViewTicket) -> None:
        """Stop a view that was evicted while it waited on the backend."""
        if ticket.generation != self.generation:
            raise NavigationInterrupted(self.location)

    def on_unauthorized(self) -> None:
        """Gateway listener: a rejected credential sends everyone to login."""
        self.hard_redirect(LOGIN_PATH)
