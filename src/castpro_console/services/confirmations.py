"""Pending confirmations for two-phase commands."""

import logging
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from castpro_console.domain.confirmations import Confirmation
from castpro_console.domain.workflow import Tone
from castpro_console.errors import ConfirmationNotFoundError
from castpro_console.services.cache import InMemoryCache

logger = logging.getLogger(__name__)


@dataclass
class ConfirmationBook:
    """Holds proposed commands until they are confirmed, cancelled or expire.

    Only the latest proposal per (kind, subject) stays pending; proposing
    again replaces it.
    """

    ttl_seconds: int = 300
    _pending: InMemoryCache = field(default_factory=InMemoryCache)
    _by_subject: dict[tuple[str, int], UUID] = field(default_factory=dict)

    def propose(  # noqa: PLR0913
        self,
        kind: str,
        subject_id: int,
        title: str,
        text: str,
        confirm_label: str,
        tone: Tone,
        payload: dict[str, str] | None = None,
    ) -> Confirmation:
        """Create and remember a confirmation."""
        self._prune()
        previous = self._by_subject.pop((kind, subject_id), None)
        if previous is not None:
            self._pending.delete(str(previous))
        confirmation = Confirmation(
            id=uuid4(),
            kind=kind,
            subject_id=subject_id,
            title=title,
            text=text,
            confirm_label=confirm_label,
            tone=tone,
            payload=payload or {},
        )
        self._pending.set(str(confirmation.id), confirmation, self.ttl_seconds)
        self._by_subject[(kind, subject_id)] = confirmation.id
        return confirmation

    def peek(self, confirmation_id: UUID, kind: str | None = None) -> Confirmation:
        """Return a pending confirmation without consuming it."""
        confirmation = self._pending.get(str(confirmation_id))
        if not isinstance(confirmation, Confirmation):
            raise ConfirmationNotFoundError(status_code=404)
        if kind is not None and confirmation.kind != kind:
            raise ConfirmationNotFoundError(status_code=404)
        return confirmation

    def take(self, confirmation_id: UUID, kind: str) -> Confirmation:
        """Consume a confirmation of the given kind."""
        confirmation = self.peek(confirmation_id, kind)
        self._forget(confirmation)
        return confirmation

    def cancel(self, confirmation_id: UUID) -> Confirmation:
        """Drop a confirmation without running it."""
        confirmation = self.peek(confirmation_id)
        self._forget(confirmation)
        logger.info("Cancelled %s for #%s", confirmation.kind, confirmation.subject_id)
        return confirmation

    def pending_count(self) -> int:
        self._prune()
        return len(self._by_subject)

    def _forget(self, confirmation: Confirmation) -> None:
        self._pending.delete(str(confirmation.id))
        subject = (confirmation.kind, confirmation.subject_id)
        if self._by_subject.get(subject) == confirmation.id:
            del self._by_subject[subject]

    def _prune(self) -> None:
        self._pending.prune()
        live = set(self._pending.keys())
        for subject, confirmation_id in list(self._by_subject.items()):
            if str(confirmation_id) not in live:
                del self._by_subject[subject]
