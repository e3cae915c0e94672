"""Domain model for two-phase confirmations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from castpro_console.domain.workflow import Tone


@dataclass(frozen=True)
class Confirmation:
    """A proposed state-changing command awaiting confirm or cancel."""

    id: UUID
    kind: str
    subject_id: int
    title: str
    text: str
    confirm_label: str
    tone: Tone
    payload: dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
