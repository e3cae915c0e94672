"""Application status state machine."""

from enum import Enum, StrEnum

from castpro_console.domain.models import ApplicationStatus
from castpro_console.errors import TransitionUnavailableError


class Tone(StrEnum):
    """How a confirmation should be presented."""

    AFFIRMATIVE = "affirmative"
    DESTRUCTIVE = "destructive"


class StatusAction(Enum):
    """Staff actions that move an application between statuses."""

    SHORTLIST = ("shortlist", "Shortlist", "shortlisted", Tone.AFFIRMATIVE)
    HIRE = ("hire", "Hire", "hired", Tone.AFFIRMATIVE)
    REJECT = ("reject", "Reject", "rejected", Tone.DESTRUCTIVE)

    def __init__(self, verb: str, title: str, past: str, tone: Tone) -> None:
        self.verb = verb
        self.title = title
        self.past = past
        self.tone = tone

    @classmethod
    def from_verb(cls, verb: str) -> "StatusAction":
        for action in cls:
            if action.verb == verb:
                return action
        raise TransitionUnavailableError(f"Unknown action: {verb}")


_S = ApplicationStatus
_A = StatusAction

# Every (status, action) pair is listed; None means the action is not offered.
TRANSITIONS: dict[tuple[ApplicationStatus, StatusAction], ApplicationStatus | None] = {
    (_S.PENDING, _A.SHORTLIST): _S.SHORTLISTED,
    (_S.PENDING, _A.HIRE): _S.HIRED,
    (_S.PENDING, _A.REJECT): _S.REJECTED,
    (_S.SHORTLISTED, _A.SHORTLIST): None,
    (_S.SHORTLISTED, _A.HIRE): _S.HIRED,
    (_S.SHORTLISTED, _A.REJECT): _S.REJECTED,
    (_S.HIRED, _A.SHORTLIST): None,
    (_S.HIRED, _A.HIRE): None,
    (_S.HIRED, _A.REJECT): None,
    (_S.REJECTED, _A.SHORTLIST): None,
    (_S.REJECTED, _A.HIRE): None,
    (_S.REJECTED, _A.REJECT): None,
}

TERMINAL_STATUSES = frozenset({ApplicationStatus.HIRED, ApplicationStatus.REJECTED})


def is_terminal(status: ApplicationStatus) -> bool:
    """Return True when no action leads out of the status."""
    return status in TERMINAL_STATUSES


def available_actions(status: ApplicationStatus) -> list[StatusAction]:
    """Return the actions offered from a status, in display order."""
    return [
        action for action in StatusAction if TRANSITIONS[(status, action)] is not None
    ]


def target_status(status: ApplicationStatus, action: StatusAction) -> ApplicationStatus:
    """Resolve the status an action leads to, refusing unavailable actions."""
    target = TRANSITIONS[(status, action)]
    if target is None:
        raise TransitionUnavailableError(
            f"Cannot {action.verb} an application that is {status.value}"
        )
    return target
