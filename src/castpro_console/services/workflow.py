"""Status workflow engine for casting applications."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from castpro_console.domain.confirmations import Confirmation
from castpro_console.domain.models import ApplicationStatus, CastingApplication
from castpro_console.domain.notices import Notice
from castpro_console.domain.workflow import (
    StatusAction,
    available_actions,
    target_status,
)
from castpro_console.errors import ConsoleError, OperationInProgressError
from castpro_console.services.activity import BusyTracker
from castpro_console.services.confirmations import ConfirmationBook
from castpro_console.services.registry import ApplicationRegistry

logger = logging.getLogger(__name__)

TRANSITION_KIND = "status-transition"


class StatusClient(Protocol):
    async def set_status(
        self, application_id: int, status: ApplicationStatus
    ) -> None: ...


@dataclass(frozen=True)
class TransitionOutcome:
    """Authoritative application state after a confirmed transition."""

    application: CastingApplication
    notice: Notice


@dataclass
class StatusWorkflowEngine:
    """Drives propose -> confirm/cancel -> persist -> re-fetch for status changes."""

    client: StatusClient
    registry: ApplicationRegistry
    confirmations: ConfirmationBook
    activity: BusyTracker

    def is_busy(self, application_id: int) -> bool:
        return self.activity.is_busy(_busy_key(application_id))

    def actions_for(self, application: CastingApplication) -> list[StatusAction]:
        """Actions to offer; none while a transition is outstanding."""
        if self.is_busy(application.id):
            return []
        return available_actions(application.status)

    def propose(
        self, application: CastingApplication, action: StatusAction
    ) -> Confirmation:
        """Phase one: validate the action and ask the admin to confirm it."""
        target_status(application.status, action)
        if self.is_busy(application.id):
            raise OperationInProgressError()
        return self.confirmations.propose(
            kind=TRANSITION_KIND,
            subject_id=application.id,
            title=f"{action.title} this applicant?",
            text=(
                f"Are you sure you want to {action.verb} {application.full_name}?"
            ),
            confirm_label=f"Yes, {action.verb}",
            tone=action.tone,
            payload={"action": action.verb, "from_status": application.status.value},
        )

    async def confirm(self, confirmation_id: UUID) -> TransitionOutcome:
        """Phase two: persist the new status, then re-fetch the application.

        The confirmation is consumed only once the transition is allowed and
        no other one is outstanding; a refusal leaves it confirmable.
        """
        confirmation = self.confirmations.peek(confirmation_id, TRANSITION_KIND)
        application_id = confirmation.subject_id
        action = StatusAction.from_verb(confirmation.payload["action"])
        current = self.registry.cached(application_id)
        status = (
            current.status
            if current is not None
            else ApplicationStatus(confirmation.payload["from_status"])
        )
        target = target_status(status, action)

        async with self.activity.hold(_busy_key(application_id)):
            self.confirmations.take(confirmation_id, TRANSITION_KIND)
            try:
                await self.client.set_status(application_id, target)
            except ConsoleError as exc:
                logger.warning(
                    "Failed to %s application #%s: %s",
                    action.verb,
                    application_id,
                    exc.message,
                )
                raise
            application = await self.registry.refresh(application_id)

        logger.info("Application #%s is now %s", application_id, application.status)
        return TransitionOutcome(
            application=application,
            notice=Notice.success("Success!", f"Applicant has been {action.past}."),
        )

    def cancel(self, confirmation_id: UUID) -> None:
        self.confirmations.cancel(confirmation_id)


def _busy_key(application_id: int) -> str:
    return f"application-status:{application_id}"
