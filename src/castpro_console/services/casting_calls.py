"""Casting call form submission and confirmed deletion."""

import logging
from dataclasses import dataclass
from uuid import UUID

from castpro_console.domain.confirmations import Confirmation
from castpro_console.domain.models import (
    CastingCall,
    CastingCallInput,
    CastingCallUpdate,
)
from castpro_console.domain.notices import Notice
from castpro_console.domain.workflow import Tone
from castpro_console.errors import ConsoleError, OperationInProgressError
from castpro_console.services.confirmations import ConfirmationBook
from castpro_console.services.registry import CastingCallRegistry

logger = logging.getLogger(__name__)

DELETE_KIND = "delete-casting-call"


@dataclass(frozen=True)
class SaveOutcome:
    casting_call: CastingCall | None
    notice: Notice


@dataclass
class CastingCallService:
    """Application service behind the casting call list and form views."""

    registry: CastingCallRegistry
    confirmations: ConfirmationBook

    async def load_form(self, casting_call_id: int) -> CastingCallInput:
        """Prefill the edit form from the current record."""
        call = await self.registry.get(casting_call_id)
        return CastingCallInput(
            title=call.title,
            description=call.description,
            requirements=call.requirements,
            deadline=call.deadline,
            status=call.status,
        )

    async def save(
        self,
        data: CastingCallInput | CastingCallUpdate,
        casting_call_id: int | None = None,
    ) -> SaveOutcome:
        """Create a casting call, or update the given one with the set fields."""
        if casting_call_id is None:
            if not isinstance(data, CastingCallInput):
                raise TypeError("creating a casting call needs the full form")
            created = await self.registry.create(data)
            logger.info("Created casting call %r", data.title)
            return SaveOutcome(
                casting_call=created,
                notice=Notice.success(
                    "Created!", "Casting call has been created successfully."
                ),
            )
        updated = await self.registry.update(
            casting_call_id, data.model_dump(mode="json", exclude_unset=True)
        )
        logger.info("Updated casting call #%s", casting_call_id)
        return SaveOutcome(
            casting_call=updated,
            notice=Notice.success(
                "Updated!", "Casting call has been updated successfully."
            ),
        )

    def propose_delete(self, call: CastingCall) -> Confirmation:
        if self.registry.is_deleting(call.id):
            raise OperationInProgressError()
        return self.confirmations.propose(
            kind=DELETE_KIND,
            subject_id=call.id,
            title="Delete Casting Call?",
            text=(
                f'Are you sure you want to delete "{call.title}"? '
                "This action cannot be undone."
            ),
            confirm_label="Yes, delete it",
            tone=Tone.DESTRUCTIVE,
        )

    async def confirm_delete(self, confirmation_id: UUID) -> Notice:
        """Delete after confirmation; on failure the cached list is untouched."""
        confirmation = self.confirmations.peek(confirmation_id, DELETE_KIND)
        if self.registry.is_deleting(confirmation.subject_id):
            raise OperationInProgressError()
        # No suspension point between here and the delete taking its busy key.
        self.confirmations.take(confirmation_id, DELETE_KIND)
        try:
            await self.registry.delete(confirmation.subject_id)
        except ConsoleError as exc:
            logger.warning(
                "Failed to delete casting call #%s: %s",
                confirmation.subject_id,
                exc.message,
            )
            raise
        return Notice.success("Deleted!", "Casting call has been deleted.")

    def cancel(self, confirmation_id: UUID) -> None:
        self.confirmations.cancel(confirmation_id)
