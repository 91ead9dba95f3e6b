"""Application status workflow.

Pure rules for which status changes an administrator may make and what each
change writes. Nothing here touches the database; the admin update handler
calls ``next_state`` before persisting anything.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from services.aid_service.errors import InvalidTransition, RejectionReasonRequired
from services.aid_service.models.enums import ApplicationStatus

TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset(
        {
            ApplicationStatus.UNDER_REVIEW,
            ApplicationStatus.APPROVED,
            ApplicationStatus.REJECTED,
        }
    ),
    ApplicationStatus.UNDER_REVIEW: frozenset(
        {ApplicationStatus.APPROVED, ApplicationStatus.REJECTED}
    ),
    ApplicationStatus.APPROVED: frozenset({ApplicationStatus.PAID}),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.PAID: frozenset(),
}

INITIAL_STATUS = ApplicationStatus.PENDING
TERMINAL_STATUSES = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


@dataclass(frozen=True)
class TransitionResult:
    """Field values a legal transition writes to the application."""

    status: ApplicationStatus
    reviewed_by: str
    reviewed_at: datetime
    admin_notes: Optional[str] = None
    paid_at: Optional[datetime] = None
    paid_amount: Optional[Decimal] = None

    def as_update(self) -> dict:
        """Only the fields this transition sets; untouched ones are left out."""
        update = {
            "status": self.status,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at,
        }
        if self.admin_notes is not None:
            update["admin_notes"] = self.admin_notes
        if self.status == ApplicationStatus.PAID:
            update["paid_at"] = self.paid_at
            update["paid_amount"] = self.paid_amount
        return update


def can_transition(current: ApplicationStatus, requested: ApplicationStatus) -> bool:
    return ApplicationStatus(requested) in TRANSITIONS[ApplicationStatus(current)]


def available_actions(current: ApplicationStatus) -> list[ApplicationStatus]:
    """Statuses an admin may move an application to, in display order."""
    order = list(ApplicationStatus)
    return sorted(TRANSITIONS[ApplicationStatus(current)], key=order.index)


def next_state(
    current: ApplicationStatus,
    requested: ApplicationStatus,
    actor: str,
    *,
    now: datetime,
    amount_requested: Decimal,
    admin_notes: Optional[str] = None,
) -> TransitionResult:
    """
    Validate ``current -> requested`` and compute what it writes.

    ``actor`` is the reviewer's user id. ``now`` is captured once by the caller
    so reviewed_at and paid_at reflect the same instant. Raises
    ``InvalidTransition`` for pairs outside the table and
    ``RejectionReasonRequired`` when rejecting without a reason.
    """
    current = ApplicationStatus(current)
    requested = ApplicationStatus(requested)

    if not can_transition(current, requested):
        raise InvalidTransition(current, requested)

    notes = admin_notes.strip() if admin_notes is not None else None
    if requested == ApplicationStatus.REJECTED and not notes:
        raise RejectionReasonRequired()

    if requested == ApplicationStatus.PAID:
        return TransitionResult(
            status=requested,
            reviewed_by=actor,
            reviewed_at=now,
            admin_notes=notes or None,
            paid_at=now,
            paid_amount=amount_requested,
        )

    return TransitionResult(
        status=requested,
        reviewed_by=actor,
        reviewed_at=now,
        admin_notes=notes or None,
    )
