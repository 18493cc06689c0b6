from __future__ import annotations

from enum import Enum

from funeralcover.errors import InvalidTransitionError


class ClaimStatus(str, Enum):
    SUBMITTED = "Submitted"
    UNDER_REVIEW = "UnderReview"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    PAID = "Paid"


class ClaimEvent(str, Enum):
    BEGIN_REVIEW = "begin_review"
    APPROVE = "approve"
    REJECT = "reject"
    DISBURSE = "disburse"


INITIAL_STATUS = ClaimStatus.SUBMITTED

TERMINAL_STATUSES = frozenset({ClaimStatus.REJECTED, ClaimStatus.PAID})

TRANSITIONS: dict[tuple[ClaimStatus, ClaimEvent], ClaimStatus] = {
    (ClaimStatus.SUBMITTED, ClaimEvent.BEGIN_REVIEW): ClaimStatus.UNDER_REVIEW,
    (ClaimStatus.UNDER_REVIEW, ClaimEvent.APPROVE): ClaimStatus.APPROVED,
    (ClaimStatus.UNDER_REVIEW, ClaimEvent.REJECT): ClaimStatus.REJECTED,
    (ClaimStatus.APPROVED, ClaimEvent.DISBURSE): ClaimStatus.PAID,
}


def is_terminal(status: ClaimStatus) -> bool:
    return status in TERMINAL_STATUSES


def next_status(current: ClaimStatus, event: ClaimEvent) -> ClaimStatus:
    """Return the status ``event`` leads to from ``current``.

    Guards (documents present, rejection reason, payout amount) are checked by
    the caller; this only enforces the shape of the workflow.

    Raises:
        InvalidTransitionError: If ``current`` is terminal or the event is not
            allowed from it.
    """
    if is_terminal(current):
        raise InvalidTransitionError(
            f"Claim is {current.value}; no further transitions are allowed"
        )
    target = TRANSITIONS.get((current, event))
    if target is None:
        allowed = [e.value for (s, e) in TRANSITIONS if s == current]
        raise InvalidTransitionError(
            f"Cannot {event.value} a claim that is {current.value}. Allowed: {allowed}"
        )
    return target
