from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from funeralcover.domain.billing import BILLING_PERIOD

# The free trial and each paid subscription period last one billing period.
TRIAL_PERIOD = BILLING_PERIOD
SUBSCRIPTION_PERIOD = BILLING_PERIOD


class AccessState(str, Enum):
    TRIAL_ACTIVE = "trial_active"
    TRIAL_EXPIRED = "trial_expired"
    PAID_ACTIVE = "paid_active"
    PAID_EXPIRED = "paid_expired"

    @property
    def is_active(self) -> bool:
        return self in (AccessState.TRIAL_ACTIVE, AccessState.PAID_ACTIVE)


def evaluate_access(*, expiry: datetime | None, has_paid: bool, now: datetime) -> AccessState:
    """Derive a user's access state.

    Active iff ``expiry`` is set and strictly after ``now``; an expiry equal to
    ``now`` has already lapsed. ``has_paid`` picks the Trial or Paid family.
    """
    active = expiry is not None and expiry > now
    if has_paid:
        return AccessState.PAID_ACTIVE if active else AccessState.PAID_EXPIRED
    return AccessState.TRIAL_ACTIVE if active else AccessState.TRIAL_EXPIRED


def trial_expiry(now: datetime) -> datetime:
    return now + TRIAL_PERIOD


def subscription_expiry(now: datetime) -> datetime:
    # Resets to a full period from now; remaining trial or paid time does not stack.
    return now + SUBSCRIPTION_PERIOD


def days_remaining(expiry: datetime | None, now: datetime) -> int:
    if expiry is None or expiry <= now:
        return 0
    return (expiry - now) // timedelta(days=1)
