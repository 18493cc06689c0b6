"""Account state tracker: trial start, access evaluation and subscription payments."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

import funeralcover.repositories.user as user_repo
from funeralcover.core.config import settings
from funeralcover.db.models.user import User as UserModel
from funeralcover.domain.access import (
    AccessState,
    evaluate_access,
    subscription_expiry,
    trial_expiry,
)
from funeralcover.errors import (
    SUBSCRIPTION_EXPIRED,
    TRIAL_EXPIRED,
    AccessDeniedError,
    DomainValidationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def start_trial(db: Session, user_id: int, now: datetime) -> UserModel:
    """
    Open the 30-day free trial for a newly registered user.

    Raises:
        NotFoundError: If the user does not exist.
    """
    user = user_repo.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")

    return user_repo.update_user_subscription(db, user_id, subscription_expiry=trial_expiry(now))


def get_access_state(user: UserModel, now: datetime) -> AccessState:
    return evaluate_access(
        expiry=user.subscription_expiry,
        has_paid=bool(user.has_paid),
        now=now,
    )


def ensure_access(user: UserModel, now: datetime) -> AccessState:
    """
    Return the user's access state if it is an Active variant.

    Raises:
        AccessDeniedError: With reason TRIAL_EXPIRED or SUBSCRIPTION_EXPIRED.
    """
    state = get_access_state(user, now)
    if state.is_active:
        return state

    fee = settings.subscription_fee_label
    if state is AccessState.TRIAL_EXPIRED:
        raise AccessDeniedError(f"Trial expired. Pay {fee} to continue.", reason=TRIAL_EXPIRED)
    raise AccessDeniedError(
        f"Subscription expired. Pay {fee} to continue.", reason=SUBSCRIPTION_EXPIRED
    )


def apply_payment(db: Session, user_id: int, reference: str | None, now: datetime) -> UserModel:
    """
    Record a subscription payment for a user.

    - Requires a non-empty payment reference
    - Marks the user as paid
    - Resets the expiry to exactly 30 days from ``now``; time left on a trial
      or earlier payment is not carried over

    Raises:
        DomainValidationError: If the reference is missing or blank.
        NotFoundError: If the user does not exist.
    """
    if reference is None or not reference.strip():
        raise DomainValidationError("Payment reference is required")

    user = user_repo.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")

    new_expiry = subscription_expiry(now)
    user = user_repo.update_user_subscription(
        db, user_id, subscription_expiry=new_expiry, has_paid=True
    )
    logger.info(
        "Subscription payment %s applied to user %s; access until %s",
        reference.strip(),
        user_id,
        new_expiry.isoformat(),
    )
    return user
