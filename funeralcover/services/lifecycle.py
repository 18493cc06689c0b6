"""Routes external payment events to the account tracker or the policy ledger."""

from datetime import datetime

from sqlalchemy.orm import Session

from funeralcover.errors import DomainValidationError
from funeralcover.schemas.payment import (
    Payment,
    PaymentEvent,
    PaymentEventResult,
    SubscriptionPaymentResult,
)
from funeralcover.services import account as account_service
from funeralcover.services import policy as policy_service

SUBSCRIPTION = "subscription"
PREMIUM = "premium"


def apply_subscription_payment(
    db: Session, user_id: int, reference: str | None, now: datetime
) -> SubscriptionPaymentResult:
    user = account_service.apply_payment(db, user_id, reference, now)
    return SubscriptionPaymentResult(
        message="Payment recorded, subscription extended.",
        user_id=user.id,
        new_expiry=user.subscription_expiry,
    )


def handle_payment_event(db: Session, event: PaymentEvent, now: datetime) -> PaymentEventResult:
    """
    Dispatch a payment notification.

    - ``user_id``: subscription fee, applied by the account tracker
    - ``policy_id``: premium, appended to the policy ledger

    Every field is validated before anything is written.

    Raises:
        DomainValidationError: If the reference is blank, or a premium event has no positive amount
        NotFoundError: If the user or policy does not exist
    """
    if event.reference is None or not event.reference.strip():
        raise DomainValidationError("Payment reference is required")

    if event.policy_id is not None:
        if event.amount is None or event.amount <= 0:
            raise DomainValidationError("Payment amount must be greater than 0")
        payment = policy_service.record_payment(
            db,
            policy_id=event.policy_id,
            amount=event.amount,
            now=now,
            reference=event.reference,
        )
        return PaymentEventResult(kind=PREMIUM, payment=Payment.model_validate(payment))

    return PaymentEventResult(
        kind=SUBSCRIPTION,
        subscription=apply_subscription_payment(db, event.user_id, event.reference, now),
    )
