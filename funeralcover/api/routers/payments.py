from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_active_user, get_clock, get_db, verify_webhook_secret
from funeralcover.core.clock import Clock
from funeralcover.db.models.user import User
from funeralcover.schemas.payment import Payment, PaymentCreate, PaymentEvent, PaymentEventResult
from funeralcover.services.lifecycle import handle_payment_event
from funeralcover.services.policy import record_payment

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=Payment, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_data: PaymentCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(get_active_user),
):
    """
    Record a premium payment against a policy.

    The policy's status is not changed; lapsing is decided by the lapse check.
    """
    payment = record_payment(
        db,
        policy_id=payment_data.policy_id,
        amount=payment_data.amount,
        now=clock.now(),
        reference=payment_data.reference,
    )
    return Payment.model_validate(payment)


@router.post(
    "/webhook",
    response_model=PaymentEventResult,
    dependencies=[Depends(verify_webhook_secret)],
)
def payment_webhook(
    event: PaymentEvent,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Payment notification from the payment provider.

    - ``user_id`` + ``reference``: subscription fee, extends access to 30 days from now
    - ``policy_id`` + ``amount`` + ``reference``: premium, appended to the policy's ledger
      (replaying the same reference does not record it twice)
    """
    return handle_payment_event(db, event, clock.now())
