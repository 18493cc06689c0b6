from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_clock, get_db, verify_webhook_secret
from funeralcover.core.clock import Clock
from funeralcover.schemas.payment import SubscriptionPayment, SubscriptionPaymentResult
from funeralcover.services.lifecycle import apply_subscription_payment

router = APIRouter(
    prefix="/subscription",
    tags=["subscription"],
    dependencies=[Depends(verify_webhook_secret)],
)


@router.post("/pay", response_model=SubscriptionPaymentResult)
def pay_subscription(
    payment: SubscriptionPayment,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Record a subscription payment reported by the payment provider.

    Not behind login: users whose access has expired cannot log in, so this
    is called by the payment collaborator. The new expiry is always 30 days
    from now.
    """
    return apply_subscription_payment(db, payment.user_id, payment.reference, clock.now())
