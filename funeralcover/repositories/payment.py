from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from funeralcover.db.models.payment import Payment as PaymentModel
from funeralcover.db.models.policy import Policy as PolicyModel


def get_payment_by_reference(db: Session, reference: str) -> PaymentModel | None:
    """Get a payment by its external reference. Used to ignore replayed webhooks."""
    return db.query(PaymentModel).filter(PaymentModel.reference == reference).first()


def get_payments_by_policy_id(db: Session, policy_id: int) -> list[PaymentModel]:
    """Get all payments for a policy, in the order they were made."""
    return (
        db.query(PaymentModel)
        .filter(PaymentModel.policy_id == policy_id)
        .order_by(PaymentModel.paid_at, PaymentModel.id)
        .all()
    )


def append_payment(
    db: Session,
    policy: PolicyModel,
    amount: Decimal,
    paid_at: datetime,
    reference: str | None = None,
) -> PaymentModel:
    """
    Append a payment to a policy's ledger.

    The policy's ``last_payment_at`` is stamped in the same transaction, which
    bumps its version so a concurrent lapse write on the same row goes stale.
    """
    db_payment = PaymentModel(
        policy_id=policy.id,
        amount=amount,
        paid_at=paid_at,
        reference=reference,
    )
    db.add(db_payment)
    policy.last_payment_at = paid_at
    db.commit()
    db.refresh(db_payment)
    return db_payment


def count_payments_by_policy_id(db: Session, policy_id: int) -> int:
    return db.query(PaymentModel).filter(PaymentModel.policy_id == policy_id).count()
