"""Policy ledger: policy records, premium payments and arrears."""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import funeralcover.repositories.claim as claim_repo
import funeralcover.repositories.member as member_repo
import funeralcover.repositories.payment as payment_repo
import funeralcover.repositories.policy as policy_repo
from funeralcover.db.models.payment import Payment as PaymentModel
from funeralcover.db.models.policy import Policy as PolicyModel
from funeralcover.domain.billing import (
    MANUAL_POLICY_TRANSITIONS,
    LapseRule,
    PolicyStatus,
    compute_arrears,
    elapsed_billing_periods,
    to_money,
)
from funeralcover.errors import (
    DomainValidationError,
    DuplicateResourceError,
    NotFoundError,
    NotSupportedError,
)
from funeralcover.schemas.policy import PolicyArrears

logger = logging.getLogger(__name__)


def get_policy(db: Session, policy_id: int) -> PolicyModel:
    policy = policy_repo.get_policy_by_id(db, policy_id)
    if not policy:
        raise NotFoundError("Policy not found")
    return policy


def list_policies(
    db: Session,
    member_id: int | None = None,
    status: PolicyStatus | None = None,
) -> list[PolicyModel]:
    return policy_repo.get_all_policies(
        db,
        member_id=member_id,
        status=status.value if status is not None else None,
    )


def create_policy(
    db: Session,
    member_id: int,
    plan_type: str,
    cover_level: Decimal,
    premium: Decimal,
    now: datetime,
    start_date: datetime | None = None,
) -> PolicyModel:
    """
    Create an Active policy for an existing member.

    - Validates member exists
    - Validates premium and cover level are non-negative
    - Start date defaults to ``now``

    Raises:
        NotFoundError: If the member does not exist
        DomainValidationError: If a monetary field is negative
    """
    if premium < 0:
        raise DomainValidationError("Premium must be >= 0")
    if cover_level < 0:
        raise DomainValidationError("Cover level must be >= 0")

    if not member_repo.get_member_by_id(db, member_id):
        raise NotFoundError(f"Member with id {member_id} not found")

    return policy_repo.create_policy(
        db,
        member_id=member_id,
        plan_type=plan_type,
        cover_level=to_money(cover_level),
        premium=to_money(premium),
        start_date=start_date or now,
        status=PolicyStatus.ACTIVE.value,
    )


def update_policy(db: Session, policy_id: int, **update_fields) -> PolicyModel:
    """
    Update a policy with business logic validation.

    - Premium and cover level stay non-negative
    - Status can only be moved to Cancelled by hand; Lapsed is set by the
      lapse check and reinstating a Lapsed policy is not supported

    Only fields explicitly provided in update_fields will be updated.

    Raises:
        NotFoundError: If the policy doesn't exist
        NotSupportedError: If the update would reinstate a Lapsed policy
        DomainValidationError: For any other disallowed status change or invalid value
    """
    policy = get_policy(db, policy_id)

    for field in ("plan_type", "cover_level", "premium", "start_date", "status"):
        if field in update_fields and update_fields[field] is None:
            raise DomainValidationError(f"{field} cannot be cleared")
    for field in ("cover_level", "premium"):
        if update_fields.get(field) is not None:
            if update_fields[field] < 0:
                raise DomainValidationError(f"{field} must be >= 0")
            update_fields[field] = to_money(update_fields[field])

    if "status" in update_fields:
        target = PolicyStatus(update_fields["status"])
        current = PolicyStatus(policy.status)
        if target != current:
            if current is PolicyStatus.LAPSED and target is PolicyStatus.ACTIVE:
                raise NotSupportedError("Policy reinstatement is not supported")
            if target not in MANUAL_POLICY_TRANSITIONS[current]:
                raise DomainValidationError(
                    f"Cannot change policy status from {current.value} to {target.value}"
                )
        update_fields["status"] = target.value

    return policy_repo.update_policy(db, policy_id, **update_fields)


def reinstate_policy(db: Session, policy_id: int) -> PolicyModel:
    """Reinstatement of lapsed policies is out of scope.

    Raises:
        NotFoundError: If the policy doesn't exist
        NotSupportedError: Always, for an existing policy
    """
    get_policy(db, policy_id)
    raise NotSupportedError("Policy reinstatement is not supported")


def delete_policy(db: Session, policy_id: int) -> None:
    """
    Delete a policy that has no ledger history.

    Raises:
        NotFoundError: If the policy doesn't exist
        DomainValidationError: If payments or claims reference the policy
    """
    get_policy(db, policy_id)

    if payment_repo.count_payments_by_policy_id(db, policy_id):
        raise DomainValidationError("Cannot delete policy: policy has recorded payments")
    if claim_repo.count_claims_by_policy_id(db, policy_id):
        raise DomainValidationError("Cannot delete policy: policy has claims")

    policy_repo.delete_policy(db, policy_id)


def _recorded_payment(db: Session, policy_id: int, reference: str) -> PaymentModel | None:
    """Return the payment already recorded under ``reference`` for this policy, if any."""
    existing = payment_repo.get_payment_by_reference(db, reference)
    if existing is None:
        return None
    if existing.policy_id != policy_id:
        raise DuplicateResourceError(
            f"Payment reference {reference} is already recorded for another policy"
        )
    logger.info("Payment %s already recorded for policy %s", reference, policy_id)
    return existing


def record_payment(
    db: Session,
    policy_id: int,
    amount: Decimal,
    now: datetime,
    reference: str | None = None,
) -> PaymentModel:
    """
    Append a premium payment to a policy's ledger.

    Status is never changed here: the lapse check runs separately, so a late
    payment on a Lapsed policy is still recorded. A payment reference that was
    already recorded for this policy returns the earlier payment unchanged.

    Raises:
        DomainValidationError: If amount is not > 0
        NotFoundError: If the policy doesn't exist
        DuplicateResourceError: If the reference belongs to another policy
    """
    if amount is None or amount <= 0:
        raise DomainValidationError("Payment amount must be greater than 0")
    reference = reference.strip() if reference else None

    policy = get_policy(db, policy_id)

    if reference:
        existing = _recorded_payment(db, policy_id, reference)
        if existing:
            return existing

    try:
        payment = payment_repo.append_payment(
            db,
            policy,
            amount=to_money(amount),
            paid_at=now,
            reference=reference,
        )
    except IntegrityError:
        # A replay of the same reference committed between the lookup and the insert.
        db.rollback()
        existing = _recorded_payment(db, policy_id, reference) if reference else None
        if existing is None:
            raise
        return existing
    logger.info("Recorded payment %s of %s on policy %s", payment.id, payment.amount, policy_id)
    return payment


def list_payments(db: Session, policy_id: int) -> list[PaymentModel]:
    get_policy(db, policy_id)
    return payment_repo.get_payments_by_policy_id(db, policy_id)


def policy_arrears(policy: PolicyModel, payments: list[PaymentModel], now: datetime) -> Decimal:
    """Arrears of ``policy`` at ``now`` given its recorded payments."""
    return compute_arrears(
        premium=Decimal(policy.premium),
        start_date=policy.start_date,
        payments=(Decimal(p.amount) for p in payments),
        now=now,
    )


def get_arrears(db: Session, policy_id: int, now: datetime) -> PolicyArrears:
    policy = get_policy(db, policy_id)
    payments = payment_repo.get_payments_by_policy_id(db, policy_id)
    arrears = policy_arrears(policy, payments, now)
    premium = to_money(policy.premium)
    return PolicyArrears(
        policy_id=policy.id,
        status=PolicyStatus(policy.status),
        premium=premium,
        elapsed_periods=elapsed_billing_periods(policy.start_date, now),
        total_paid=to_money(sum((Decimal(p.amount) for p in payments), Decimal("0"))),
        arrears=arrears,
        beyond_grace=LapseRule(premium=premium).should_lapse(arrears),
    )
