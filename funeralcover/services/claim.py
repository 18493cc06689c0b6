"""Claims workflow: submission and adjudication of funeral claims."""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

import funeralcover.repositories.claim as claim_repo
import funeralcover.repositories.policy as policy_repo
from funeralcover.db.models.claim import Claim as ClaimModel
from funeralcover.db.models.policy import Policy as PolicyModel
from funeralcover.domain.billing import PolicyStatus, to_money
from funeralcover.domain.claims import ClaimEvent, ClaimStatus, next_status
from funeralcover.errors import DomainValidationError, NotFoundError

logger = logging.getLogger(__name__)


def _has_documents(death_cert_ref: str | None, affidavit_ref: str | None) -> bool:
    return bool(death_cert_ref and death_cert_ref.strip()) and bool(
        affidavit_ref and affidavit_ref.strip()
    )


def get_claim(db: Session, claim_id: int) -> ClaimModel:
    claim = claim_repo.get_claim_by_id(db, claim_id)
    if not claim:
        raise NotFoundError("Claim not found")
    return claim


def list_claims(
    db: Session,
    policy_id: int | None = None,
    status: ClaimStatus | None = None,
) -> list[ClaimModel]:
    return claim_repo.get_all_claims(
        db,
        policy_id=policy_id,
        status=status.value if status is not None else None,
    )


def get_claimable_policy(db: Session, policy_id: int) -> PolicyModel:
    """
    Return the policy a claim would be opened against.

    Raises:
        NotFoundError: If the policy does not exist
        DomainValidationError: If the policy is not Active
    """
    policy = policy_repo.get_policy_by_id(db, policy_id)
    if not policy:
        raise NotFoundError(f"Policy with id {policy_id} not found")
    if policy.status != PolicyStatus.ACTIVE.value:
        raise DomainValidationError(
            f"Cannot submit a claim against a {policy.status} policy"
        )
    return policy


def submit_claim(
    db: Session,
    policy_id: int,
    death_cert_ref: str | None,
    affidavit_ref: str | None,
    now: datetime,
) -> ClaimModel:
    """
    Open a claim against a policy.

    - Both supporting documents (death certificate, affidavit) are required
    - The policy must exist and be Active

    Raises:
        DomainValidationError: If a document reference is missing or the policy is not Active
        NotFoundError: If the policy does not exist
    """
    if not _has_documents(death_cert_ref, affidavit_ref):
        raise DomainValidationError("Both a death certificate and an affidavit are required")

    get_claimable_policy(db, policy_id)

    claim = claim_repo.create_claim(
        db,
        policy_id=policy_id,
        death_cert_path=death_cert_ref.strip(),
        affidavit_path=affidavit_ref.strip(),
        created_at=now,
    )
    logger.info("Claim %s submitted on policy %s", claim.id, policy_id)
    return claim


def _transition(
    db: Session,
    claim: ClaimModel,
    target: ClaimStatus,
    now: datetime,
    **fields,
) -> ClaimModel:
    updated = claim_repo.update_claim(
        db,
        claim.id,
        status=target.value,
        updated_at=now,
        **fields,
    )
    logger.info("Claim %s moved to %s", claim.id, target.value)
    return updated


def begin_review(db: Session, claim_id: int, now: datetime) -> ClaimModel:
    """
    Submitted -> UnderReview.

    Raises:
        InvalidTransitionError: If the claim is not Submitted
        DomainValidationError: If either supporting document is missing
    """
    claim = get_claim(db, claim_id)
    target = next_status(ClaimStatus(claim.status), ClaimEvent.BEGIN_REVIEW)
    if not _has_documents(claim.death_cert_path, claim.affidavit_path):
        raise DomainValidationError(
            "Both a death certificate and an affidavit are required before review"
        )
    return _transition(db, claim, target, now)


def approve_claim(db: Session, claim_id: int, now: datetime) -> ClaimModel:
    """UnderReview -> Approved."""
    claim = get_claim(db, claim_id)
    target = next_status(ClaimStatus(claim.status), ClaimEvent.APPROVE)
    return _transition(db, claim, target, now)


def reject_claim(db: Session, claim_id: int, reason: str | None, now: datetime) -> ClaimModel:
    """
    UnderReview -> Rejected.

    Raises:
        InvalidTransitionError: If the claim is not UnderReview
        DomainValidationError: If no reason is given
    """
    claim = get_claim(db, claim_id)
    target = next_status(ClaimStatus(claim.status), ClaimEvent.REJECT)
    if reason is None or not reason.strip():
        raise DomainValidationError("A reason is required to reject a claim")
    return _transition(db, claim, target, now, rejection_reason=reason.strip())


def disburse_claim(
    db: Session,
    claim_id: int,
    payout_amount: Decimal | None,
    now: datetime,
) -> ClaimModel:
    """
    Approved -> Paid. Records the payout; moving the funds happens elsewhere.

    Raises:
        InvalidTransitionError: If the claim is not Approved
        DomainValidationError: If the payout is not > 0 or exceeds the policy's cover level
    """
    claim = get_claim(db, claim_id)
    target = next_status(ClaimStatus(claim.status), ClaimEvent.DISBURSE)
    if payout_amount is None or payout_amount <= 0:
        raise DomainValidationError("Payout amount must be greater than 0")

    cover_level = Decimal(claim.policy.cover_level)
    if payout_amount > cover_level:
        raise DomainValidationError(
            f"Payout amount {to_money(payout_amount)} exceeds the policy cover level {to_money(cover_level)}"
        )

    return _transition(
        db,
        claim,
        target,
        now,
        payout_amount=to_money(payout_amount),
        paid_at=now,
    )
