from datetime import datetime

from sqlalchemy.orm import Session

from funeralcover.db.models.claim import Claim as ClaimModel
from funeralcover.domain.claims import INITIAL_STATUS
from funeralcover.errors import NotFoundError


def get_claim_by_id(db: Session, claim_id: int) -> ClaimModel | None:
    """Get a claim by ID."""
    return db.query(ClaimModel).filter(ClaimModel.id == claim_id).first()


def get_all_claims(
    db: Session,
    policy_id: int | None = None,
    status: str | None = None,
) -> list[ClaimModel]:
    """Get all claims, newest first, optionally filtered by policy and status."""
    query = db.query(ClaimModel)
    if policy_id is not None:
        query = query.filter(ClaimModel.policy_id == policy_id)
    if status is not None:
        query = query.filter(ClaimModel.status == status)
    return query.order_by(ClaimModel.created_at.desc(), ClaimModel.id.desc()).all()


def count_claims_by_policy_id(db: Session, policy_id: int) -> int:
    return db.query(ClaimModel).filter(ClaimModel.policy_id == policy_id).count()


def create_claim(
    db: Session,
    policy_id: int,
    death_cert_path: str | None,
    affidavit_path: str | None,
    created_at: datetime,
) -> ClaimModel:
    """Create a new claim in the database. Pure data access - no business logic."""
    db_claim = ClaimModel(
        policy_id=policy_id,
        death_cert_path=death_cert_path,
        affidavit_path=affidavit_path,
        status=INITIAL_STATUS.value,
        created_at=created_at,
        updated_at=created_at,
    )
    db.add(db_claim)
    db.commit()
    db.refresh(db_claim)
    return db_claim


def update_claim(db: Session, claim_id: int, **kwargs) -> ClaimModel:
    """Update a claim. Only updates fields that are explicitly provided."""
    claim = get_claim_by_id(db, claim_id)
    if not claim:
        raise NotFoundError("Claim not found")

    for field in ("status", "rejection_reason", "payout_amount", "paid_at", "updated_at"):
        if field in kwargs:
            setattr(claim, field, kwargs[field])

    db.commit()
    db.refresh(claim)
    return claim
