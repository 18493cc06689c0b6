from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from funeralcover.db.models.policy import Policy as PolicyModel
from funeralcover.domain.billing import PolicyStatus
from funeralcover.errors import NotFoundError


def get_policy_by_id(db: Session, policy_id: int) -> PolicyModel | None:
    """Get a policy by ID."""
    return db.query(PolicyModel).filter(PolicyModel.id == policy_id).first()


def get_all_policies(
    db: Session,
    member_id: int | None = None,
    status: str | None = None,
) -> list[PolicyModel]:
    """Get all policies, optionally filtered by member and status."""
    query = db.query(PolicyModel)
    if member_id is not None:
        query = query.filter(PolicyModel.member_id == member_id)
    if status is not None:
        query = query.filter(PolicyModel.status == status)
    return query.order_by(PolicyModel.id).all()


def get_policies_by_member_id(db: Session, member_id: int) -> list[PolicyModel]:
    """Get all policies for a specific member."""
    return db.query(PolicyModel).filter(PolicyModel.member_id == member_id).all()


def get_active_policies(db: Session) -> list[PolicyModel]:
    """Get every policy whose status is Active, oldest first."""
    return (
        db.query(PolicyModel)
        .filter(PolicyModel.status == PolicyStatus.ACTIVE.value)
        .order_by(PolicyModel.id)
        .all()
    )


def create_policy(
    db: Session,
    member_id: int,
    plan_type: str,
    cover_level: Decimal,
    premium: Decimal,
    start_date: datetime,
    status: str = PolicyStatus.ACTIVE.value,
) -> PolicyModel:
    """Create a new policy in the database. Pure data access - no business logic."""
    db_policy = PolicyModel(
        member_id=member_id,
        plan_type=plan_type,
        cover_level=cover_level,
        premium=premium,
        start_date=start_date,
        status=status,
    )
    db.add(db_policy)
    db.commit()
    db.refresh(db_policy)
    return db_policy


def update_policy(db: Session, policy_id: int, **kwargs) -> PolicyModel:
    """
    Update a policy. Only updates fields that are explicitly provided.

    Fields not provided are not updated.
    """
    policy = get_policy_by_id(db, policy_id)
    if not policy:
        raise NotFoundError("Policy not found")

    for field in ("plan_type", "cover_level", "premium", "start_date", "status"):
        if field in kwargs:
            setattr(policy, field, kwargs[field])

    db.commit()
    db.refresh(policy)
    return policy


def mark_policy_lapsed(db: Session, policy: PolicyModel) -> PolicyModel:
    """
    Move an Active policy to Lapsed and commit.

    The UPDATE is guarded by the version counter, so it raises
    ``sqlalchemy.orm.exc.StaleDataError`` if the row changed since it was read.
    """
    policy.status = PolicyStatus.LAPSED.value
    db.commit()
    db.refresh(policy)
    return policy


def delete_policy(db: Session, policy_id: int) -> None:
    """Delete a policy by ID."""
    policy = get_policy_by_id(db, policy_id)
    if not policy:
        raise NotFoundError("Policy not found")

    db.delete(policy)
    db.commit()
