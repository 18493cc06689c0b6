from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_active_user, get_clock, get_db
from funeralcover.core.clock import Clock
from funeralcover.domain.billing import PolicyStatus
from funeralcover.schemas.payment import Payment
from funeralcover.schemas.policy import Policy, PolicyArrears, PolicyCreate, PolicyUpdate
from funeralcover.services import policy as policy_service

router = APIRouter(prefix="/policies", tags=["policies"], dependencies=[Depends(get_active_user)])


@router.get("", response_model=list[Policy])
def get_all_policies(
    member_id: int | None = Query(None, description="Filter by member ID"),
    status: PolicyStatus | None = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
):
    policies = policy_service.list_policies(db, member_id=member_id, status=status)
    return [Policy.model_validate(policy) for policy in policies]


@router.post("", response_model=Policy, status_code=status.HTTP_201_CREATED)
def create_new_policy(
    policy_data: PolicyCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Create a policy for a member. New policies are Active; the start date
    defaults to now.
    """
    policy = policy_service.create_policy(
        db,
        member_id=policy_data.member_id,
        plan_type=policy_data.plan_type,
        cover_level=policy_data.cover_level,
        premium=policy_data.premium,
        now=clock.now(),
        start_date=policy_data.start_date,
    )
    return Policy.model_validate(policy)


@router.get("/{policy_id}", response_model=Policy)
def get_policy_by_id(policy_id: int, db: Session = Depends(get_db)):
    return Policy.model_validate(policy_service.get_policy(db, policy_id))


@router.put("/{policy_id}", response_model=Policy)
def update_policy_by_id(
    policy_id: int,
    policy_data: PolicyUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a policy.

    Fields not included in the request are not updated. Status can only be
    set to Cancelled; reinstating a Lapsed policy responds 501.
    """
    update_data = policy_data.model_dump(exclude_unset=True)
    policy = policy_service.update_policy(db, policy_id, **update_data)
    return Policy.model_validate(policy)


@router.delete("/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_policy_by_id(policy_id: int, db: Session = Depends(get_db)):
    """Delete a policy. Only policies without payments or claims can be deleted."""
    policy_service.delete_policy(db, policy_id)


@router.get("/{policy_id}/payments", response_model=list[Payment])
def get_policy_payments(policy_id: int, db: Session = Depends(get_db)):
    payments = policy_service.list_payments(db, policy_id)
    return [Payment.model_validate(payment) for payment in payments]


@router.get("/{policy_id}/arrears", response_model=PolicyArrears)
def get_policy_arrears(
    policy_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Premiums owed to date minus payments recorded (never negative)."""
    return policy_service.get_arrears(db, policy_id, clock.now())


@router.post("/{policy_id}/reinstate", response_model=Policy)
def reinstate_policy(policy_id: int, db: Session = Depends(get_db)):
    """Reinstating a lapsed policy is not supported; always responds 501."""
    return Policy.model_validate(policy_service.reinstate_policy(db, policy_id))
