from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_active_user, get_clock, get_db, get_document_storage, require_roles
from funeralcover.core.clock import Clock
from funeralcover.db.models.user import User
from funeralcover.domain.claims import ClaimStatus
from funeralcover.errors import DomainValidationError
from funeralcover.schemas.claim import Claim, ClaimDisburse, ClaimReject
from funeralcover.services import claim as claim_service
from funeralcover.services.documents import DocumentStorage

router = APIRouter(prefix="/claims", tags=["claims"])


@router.get("", response_model=list[Claim])
def get_all_claims(
    policy_id: int | None = Query(None, description="Filter by policy ID"),
    status: ClaimStatus | None = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_active_user),
):
    claims = claim_service.list_claims(db, policy_id=policy_id, status=status)
    return [Claim.model_validate(claim) for claim in claims]


@router.post("", response_model=Claim, status_code=status.HTTP_201_CREATED)
async def submit_new_claim(
    policy_id: int = Form(...),
    death_cert: UploadFile | None = File(None),
    affidavit: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    storage: DocumentStorage = Depends(get_document_storage),
    current_user: User = Depends(get_active_user),
):
    """
    Submit a claim against an Active policy.

    Both a death certificate and an affidavit must be uploaded.
    """
    if death_cert is None or affidavit is None:
        raise DomainValidationError("Both a death certificate and an affidavit are required")

    # Nothing is stored for a claim that would be refused.
    claim_service.get_claimable_policy(db, policy_id)

    death_cert_ref = await storage.save(death_cert, "death_cert")
    affidavit_ref = await storage.save(affidavit, "affidavit")
    claim = claim_service.submit_claim(
        db,
        policy_id=policy_id,
        death_cert_ref=death_cert_ref,
        affidavit_ref=affidavit_ref,
        now=clock.now(),
    )
    return Claim.model_validate(claim)


@router.get("/{claim_id}", response_model=Claim)
def get_claim_by_id(
    claim_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_active_user),
):
    return Claim.model_validate(claim_service.get_claim(db, claim_id))


@router.post("/{claim_id}/review", response_model=Claim)
def begin_claim_review(
    claim_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(require_roles("admin")),
):
    return Claim.model_validate(claim_service.begin_review(db, claim_id, clock.now()))


@router.post("/{claim_id}/approve", response_model=Claim)
def approve_claim(
    claim_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(require_roles("admin")),
):
    return Claim.model_validate(claim_service.approve_claim(db, claim_id, clock.now()))


@router.post("/{claim_id}/reject", response_model=Claim)
def reject_claim(
    claim_id: int,
    reject_data: ClaimReject,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(require_roles("admin")),
):
    """Reject a claim under review. A reason is required."""
    claim = claim_service.reject_claim(db, claim_id, reject_data.reason, clock.now())
    return Claim.model_validate(claim)


@router.post("/{claim_id}/disburse", response_model=Claim)
def disburse_claim(
    claim_id: int,
    disburse_data: ClaimDisburse,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(require_roles("admin")),
):
    """Mark an approved claim as paid out. The payout may not exceed the policy cover level."""
    claim = claim_service.disburse_claim(db, claim_id, disburse_data.payout_amount, clock.now())
    return Claim.model_validate(claim)
