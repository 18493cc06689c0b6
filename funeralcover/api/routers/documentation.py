from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_active_user, get_db
from funeralcover.core.config import settings
from funeralcover.errors import NotFoundError
from funeralcover.services import policy as policy_service

router = APIRouter(prefix="/documentation", tags=["documentation"], dependencies=[Depends(get_active_user)])


@router.get("/{policy_id}", response_class=FileResponse)
def download_policy_document(policy_id: int, db: Session = Depends(get_db)):
    """Download the policy wording document for a policy."""
    policy = policy_service.get_policy(db, policy_id)
    path = Path(settings.policy_document_path)
    if not path.is_file():
        raise NotFoundError("Policy document not available")
    return FileResponse(
        path,
        media_type="application/pdf",
        filename=f"policy-{policy.id}{path.suffix}",
    )
