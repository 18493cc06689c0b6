from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_active_user, get_db
import funeralcover.repositories.role as role_repo
from funeralcover.schemas.role import Role

router = APIRouter(prefix="/roles", tags=["roles"], dependencies=[Depends(get_active_user)])


@router.get("", response_model=list[Role])
def get_roles(db: Session = Depends(get_db)):
    roles = role_repo.get_all_roles(db)
    return roles
