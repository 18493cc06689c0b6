from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_active_user, get_db
from funeralcover.schemas.dependant import Dependant, DependantCreate, DependantUpdate
from funeralcover.services import dependant as dependant_service

router = APIRouter(prefix="/dependants", tags=["dependants"], dependencies=[Depends(get_active_user)])


@router.get("", response_model=list[Dependant])
def get_all_dependants(
    member_id: int | None = Query(None, description="Only dependants of this member"),
    db: Session = Depends(get_db),
):
    dependants = dependant_service.list_dependants(db, member_id=member_id)
    return [Dependant.model_validate(dependant) for dependant in dependants]


@router.post("", response_model=Dependant, status_code=status.HTTP_201_CREATED)
def create_new_dependant(dependant_data: DependantCreate, db: Session = Depends(get_db)):
    dependant = dependant_service.create_dependant(
        db,
        member_id=dependant_data.member_id,
        name=dependant_data.name,
        dob=dependant_data.dob,
    )
    return Dependant.model_validate(dependant)


@router.get("/{dependant_id}", response_model=Dependant)
def get_dependant_by_id(dependant_id: int, db: Session = Depends(get_db)):
    return Dependant.model_validate(dependant_service.get_dependant(db, dependant_id))


@router.put("/{dependant_id}", response_model=Dependant)
def update_dependant_by_id(
    dependant_id: int,
    dependant_data: DependantUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a dependant.

    Fields not included in the request are not updated.
    To clear dob, explicitly include it with null value.
    """
    update_data = dependant_data.model_dump(exclude_unset=True)
    dependant = dependant_service.update_dependant(db, dependant_id, **update_data)
    return Dependant.model_validate(dependant)


@router.delete("/{dependant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_dependant_by_id(dependant_id: int, db: Session = Depends(get_db)):
    dependant_service.delete_dependant(db, dependant_id)
