from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_active_user, get_db
from funeralcover.schemas.member import Member, MemberCreate, MemberUpdate
from funeralcover.schemas.pagination import PaginatedResponse
from funeralcover.services import member as member_service

router = APIRouter(prefix="/members", tags=["members"], dependencies=[Depends(get_active_user)])


@router.get("", response_model=PaginatedResponse[Member])
def get_all_members(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    name: str | None = Query(None, description="Filter members by name (partial match)"),
    db: Session = Depends(get_db),
):
    """Get all members with pagination."""
    members, total = member_service.get_all_members(db, page=page, page_size=page_size, name=name)
    return PaginatedResponse(
        items=[Member.model_validate(member) for member in members],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=Member, status_code=status.HTTP_201_CREATED)
def create_new_member(member_data: MemberCreate, db: Session = Depends(get_db)):
    """Create a member. The government ID number must be unique."""
    member = member_service.create_member(
        db,
        name=member_data.name,
        id_number=member_data.id_number,
        address=member_data.address,
        email=member_data.email,
    )
    return Member.model_validate(member)


@router.get("/{member_id}", response_model=Member)
def get_member_by_id(member_id: int, db: Session = Depends(get_db)):
    return Member.model_validate(member_service.get_member(db, member_id))


@router.put("/{member_id}", response_model=Member)
def update_member_by_id(
    member_id: int,
    member_data: MemberUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a member.

    Fields not included in the request are not updated.
    To clear address or email, explicitly include it with null value.
    """
    update_data = member_data.model_dump(exclude_unset=True)
    member = member_service.update_member(db, member_id, **update_data)
    return Member.model_validate(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member_by_id(member_id: int, db: Session = Depends(get_db)):
    """
    Delete a member.

    A member can only be deleted once they have no dependants and no policies.
    """
    member_service.delete_member(db, member_id)
