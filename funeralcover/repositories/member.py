from sqlalchemy.orm import Session

from funeralcover.db.models.member import Member as MemberModel
from funeralcover.errors import NotFoundError


def get_member_by_id(db: Session, member_id: int) -> MemberModel | None:
    """Get a member by ID."""
    return db.query(MemberModel).filter(MemberModel.id == member_id).first()


def get_member_by_id_number(db: Session, id_number: str) -> MemberModel | None:
    """Get a member by government ID number. Used to check for duplicates."""
    return db.query(MemberModel).filter(MemberModel.id_number == id_number).first()


def get_all_members_paginated(
    db: Session, page: int = 1, page_size: int = 100, name: str | None = None
) -> tuple[list[MemberModel], int]:
    """
    Get all members with pagination, sorted by name for stable pagination.

    Args:
        page: Page number (1-indexed)
        page_size: Number of items per page
        name: Optional name filter (case-insensitive partial match)

    Returns:
        Tuple of (list of members, total count)
    """
    query = db.query(MemberModel)
    if name:
        query = query.filter(MemberModel.name.ilike(f"%{name}%"))
    total = query.count()
    skip = (page - 1) * page_size
    members = query.order_by(MemberModel.name, MemberModel.id).offset(skip).limit(page_size).all()
    return members, total


def create_member(
    db: Session,
    name: str,
    id_number: str,
    address: str | None = None,
    email: str | None = None,
) -> MemberModel:
    """Create a new member in the database. Pure data access - no business logic."""
    db_member = MemberModel(
        name=name,
        id_number=id_number,
        address=address,
        email=email,
    )
    db.add(db_member)
    db.commit()
    db.refresh(db_member)
    return db_member


def update_member(db: Session, member_id: int, **kwargs) -> MemberModel:
    """
    Update a member. Only updates fields that are explicitly provided.

    To clear a nullable field (address, email), explicitly pass it with None value.
    """
    member = get_member_by_id(db, member_id)
    if not member:
        raise NotFoundError("Member not found")

    for field in ("name", "id_number", "address", "email"):
        if field in kwargs:
            setattr(member, field, kwargs[field])

    db.commit()
    db.refresh(member)
    return member


def delete_member(db: Session, member_id: int) -> None:
    """Delete a member by ID."""
    member = get_member_by_id(db, member_id)
    if not member:
        raise NotFoundError("Member not found")

    db.delete(member)
    db.commit()
