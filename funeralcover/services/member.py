from sqlalchemy.orm import Session

import funeralcover.repositories.dependant as dependant_repo
import funeralcover.repositories.member as member_repo
import funeralcover.repositories.policy as policy_repo
from funeralcover.db.models.member import Member as MemberModel
from funeralcover.errors import DomainValidationError, DuplicateResourceError, NotFoundError


def get_member(db: Session, member_id: int) -> MemberModel:
    member = member_repo.get_member_by_id(db, member_id)
    if not member:
        raise NotFoundError("Member not found")
    return member


def get_all_members(
    db: Session, page: int = 1, page_size: int = 100, name: str | None = None
) -> tuple[list[MemberModel], int]:
    """Get all members with pagination and an optional name filter."""
    return member_repo.get_all_members_paginated(
        db, page=page, page_size=page_size, name=name
    )


def create_member(
    db: Session,
    name: str,
    id_number: str,
    address: str | None = None,
    email: str | None = None,
) -> MemberModel:
    """
    Create a member with domain validation.

    - Enforces uniqueness of the government ID number

    Raises:
        DuplicateResourceError: If id_number already exists
    """
    existing = member_repo.get_member_by_id_number(db, id_number)
    if existing:
        raise DuplicateResourceError(f"A member with ID number {id_number} already exists")
    return member_repo.create_member(
        db,
        name=name,
        id_number=id_number,
        address=address,
        email=email,
    )


def update_member(db: Session, member_id: int, **update_fields) -> MemberModel:
    """
    Update a member with domain validation.

    - Validates member exists
    - Enforces uniqueness of id_number if it is being changed

    Only fields explicitly provided in update_fields will be updated.
    """
    member = get_member(db, member_id)

    if "name" in update_fields and update_fields["name"] is None:
        raise DomainValidationError("Member name cannot be empty")
    if "id_number" in update_fields:
        id_number = update_fields["id_number"]
        if id_number is None:
            raise DomainValidationError("Member ID number cannot be empty")
        if id_number != member.id_number:
            existing = member_repo.get_member_by_id_number(db, id_number)
            if existing:
                raise DuplicateResourceError(
                    f"A member with ID number {id_number} already exists"
                )

    return member_repo.update_member(db, member_id, **update_fields)


def delete_member(db: Session, member_id: int) -> None:
    """
    Delete a member with business logic validation.

    - Validates member exists
    - Validates member has no dependants and no policies

    Raises:
        NotFoundError: If member doesn't exist
        DomainValidationError: If member still owns dependants or policies
    """
    get_member(db, member_id)

    if policy_repo.get_policies_by_member_id(db, member_id):
        raise DomainValidationError("Cannot delete member: member has associated policies")
    if dependant_repo.get_dependants_by_member_id(db, member_id):
        raise DomainValidationError("Cannot delete member: member has associated dependants")

    member_repo.delete_member(db, member_id)
