from datetime import date

from sqlalchemy.orm import Session

import funeralcover.repositories.dependant as dependant_repo
import funeralcover.repositories.member as member_repo
from funeralcover.db.models.dependant import Dependant as DependantModel
from funeralcover.errors import DomainValidationError, NotFoundError


def _ensure_member_exists(db: Session, member_id: int) -> None:
    if not member_repo.get_member_by_id(db, member_id):
        raise NotFoundError(f"Member with id {member_id} not found")


def get_dependant(db: Session, dependant_id: int) -> DependantModel:
    dependant = dependant_repo.get_dependant_by_id(db, dependant_id)
    if not dependant:
        raise NotFoundError("Dependant not found")
    return dependant


def list_dependants(db: Session, member_id: int | None = None) -> list[DependantModel]:
    if member_id is not None:
        _ensure_member_exists(db, member_id)
    return dependant_repo.get_all_dependants(db, member_id=member_id)


def create_dependant(
    db: Session,
    member_id: int,
    name: str,
    dob: date | None = None,
) -> DependantModel:
    """
    Create a dependant for an existing member.

    Raises:
        NotFoundError: If the member does not exist
    """
    _ensure_member_exists(db, member_id)
    return dependant_repo.create_dependant(db, member_id=member_id, name=name, dob=dob)


def update_dependant(db: Session, dependant_id: int, **update_fields) -> DependantModel:
    """
    Update a dependant. Moving it to another member requires that member to exist.
    """
    get_dependant(db, dependant_id)

    if "member_id" in update_fields:
        if update_fields["member_id"] is None:
            raise DomainValidationError("A dependant must belong to a member")
        _ensure_member_exists(db, update_fields["member_id"])
    if "name" in update_fields and update_fields["name"] is None:
        raise DomainValidationError("Dependant name cannot be empty")

    return dependant_repo.update_dependant(db, dependant_id, **update_fields)


def delete_dependant(db: Session, dependant_id: int) -> None:
    get_dependant(db, dependant_id)
    dependant_repo.delete_dependant(db, dependant_id)
