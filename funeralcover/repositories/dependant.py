from datetime import date

from sqlalchemy.orm import Session

from funeralcover.db.models.dependant import Dependant as DependantModel
from funeralcover.errors import NotFoundError


def get_dependant_by_id(db: Session, dependant_id: int) -> DependantModel | None:
    """Get a dependant by ID."""
    return db.query(DependantModel).filter(DependantModel.id == dependant_id).first()


def get_all_dependants(db: Session, member_id: int | None = None) -> list[DependantModel]:
    """Get all dependants, optionally only those of one member."""
    query = db.query(DependantModel)
    if member_id is not None:
        query = query.filter(DependantModel.member_id == member_id)
    return query.order_by(DependantModel.id).all()


def get_dependants_by_member_id(db: Session, member_id: int) -> list[DependantModel]:
    """Get all dependants for a specific member."""
    return db.query(DependantModel).filter(DependantModel.member_id == member_id).all()


def create_dependant(
    db: Session,
    member_id: int,
    name: str,
    dob: date | None = None,
) -> DependantModel:
    """Create a new dependant in the database. Pure data access - no business logic."""
    db_dependant = DependantModel(member_id=member_id, name=name, dob=dob)
    db.add(db_dependant)
    db.commit()
    db.refresh(db_dependant)
    return db_dependant


def update_dependant(db: Session, dependant_id: int, **kwargs) -> DependantModel:
    """Update a dependant. Only updates fields that are explicitly provided."""
    dependant = get_dependant_by_id(db, dependant_id)
    if not dependant:
        raise NotFoundError("Dependant not found")

    if "member_id" in kwargs:
        dependant.member_id = kwargs["member_id"]
    if "name" in kwargs:
        dependant.name = kwargs["name"]
    if "dob" in kwargs:
        dependant.dob = kwargs["dob"]  # Can be None to clear

    db.commit()
    db.refresh(dependant)
    return dependant


def delete_dependant(db: Session, dependant_id: int) -> None:
    """Delete a dependant by ID."""
    dependant = get_dependant_by_id(db, dependant_id)
    if not dependant:
        raise NotFoundError("Dependant not found")

    db.delete(dependant)
    db.commit()
