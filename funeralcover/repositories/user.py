from datetime import datetime

from sqlalchemy.orm import Session

from funeralcover.db.models.user import User as UserModel
from funeralcover.errors import NotFoundError


def get_user_by_email(db: Session, email: str) -> UserModel | None:
    """Get a user by email."""
    return db.query(UserModel).filter(UserModel.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> UserModel | None:
    """Get a user by ID."""
    return db.query(UserModel).filter(UserModel.id == user_id).first()


def create_user(
    db: Session,
    email: str,
    name: str,
    password_hash: str,
    role_id: int,
) -> UserModel:
    """Create a new user in the database. Pure data access - no business logic."""
    db_user = UserModel(
        email=email,
        name=name,
        password_hash=password_hash,
        role_id=role_id,
        has_paid=False,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user_subscription(
    db: Session,
    user_id: int,
    subscription_expiry: datetime,
    has_paid: bool | None = None,
) -> UserModel:
    """Set a user's access window and, optionally, the paid flag."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    user.subscription_expiry = subscription_expiry
    if has_paid is not None:
        user.has_paid = has_paid

    db.commit()
    db.refresh(user)
    return user
