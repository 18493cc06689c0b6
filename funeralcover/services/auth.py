"""Auth service: registration with a free trial, and login gated on access state."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

import funeralcover.repositories.role as role_repo
import funeralcover.repositories.user as user_repo
from funeralcover.core.security import (
    create_access_token,
    get_password_hash,
    validate_password,
    verify_password,
)
from funeralcover.db.models.user import User as UserModel
from funeralcover.errors import (
    DomainValidationError,
    DuplicateResourceError,
    NotFoundError,
    UnauthorizedError,
)
from funeralcover.schemas.user import Token, User, UserRegister
from funeralcover.services import account as account_service

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "agent"


def register(db: Session, user_data: UserRegister, now: datetime) -> UserModel:
    """
    Register a new user and open their 30-day trial.

    - Validates email uniqueness
    - Validates password strength
    - Assigns the default "agent" role
    - Hashes the password

    Raises:
        DuplicateResourceError: If the email is already registered.
        DomainValidationError: If the password is too weak.
    """
    existing_user = user_repo.get_user_by_email(db, user_data.email)
    if existing_user:
        raise DuplicateResourceError("Email already registered")

    is_valid, error_message = validate_password(user_data.password)
    if not is_valid:
        raise DomainValidationError(error_message)

    role = role_repo.get_role_by_name(db, DEFAULT_ROLE)
    if not role:
        raise NotFoundError(f"Role '{DEFAULT_ROLE}' not found")

    user = user_repo.create_user(
        db,
        email=user_data.email,
        name=user_data.name,
        password_hash=get_password_hash(user_data.password),
        role_id=role.id,
    )
    user = account_service.start_trial(db, user.id, now)
    logger.info("Registered user %s; trial ends %s", user.id, user.subscription_expiry.isoformat())
    return user


def login(db: Session, email: str, password: str, now: datetime) -> Token:
    """
    Authenticate user by email and password, return JWT access token.

    Credentials are checked before access, so a wrong password never reveals
    whether the account's trial has run out.

    Raises:
        UnauthorizedError: If email not found or password incorrect.
        AccessDeniedError: If the trial or subscription has expired.
    """
    user = user_repo.get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Incorrect email or password")

    state = account_service.ensure_access(user, now)

    access_token = create_access_token(data={"sub": user.id})
    return Token(
        access_token=access_token,
        token_type="bearer",
        user=User.model_validate(user),
        access_state=state,
    )
