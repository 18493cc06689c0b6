import hmac

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from funeralcover.core.clock import Clock, SystemClock
from funeralcover.core.config import settings
from funeralcover.core.security import decode_token
from funeralcover.db.base import SessionLocal
from funeralcover.db.models.user import User
from funeralcover.errors import ForbiddenError, UnauthorizedError
from funeralcover.services.account import ensure_access
from funeralcover.services.documents import DocumentStorage, LocalDocumentStorage
from funeralcover.services.notifications import EmailNotificationSender, NotificationSender

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_system_clock = SystemClock()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_clock() -> Clock:
    return _system_clock


def get_notifier() -> NotificationSender:
    return EmailNotificationSender()


def get_document_storage() -> DocumentStorage:
    return LocalDocumentStorage(settings.upload_dir, max_bytes=settings.max_upload_bytes)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Get the current authenticated user from JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    # Validate token type - must be an "access" token
    if payload.get("type") != "access":
        raise credentials_exception

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_active_user(
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
) -> User:
    """Get the current user, rejecting anyone whose trial or subscription has expired."""
    ensure_access(current_user, clock.now())
    return current_user


def require_roles(*role_names: str):
    """
    Create a dependency that requires the current (active) user to have one of the specified roles.

    Args:
        *role_names: Variable number of role name strings to allow

    Returns:
        A dependency function that checks if the user has one of the required roles

    Example:
        Depends(require_roles("admin"))
    """
    def role_checker(current_user: User = Depends(get_active_user)) -> User:
        if current_user.role.name not in role_names:
            raise ForbiddenError("Not enough permissions")
        return current_user

    return role_checker


def verify_webhook_secret(x_webhook_secret: str | None = Header(None)) -> None:
    """Check the shared secret on payment webhooks when one is configured."""
    expected = settings.payment_webhook_secret
    if expected is None:
        return
    if x_webhook_secret is None or not hmac.compare_digest(x_webhook_secret, expected):
        raise UnauthorizedError("Invalid webhook secret")
