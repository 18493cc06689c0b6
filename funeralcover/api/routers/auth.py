from fastapi import APIRouter, Depends, Form, status
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_clock, get_current_user, get_db
from funeralcover.core.clock import Clock
from funeralcover.db.models.user import User as UserModel
from funeralcover.domain.access import days_remaining
from funeralcover.schemas.user import AccessStatus, RegistrationResult, Token, User, UserRegister
from funeralcover.services import auth as auth_service
from funeralcover.services.account import get_access_state

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegistrationResult, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Register a new user. The account starts with a free 30-day trial."""
    user = auth_service.register(db, user_data, clock.now())
    return RegistrationResult(
        message="Registered, trial for 30 days.",
        user=User.model_validate(user),
        trial_ends=user.subscription_expiry,
    )


@router.post("/login", response_model=Token)
def login(
    username: str = Form(...),  # OAuth2 uses "username", but we treat it as email
    password: str = Form(...),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Login endpoint - returns JWT token.
    Uses form data for OAuth2 compatibility (Swagger UI authorization).
    The 'username' field should contain the user's email address.

    Responds 403 with code ACCESS_DENIED when the trial or subscription has
    expired; ``trial_expired`` in the body tells the two apart.
    """
    return auth_service.login(db, email=username, password=password, now=clock.now())


@router.get("/me", response_model=AccessStatus)
def get_current_user_info(
    current_user: UserModel = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """Get current user information and access state. Available even after access expires."""
    now = clock.now()
    return AccessStatus(
        user=User.model_validate(current_user),
        access_state=get_access_state(current_user, now),
        days_remaining=days_remaining(current_user.subscription_expiry, now),
    )
