from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from funeralcover.domain.access import AccessState
from funeralcover.schemas.role import Role


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: Role
    subscription_expiry: datetime | None = None
    has_paid: bool


class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)


class RegistrationResult(BaseModel):
    message: str
    user: User
    trial_ends: datetime


class AccessStatus(BaseModel):
    user: User
    access_state: AccessState
    days_remaining: int


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
    access_state: AccessState
