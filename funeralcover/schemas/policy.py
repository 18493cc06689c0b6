from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from funeralcover.domain.billing import PolicyStatus


class Policy(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    plan_type: str
    cover_level: Decimal
    premium: Decimal
    start_date: datetime
    status: PolicyStatus
    last_payment_at: datetime | None = None


class PolicyCreate(BaseModel):
    member_id: int
    plan_type: str = Field(..., min_length=1, max_length=100)
    cover_level: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    premium: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Premium per 30-day period (must be >= 0)")
    start_date: datetime | None = Field(None, description="Defaults to now")


class PolicyUpdate(BaseModel):
    plan_type: str | None = Field(None, min_length=1, max_length=100)
    cover_level: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    premium: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    start_date: datetime | None = None
    status: PolicyStatus | None = Field(None, description="Only Cancelled can be set manually")


class PolicyArrears(BaseModel):
    policy_id: int
    status: PolicyStatus
    premium: Decimal
    elapsed_periods: int
    total_paid: Decimal
    arrears: Decimal
    beyond_grace: bool = Field(..., description="True when arrears exceed one full premium")
