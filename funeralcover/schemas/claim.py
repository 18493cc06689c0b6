from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from funeralcover.domain.claims import ClaimStatus


class Claim(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policy_id: int
    death_cert_path: str | None = None
    affidavit_path: str | None = None
    status: ClaimStatus
    created_at: datetime
    updated_at: datetime
    rejection_reason: str | None = None
    payout_amount: Decimal | None = None
    paid_at: datetime | None = None


class ClaimReject(BaseModel):
    reason: str | None = Field(None, description="Why the claim was rejected (required)")


class ClaimDisburse(BaseModel):
    payout_amount: Decimal = Field(..., max_digits=12, decimal_places=2)
