from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Payment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policy_id: int
    amount: Decimal
    paid_at: datetime
    reference: str | None = None


class PaymentCreate(BaseModel):
    policy_id: int
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount paid (must be > 0)")
    reference: str | None = Field(None, max_length=255)


class SubscriptionPayment(BaseModel):
    user_id: int
    # Emptiness is a domain rule (InvalidArgument), checked by the service.
    reference: str | None = Field(None, max_length=255)


class SubscriptionPaymentResult(BaseModel):
    message: str
    user_id: int
    new_expiry: datetime


class PaymentEvent(BaseModel):
    """Payment notification from the payment collaborator.

    Carries either ``user_id`` (subscription fee) or ``policy_id`` + ``amount``
    (premium), never both.
    """

    reference: str | None = Field(None, max_length=255)
    user_id: int | None = None
    policy_id: int | None = None
    amount: Decimal | None = Field(None, max_digits=12, decimal_places=2)

    @model_validator(mode="after")
    def exactly_one_target(self) -> "PaymentEvent":
        if (self.user_id is None) == (self.policy_id is None):
            raise ValueError("Exactly one of user_id or policy_id must be provided")
        return self


class PaymentEventResult(BaseModel):
    kind: str = Field(..., description="subscription or premium")
    subscription: SubscriptionPaymentResult | None = None
    payment: Payment | None = None
