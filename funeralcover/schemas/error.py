"""Standardized error response schema."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error body for domain exceptions (4xx/5xx)."""

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")


class AccessDeniedResponse(ErrorResponse):
    """Error body for an expired trial or subscription."""

    reason: str = Field(..., description="trial_expired or subscription_expired")
    trial_expired: bool = Field(..., description="True when the free trial (not a paid period) ran out")
