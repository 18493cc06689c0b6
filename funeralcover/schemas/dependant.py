from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class Dependant(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    name: str
    dob: date | None = None


class DependantCreate(BaseModel):
    member_id: int
    name: str = Field(..., min_length=1, max_length=255)
    dob: date | None = None


class DependantUpdate(BaseModel):
    member_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=255)
    dob: date | None = None
