from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Member(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    id_number: str
    address: str | None = None
    email: str | None = None


class MemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    id_number: str = Field(..., min_length=1, max_length=32, description="Government ID number (unique)")
    address: str | None = None
    email: EmailStr | None = Field(None, description="Contact address for arrears reminders")


class MemberUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    id_number: str | None = Field(None, min_length=1, max_length=32)
    address: str | None = None
    email: EmailStr | None = None
