from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Agent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class AgentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
