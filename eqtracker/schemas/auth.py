from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MemberLoginRequest(BaseModel):
    member_number: int = Field(..., alias="memberNumber", gt=0)

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"example": {"memberNumber": 42}},
    }


class ChairLoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {"example": {"email": "chair@example.org", "password": "secret"}},
    }


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    member_number: int
    email: str | None = None
    role: str
    can_manage_inventory: bool = False
