from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)

    model_config = {
        "json_schema_extra": {
            "example": {"email": "a@x.com", "password": "secret1"}
        },
    }


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {"email": "a@x.com", "password": "secret1"}
        },
    }


class UserOut(BaseModel):
    id: int
    email: str

    model_config = {"from_attributes": True}


class EmailCheck(BaseModel):
    exists: bool
