"""
Pydantic models for registration and login.
"""

from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    email: str = Field(..., examples=["admin@example.com"])
    name: str = Field(..., min_length=1, max_length=100, examples=["Catalog Admin"])
    password: str = Field(..., min_length=8, examples=["strongpassword"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("A valid email address is required")
        return v


class UserLogin(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
