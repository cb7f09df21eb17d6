"""Pydantic schemas for accounts and the seller directory.

Separate request schemas (input) from read schemas (output).
"""

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=100)
    # admins are provisioned out of band, never self-registered
    role: str = Field(default="buyer", pattern=r"^(buyer|seller)$")


class LoginRequest(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    role: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Returned by register and login: a bearer token plus the user."""
    token: str
    token_type: str = "bearer"
    user: UserRead


class SellerRead(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
    product_count: int
