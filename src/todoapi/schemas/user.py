"""Pydantic schemas for user accounts.

Learn: Separate "Create" schemas (input) from "Read" schemas (output).
UserRead is the only shape a user ever leaves the API in: no password
hash, no token list.
"""

import uuid

from pydantic import BaseModel, EmailStr, Field

MIN_PASSWORD_LENGTH = 6


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class UserLogin(BaseModel):
    # Not validated beyond being strings: a malformed email just fails login.
    email: str
    password: str


class UserRead(BaseModel):
    id: uuid.UUID
    email: str

    model_config = {"from_attributes": True}


class LoginRead(UserRead):
    """Login response. The token is also sent in the auth header."""
    token: str
