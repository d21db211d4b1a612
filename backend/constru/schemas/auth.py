"""Pydantic schemas for accounts and the refresh-token session lifecycle."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RefreshTokenRecord(BaseModel):
    """Stored session record as seen by the domain."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    token: str
    user_id: str
    expires_at: datetime
    revoked: bool
    created_at: datetime


class CreateRefreshToken(BaseModel):
    token: str
    user_id: str
    expires_at: datetime
    revoked: bool = False


class RegisterBody(BaseModel):
    email: str
    password: str = Field(min_length=1)
    first_name: str = ""
    last_name: str = ""


class LoginBody(BaseModel):
    email: str
    password: str


class RefreshBody(BaseModel):
    refresh_token: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    role: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until access token expires
    user: UserOut
