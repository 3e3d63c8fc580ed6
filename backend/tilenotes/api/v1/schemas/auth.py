from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class SignInRequest(BaseModel):
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="User's password")


class SignUpRequest(BaseModel):
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="User's password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class SessionUser(BaseModel):
    id: str
    email: str


class AuthResponse(BaseModel):
    """Session issued by Supabase after sign-up, sign-in or refresh."""

    access_token: str = Field(..., description="JWT access token for API calls")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    refresh_token: str | None = None
    user: SessionUser


class OAuthProvider(str, Enum):
    GOOGLE = "google"
    GITHUB = "github"


class OAuthUrlResponse(BaseModel):
    provider: OAuthProvider
    url: str = Field(..., description="Provider authorize URL to redirect the browser to")
