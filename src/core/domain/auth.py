"""Authentication request/response models (REST contract of /api/auth)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, repr=False)


class SignUpRequest(SignInRequest):
    """Same payload as sign-in; the strength policy is enforced server-side (422)."""


class AuthUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    email: str
    email_confirmed_at: datetime | None = None

    @property
    def is_email_verified(self) -> bool:
        return self.email_confirmed_at is not None


class AuthSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1, repr=False)
    refresh_token: str = Field(..., min_length=1, repr=False)
    expires_in: int | None = None
    token_type: str = "bearer"


class SignInResponse(BaseModel):
    """Body of a successful sign-in or sign-up."""

    model_config = ConfigDict(extra="ignore")

    user: AuthUser
    session: AuthSession


class StoredSession(BaseModel):
    """What the session store persists between CLI invocations."""

    access_token: str | None = Field(default=None, repr=False)
    refresh_token: str | None = Field(default=None, repr=False)
    user_id: str | None = None
    user_email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    @classmethod
    def from_response(cls, response: SignInResponse) -> "StoredSession":
        return cls(
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            user_id=response.user.id,
            user_email=response.user.email,
        )
