"""Normalised, UI-ready error states.

`ErrorState` is what every failed API call turns into. The CLI (or any other
front end) only looks at `message`, `type` and `recoverable`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    NETWORK_ERROR = "NETWORK_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNVERIFIED_EMAIL = "UNVERIFIED_EMAIL"
    UNAUTHORIZED = "UNAUTHORIZED"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    RATE_LIMITED = "RATE_LIMITED"
    SERVER_ERROR = "SERVER_ERROR"


class ErrorType(str, Enum):
    """Coarse bucket that decides UI treatment (redirect, inline, retry)."""

    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    SERVER = "server"
    NETWORK = "network"


class Operation(str, Enum):
    """Which kind of call failed; 401 means different things per operation."""

    SIGN_IN = "sign_in"
    SIGN_UP = "sign_up"
    SESSION = "session"


class ErrorContext(BaseModel):
    """Auxiliary information the caller knows but the response body does not carry."""

    model_config = ConfigDict(frozen=True)

    operation: Operation = Operation.SESSION
    retry_after_seconds: int | None = Field(
        default=None,
        description="Value of a Retry-After header, used when the body has none.",
    )


class ErrorState(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: str = Field(..., min_length=1)
    details: dict[str, Any] | None = None
    type: ErrorType
    recoverable: bool
    status: int = Field(default=0, description="Originating HTTP status (0 for transport failures).")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_rate_limited(self) -> bool:
        return self.code is ErrorCode.RATE_LIMITED

    @property
    def retry_after_seconds(self) -> int | None:
        if not self.is_rate_limited or not self.details:
            return None
        value = self.details.get("retryAfter")
        return value if isinstance(value, int) else None

    @property
    def requires_login(self) -> bool:
        """True when the only way forward is signing in again."""

        return self.code is ErrorCode.UNAUTHORIZED


class UpstreamError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


class UpstreamErrorBody(BaseModel):
    """`{"error": {"code", "message", "details"}}` as sent by the API."""

    model_config = ConfigDict(extra="ignore")

    error: UpstreamError | None = None


class LifeSyncError(Exception):
    """Base class for errors raised by LifeSync adapters."""


class ApiError(LifeSyncError):
    """A failed API call, already classified for display."""

    def __init__(self, state: ErrorState) -> None:
        super().__init__(state.message)
        self.state = state

    @property
    def code(self) -> ErrorCode:
        return self.state.code
