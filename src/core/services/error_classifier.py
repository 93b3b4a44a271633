"""HTTP failure classification.

Maps `(status, body, context)` to an `ErrorState`. The mapping is total:
unknown statuses fall back to SERVER_ERROR instead of raising, and malformed
bodies are treated as absent.

Messages are fixed strings (plus the retry-after minutes). They never echo
request data, and INVALID_CREDENTIALS does not say whether the account exists.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from core.domain.auth import AuthUser
from core.domain.errors import (
    ErrorCode,
    ErrorContext,
    ErrorState,
    ErrorType,
    Operation,
    UpstreamError,
    UpstreamErrorBody,
)

DEFAULT_RETRY_AFTER_SECONDS = 900
MAX_RETRY_AFTER_SECONDS = 86400

NETWORK_MESSAGE = "Network connection error. Please check your internet connection."
VALIDATION_FALLBACK_MESSAGE = "Invalid input"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
UNVERIFIED_EMAIL_MESSAGE = "Please verify your email address to continue."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."
EMAIL_EXISTS_MESSAGE = "This email address is already registered. Please sign in instead."
WEAK_PASSWORD_MESSAGE = (
    "Password does not meet strength requirements. Please choose a stronger password."
)
SERVER_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def parse_error_body(body: Any) -> UpstreamError | None:
    """Extract the nested `error` object, or None when the body does not match."""

    if not isinstance(body, Mapping):
        return None
    try:
        return UpstreamErrorBody.model_validate(body).error
    except ValidationError:
        return None


def retry_after_minutes(seconds: int) -> int:
    """Display value for a retry-after delay; never below one minute."""

    return max(1, math.ceil(min(seconds, MAX_RETRY_AFTER_SECONDS) / 60))


def _retry_after_seconds(error: UpstreamError | None, context: ErrorContext) -> int:
    raw = (error.details or {}).get("retryAfter") if error else None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool) and raw > 0:
        # ints are exact at any size; floats may be inf.
        if isinstance(raw, int) or math.isfinite(raw):
            return min(math.ceil(raw), MAX_RETRY_AFTER_SECONDS)
        return MAX_RETRY_AFTER_SECONDS
    if context.retry_after_seconds and context.retry_after_seconds > 0:
        return min(context.retry_after_seconds, MAX_RETRY_AFTER_SECONDS)
    return DEFAULT_RETRY_AFTER_SECONDS


def classify(
    status: int,
    body: Mapping[str, Any] | None = None,
    context: ErrorContext | None = None,
) -> ErrorState:
    """Turn a failed HTTP exchange into an `ErrorState`.

    Args:
        status: HTTP status code, or 0 when no response arrived (transport
            failure, timeout).
        body: Parsed JSON body of the error response, if any.
        context: Which operation failed and an optional Retry-After header value.
    """

    context = context or ErrorContext()
    error = parse_error_body(body)

    if status == 0:
        return ErrorState(
            code=ErrorCode.NETWORK_ERROR,
            message=NETWORK_MESSAGE,
            type=ErrorType.NETWORK,
            recoverable=True,
            status=status,
        )

    if status == 400:
        return ErrorState(
            code=ErrorCode.VALIDATION_ERROR,
            message=(error.message if error and error.message else VALIDATION_FALLBACK_MESSAGE),
            details=error.details if error else None,
            type=ErrorType.VALIDATION,
            recoverable=True,
            status=status,
        )

    if status == 401:
        if context.operation is Operation.SIGN_IN:
            return ErrorState(
                code=ErrorCode.INVALID_CREDENTIALS,
                message=INVALID_CREDENTIALS_MESSAGE,
                type=ErrorType.UNAUTHORIZED,
                recoverable=True,
                status=status,
            )
        return ErrorState(
            code=ErrorCode.UNAUTHORIZED,
            message=SESSION_EXPIRED_MESSAGE,
            type=ErrorType.UNAUTHORIZED,
            recoverable=False,
            status=status,
        )

    if status == 409:
        return ErrorState(
            code=ErrorCode.EMAIL_EXISTS,
            message=EMAIL_EXISTS_MESSAGE,
            details={"field": "email", "action": "sign-in"},
            type=ErrorType.VALIDATION,
            recoverable=True,
            status=status,
        )

    if status == 422:
        return ErrorState(
            code=ErrorCode.WEAK_PASSWORD,
            message=WEAK_PASSWORD_MESSAGE,
            details={"field": "password"},
            type=ErrorType.VALIDATION,
            recoverable=True,
            status=status,
        )

    if status == 429:
        seconds = _retry_after_seconds(error, context)
        upstream_details = error.details if error and error.details else {}
        return ErrorState(
            code=ErrorCode.RATE_LIMITED,
            message=(
                f"Too many attempts. Please try again in {retry_after_minutes(seconds)} minutes."
            ),
            details={**upstream_details, "retryAfter": seconds},
            type=ErrorType.NETWORK,
            recoverable=True,
            status=status,
        )

    # 5xx and anything unrecognised.
    return ErrorState(
        code=ErrorCode.SERVER_ERROR,
        message=SERVER_ERROR_MESSAGE,
        type=ErrorType.SERVER,
        recoverable=True,
        status=status,
    )


def check_email_verified(user: AuthUser) -> ErrorState | None:
    """Post-success check on a sign-in response.

    The API answers 200 for unconfirmed accounts; the only signal is a missing
    `email_confirmed_at`.
    """

    if user.is_email_verified:
        return None
    return ErrorState(
        code=ErrorCode.UNVERIFIED_EMAIL,
        message=UNVERIFIED_EMAIL_MESSAGE,
        details={"email": user.email},
        type=ErrorType.UNAUTHORIZED,
        recoverable=False,
        status=200,
    )


def is_retryable(state: ErrorState) -> bool:
    """Transient failures worth retrying automatically (transport, timeouts, 5xx)."""

    return state.code is ErrorCode.NETWORK_ERROR or state.status >= 500
