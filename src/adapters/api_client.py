"""Async client for the LifeSync REST API.

Responsibility:
- Thin wrappers over `POST /auth/sign-up`, `POST /auth/sign-in` and
  `GET /dashboard`.
- Token handling: bearer header on protected calls, session stored on
  success, cleared on 401.
- Every failure is classified and raised as `ApiError`; callers only render
  `exc.state`.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from adapters.http_client import bearer_headers, build_async_client
from adapters.session_store import MemorySessionStore
from core.config import AppSettings
from core.domain.auth import SignInRequest, SignInResponse, SignUpRequest, StoredSession
from core.domain.dashboard import Dashboard, DashboardQuery
from core.domain.errors import ApiError, ErrorCode, ErrorContext, Operation
from core.interfaces.session_store import SessionStore
from core.services.error_classifier import check_email_verified, classify, is_retryable

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

SIGN_UP_PATH = "auth/sign-up"
SIGN_IN_PATH = "auth/sign-in"
DASHBOARD_PATH = "dashboard"


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _retry_after_header(response: httpx.Response) -> int | None:
    value = response.headers.get("Retry-After")
    if value and value.strip().isdigit():
        return int(value.strip())
    return None


class LifeSyncClient:
    """API client bound to one session store.

    Use as an async context manager, or pass an existing `httpx.AsyncClient`
    (which the caller then owns).
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        session_store: SessionStore | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings or AppSettings()
        self._store: SessionStore = session_store or MemorySessionStore()
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep
        self._clock = clock

        self._dashboard: Dashboard | None = None
        self._dashboard_params: dict[str, str] | None = None
        self._dashboard_fetched_at: float | None = None

    async def __aenter__(self) -> "LifeSyncClient":
        self._http()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def session_store(self) -> SessionStore:
        return self._store

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self._client

    # Auth

    async def sign_up(self, request: SignUpRequest) -> SignInResponse:
        """Create an account; the returned user is usually not verified yet."""

        response = await self._send(
            "POST",
            SIGN_UP_PATH,
            operation=Operation.SIGN_UP,
            timeout=self._settings.auth_timeout_seconds,
            json=request.model_dump(mode="json"),
        )
        result = self._parse(response, SignInResponse, Operation.SIGN_UP)
        self._store.set(StoredSession.from_response(result))
        logger.info("sign_up_succeeded", user_id=result.user.id)
        return result

    async def sign_in(self, request: SignInRequest) -> SignInResponse:
        """Sign in and persist the session.

        Raises:
            ApiError: INVALID_CREDENTIALS, RATE_LIMITED, ... on failure, and
                UNVERIFIED_EMAIL when the account has not been confirmed
                (the session is not stored in that case).
        """

        response = await self._send(
            "POST",
            SIGN_IN_PATH,
            operation=Operation.SIGN_IN,
            timeout=self._settings.auth_timeout_seconds,
            json=request.model_dump(mode="json"),
        )
        result = self._parse(response, SignInResponse, Operation.SIGN_IN)

        unverified = check_email_verified(result.user)
        if unverified is not None:
            logger.info("sign_in_unverified_email", user_id=result.user.id)
            raise ApiError(unverified)

        self._store.set(StoredSession.from_response(result))
        self.invalidate_cache()
        logger.info("sign_in_succeeded", user_id=result.user.id)
        return result

    def is_authenticated(self) -> bool:
        session = self._store.get()
        return session is not None and session.is_authenticated

    def require_session(self) -> StoredSession:
        """Guard for protected calls; raises UNAUTHORIZED when signed out."""

        session = self._store.get()
        if session is None or not session.is_authenticated:
            raise ApiError(classify(401, None, ErrorContext(operation=Operation.SESSION)))
        return session

    def logout(self) -> None:
        self._store.clear()
        self.invalidate_cache()

    # Dashboard

    async def fetch_dashboard(
        self,
        query: DashboardQuery | None = None,
        *,
        force: bool = False,
    ) -> Dashboard:
        """Fetch the dashboard, served from cache while fresh.

        Transport failures, timeouts and 5xx are retried with exponential
        backoff (`retry_backoff_seconds`, doubled after each attempt).
        """

        params = (query or DashboardQuery()).as_params()
        if not force and self._cache_valid(params):
            assert self._dashboard is not None
            return self._dashboard

        self.require_session()
        max_attempts = self._settings.dashboard_max_retries + 1
        attempt = 0
        while True:
            try:
                response = await self._send(
                    "GET",
                    DASHBOARD_PATH,
                    operation=Operation.SESSION,
                    timeout=self._settings.dashboard_timeout_seconds,
                    params=params,
                    authenticated=True,
                )
                break
            except ApiError as exc:
                attempt += 1
                if attempt >= max_attempts or not is_retryable(exc.state):
                    raise
                delay = self._settings.retry_backoff_seconds * 2 ** (attempt - 1)
                logger.info(
                    "dashboard_retry",
                    attempt=attempt,
                    delay_seconds=delay,
                    code=exc.state.code.value,
                )
                await self._sleep(delay)

        dashboard = self._parse(response, Dashboard, Operation.SESSION)
        self._dashboard = dashboard
        self._dashboard_params = params
        self._dashboard_fetched_at = self._clock()
        return dashboard

    def invalidate_cache(self) -> None:
        self._dashboard = None
        self._dashboard_params = None
        self._dashboard_fetched_at = None

    def _cache_valid(self, params: dict[str, str]) -> bool:
        if self._dashboard is None or self._dashboard_fetched_at is None:
            return False
        if params != self._dashboard_params:
            return False
        age = self._clock() - self._dashboard_fetched_at
        return age < self._settings.dashboard_cache_seconds

    # Plumbing

    async def _send(
        self,
        method: str,
        path: str,
        *,
        operation: Operation,
        timeout: float,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        authenticated: bool = False,
    ) -> httpx.Response:
        headers: dict[str, str] = {}
        if authenticated:
            session = self._store.get()
            headers.update(bearer_headers(session.access_token if session else None))

        try:
            response = await self._http().request(
                method,
                path,
                json=json,
                params=params,
                headers=headers,
                timeout=timeout,
            )
        except httpx.TransportError as exc:
            logger.warning("api_transport_error", method=method, path=path, error=type(exc).__name__)
            raise ApiError(classify(0, None, ErrorContext(operation=operation))) from exc

        logger.debug("api_response", method=method, path=path, status=response.status_code)
        if response.is_success:
            return response

        body = _json_or_none(response)
        context = ErrorContext(operation=operation, retry_after_seconds=_retry_after_header(response))
        state = classify(response.status_code, body, context)

        if state.code is ErrorCode.SERVER_ERROR:
            logger.error(
                "api_server_error",
                method=method,
                path=path,
                status=response.status_code,
                body=body if body is not None else response.text[:2000],
            )
        else:
            logger.warning(
                "api_request_failed",
                method=method,
                path=path,
                status=response.status_code,
                code=state.code.value,
            )

        if state.code is ErrorCode.UNAUTHORIZED:
            self.logout()
        raise ApiError(state)

    def _parse(self, response: httpx.Response, model: type[ModelT], operation: Operation) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.error(
                "api_unexpected_payload",
                path=str(response.request.url.path),
                status=response.status_code,
                error=str(exc),
            )
            raise ApiError(
                classify(response.status_code, None, ErrorContext(operation=operation))
            ) from exc
