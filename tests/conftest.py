"""Pytest configuration for LifeSync tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest

from adapters.session_store import MemorySessionStore
from core.config import AppSettings
from core.domain.auth import StoredSession

API_BASE_URL = "http://lifesync.test/api"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real LIFESYNC_* variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("LIFESYNC_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url=API_BASE_URL,
        session_file=tmp_path / "session.json",
        retry_backoff_seconds=0.0,
    )


@pytest.fixture
def signed_in_store() -> MemorySessionStore:
    return MemorySessionStore(
        StoredSession(
            access_token="access-123",
            refresh_token="refresh-456",
            user_id="user-1",
            user_email="ada@example.com",
        )
    )


@pytest.fixture
def sign_in_payload() -> dict[str, Any]:
    return {
        "user": {
            "id": "user-1",
            "email": "ada@example.com",
            "email_confirmed_at": "2024-03-01T10:00:00Z",
        },
        "session": {
            "access_token": "access-123",
            "refresh_token": "refresh-456",
            "expires_in": 3600,
        },
    }


@pytest.fixture
def dashboard_payload() -> dict[str, Any]:
    return {
        "summary": {
            "total_notes": 12,
            "categories": [
                {
                    "id": "0b9f1c52-4a57-4c1e-9d1a-0a5c2f6b7e11",
                    "name": "Mind",
                    "note_count": 3,
                    "daily_goal": 2,
                    "last_note": {"date": "2024-03-09", "title": "Morning pages"},
                },
                {
                    "id": "5d2e8f3a-1b4c-4d6e-8f9a-0b1c2d3e4f50",
                    "name": "Pets",
                    "note_count": 1,
                    "daily_goal": 4,
                },
            ],
            "note_dates": ["2024-03-08", "2024-03-09", "2024-03-10"],
        },
        "recent_reports": [
            {
                "id": "9a8b7c6d-5e4f-4a3b-2c1d-0e9f8a7b6c5d",
                "title": "Weekly reflection",
                "created_at": "2024-03-10T08:00:00Z",
                "generated_by": "system",
            }
        ],
    }
