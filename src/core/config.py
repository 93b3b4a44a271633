"""Core configuration.

Why here:
- Centralises environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP client, session store) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "lifesync"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "lifesync"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lifesync"
    return Path.home() / ".config" / "lifesync"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env file.

    `None` values are skipped so callers can pass optional prompts straight in.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# LifeSync user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars) without leaking into the Core.
    - A single configuration contract for CLI and adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIFESYNC_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="http://localhost:3000/api",
        min_length=8,
        description="Base URL of the LifeSync REST API.",
    )
    user_agent: str = Field(
        default="lifesync-cli/0.1",
        min_length=1,
        description="User-Agent sent with every API request.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Default per-request timeout (seconds).",
    )
    auth_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for sign-in/sign-up calls (seconds).",
    )
    dashboard_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for dashboard fetches (seconds).",
    )
    dashboard_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries for dashboard fetches on transient failures (network, 5xx).",
    )
    retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base delay for exponential backoff between retries.",
    )
    dashboard_cache_seconds: float = Field(
        default=300.0,
        ge=0,
        description="How long a fetched dashboard is served from cache.",
    )

    session_file: Path | None = Field(
        default=None,
        description="Where tokens are persisted. Defaults to <user config dir>/session.json.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR).",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON instead of the coloured console format.",
    )

    def resolved_session_file(self) -> Path:
        return self.session_file or get_user_config_dir() / "session.json"
