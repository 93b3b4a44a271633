"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.session_store import FileSessionStore
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.services.dashboard import is_valid_uuid

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    """Any HTTP answer counts as reachable; only transport failures fail."""

    try:
        async with build_async_client(settings) as client:
            response = await client.get("dashboard", timeout=settings.dashboard_timeout_seconds)
        return True, f"HTTP {response.status_code}"
    except httpx.TransportError as exc:
        return False, type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="LifeSync Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("User config", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))

    session_path = settings.resolved_session_file()
    session = FileSessionStore(session_path).get()
    if session is not None and session.is_authenticated:
        if session.user_id and is_valid_uuid(session.user_id):
            table.add_row("Session", "OK", f"{session.user_email} ({session_path})")
        else:
            table.add_row("Session", "WARN", "Stored user id is not a UUID -> run `lifesync login`")
    else:
        table.add_row("Session", "OPTIONAL", "Not signed in -> run `lifesync login`")

    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] Set LIFESYNC_API_BASE_URL or run `lifesync doctor setup`."
        )
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()
    base_url = typer.prompt("API base URL", default=settings.api_base_url, show_default=True).strip()
    if not base_url.startswith(("http://", "https://")):
        raise typer.BadParameter("base URL must start with http:// or https://")

    log_level = typer.prompt("Log level", default=settings.log_level, show_default=True).strip().upper()
    if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        raise typer.BadParameter("log level must be DEBUG, INFO, WARNING or ERROR")

    env_path = write_user_env_vars(
        {
            "LIFESYNC_API_BASE_URL": base_url,
            "LIFESYNC_LOG_LEVEL": log_level,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
