"""LifeSync command line.

Commands are thin: they parse input, call the core/adapters, and render with
`cli.ui_components`. Failed API calls surface as `ApiError` and are rendered
as an error panel with a non-zero exit code.
"""

from __future__ import annotations

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.api_client import LifeSyncClient
from adapters.json_exporter import export_dashboard_json
from adapters.session_store import FileSessionStore
from cli import doctor
from cli.ui_components import (
    build_categories_table,
    build_error_panel,
    build_reports_table,
    build_streak_panel,
    build_strength_panel,
    print_banner,
)
from core.config import AppSettings
from core.domain.auth import SignInRequest, SignUpRequest
from core.domain.dashboard import DashboardQuery
from core.domain.errors import ApiError, ErrorContext, ErrorState, ErrorType, Operation
from core.logging import configure_logging
from core.services.dashboard import build_dashboard_view, is_valid_past_date
from core.services.error_classifier import classify
from core.services.password_strength import analyze

app = typer.Typer(
    no_args_is_help=True,
    help="LifeSync: personal reflection dashboard from the terminal.",
)
app.add_typer(doctor.app, name="doctor")

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level to stderr."),
) -> None:
    settings = AppSettings()
    configure_logging(
        log_level="DEBUG" if verbose else settings.log_level,
        json_format=settings.log_json,
    )


def build_client(settings: AppSettings) -> LifeSyncClient:
    return LifeSyncClient(settings, FileSessionStore(settings.resolved_session_file()))


def exit_code_for(state: ErrorState) -> int:
    return 2 if state.type in (ErrorType.VALIDATION, ErrorType.UNAUTHORIZED) else 1


def _fail(state: ErrorState) -> typer.Exit:
    err_console.print(build_error_panel(state))
    return typer.Exit(code=exit_code_for(state))


def _credentials(model: type[SignInRequest], email: str, password: str) -> SignInRequest:
    try:
        return model(email=email, password=password)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise typer.BadParameter(f"invalid {fields or 'input'}") from None


@app.command()
def password(
    source: Optional[str] = typer.Argument(
        None,
        metavar="[-]",
        help="Pass - to read the password from stdin; otherwise it is prompted.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the analysis as JSON."),
) -> None:
    """Analyse password strength locally (nothing is sent anywhere).

    The password is never taken as a command-line value, so it stays out of
    shell history and the process list.
    """

    if source is None:
        value = typer.prompt("Password", hide_input=True, default="", show_default=False)
    elif source == "-":
        value = typer.get_text_stream("stdin").readline().rstrip("\r\n")
    else:
        raise typer.BadParameter("only - is accepted; omit it to be prompted")
    result = analyze(value)
    if as_json:
        console.print_json(result.model_dump_json(by_alias=True))
        return
    console.print(build_strength_panel(result))
    for tip in result.feedback:
        console.print(f"[dim]•[/dim] {tip}")


@app.command(name="classify")
def classify_command(
    status: int = typer.Argument(..., help="HTTP status code (0 for no response)."),
    body: Optional[str] = typer.Option(None, "--body", help="JSON error body returned by the API."),
    operation: Operation = typer.Option(Operation.SESSION, "--operation", help="Failed operation."),
    retry_after: Optional[int] = typer.Option(None, "--retry-after", min=0, help="Retry-After header (s)."),
    as_json: bool = typer.Option(False, "--json", help="Print the ErrorState as JSON."),
) -> None:
    """Show how an API failure is presented to the user."""

    parsed: Any = None
    if body:
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"--body is not valid JSON: {exc.msg}") from None

    state = classify(
        status,
        parsed,
        ErrorContext(operation=operation, retry_after_seconds=retry_after),
    )
    if as_json:
        console.print_json(state.model_dump_json())
        return
    console.print(build_error_panel(state))


@app.command()
def signup(
    email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
) -> None:
    """Create an account."""

    secret = typer.prompt("Password", hide_input=True, confirmation_prompt=True)
    console.print(build_strength_panel(analyze(secret)))
    request = _credentials(SignUpRequest, email, secret)

    settings = AppSettings()

    async def _run() -> None:
        async with build_client(settings) as client:
            response = await client.sign_up(request)
        console.print(f"[green]Account created for[/green] {response.user.email}")
        if not response.user.is_email_verified:
            console.print("[yellow]Check your inbox to verify your email address.[/yellow]")

    try:
        asyncio.run(_run())
    except ApiError as exc:
        raise _fail(exc.state) from None


@app.command()
def login(
    email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
) -> None:
    """Sign in and remember the session."""

    secret = typer.prompt("Password", hide_input=True)
    request = _credentials(SignInRequest, email, secret)
    settings = AppSettings()

    async def _run() -> None:
        async with build_client(settings) as client:
            response = await client.sign_in(request)
        console.print(f"[green]Signed in as[/green] {response.user.email}")

    try:
        asyncio.run(_run())
    except ApiError as exc:
        raise _fail(exc.state) from None


@app.command()
def logout() -> None:
    """Forget the stored session."""

    settings = AppSettings()
    store = FileSessionStore(settings.resolved_session_file())
    store.clear()
    console.print("Signed out.")


@app.command()
def whoami() -> None:
    """Show the signed-in account."""

    settings = AppSettings()
    session = FileSessionStore(settings.resolved_session_file()).get()
    if session is None or not session.is_authenticated:
        console.print("Not signed in.")
        raise typer.Exit(code=1)
    console.print(f"{session.user_email} [dim]({session.user_id})[/dim]")


@app.command()
def dashboard(
    since: Optional[str] = typer.Option(None, "--since", help="Only include activity since YYYY-MM-DD."),
    refresh: bool = typer.Option(False, "--refresh", help="Bypass the local cache."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Also write the dashboard as JSON."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the banner."),
) -> None:
    """Show streak, categories and recent reports."""

    if since is not None and not is_valid_past_date(since):
        raise typer.BadParameter("--since must be a past or current date (YYYY-MM-DD)")
    query = DashboardQuery(since=date.fromisoformat(since) if since else None)

    settings = AppSettings()

    async def _run():
        async with build_client(settings) as client:
            return await client.fetch_dashboard(query, force=refresh)

    try:
        data = asyncio.run(_run())
    except ApiError as exc:
        raise _fail(exc.state) from None

    view = build_dashboard_view(data)
    if not no_banner:
        print_banner(console)
    console.print(build_streak_panel(view.streak, view.summary.total_notes))
    if view.categories:
        console.print(build_categories_table(view.categories))
    if view.reports:
        console.print(build_reports_table(view.reports))
    else:
        console.print("[dim]No reports yet.[/dim]")

    if json_out is not None:
        path = export_dashboard_json(view=view, output_path=json_out)
        console.print(f"[green]Saved:[/green] {path}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
