"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Panels/tables are reused by several commands.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.dashboard import CategoryCardView, FormattedReport, StreakData
from core.domain.errors import ErrorState, ErrorType
from core.domain.password import PasswordStrengthResult, StrengthLevel

LEVEL_STYLES: dict[StrengthLevel, str] = {
    StrengthLevel.WEAK: "red",
    StrengthLevel.FAIR: "yellow",
    StrengthLevel.GOOD: "cyan",
    StrengthLevel.STRONG: "green",
}

ERROR_STYLES: dict[ErrorType, str] = {
    ErrorType.UNAUTHORIZED: "magenta",
    ErrorType.VALIDATION: "yellow",
    ErrorType.SERVER: "red",
    ErrorType.NETWORK: "blue",
}

_CRITERIA_LABELS = (
    "At least 6 characters",
    "Uppercase letter",
    "Lowercase letter",
    "Number",
    "Special character",
)


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Skipped in non-interactive modes (JSON output, pipelines).
    """

    title = Text("LifeSync", style="bold cyan")
    subtitle = Text("Reflection • Categories • Reports", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def strength_bar(result: PasswordStrengthResult) -> Text:
    style = LEVEL_STYLES[result.level]
    bar = Text("█" * result.score, style=style)
    bar.append("░" * (5 - result.score), style="dim")
    bar.append(f"  {result.level.value.upper()} ({result.score}/5)", style=f"bold {style}")
    return bar


def build_strength_panel(result: PasswordStrengthResult) -> Panel:
    """Strength bar, level label and criteria checklist."""

    checklist = Table.grid(padding=(0, 1))
    checklist.add_column(no_wrap=True)
    checklist.add_column()
    for met, label in zip(result.criteria.as_tuple(), _CRITERIA_LABELS):
        mark = Text("✔", style="green") if met else Text("✘", style="red")
        checklist.add_row(mark, label)

    return Panel(
        Group(strength_bar(result), Text(""), checklist),
        title=Text("Password strength", style="bold"),
        border_style=LEVEL_STYLES[result.level],
    )


def build_error_panel(state: ErrorState) -> Panel:
    """Dismissible-alert equivalent for a failed operation."""

    style = ERROR_STYLES[state.type]
    body = Text(state.message + "\n")
    hints: list[str] = []
    if state.requires_login:
        hints.append("Run `lifesync login` to sign in again.")
    elif state.is_rate_limited:
        hints.append("Retries are disabled until the wait time has passed.")
    elif state.recoverable:
        hints.append("You can retry this operation.")
    for hint in hints:
        body.append(f"\n{hint}", style="dim")
    body.append(f"\n{state.code.value}", style="dim")

    return Panel(body, title=Text("Error", style=f"bold {style}"), border_style=style)


def build_streak_panel(streak: StreakData, total_notes: int) -> Panel:
    body = Text()
    body.append(f"{streak.days}", style="bold yellow")
    body.append(" day streak" if streak.days == 1 else " days streak")
    if streak.days and not streak.is_current_day:
        body.append("  (write today to keep it)", style="dim")
    body.append(f"\nBest: {streak.best_streak}")
    if streak.last_note_date:
        body.append(f"\nLast note: {streak.last_note_date.isoformat()}")
    body.append(f"\nTotal notes: {total_notes}")
    return Panel(body, title=Text("Streak", style="bold yellow"), border_style="yellow")


def build_categories_table(cards: list[CategoryCardView]) -> Table:
    table = Table(title="Categories")
    table.add_column("Category", style="cyan", no_wrap=True)
    table.add_column("Notes", justify="right")
    table.add_column("Goal", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Last note", style="dim")
    for card in cards:
        name = Text(card.name, style=card.color_hex)
        if not card.is_active:
            name.stylize("strike")
        last = (card.last_note.title or card.last_note.date) if card.last_note else "-"
        table.add_row(
            name,
            str(card.note_count),
            str(card.daily_goal),
            f"{card.progress_percent}%",
            last,
        )
    return table


def build_reports_table(reports: list[FormattedReport]) -> Table:
    table = Table(title="Recent reports")
    table.add_column("Date", no_wrap=True)
    table.add_column("When", style="dim")
    table.add_column("Title", style="white")
    table.add_column("Source")
    for item in reports:
        table.add_row(
            item.formatted_date,
            item.relative_time,
            item.report.title or "-",
            Text(item.generated_by_label, style=item.generated_by_badge_color),
        )
    return table
