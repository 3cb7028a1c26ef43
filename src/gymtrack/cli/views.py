"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of training metrics.
"""

from rich.console import Console
from rich.table import Table

from ..core.models import ExerciseConfig, ProgressSummary, RepsSummary, SessionStatus, WeekMetrics

console = Console()

_TREND_STYLE = {"increase": "green", "decrease": "red", "stable": "blue"}
_STATUS_TEXT = {
    "ready": "[cyan]Ready[/cyan]: log the first set",
    "continue": "[yellow]Continue[/yellow]",
    "complete": "[green]Goal reached[/green]: save and move on",
}


def fmt_kg(value: float) -> str:
    """Format a load, dropping trailing zeros (80 → '80', 82.5 → '82.5')."""
    return f"{value:.2f}".rstrip("0").rstrip(".") + " kg"


def format_week_table(config: ExerciseConfig, weeks: list[WeekMetrics]) -> Table:
    """
    Create a Rich table of week-by-week metrics for one exercise.

    Args:
        config: Exercise configuration (for the title)
        weeks: Recomputed metrics, oldest first

    Returns:
        Rich Table object
    """
    table = Table(title=f"{config.name} (1RM {config.one_rm:.1f} kg)", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Block", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Eff. reps", justify="right")
    table.add_column("HVL", justify="right")
    table.add_column("Weight", justify="right", style="cyan")
    table.add_column("e1RM", justify="right", style="bold")

    for i, week in enumerate(weeks, 1):
        block = f"{week.block_number}" + (" [magenta]D[/magenta]" if week.is_deload else "")
        table.add_row(
            str(i),
            block,
            str(week.completed_sets),
            str(week.suggested_sets),
            f"{week.total_effective_reps:.2f}",
            f"{week.total_hvl:.0f}",
            fmt_kg(week.suggested_weight),
            f"{week.estimated_one_rm:.1f}" if week.estimated_one_rm else "-",
        )

    return table


def format_summary(summary: RepsSummary) -> Table:
    """Create a two-column table of session totals."""
    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right", style="bold")
    table.add_row("Completed sets", str(summary.completed_sets))
    table.add_row("Effective reps", f"{summary.total_effective_reps:.2f}")
    table.add_row("HVL", f"{summary.total_hvl:.1f}")
    return table


def print_session_status(status: SessionStatus) -> None:
    """Print progress of the current session towards its goal."""
    console.print(_STATUS_TEXT.get(status.state, status.state))
    if status.state == "continue":
        console.print(f"  ~{status.remaining_reps} effective reps remaining")
    console.print(
        f"  [dim](Tot: {status.effective_reps:.2f} / Goal: {status.goal:.2f}, "
        f"{status.completed_sets} sets)[/dim]"
    )


def print_progress(progress: ProgressSummary, name: str = "") -> None:
    """Print an e1RM progress line with its trend badge."""
    style = _TREND_STYLE.get(progress.trend, "blue")
    sign = "+" if progress.percent > 0 else ""
    prefix = f"[bold]{name}[/bold]: " if name else ""
    console.print(
        f"{prefix}{progress.first_1rm:.1f} → {progress.last_1rm:.1f} kg  "
        f"[{style}]{progress.trend} {sign}{progress.percent:.1f}%[/{style}]"
    )


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
