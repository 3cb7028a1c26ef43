"""Analysis commands: one-rm, rep-range, summary, progress, weeks."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.metrics import estimate_1rm, estimate_rep_range, summarize_sets
from ...core.progress import exercise_progress, progress_percent, trend_status
from ...core.recommender import recompute_exercise_weeks
from ...io.serializers import ValidationError, load_exercise_file, parse_sets_string
from .. import views
from ..app import FrequencyOption, JsonOption, app, get_settings, resolve_frequency


@app.command("one-rm")
def one_rm(
    weight: Annotated[float, typer.Argument(help="Load lifted (kg)")],
    reps: Annotated[int, typer.Argument(help="Reps completed")],
    json_out: JsonOption = False,
) -> None:
    """
    Estimate 1RM from a set (weight × 36 / (37 − reps)).
    """
    result = estimate_1rm(weight, reps)
    if result <= 0:
        views.print_error("Cannot estimate 1RM: need weight > 0 and 1–36 reps.")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({"weight": weight, "reps": reps, "estimated_1rm": round(result, 2)}, indent=2))
        return

    views.console.print(f"Estimated 1RM: [bold]{result:.1f} kg[/bold]")


@app.command("rep-range")
def rep_range(
    weight: Annotated[float, typer.Argument(help="Planned load (kg)")],
    e1rm: Annotated[float, typer.Argument(help="Current estimated 1RM (kg)")],
    json_out: JsonOption = False,
) -> None:
    """
    Estimate the rep window achievable at a weight.
    """
    result = estimate_rep_range(weight, e1rm)

    if json_out:
        print(json.dumps({"min": result.min, "max": result.max}, indent=2))
        return

    if result.max == 0:
        views.print_warning("Weight must be below the estimated 1RM.")
        return
    views.console.print(f"Expected reps at {views.fmt_kg(weight)}: [bold]{result.min}-{result.max}[/bold]")


@app.command()
def summary(
    logged: Annotated[
        str,
        typer.Argument(help="Sets in logged order, e.g. '8@100, 6@100, 0, 5@100'"),
    ],
    json_out: JsonOption = False,
) -> None:
    """
    Effective reps, completed sets and HVL of a session.

    Counting stops at the first set with zero reps.
    """
    try:
        parsed = parse_sets_string(logged)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    result = summarize_sets(parsed)

    if json_out:
        print(json.dumps({
            "completed_sets": result.completed_sets,
            "total_effective_reps": round(result.total_effective_reps, 4),
            "total_hvl": round(result.total_hvl, 4),
        }, indent=2))
        return

    views.console.print(views.format_summary(result))
    if result.completed_sets < len(parsed):
        views.print_warning(
            f"Stopped counting at set {result.completed_sets + 1} (zero reps); "
            "later sets are not counted."
        )


@app.command()
def progress(
    previous: Annotated[float, typer.Argument(help="Earlier e1RM (kg)")],
    current: Annotated[float, typer.Argument(help="Latest e1RM (kg)")],
    json_out: JsonOption = False,
) -> None:
    """
    Percentage change between two e1RM values and its trend.
    """
    settings = get_settings()
    percent = progress_percent(previous, current)
    trend = trend_status(percent, settings.trend_threshold_percent)

    if json_out:
        print(json.dumps({"percent": round(percent, 4), "trend": trend}, indent=2))
        return

    sign = "+" if percent > 0 else ""
    views.console.print(f"Progress: [bold]{sign}{percent:.1f}%[/bold] ({trend})")


@app.command()
def weeks(
    file: Annotated[
        Path,
        typer.Argument(help="YAML/JSON file with 'exercise' and 'sessions' sections"),
    ],
    window: Annotated[
        Optional[int],
        typer.Option("--window", "-w", help="Sessions compared for the trend; default from model.yaml"),
    ] = None,
    frequency: FrequencyOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Recompute week-by-week metrics for an exercise's logged sessions.
    """
    try:
        config, sessions = load_exercise_file(file)
    except (OSError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    settings = get_settings()
    freq = resolve_frequency(frequency, settings)
    metrics = recompute_exercise_weeks(config, sessions, freq, settings.effective_rep_targets)
    trend = exercise_progress(
        config,
        sessions,
        window or settings.progress_window,
        settings.trend_threshold_percent,
    )

    if json_out:
        print(json.dumps({
            "exercise": config.name,
            "weeks": [
                {
                    "block": w.block_number,
                    "deload": w.is_deload,
                    "completed_sets": w.completed_sets,
                    "suggested_sets": w.suggested_sets,
                    "total_effective_reps": round(w.total_effective_reps, 4),
                    "total_hvl": round(w.total_hvl, 4),
                    "suggested_weight": w.suggested_weight,
                    "estimated_1rm": round(w.estimated_one_rm, 4) if w.estimated_one_rm else None,
                }
                for w in metrics
            ],
            "progress": None if trend is None else {
                "percent": round(trend.percent, 4),
                "trend": trend.trend,
            },
        }, indent=2))
        return

    if not metrics:
        views.print_info(f"No sessions logged for {config.name}.")
        return

    views.console.print()
    views.console.print(views.format_week_table(config, metrics))
    if trend is not None:
        views.print_progress(trend, config.name)
    views.console.print()
