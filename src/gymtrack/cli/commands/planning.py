"""Planning commands: weight, sets, deload, advance."""

import json
from typing import Annotated

import typer

from ...core.metrics import estimate_rep_range
from ...core.models import VOLUME_LEVELS, BlockPosition
from ...core.periodization import advance_week, is_deload_time
from ...core.recommender import effective_reps_goal, session_status, suggested_sets, suggested_weight
from ...io.serializers import ValidationError, parse_sets_string
from .. import views
from ..app import BlockOption, FrequencyOption, JsonOption, app, get_settings, resolve_frequency


def _check_volume(volume: str) -> str:
    if volume not in VOLUME_LEVELS:
        views.print_error(f"Invalid volume level: {volume}. Use one of: {', '.join(VOLUME_LEVELS)}")
        raise typer.Exit(1)
    return volume


@app.command()
def weight(
    e1rm: Annotated[float, typer.Argument(help="Current estimated 1RM (kg)")],
    min_range: Annotated[float, typer.Argument(help="Lower intensity bound, fraction of 1RM (e.g. 0.80)")],
    max_range: Annotated[float, typer.Argument(help="Upper intensity bound, fraction of 1RM (e.g. 0.85)")],
    stack: Annotated[float, typer.Argument(help="Heaviest load the equipment allows (kg)")],
    rounding: Annotated[float, typer.Argument(help="Smallest weight increment (kg)")],
    prev: Annotated[
        float,
        typer.Option("--prev", "-p", help="Weight used last session (kg)"),
    ] = 0.0,
    block: BlockOption = 1,
    frequency: FrequencyOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Suggest the working weight for this session.
    """
    freq = resolve_frequency(frequency, get_settings())
    result = suggested_weight(e1rm, min_range, max_range, stack, rounding, prev, block, freq)
    if result <= 0:
        views.print_error("No weight can be suggested for these parameters.")
        raise typer.Exit(1)

    reps = estimate_rep_range(result, e1rm)
    deload = is_deload_time(block, freq)

    if json_out:
        print(json.dumps({
            "suggested_weight": result,
            "rep_range": {"min": reps.min, "max": reps.max},
            "deload": deload,
        }, indent=2))
        return

    views.console.print(f"Suggested weight: [bold cyan]{views.fmt_kg(result)}[/bold cyan]")
    if reps.max > 0:
        views.console.print(f"Expected reps: {reps.min}-{reps.max}")
    if deload:
        views.print_info(f"Block {block} is a deload block: working at the bottom of the rep range.")


@app.command()
def sets(
    logged: Annotated[
        str,
        typer.Argument(help="Sets done so far, e.g. '8@100, 6@100' or '8, 6 @100kg'"),
    ],
    block: BlockOption = 1,
    start: Annotated[
        float,
        typer.Option("--start", "-s", help="Effective reps already banked this session"),
    ] = 0.0,
    multiplier: Annotated[
        float,
        typer.Option("--multiplier", "-m", help="Goal multiplier (≤ 1)"),
    ] = 1.0,
    volume: Annotated[
        str,
        typer.Option("--volume", "-v", help="Training volume: Low or Moderate"),
    ] = "Moderate",
    max_sets: Annotated[
        int,
        typer.Option("--max-sets", help="Ceiling on the suggested set count"),
    ] = 10,
    frequency: FrequencyOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Suggest how many sets to perform, given the sets logged so far.
    """
    _check_volume(volume)
    try:
        parsed = parse_sets_string(logged)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    settings = get_settings()
    freq = resolve_frequency(frequency, settings)
    targets = settings.effective_rep_targets
    cap = min(max_sets, settings.max_sets_cap)

    target = suggested_sets(parsed, block, start, multiplier, volume, cap, freq, targets)
    status = session_status(parsed, volume, block, multiplier, cap, freq, targets)

    if json_out:
        print(json.dumps({
            "suggested_sets": target,
            "completed_sets": status.completed_sets,
            "effective_reps": round(status.effective_reps, 4),
            "goal": round(effective_reps_goal(volume, multiplier, block, freq, targets), 4),
            "state": status.state,
        }, indent=2))
        return

    views.console.print(f"Suggested sets: [bold]{target}[/bold]")
    views.print_session_status(status)


@app.command()
def deload(
    block: Annotated[int, typer.Argument(help="Block number (1-indexed)")],
    frequency: FrequencyOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Tell whether a block is a deload block.
    """
    freq = resolve_frequency(frequency, get_settings())
    result = is_deload_time(block, freq)

    if json_out:
        print(json.dumps({"block": block, "frequency": freq, "deload": result}, indent=2))
        return

    if result:
        views.console.print(f"Block {block}: [magenta]deload[/magenta] (volume forced to Low)")
    else:
        views.console.print(f"Block {block}: regular training")


@app.command()
def advance(
    block: Annotated[int, typer.Argument(help="Current block number (1-indexed)")],
    week: Annotated[int, typer.Argument(help="Current week within the block (1-indexed)")],
    json_out: JsonOption = False,
) -> None:
    """
    Show the block/week that follows the given one.
    """
    if block < 1 or week < 1:
        views.print_error("Block and week are 1-indexed")
        raise typer.Exit(1)

    settings = get_settings()
    nxt = advance_week(BlockPosition(block=block, week=week), settings.weeks_per_block)

    if json_out:
        print(json.dumps({"block": nxt.block, "week": nxt.week}, indent=2))
        return

    views.console.print(f"Next: block {nxt.block}, week {nxt.week}")
    if nxt.block != block and is_deload_time(nxt.block, settings.deload_frequency):
        views.print_info("New block is a deload block.")
