"""
Set and weight recommendations.

Combines the effective-reps model, the 1RM estimator and the deload
policy into the two per-session suggestions (how many sets, what weight)
and the week-by-week recomputation of an exercise's history.
"""

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Sequence

from .config import (
    BASE_EFFECTIVE_REP_TARGET,
    DEFAULT_VOLUME_LEVEL,
    DELOAD_FREQUENCY,
    MAX_SETS_CAP,
)
from .metrics import SetLike, estimate_1rm, iter_counted_sets, summarize_sets
from .models import ExerciseConfig, ExerciseEntry, LoggedSet, SessionRecord, SessionStatus, WeekMetrics
from .periodization import effective_volume_level, is_deload_time
from .validation import finite_number, finite_or, positive_finite

# Tolerance when rounding up to a weight increment, so that float noise
# such as 80.00000000000001 / 2.5 does not add a whole increment.
_ROUNDING_EPS = 1e-9


def _safe_goal_multiplier(goal_multiplier: Any) -> float:
    value = positive_finite(goal_multiplier)
    if value is None or value > 1:
        return 1.0
    return value


def _safe_max_sets(max_sets: Any, cap: int = MAX_SETS_CAP) -> int:
    value = positive_finite(max_sets)
    if value is None or value > cap:
        return cap
    return max(1, int(value))


def effective_reps_goal(
    volume_level: str = DEFAULT_VOLUME_LEVEL,
    goal_multiplier: Any = 1.0,
    block_number: Any = 1,
    frequency: Any = DELOAD_FREQUENCY,
    targets: Mapping[str, float] | None = None,
) -> float:
    """
    Cumulative effective-reps target for a session.

    goal = base_goal[volume_level] × goal_multiplier, with Low forced on
    deload blocks.  Unknown volume levels fall back to Moderate.

    Args:
        volume_level: Configured training volume ("Low" | "Moderate")
        goal_multiplier: Scales the goal; > 1 or invalid is treated as 1
        block_number: 1-indexed block counter
        frequency: Deload frequency in blocks
        targets: Base goal per volume level (defaults to the model constants)
    """
    base_targets = targets if targets is not None else BASE_EFFECTIVE_REP_TARGET
    if not isinstance(volume_level, str) or volume_level not in base_targets:
        volume_level = DEFAULT_VOLUME_LEVEL
    level = effective_volume_level(volume_level, block_number, frequency)
    base = base_targets.get(level, base_targets.get(volume_level, 0.0))
    return base * _safe_goal_multiplier(goal_multiplier)


def suggested_sets(
    sets: Sequence[SetLike] | None,
    block_number: Any,
    starting_effective_reps: Any = 0.0,
    goal_multiplier: Any = 1.0,
    volume_level: str = DEFAULT_VOLUME_LEVEL,
    max_sets: Any = MAX_SETS_CAP,
    frequency: Any = DELOAD_FREQUENCY,
    targets: Mapping[str, float] | None = None,
) -> int:
    """
    Suggest how many sets to perform this session.

    One more set than completed while the cumulative effective reps
    (starting_effective_reps + this session's) are below the goal,
    otherwise the completed count; always within [1, max_sets].

    Args:
        sets: Sets logged so far, in order (LoggedSet, mapping or rep count)
        block_number: 1-indexed block counter
        starting_effective_reps: Effective reps already banked (e.g. from
            a previous exercise for the same muscle); negatives count as 0
        goal_multiplier: Scales the goal; values above 1 reset to 1
        volume_level: Configured training volume
        max_sets: Ceiling on the suggestion, itself capped at 10

    Returns:
        Suggested set count
    """
    ceiling = _safe_max_sets(max_sets)
    starting = max(0.0, finite_or(starting_effective_reps, 0.0))
    goal = effective_reps_goal(
        volume_level, goal_multiplier, block_number, frequency, targets,
    )

    summary = summarize_sets(sets)
    total = starting + summary.total_effective_reps

    if total < goal:
        suggested = summary.completed_sets + 1
    else:
        suggested = summary.completed_sets

    return min(max(suggested, 1), ceiling)


def _increment_decimals(increment: float) -> int:
    """Decimal places needed to write increment exactly (2.5 -> 1, 1e-7 -> 7)."""
    exponent = Decimal(repr(increment)).normalize().as_tuple().exponent
    return max(0, -exponent) if isinstance(exponent, int) else 0


def _on_grid(steps: int, increment: float) -> float:
    return round(steps * increment, _increment_decimals(increment))


def round_up_to_increment(value: float, increment: float) -> float:
    """Round value up to the next multiple of increment (≥ value)."""
    steps = math.ceil(value / increment - _ROUNDING_EPS)
    return _on_grid(steps, increment)


def suggested_weight(
    e1rm: Any,
    min_rep_range: Any,
    max_rep_range: Any,
    max_weight_stack: Any,
    rounding: Any,
    prev_weight: Any = 0.0,
    block_number: Any = 1,
    frequency: Any = DELOAD_FREQUENCY,
) -> float:
    """
    Suggest the working weight for this session.

    floor     = max(prev_weight, e1RM × min_rep_range)
    ceiling   = min(e1RM × max_rep_range, max_weight_stack)
    candidate = min(floor, ceiling)

    On deload blocks the candidate is the bottom of the rep-range band,
    min(e1RM × min_rep_range, max_weight_stack), regardless of prev_weight.
    The candidate is rounded UP to the equipment increment; if that would
    overshoot the ceiling, the largest increment under the ceiling is used.

    Args:
        e1rm: Current estimated 1RM
        min_rep_range: Lower intensity bound as a fraction of 1RM
        max_rep_range: Upper intensity bound as a fraction of 1RM
        max_weight_stack: Heaviest load the equipment allows
        rounding: Smallest available weight increment
        prev_weight: Weight used last session (0 if none)
        block_number: 1-indexed block counter

    Returns:
        Suggested weight, or 0 for invalid input or when no positive
        increment fits under the ceiling
    """
    values = [positive_finite(v) for v in (e1rm, min_rep_range, max_rep_range, max_weight_stack, rounding)]
    if any(v is None for v in values):
        return 0.0
    one_rm, low, high, stack, increment = values  # type: ignore[misc]

    previous = finite_or(prev_weight, 0.0)
    floor = max(previous, one_rm * low)
    ceiling = min(one_rm * high, stack)
    candidate = min(floor, ceiling)

    if is_deload_time(block_number, frequency):
        candidate = min(one_rm * low, stack)

    weight = round_up_to_increment(candidate, increment)
    if weight > ceiling + _ROUNDING_EPS:
        weight = _on_grid(math.floor(ceiling / increment + _ROUNDING_EPS), increment)
    return weight if weight > 0 else 0.0


def session_status(
    sets: Sequence[SetLike] | None,
    volume_level: str = DEFAULT_VOLUME_LEVEL,
    block_number: Any = 1,
    goal_multiplier: Any = 1.0,
    max_sets: Any = MAX_SETS_CAP,
    frequency: Any = DELOAD_FREQUENCY,
    targets: Mapping[str, float] | None = None,
) -> SessionStatus:
    """
    Report how far the current session is from its effective-reps goal.

    Complete once the goal is reached or max_sets sets are done.
    """
    goal = effective_reps_goal(volume_level, goal_multiplier, block_number, frequency, targets)
    summary = summarize_sets(sets)
    done = summary.total_effective_reps

    if summary.completed_sets == 0:
        state = "ready"
    elif done >= goal or summary.completed_sets >= _safe_max_sets(max_sets):
        state = "complete"
    else:
        state = "continue"

    return SessionStatus(
        state=state,
        effective_reps=done,
        goal=goal,
        remaining_reps=max(0, math.ceil(goal - done)),
        completed_sets=summary.completed_sets,
    )


def entry_sets(entry: ExerciseEntry) -> list[LoggedSet]:
    """Sets of an entry, with unweighted sets taken at the entry's working weight."""
    weight = finite_number(entry.weight) or 0.0
    return [
        s if s.weight > 0 or weight <= 0 else LoggedSet(reps=s.reps, weight=weight)
        for s in entry.sets
    ]


def key_set_1rm(sets: Sequence[SetLike] | None) -> float | None:
    """e1RM of the first counted set that carries weight, or None."""
    for reps, weight in iter_counted_sets(sets):
        if weight > 0:
            return estimate_1rm(weight, reps)
    return None


def recompute_exercise_weeks(
    config: ExerciseConfig,
    sessions: Sequence[SessionRecord],
    frequency: Any = DELOAD_FREQUENCY,
    targets: Mapping[str, float] | None = None,
) -> list[WeekMetrics]:
    """
    Recompute derived metrics for every logged week of an exercise.

    Walks sessions in order.  Each week's weight suggestion uses the
    rolling e1RM (starting at config.one_rm) and the previous week's
    suggestion as prev_weight; the week's key set then becomes the
    rolling e1RM.  Sessions without an entry for the exercise are skipped.

    Args:
        config: Exercise configuration
        sessions: Session history, oldest first
        frequency: Deload frequency in blocks

    Returns:
        One WeekMetrics per session that trained the exercise
    """
    rolling_1rm = config.one_rm
    previous_weight = 0.0
    weeks: list[WeekMetrics] = []

    for session in sessions:
        entry = session.entry_for(config.exercise_id)
        if entry is None:
            continue

        sets = entry_sets(entry)
        summary = summarize_sets(sets)
        sets_target = suggested_sets(
            sets,
            session.block,
            goal_multiplier=config.volume_multiplier,
            volume_level=config.volume_level,
            max_sets=config.max_sets,
            frequency=frequency,
            targets=targets,
        )
        weight = suggested_weight(
            rolling_1rm,
            config.min_rep_range,
            config.max_rep_range,
            config.max_weight_stack,
            config.rounding,
            previous_weight,
            session.block,
            frequency,
        )
        estimate = key_set_1rm(sets)

        weeks.append(WeekMetrics(
            block_number=session.block,
            total_effective_reps=summary.total_effective_reps,
            completed_sets=summary.completed_sets,
            total_hvl=summary.total_hvl,
            suggested_sets=sets_target,
            suggested_weight=weight,
            estimated_one_rm=estimate,
            is_deload=is_deload_time(session.block, frequency),
        ))

        if estimate:
            rolling_1rm = estimate
        previous_weight = weight or previous_weight

    return weeks
