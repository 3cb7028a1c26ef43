"""
Progress tracking: e1RM change and trend classification.

Read-only aggregation over historical sessions.
"""

from dataclasses import replace
from typing import Any, Sequence

from .config import PROGRESS_WINDOW, TREND_THRESHOLD_PERCENT, TrendStatus
from .models import ExerciseConfig, ExerciseEntry, ProgressSummary, SessionRecord
from .recommender import entry_sets, key_set_1rm
from .validation import finite_number, positive_finite


def progress_percent(previous_1rm: Any, current_1rm: Any) -> float:
    """
    Percentage change between two e1RM values.

    (current − previous) / previous × 100

    Returns:
        Percent change, or 0 if previous ≤ 0 or either value is invalid
    """
    previous = positive_finite(previous_1rm)
    current = finite_number(current_1rm)
    if previous is None or current is None:
        return 0.0
    return (current - previous) / previous * 100


def trend_status(
    percent: Any,
    threshold: float = TREND_THRESHOLD_PERCENT,
) -> TrendStatus:
    """Classify a percent change: increase above +2 %, decrease below −2 %."""
    value = finite_number(percent)
    if value is None:
        return "stable"
    if value > threshold:
        return "increase"
    if value < -threshold:
        return "decrease"
    return "stable"


def session_one_rm(entry: ExerciseEntry) -> float:
    """
    e1RM of a session entry, taken from its key set.

    The key set is the first counted set carrying weight; sets logged
    without a weight count at the entry's working weight.

    Returns 0 when no counted set has a weight.
    """
    return key_set_1rm(entry_sets(entry)) or 0.0


def updated_one_rm(config: ExerciseConfig, estimate: Any) -> ExerciseConfig:
    """
    Raise the exercise's 1RM after a personal best.

    Returns a new config with one_rm = estimate when estimate exceeds the
    current value, otherwise the config unchanged.
    """
    value = positive_finite(estimate)
    if value is None or value <= config.one_rm:
        return config
    return replace(config, one_rm=value)


def exercise_progress(
    config: ExerciseConfig,
    history: Sequence[SessionRecord],
    window: int = PROGRESS_WINDOW,
    threshold: float = TREND_THRESHOLD_PERCENT,
) -> ProgressSummary | None:
    """
    Summarize e1RM progress over the most recent sessions of an exercise.

    Compares the oldest and newest of the last *window* sessions that
    trained the exercise.  Sessions saved without an estimate fall back to
    config.one_rm.

    Args:
        config: Exercise configuration
        history: Sessions in chronological order
        window: Number of recent sessions compared

    Returns:
        ProgressSummary, or None if the exercise was never trained
    """
    values: list[float] = []
    for session in history:
        entry = session.entry_for(config.exercise_id)
        if entry is None:
            continue
        estimate = entry.estimated_1rm or session_one_rm(entry)
        values.append(estimate if estimate > 0 else config.one_rm)

    if not values:
        return None

    recent = values[-max(1, window):]
    percent = progress_percent(recent[0], recent[-1])
    return ProgressSummary(
        first_1rm=recent[0],
        last_1rm=recent[-1],
        percent=percent,
        trend=trend_status(percent, threshold),
        sessions=len(values),
        history=tuple(recent),
    )
