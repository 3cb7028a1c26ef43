"""
Training-load calculation engine.

Pure functions converting logged sets into effective reps, e1RM and HVL,
and proposing the next session's weight and set count.
"""

from .metrics import (
    calculate_1rm,
    calculate_effective_repetitions,
    calculate_hvl,
    effective_reps,
    estimate_1rm,
    estimate_rep_range,
    summarize_sets,
)
from .models import (
    BlockPosition,
    ExerciseConfig,
    ExerciseEntry,
    LoggedSet,
    ProgressSummary,
    RepRange,
    RepsSummary,
    SessionRecord,
    SessionState,
    SessionStatus,
    WeekMetrics,
)
from .periodization import advance_week, effective_volume_level, is_deload_time, parse_block_number
from .progress import exercise_progress, progress_percent, trend_status, updated_one_rm
from .recommender import (
    effective_reps_goal,
    recompute_exercise_weeks,
    session_status,
    suggested_sets,
    suggested_weight,
)

__all__ = [
    "BlockPosition",
    "ExerciseConfig",
    "ExerciseEntry",
    "LoggedSet",
    "ProgressSummary",
    "RepRange",
    "RepsSummary",
    "SessionRecord",
    "SessionState",
    "SessionStatus",
    "WeekMetrics",
    "advance_week",
    "calculate_1rm",
    "calculate_effective_repetitions",
    "calculate_hvl",
    "effective_reps",
    "effective_reps_goal",
    "effective_volume_level",
    "estimate_1rm",
    "estimate_rep_range",
    "exercise_progress",
    "is_deload_time",
    "parse_block_number",
    "progress_percent",
    "recompute_exercise_weeks",
    "session_status",
    "suggested_sets",
    "suggested_weight",
    "summarize_sets",
    "trend_status",
    "updated_one_rm",
]
