"""
Data models for gymtrack.

Records exchanged between the calculation core and its collaborators.
Configuration and logged sets validate their invariants on construction;
derived metrics (RepsSummary, WeekMetrics, ...) are plain result values
recomputed on every read and never the authoritative state.
"""

import math
from dataclasses import dataclass

from .config import MAX_SETS_CAP, TrendStatus, VolumeLevel

VOLUME_LEVELS: tuple[str, ...] = ("Low", "Moderate")


def _validate_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    import re
    from datetime import datetime

    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass(frozen=True)
class ExerciseConfig:
    """
    Training parameters of one exercise.

    Rep ranges are fractions of 1RM (e.g. 0.80–0.85).  volume_multiplier
    scales the effective-reps goal; values above 1 are stored as entered
    but treated as 1 by the recommender.
    """

    name: str
    one_rm: float
    min_rep_range: float
    max_rep_range: float
    max_weight_stack: float
    rounding: float
    volume_level: VolumeLevel = "Moderate"
    max_sets: int = MAX_SETS_CAP
    volume_multiplier: float = 1.0
    exercise_id: str = ""

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("one_rm", "max_weight_stack", "rounding", "volume_multiplier"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if not 0 < self.min_rep_range <= 1 or not 0 < self.max_rep_range <= 1:
            raise ValueError("Rep ranges must be fractions of 1RM in (0, 1]")
        if self.min_rep_range > self.max_rep_range:
            raise ValueError(
                f"min_rep_range ({self.min_rep_range}) must not exceed "
                f"max_rep_range ({self.max_rep_range})"
            )

        if self.volume_level not in VOLUME_LEVELS:
            raise ValueError(f"Invalid volume_level: {self.volume_level}")

        if not 1 <= self.max_sets <= MAX_SETS_CAP:
            raise ValueError(f"max_sets must be between 1 and {MAX_SETS_CAP}")


@dataclass(frozen=True)
class LoggedSet:
    """A single performed set: reps completed at the load actually used."""

    reps: int
    weight: float = 0.0

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if not math.isfinite(self.weight) or self.weight < 0:
            raise ValueError("weight must be non-negative")


@dataclass(frozen=True)
class ExerciseEntry:
    """All sets of one exercise within a session, in logged order."""

    exercise_id: str
    weight: float = 0.0  # working weight used for the session
    sets: tuple[LoggedSet, ...] = ()
    estimated_1rm: float | None = None


@dataclass(frozen=True)
class SessionRecord:
    """
    A saved training session.

    block/week are 1-indexed counters of the periodization cycle.
    """

    date: str  # ISO format: YYYY-MM-DD
    block: int = 1
    week: int = 1
    entries: tuple[ExerciseEntry, ...] = ()

    def __post_init__(self) -> None:
        """Validate session data."""
        _validate_date(self.date)
        if self.block < 1 or self.week < 1:
            raise ValueError("block and week are 1-indexed")

    def entry_for(self, exercise_id: str) -> ExerciseEntry | None:
        """Return the entry for exercise_id, or None if it was not trained."""
        for entry in self.entries:
            if entry.exercise_id == exercise_id:
                return entry
        return None


@dataclass(frozen=True)
class SessionState:
    """
    The in-progress session.

    Passed into and returned from the transitions in core.session; the
    caller owns its lifecycle (create, persist, clear).
    """

    date: str
    block: int = 1
    week: int = 1
    entries: tuple[ExerciseEntry, ...] = ()
    current_exercise_id: str | None = None

    def __post_init__(self) -> None:
        _validate_date(self.date)
        if self.block < 1 or self.week < 1:
            raise ValueError("block and week are 1-indexed")

    def entry_for(self, exercise_id: str) -> ExerciseEntry | None:
        for entry in self.entries:
            if entry.exercise_id == exercise_id:
                return entry
        return None

    def to_record(self) -> SessionRecord:
        """Snapshot the session as a SessionRecord."""
        return SessionRecord(
            date=self.date, block=self.block, week=self.week, entries=self.entries,
        )


@dataclass(frozen=True)
class BlockPosition:
    """Current place in the periodization cycle."""

    block: int = 1
    week: int = 1


@dataclass(frozen=True)
class RepsSummary:
    """Per-session totals over the countable sets."""

    total_effective_reps: float = 0.0
    completed_sets: int = 0
    total_hvl: float = 0.0


@dataclass(frozen=True)
class RepRange:
    """Rep window expected at a given weight; (0, 0) when not estimable."""

    min: int = 0
    max: int = 0


@dataclass(frozen=True)
class WeekMetrics:
    """Derived metrics for one logged week of an exercise."""

    block_number: int
    total_effective_reps: float
    completed_sets: int
    total_hvl: float
    suggested_sets: int
    suggested_weight: float
    estimated_one_rm: float | None = None  # None when no set had weight and reps
    is_deload: bool = False


@dataclass(frozen=True)
class SessionStatus:
    """
    Progress of the current session towards its effective-reps goal.

    state is "ready" before the first set, "complete" once the goal or the
    set ceiling is reached, "continue" otherwise.
    """

    state: str
    effective_reps: float
    goal: float
    remaining_reps: int
    completed_sets: int


@dataclass(frozen=True)
class ProgressSummary:
    """e1RM change over the recent sessions of one exercise."""

    first_1rm: float
    last_1rm: float
    percent: float
    trend: TrendStatus
    sessions: int = 0
    history: tuple[float, ...] = ()  # oldest first
