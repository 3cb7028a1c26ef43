"""
In-progress session transitions.

The current session is an explicit SessionState value: every function
takes a state and returns a new one.  Creating, persisting and clearing
it is left to the caller.
"""

from dataclasses import replace
from datetime import date as _date

from .models import BlockPosition, ExerciseConfig, ExerciseEntry, LoggedSet, SessionRecord, SessionState
from .progress import session_one_rm, updated_one_rm


def start_session(position: BlockPosition, date: str | None = None) -> SessionState:
    """Open an empty session at the given block/week (today by default)."""
    return SessionState(
        date=date or _date.today().isoformat(),
        block=position.block,
        week=position.week,
    )


def _replace_entry(state: SessionState, entry: ExerciseEntry) -> SessionState:
    entries = tuple(
        entry if e.exercise_id == entry.exercise_id else e for e in state.entries
    )
    return replace(state, entries=entries)


def ensure_exercise(state: SessionState, exercise_id: str, initial_weight: float) -> SessionState:
    """
    Make exercise_id the current exercise, adding an empty entry for it.

    An existing entry keeps its weight and sets.
    """
    if state.entry_for(exercise_id) is None:
        entry = ExerciseEntry(exercise_id=exercise_id, weight=max(0.0, initial_weight))
        state = replace(state, entries=state.entries + (entry,))
    return replace(state, current_exercise_id=exercise_id)


def add_set(state: SessionState, exercise_id: str, reps: int, weight: float | None = None) -> SessionState:
    """
    Append a set to an exercise.

    The set is logged at the entry's working weight unless *weight* is given.

    Raises:
        KeyError: If the exercise has no entry in this session
        ValueError: If reps or weight are negative
    """
    entry = state.entry_for(exercise_id)
    if entry is None:
        raise KeyError(f"No entry for exercise {exercise_id!r} in this session")
    logged = LoggedSet(reps=reps, weight=entry.weight if weight is None else weight)
    return _replace_entry(state, replace(entry, sets=entry.sets + (logged,)))


def remove_set(state: SessionState, exercise_id: str, index: int) -> SessionState:
    """Remove the set at *index*; out-of-range indexes leave the state unchanged."""
    entry = state.entry_for(exercise_id)
    if entry is None or not 0 <= index < len(entry.sets):
        return state
    sets = entry.sets[:index] + entry.sets[index + 1:]
    return _replace_entry(state, replace(entry, sets=sets))


def set_weight(state: SessionState, exercise_id: str, weight: float) -> SessionState:
    """Change the working weight of an exercise (clamped at 0)."""
    entry = state.entry_for(exercise_id)
    if entry is None:
        return state
    return _replace_entry(state, replace(entry, weight=max(0.0, weight)))


def finish_exercise(
    state: SessionState,
    config: ExerciseConfig,
) -> tuple[SessionState, SessionRecord, ExerciseConfig]:
    """
    Close the current exercise of the session.

    Stores the session's e1RM estimate on the entry and raises the
    exercise's one_rm on a personal best.

    Returns:
        (new state with no current exercise, record snapshot to save,
        possibly updated exercise config)

    Raises:
        ValueError: If the exercise has no counted set
    """
    entry = state.entry_for(config.exercise_id)
    if entry is None or not entry.sets or entry.sets[0].reps <= 0:
        raise ValueError("Log at least one set before saving")

    new_config = config
    estimate = session_one_rm(entry)
    if estimate > 0:
        entry = replace(entry, estimated_1rm=estimate)
        state = _replace_entry(state, entry)
        new_config = updated_one_rm(config, estimate)

    state = replace(state, current_exercise_id=None)
    return state, state.to_record(), new_config
