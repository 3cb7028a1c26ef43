"""
Pure metric computation functions.

Effective-reps model and one-rep-max estimator.  All functions are pure,
never raise, and return a neutral value (0 or an empty range) for
invalid input.
"""

import math
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Sequence

from .config import (
    BRZYCKI_DENOMINATOR,
    BRZYCKI_NUMERATOR,
    EFFECTIVE_REP_VALUES,
    MAX_ESTIMABLE_REPS,
    REP_RANGE_HALF_WIDTH,
)
from .models import LoggedSet, RepRange, RepsSummary
from .validation import finite_number, round_half_up

# A set as handed over by a caller: a LoggedSet, a {"reps", "weight"}
# mapping, or a bare rep count (no load).
SetLike = LoggedSet | Mapping[str, Any] | float


def effective_reps(reps: Any) -> float:
    """
    Map completed reps to hypertrophic effective reps.

    Table lookup at round(reps), with reps above the table flattening at
    the last value (5.65 for 8+ reps).

    Args:
        reps: Reps completed to failure

    Returns:
        Effective reps, or 0 for non-positive / non-finite input
    """
    value = finite_number(reps)
    if value is None or value <= 0:
        return 0.0
    index = min(len(EFFECTIVE_REP_VALUES) - 1, round_half_up(value))
    return EFFECTIVE_REP_VALUES[index]


def estimate_1rm(weight: Any, reps: Any) -> float:
    """
    Estimate one-rep max with the modified Brzycki formula.

    e1RM = weight × 36 / (37 − reps)

    No rounding is applied; round for display only.

    Args:
        weight: Load lifted (kg)
        reps: Reps completed at that load

    Returns:
        Estimated 1RM, or 0 outside 0 < reps ≤ 36, weight > 0
    """
    w = finite_number(weight)
    r = finite_number(reps)
    if w is None or r is None:
        return 0.0
    if w <= 0 or r <= 0 or r > MAX_ESTIMABLE_REPS:
        return 0.0
    return w * (BRZYCKI_NUMERATOR / (BRZYCKI_DENOMINATOR - r))


calculate_1rm = estimate_1rm


def estimate_rep_range(weight: Any, e1rm: Any) -> RepRange:
    """
    Estimate the rep window achievable at a given weight.

    Inverse of estimate_1rm: reps = 37 − 36 × weight / e1RM, floored and
    clamped to ≥ 1, reported as a ±2 window within [1, 36].

    Args:
        weight: Planned load
        e1rm: Current estimated 1RM

    Returns:
        RepRange, or RepRange(0, 0) unless 0 < weight < e1rm
    """
    w = finite_number(weight)
    m = finite_number(e1rm)
    if w is None or m is None or w <= 0 or m <= 0 or w >= m:
        return RepRange(0, 0)

    estimated = BRZYCKI_DENOMINATOR - BRZYCKI_NUMERATOR * w / m
    reps = max(1, math.floor(estimated))
    return RepRange(
        min=max(1, reps - REP_RANGE_HALF_WIDTH),
        max=min(MAX_ESTIMABLE_REPS, reps + REP_RANGE_HALF_WIDTH),
    )


def _set_fields(entry: SetLike) -> tuple[Any, Any]:
    """Extract raw (reps, weight) from any supported set shape."""
    if isinstance(entry, LoggedSet):
        return entry.reps, entry.weight
    if isinstance(entry, Mapping):
        return entry.get("reps"), entry.get("weight", 0.0)
    return entry, 0.0


def iter_counted_sets(sets: Sequence[SetLike] | None) -> Iterator[tuple[int, float]]:
    """
    Yield (rounded_reps, weight) for the countable prefix of a session.

    Sets are chronological.  The first set whose rounded reps are ≤ 0
    (or missing) ends the sequence: later sets are not counted even if
    valid.  Anything that is not a sequence of sets yields nothing.
    """
    if not sets or isinstance(sets, (str, bytes, Mapping)) or not isinstance(sets, Iterable):
        return
    for entry in sets:
        raw_reps, raw_weight = _set_fields(entry)
        value = finite_number(raw_reps)
        reps = round_half_up(value) if value is not None else 0
        if reps <= 0:
            break
        weight = finite_number(raw_weight)
        yield reps, weight if weight is not None else 0.0


def summarize_sets(sets: Sequence[SetLike] | None) -> RepsSummary:
    """
    Aggregate a session's sets into effective reps, set count and HVL.

    HVL (hypertrophic volume load) = Σ e1RM(set) × effective_reps(set),
    over sets with a positive weight.

    Args:
        sets: Sets in logged order

    Returns:
        RepsSummary over the sets before the first zero-rep entry
    """
    total_effective = 0.0
    completed = 0
    total_hvl = 0.0

    for reps, weight in iter_counted_sets(sets):
        completed += 1
        eff = effective_reps(reps)
        total_effective += eff
        if weight > 0:
            total_hvl += estimate_1rm(weight, reps) * eff

    return RepsSummary(
        total_effective_reps=total_effective,
        completed_sets=completed,
        total_hvl=total_hvl,
    )


def calculate_effective_repetitions(sets: Sequence[SetLike] | None) -> float:
    """Total effective reps of a session."""
    return summarize_sets(sets).total_effective_reps


def calculate_hvl(sets: Sequence[SetLike] | None, weight: Any = None) -> float:
    """
    Total hypertrophic volume load of a session.

    If *weight* is given, every set is taken at that load (the session's
    working weight) instead of its own.
    """
    if weight is None:
        return summarize_sets(sets).total_hvl

    w = finite_number(weight)
    if w is None or w <= 0:
        return 0.0
    return sum(
        estimate_1rm(w, reps) * effective_reps(reps)
        for reps, _ in iter_counted_sets(sets)
    )
