"""
Serialization for training data models.

Handles conversion between dataclasses and JSON/YAML-compatible dicts,
and parsing of the sets strings typed on the command line.  This is the
validation boundary: malformed input raises ValidationError here so the
calculation core only sees well-formed records.
"""

import math
import re
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from ..core.models import VOLUME_LEVELS, ExerciseConfig, ExerciseEntry, LoggedSet, SessionRecord


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


# Alternative keys accepted on input (camelCase as exported by the web app).
_CONFIG_ALIASES: dict[str, tuple[str, ...]] = {
    "exercise_id": ("exercise_id", "id"),
    "name": ("name",),
    "one_rm": ("one_rm", "oneRM"),
    "min_rep_range": ("min_rep_range", "minRepRange", "minRange"),
    "max_rep_range": ("max_rep_range", "maxRepRange", "maxRange"),
    "max_weight_stack": ("max_weight_stack", "maxWeightStack", "maxWeight", "maxStack"),
    "rounding": ("rounding",),
    "volume_level": ("volume_level", "volumeLevel", "trainingVolume"),
    "max_sets": ("max_sets", "maxSets"),
    "volume_multiplier": ("volume_multiplier", "volumeMultiplier"),
}


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def _to_number(value: Any, name: str) -> float:
    """Convert a raw value (number or numeric string) to float."""
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e


def validate_non_negative(value: Any, name: str) -> float:
    """
    Validate that a value is a non-negative number.

    Raises:
        ValidationError: If value is not a number or is negative
    """
    number = _to_number(value, name)
    if not math.isfinite(number) or number < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return number


def validate_positive(value: Any, name: str) -> float:
    """
    Validate that a value is a positive number.

    Raises:
        ValidationError: If value is not a number or is not positive
    """
    number = _to_number(value, name)
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return number


def _lookup(data: dict[str, Any], field: str) -> Any:
    for key in _CONFIG_ALIASES[field]:
        if key in data:
            return data[key]
    return None


# ---------------------------------------------------------------------------
# ExerciseConfig
# ---------------------------------------------------------------------------


def exercise_config_to_dict(config: ExerciseConfig) -> dict[str, Any]:
    """Convert ExerciseConfig to a JSON-compatible dict."""
    return {
        "exercise_id": config.exercise_id,
        "name": config.name,
        "one_rm": config.one_rm,
        "min_rep_range": config.min_rep_range,
        "max_rep_range": config.max_rep_range,
        "max_weight_stack": config.max_weight_stack,
        "rounding": config.rounding,
        "volume_level": config.volume_level,
        "max_sets": config.max_sets,
        "volume_multiplier": config.volume_multiplier,
    }


def dict_to_exercise_config(data: dict[str, Any]) -> ExerciseConfig:
    """
    Convert dict to ExerciseConfig.

    Accepts snake_case keys and the camelCase names used by the web app
    (oneRM, minRepRange, maxWeight, trainingVolume, ...).

    Raises:
        ValidationError: If a field is missing or invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Exercise must be a mapping")

    required = ("one_rm", "min_rep_range", "max_rep_range", "max_weight_stack", "rounding")
    values: dict[str, float] = {}
    for field in required:
        raw = _lookup(data, field)
        if raw is None:
            raise ValidationError(f"Missing exercise field: {field}")
        values[field] = validate_positive(raw, field)

    volume_level = _lookup(data, "volume_level") or "Moderate"
    if volume_level not in VOLUME_LEVELS:
        raise ValidationError(
            f"Invalid volume_level: {volume_level}. Must be one of {VOLUME_LEVELS}"
        )

    max_sets = _lookup(data, "max_sets")
    multiplier = _lookup(data, "volume_multiplier")

    try:
        return ExerciseConfig(
            name=str(_lookup(data, "name") or "Exercise"),
            volume_level=volume_level,
            max_sets=int(validate_positive(max_sets, "max_sets")) if max_sets is not None else 10,
            volume_multiplier=(
                validate_positive(multiplier, "volume_multiplier") if multiplier is not None else 1.0
            ),
            exercise_id=str(_lookup(data, "exercise_id") or ""),
            **values,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


# ---------------------------------------------------------------------------
# Sets, entries, sessions
# ---------------------------------------------------------------------------


def logged_set_to_dict(logged: LoggedSet) -> dict[str, Any]:
    """Convert LoggedSet to a JSON-compatible dict."""
    return {"reps": logged.reps, "weight": logged.weight}


def dict_to_logged_set(data: Any) -> LoggedSet:
    """
    Convert a dict (or a bare rep count) to LoggedSet.

    Raises:
        ValidationError: If reps or weight are invalid
    """
    if not isinstance(data, dict):
        data = {"reps": data}
    reps = validate_non_negative(data.get("reps", 0), "reps")
    if reps != int(reps):
        raise ValidationError(f"reps must be a whole number, got {reps}")
    weight = validate_non_negative(data.get("weight", 0.0), "weight")
    return LoggedSet(reps=int(reps), weight=weight)


def entry_to_dict(entry: ExerciseEntry) -> dict[str, Any]:
    """Convert ExerciseEntry to a JSON-compatible dict."""
    d: dict[str, Any] = {
        "exercise_id": entry.exercise_id,
        "weight": entry.weight,
        "sets": [logged_set_to_dict(s) for s in entry.sets],
    }
    if entry.estimated_1rm is not None:
        d["estimated_1rm"] = entry.estimated_1rm
    return d


def dict_to_entry(data: dict[str, Any], default_exercise_id: str = "") -> ExerciseEntry:
    """
    Convert dict to ExerciseEntry.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Exercise entry must be a mapping")
    estimate = data.get("estimated_1rm", data.get("estimated1RM"))
    return ExerciseEntry(
        exercise_id=str(data.get("exercise_id", data.get("exerciseId", default_exercise_id))),
        weight=validate_non_negative(data.get("weight", 0.0), "weight"),
        sets=tuple(dict_to_logged_set(s) for s in data.get("sets", [])),
        estimated_1rm=validate_non_negative(estimate, "estimated_1rm") if estimate is not None else None,
    )


def session_record_to_dict(session: SessionRecord) -> dict[str, Any]:
    """Convert SessionRecord to a JSON-compatible dict."""
    return {
        "date": session.date,
        "block": session.block,
        "week": session.week,
        "entries": [entry_to_dict(e) for e in session.entries],
    }


def dict_to_session_record(data: dict[str, Any], default_exercise_id: str = "") -> SessionRecord:
    """
    Convert dict to SessionRecord.

    A session may list its entries under "entries" (or "exercises"), or,
    for single-exercise files, carry "weight"/"sets" directly.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Session must be a mapping")
    date = validate_date(str(data.get("date", "")))

    raw_entries = data.get("entries", data.get("exercises"))
    if raw_entries is None:
        raw_entries = [{
            "exercise_id": default_exercise_id,
            "weight": data.get("weight", 0.0),
            "sets": data.get("sets", []),
            "estimated_1rm": data.get("estimated_1rm"),
        }]

    block = validate_positive(data.get("block", 1), "block")
    week = validate_positive(data.get("week", 1), "week")
    return SessionRecord(
        date=date,
        block=int(block),
        week=int(week),
        entries=tuple(dict_to_entry(e, default_exercise_id) for e in raw_entries),
    )


def load_exercise_file(path: str | Path) -> tuple[ExerciseConfig, list[SessionRecord]]:
    """
    Load an exercise definition and its sessions from a YAML or JSON file.

    Expected layout:
        exercise: {name, one_rm, min_rep_range, ...}
        sessions: [{date, block, week, weight, sets: [{reps, weight}, ...]}, ...]

    Raises:
        ValidationError: If the file cannot be parsed or is invalid
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid YAML/JSON in {path}: {e}") from e

    if not isinstance(data, dict) or "exercise" not in data:
        raise ValidationError(f"{path}: expected a mapping with an 'exercise' section")

    config = dict_to_exercise_config(data["exercise"])
    sessions = [
        dict_to_session_record(s, config.exercise_id) for s in data.get("sessions") or []
    ]
    return config, sorted(sessions, key=lambda s: s.date)


# ---------------------------------------------------------------------------
# Sets strings
# ---------------------------------------------------------------------------


def parse_compact_sets(s: str) -> list[LoggedSet] | None:
    """
    Try to parse a compact sets string sharing one weight.

    Format: groups @Wkg
    Each group is either:
      NxM  (N reps × M sets, any x/X/× accepted)
      N    (1 set of N reps)

    Examples:
        "8x3 @100kg"        → 3 sets of 8 reps at 100 kg
        "8, 6, 5 @ 80"      → sets of 8, 6, 5 reps at 80 kg
        "10, 8x2 @60kg"     → 10 reps, then 2 sets of 8, at 60 kg

    Returns None if the string is not in compact form.
    """
    m = re.fullmatch(r"(.+?)\s*@\s*([0-9]+(?:\.[0-9]+)?)\s*(?:kg)?", s.strip(), re.IGNORECASE)
    if not m:
        return None
    groups_text, weight = m.group(1), float(m.group(2))
    groups = [g.strip() for g in groups_text.split(",") if g.strip()]
    if not groups:
        return None

    result: list[LoggedSet] = []
    for group in groups:
        gm = re.fullmatch(r"(\d+)\s*[xX×]\s*(\d+)", group)
        if gm:
            n_reps, n_sets = int(gm.group(1)), int(gm.group(2))
            if n_sets < 1:
                return None
            result.extend(LoggedSet(reps=n_reps, weight=weight) for _ in range(n_sets))
            continue
        if re.fullmatch(r"\d+", group):
            result.append(LoggedSet(reps=int(group), weight=weight))
            continue
        return None

    return result


def parse_sets_string(sets_str: str) -> list[LoggedSet]:
    """
    Parse a sets string.

    Compact format (tried first), one weight for all sets:
        "8x3 @100kg", "8, 6, 5 @80"

    Per-set formats (comma-separated):
        reps@weight   e.g. "8@100"
        reps weight   e.g. "8 100"
        reps          e.g. "8"   bare int, weight=0

    Args:
        sets_str: Sets string to parse

    Returns:
        LoggedSets in the order given

    Raises:
        ValidationError: If format is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    compact = parse_compact_sets(sets_str)
    if compact is not None:
        return compact

    sets: list[LoggedSet] = []
    for part in (p.strip() for p in sets_str.split(",")):
        if not part:
            continue
        match_at = re.fullmatch(r"(\d+)\s*@\s*(\d+(?:\.\d+)?)", part)
        match_sp = re.fullmatch(r"(\d+)\s+(\d+(?:\.\d+)?)", part)
        match_bare = re.fullmatch(r"(\d+)", part)

        if match_at:
            reps, weight = int(match_at.group(1)), float(match_at.group(2))
        elif match_sp:
            reps, weight = int(match_sp.group(1)), float(match_sp.group(2))
        elif match_bare:
            reps, weight = int(match_bare.group(1)), 0.0
        else:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                f"Use: reps@weight (e.g. 8@100), reps weight (e.g. 8 100),\n"
                f"     or a shared weight: 8, 6, 5 @100kg / 8x3 @100kg."
            )

        sets.append(LoggedSet(reps=reps, weight=weight))

    if not sets:
        raise ValidationError("No valid sets found in sets string")

    return sets
