"""
Configuration constants for the training-load model.

All adjustable parameters are centralized here for easy tuning.
Values in the bundled model.yaml (and the user's override file) take
precedence when read through load_model_settings().
"""

from dataclasses import dataclass
from typing import Any, Final, Literal

from .engine.config_loader import load_model_config

VolumeLevel = Literal["Low", "Moderate"]
TrendStatus = Literal["increase", "decrease", "stable"]

# =============================================================================
# EFFECTIVE REPS
# =============================================================================

# Index = completed reps at failure, value = hypertrophic effective reps.
# Reps above 8 flatten at the last value.
EFFECTIVE_REP_VALUES: Final[tuple[float, ...]] = (
    0.0, 1.0, 2.0, 2.99, 3.94, 4.79, 5.41, 5.64, 5.65,
)

# =============================================================================
# ONE-REP-MAX ESTIMATION
# =============================================================================

BRZYCKI_NUMERATOR: Final[float] = 36.0  # weight × 36 / (37 − reps)
BRZYCKI_DENOMINATOR: Final[float] = 37.0
MAX_ESTIMABLE_REPS: Final[int] = 36  # reps=37 divides by zero
REP_RANGE_HALF_WIDTH: Final[int] = 2  # ± window reported around the estimate

# =============================================================================
# PERIODIZATION
# =============================================================================

DELOAD_FREQUENCY: Final[int] = 4  # Deload on block 1, 5, 9, ... (0 disables)
WEEKS_PER_BLOCK: Final[int] = 4  # Weeks before the block counter advances

# =============================================================================
# VOLUME TARGETS
# =============================================================================

BASE_EFFECTIVE_REP_TARGET: Final[dict[str, float]] = {
    "Low": 19.16,
    "Moderate": 28.74,
}
DEFAULT_VOLUME_LEVEL: Final[str] = "Moderate"
MAX_SETS_CAP: Final[int] = 10  # Hard ceiling on suggested sets

# =============================================================================
# PROGRESS TRACKING
# =============================================================================

TREND_THRESHOLD_PERCENT: Final[float] = 2.0  # |change| above this is a trend
PROGRESS_WINDOW: Final[int] = 8  # Recent sessions compared by the tracker


@dataclass(frozen=True)
class ModelSettings:
    """Tunable model parameters after YAML overrides are applied."""

    deload_frequency: int = DELOAD_FREQUENCY
    weeks_per_block: int = WEEKS_PER_BLOCK
    goal_low: float = BASE_EFFECTIVE_REP_TARGET["Low"]
    goal_moderate: float = BASE_EFFECTIVE_REP_TARGET["Moderate"]
    max_sets_cap: int = MAX_SETS_CAP
    trend_threshold_percent: float = TREND_THRESHOLD_PERCENT
    progress_window: int = PROGRESS_WINDOW

    @property
    def effective_rep_targets(self) -> dict[str, float]:
        """Base effective-reps goal per volume level."""
        return {"Low": self.goal_low, "Moderate": self.goal_moderate}


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    value = cfg.get(name, {})
    return value if isinstance(value, dict) else {}


def model_settings_from_dict(cfg: dict[str, Any]) -> ModelSettings:
    """
    Build ModelSettings from a merged YAML config dict.

    Missing keys keep the Python defaults above.

    Raises:
        ValueError: If a value has the wrong type or is out of range
    """
    periodization = _section(cfg, "periodization")
    volume = _section(cfg, "volume")
    progress = _section(cfg, "progress")

    try:
        settings = ModelSettings(
            deload_frequency=int(periodization.get("DELOAD_FREQUENCY", DELOAD_FREQUENCY)),
            weeks_per_block=int(periodization.get("WEEKS_PER_BLOCK", WEEKS_PER_BLOCK)),
            goal_low=float(volume.get("GOAL_LOW", BASE_EFFECTIVE_REP_TARGET["Low"])),
            goal_moderate=float(volume.get("GOAL_MODERATE", BASE_EFFECTIVE_REP_TARGET["Moderate"])),
            max_sets_cap=int(volume.get("MAX_SETS_CAP", MAX_SETS_CAP)),
            trend_threshold_percent=float(
                progress.get("TREND_THRESHOLD_PERCENT", TREND_THRESHOLD_PERCENT)
            ),
            progress_window=int(progress.get("PROGRESS_WINDOW", PROGRESS_WINDOW)),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid model configuration: {e}") from e

    if settings.deload_frequency < 0:
        raise ValueError("DELOAD_FREQUENCY must be non-negative")
    if settings.weeks_per_block < 1:
        raise ValueError("WEEKS_PER_BLOCK must be at least 1")
    if settings.goal_low <= 0 or settings.goal_moderate <= 0:
        raise ValueError("Volume goals must be positive")
    if not 1 <= settings.max_sets_cap <= MAX_SETS_CAP:
        raise ValueError(f"MAX_SETS_CAP must be between 1 and {MAX_SETS_CAP}")
    if settings.progress_window < 2:
        raise ValueError("PROGRESS_WINDOW must be at least 2")

    return settings


def load_model_settings() -> ModelSettings:
    """
    Load ModelSettings from the bundled and user YAML files.

    Falls back to the Python defaults if the merged config is invalid.
    """
    import warnings

    try:
        return model_settings_from_dict(load_model_config())
    except ValueError as exc:
        warnings.warn(f"gymtrack: {exc}; using Python defaults.", stacklevel=2)
        return ModelSettings()
