"""Shared Typer app object, shared option types, and settings utility."""

from typing import Annotated, Optional

import typer

from ..core.config import ModelSettings, load_model_settings

# Shared --json option used by every command
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

# Shared --block option (1-indexed block counter)
BlockOption = Annotated[
    int,
    typer.Option("--block", "-b", help="Current block number (1-indexed)"),
]

# Shared --frequency option; None means "use model.yaml"
FrequencyOption = Annotated[
    Optional[int],
    typer.Option("--frequency", "-f", help="Deload every N blocks (0 disables); default from model.yaml"),
]

app = typer.Typer(
    name="gymtrack",
    help="Resistance-training load tracker: working weight, set targets and e1RM.",
    no_args_is_help=True,
)


def get_settings() -> ModelSettings:
    """Load model settings from the bundled and user model.yaml."""
    return load_model_settings()


def resolve_frequency(frequency: int | None, settings: ModelSettings) -> int:
    """Command-line frequency if given, else the configured one."""
    return settings.deload_frequency if frequency is None else frequency
