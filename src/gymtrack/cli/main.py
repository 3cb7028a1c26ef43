"""
CLI entry point using Typer.

Provides calculator commands over the training-load engine:
- weight: Suggested working weight for a session
- sets: Suggested set count given the sets logged so far
- deload / advance: Periodization helpers
- one-rm / rep-range: 1RM estimation and its inverse
- summary: Effective reps, completed sets and HVL of a session
- progress: e1RM change and trend
- weeks: Week-by-week metrics recomputed from a logged exercise file
"""

from .app import app
from .commands import analysis, planning  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
