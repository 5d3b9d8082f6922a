"""Action implementations exposed by the tfe-bulk CLI."""

from .cleanup import cleanup_runs
from .current_run import cancel_runs, confirm_runs, discard_runs
from .run import start_runs

__all__ = [
    "cancel_runs",
    "cleanup_runs",
    "confirm_runs",
    "discard_runs",
    "start_runs",
]
