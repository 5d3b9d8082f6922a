"""Eligibility checks for bulk run and workspace actions.

A run action needs both the token's permission and the server reporting the
transition as currently available. Permission alone is not enough.

Example:
    >>> from tfe_bulk.models import Run, RunActions, RunPermissions
    >>> run = Run(
    ...     id="run-1",
    ...     permissions=RunPermissions(can_apply=True),
    ...     actions=RunActions(is_confirmable=False),
    ... )
    >>> can_confirm(run)
    False
"""

from __future__ import annotations

from typing import Callable, Literal

from .models import RUN_ERRORED, Run, Workspace

RunAction = Literal["confirm", "discard", "cancel"]


def can_confirm(run: Run) -> bool:
    return run.permissions.can_apply and run.actions.is_confirmable


def can_discard(run: Run) -> bool:
    return run.permissions.can_discard and run.actions.is_discardable


def can_cancel(run: Run) -> bool:
    return run.permissions.can_cancel and run.actions.is_cancelable


RUN_CHECKS: dict[RunAction, Callable[[Run], bool]] = {
    "confirm": can_confirm,
    "discard": can_discard,
    "cancel": can_cancel,
}


def can_start_run(workspace: Workspace) -> bool:
    """Return whether a new run may be queued in ``workspace``."""
    return workspace.permissions.can_queue_run


def is_errored(workspace: Workspace) -> bool:
    """Return whether the workspace's current run ended in an error."""
    run = workspace.current_run
    return run is not None and run.status == RUN_ERRORED
