"""Cleanup triage over each workspace's run queue.

Only the head of a queue (position 0) can be confirmed. Every run queued
behind it is cleared: discarded when stuck, cancelled when still pending.
A pending head is left alone because it starts once the queue is clear.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from . import log
from .client import TfeApi
from .dispatch import CLEANUP_ORDER, Batch
from .eligibility import can_cancel, can_confirm, can_discard
from .models import RUN_PENDING, Run, Workspace
from .retrieval import get_waiting_runs


@dataclass
class CleanupPlan:
    """Changes selected by cleanup triage, grouped by kind."""

    confirm: Batch = field(default_factory=lambda: Batch("confirm"))
    discard: Batch = field(default_factory=lambda: Batch("discard"))
    cancel: Batch = field(default_factory=lambda: Batch("cancel"))
    skip: Batch = field(default_factory=lambda: Batch("skip"))

    def batches(self) -> list[Batch]:
        """Return the batches in dispatch order."""
        return [getattr(self, kind) for kind in CLEANUP_ORDER]


def _triage_head(
    org: str, workspace: Workspace, run: Run, stuck_status: str, plan: CleanupPlan
) -> None:
    if run.status == stuck_status:
        if not workspace.auto_apply:
            log.info(f"{org} {workspace.name} auto-apply disabled, skipping {run.id}")
        elif not can_confirm(run):
            log.warning(f"{org} {workspace.name} cannot confirm {run.id}")
        else:
            log.info(f"{org} {workspace.name} will confirm {run.id}")
            plan.confirm.add(workspace.name, run.id)
    elif run.status == RUN_PENDING:
        log.info(f"{org} {workspace.name} will skip {run.id}")
        plan.skip.add(workspace.name, run.id)


def _triage_queued(
    org: str, workspace: Workspace, run: Run, stuck_status: str, plan: CleanupPlan
) -> None:
    if run.status == stuck_status:
        if can_discard(run):
            log.info(f"{org} {workspace.name} will discard {run.id}")
            plan.discard.add(workspace.name, run.id)
        else:
            log.warning(f"{org} {workspace.name} cannot discard {run.id}")
    elif run.status == RUN_PENDING:
        if can_cancel(run):
            log.info(f"{org} {workspace.name} will cancel {run.id}")
            plan.cancel.add(workspace.name, run.id)
        else:
            log.warning(f"{org} {workspace.name} cannot cancel {run.id}")


def triage_queue(
    org: str,
    workspace: Workspace,
    runs: Sequence[Run],
    stuck_status: str,
    plan: CleanupPlan,
) -> None:
    """Classify one workspace's waiting runs by queue position into ``plan``."""
    for position, run in enumerate(runs):
        if position == 0:
            _triage_head(org, workspace, run, stuck_status, plan)
        else:
            _triage_queued(org, workspace, run, stuck_status, plan)


def plan_cleanup(
    api: TfeApi,
    org: str,
    workspaces: Sequence[Workspace],
    stuck_status: str,
) -> CleanupPlan:
    """Build the cleanup plan for every workspace stuck at ``stuck_status``.

    Raises:
        TfeApiError: When a workspace's run queue cannot be retrieved.
    """
    plan = CleanupPlan()
    for workspace in workspaces:
        current = workspace.current_run
        if current is None or current.status != stuck_status:
            continue
        runs = get_waiting_runs(api, workspace.id, stuck_status)
        triage_queue(org, workspace, runs, stuck_status, plan)
    return plan
