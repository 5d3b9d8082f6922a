"""Implementation for the ``tfe-bulk cleanup`` action."""

from __future__ import annotations

from ..client import TfeApi, connect
from ..dispatch import run_gated
from ..models import DEFAULT_STUCK_STATUS
from ..retrieval import get_workspaces
from ..triage import plan_cleanup


def cleanup_runs(args: object, *, api: TfeApi | None = None) -> None:
    """Unblock workspaces whose queue is stuck behind unconfirmed runs.

    Confirms the head run where auto-apply is on, discards stuck runs queued
    behind it and cancels pending ones, leaving at most one run per queue.
    Cancels are issued first, then discards, then confirms.

    Args:
        args: CLI argument object with ``org``, ``search``, ``assume_yes``
            and ``stuck_status`` fields.
        api: Terraform API client. Built from the environment when omitted.

    Returns:
        None.

    Raises:
        TfeApiError: When retrieval fails (nothing is dispatched) or a
            dispatched call fails (later calls are not issued).

    Example:
        $ tfe-bulk cleanup --org acme --stuck-status policy_checked
    """
    org = args.org
    stuck_status = getattr(args, "stuck_status", None) or DEFAULT_STUCK_STATUS
    with connect(api) as client:
        workspaces = get_workspaces(client, org, getattr(args, "search", "") or "")
        plan = plan_cleanup(client, org, workspaces, stuck_status)
        run_gated(client, plan.batches(), bool(getattr(args, "assume_yes", False)))
