"""Implementations for the ``confirm``, ``discard`` and ``cancel`` actions.

Each one acts on the current run of every matching workspace.
"""

from __future__ import annotations

from .. import log
from ..client import TfeApi, connect
from ..dispatch import Batch, run_gated
from ..eligibility import RUN_CHECKS, RunAction
from ..retrieval import get_workspaces


def act_on_current_runs(
    action: RunAction, args: object, *, api: TfeApi | None = None
) -> None:
    """Apply ``action`` to each workspace's current run where eligible.

    Args:
        action: One of ``confirm``, ``discard`` or ``cancel``.
        args: CLI argument object with ``org``, ``search`` and ``assume_yes``.
        api: Terraform API client. Built from the environment when omitted.

    Raises:
        TfeApiError: When listing workspaces or a run transition fails.
    """
    org = args.org
    check = RUN_CHECKS[action]
    with connect(api) as client:
        workspaces = get_workspaces(client, org, getattr(args, "search", "") or "")

        batch = Batch(action)
        for ws in workspaces:
            run = ws.current_run
            if run is None:
                continue
            if not check(run):
                log.warning(f"{org} {ws.name} cannot {action} {run.id}")
                continue
            log.info(f"{org} {ws.name} will {action} {run.id}")
            batch.add(ws.name, run.id)

        run_gated(client, [batch], bool(getattr(args, "assume_yes", False)))


def confirm_runs(args: object, *, api: TfeApi | None = None) -> None:
    """Confirm (apply) the current run where permitted and confirmable."""
    act_on_current_runs("confirm", args, api=api)


def discard_runs(args: object, *, api: TfeApi | None = None) -> None:
    """Discard the current run where permitted and discardable."""
    act_on_current_runs("discard", args, api=api)


def cancel_runs(args: object, *, api: TfeApi | None = None) -> None:
    """Cancel the current run where permitted and cancelable."""
    act_on_current_runs("cancel", args, api=api)
