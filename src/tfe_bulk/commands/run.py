"""Implementation for the ``tfe-bulk run`` action."""

from __future__ import annotations

from .. import log
from ..client import TfeApi, connect
from ..dispatch import Batch, run_gated
from ..eligibility import can_start_run, is_errored
from ..retrieval import get_workspaces


def start_runs(args: object, *, api: TfeApi | None = None) -> None:
    """Queue a new run in every matching workspace that allows it.

    Args:
        args: CLI argument object with ``org``, ``search``, ``assume_yes``
            and ``errored_only`` fields.
        api: Terraform API client. Built from the environment when omitted.

    Returns:
        None.

    Raises:
        TfeApiError: When listing workspaces or creating a run fails.

    Example:
        $ tfe-bulk run --org acme --search network --errored-only
    """
    org = args.org
    errored_only = bool(getattr(args, "errored_only", False))
    with connect(api) as client:
        workspaces = get_workspaces(client, org, getattr(args, "search", "") or "")

        create = Batch("create")
        for ws in workspaces:
            if errored_only and not is_errored(ws):
                continue
            if not can_start_run(ws):
                log.warning(f"{org} {ws.name} cannot queue a run")
                continue
            log.info(f"{org} {ws.name} will start run")
            create.add(ws.name, ws.id)

        run_gated(client, [create], bool(getattr(args, "assume_yes", False)))
