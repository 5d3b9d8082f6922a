"""Paginated retrieval of workspaces and waiting runs."""

from __future__ import annotations

from . import log
from .client import TfeApi
from .models import RUN_PENDING, Run, Workspace


def get_workspaces(api: TfeApi, org: str, search: str = "") -> list[Workspace]:
    """Return every workspace in ``org`` matching ``search`` that has a run.

    Args:
        api: Terraform API client.
        org: Organization name.
        search: Substring filter passed to the API unchanged; empty means all.

    Returns:
        Workspaces in server order, excluding those without a current run.

    Raises:
        TfeApiError: When any page fails to load. No partial list is returned.
    """
    workspaces: list[Workspace] = []
    page_number = 0
    while True:
        page = api.list_workspaces(org, search, page_number)
        workspaces.extend(ws for ws in page.items if ws.current_run is not None)
        if not page.has_next(page_number):
            break
        page_number = page.next_page
    log.info(f"Found {len(workspaces)} Workspace(s)")
    return workspaces


def get_waiting_runs(api: TfeApi, workspace_id: str, stuck_status: str) -> list[Run]:
    """Return the queued runs of a workspace that are stuck or pending.

    Pending runs are assumed to sit together at the tail of the listing.
    Paging therefore continues only while the last run on the page is still
    pending; once it is not, retrieval stops even if the server reports
    more pages. An empty page also stops retrieval.

    Args:
        api: Terraform API client.
        workspace_id: Workspace to inspect.
        stuck_status: Status at which runs wait for confirmation.

    Returns:
        Matching runs in queue order.
    """
    runs: list[Run] = []
    page_number = 0
    while True:
        page = api.list_runs(workspace_id, page_number)
        runs.extend(
            run for run in page.items if run.status in (stuck_status, RUN_PENDING)
        )
        if not page.items or page.items[-1].status != RUN_PENDING:
            return runs
        if not page.has_next(page_number):
            return runs
        page_number = page.next_page
