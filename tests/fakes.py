"""In-memory Terraform API double and model builders for tests."""

from __future__ import annotations

from tfe_bulk.client import TfeApiError
from tfe_bulk.models import (
    Page,
    Run,
    RunActions,
    RunPermissions,
    Workspace,
    WorkspacePermissions,
)


def make_run(run_id: str, status: str = "pending", *, eligible: bool = True) -> Run:
    return Run(
        id=run_id,
        status=status,
        permissions=RunPermissions(
            can_apply=eligible, can_cancel=eligible, can_discard=eligible
        ),
        actions=RunActions(
            is_confirmable=eligible, is_cancelable=eligible, is_discardable=eligible
        ),
    )


def make_workspace(
    ws_id: str,
    current_run: Run | None = None,
    *,
    name: str | None = None,
    auto_apply: bool = False,
    can_queue_run: bool = True,
) -> Workspace:
    return Workspace(
        id=ws_id,
        name=name or ws_id.removeprefix("ws-"),
        auto_apply=auto_apply,
        permissions=WorkspacePermissions(can_queue_run=can_queue_run),
        current_run=current_run,
    )


class FakeApi:
    """Records every call; listings are served from prepared pages.

    ``workspace_pages`` and each entry of ``run_pages`` map a requested page
    number to the page returned for it.
    """

    def __init__(
        self,
        workspace_pages: dict[int, Page[Workspace]] | None = None,
        run_pages: dict[str, dict[int, Page[Run]]] | None = None,
        fail_on: set[tuple[str, str]] | None = None,
    ) -> None:
        self.workspace_pages = workspace_pages or {0: Page(items=[])}
        self.run_pages = run_pages or {}
        self.fail_on = fail_on or set()
        self.calls: list[tuple[str, ...]] = []
        self._created = 0
        self.closed = False

    @classmethod
    def with_workspaces(cls, *workspaces: Workspace, **kwargs: object) -> FakeApi:
        return cls(workspace_pages={0: Page(items=list(workspaces))}, **kwargs)

    def __enter__(self) -> FakeApi:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def _check(self, method: str, target: str) -> None:
        if (method, target) in self.fail_on:
            raise TfeApiError(f"{method} {target}", "boom", 500)

    def list_workspaces(
        self, org: str, search: str = "", page: int = 0
    ) -> Page[Workspace]:
        self.calls.append(("list_workspaces", org, search, str(page)))
        self._check("list_workspaces", str(page))
        return self.workspace_pages[page]

    def list_runs(self, workspace_id: str, page: int = 0) -> Page[Run]:
        self.calls.append(("list_runs", workspace_id, str(page)))
        self._check("list_runs", workspace_id)
        pages = self.run_pages.get(workspace_id, {0: Page(items=[])})
        return pages[page]

    def create_run(self, workspace_id: str) -> Run:
        self.calls.append(("create_run", workspace_id))
        self._check("create_run", workspace_id)
        self._created += 1
        return Run(id=f"run-new-{self._created}", status="pending")

    def apply_run(self, run_id: str) -> None:
        self.calls.append(("apply_run", run_id))
        self._check("apply_run", run_id)

    def cancel_run(self, run_id: str) -> None:
        self.calls.append(("cancel_run", run_id))
        self._check("cancel_run", run_id)

    def discard_run(self, run_id: str) -> None:
        self.calls.append(("discard_run", run_id))
        self._check("discard_run", run_id)

    def mutations(self) -> list[tuple[str, ...]]:
        return [call for call in self.calls if not call[0].startswith("list_")]
