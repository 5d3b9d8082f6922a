"""Pydantic models for Terraform workspace and run payloads.

The Terraform API speaks JSON:API, so each resource arrives as
``{"id", "type", "attributes", "relationships"}`` with related resources
listed under a top-level ``included`` array. The ``from_resource``
constructors flatten that shape into the fields the bulk actions use.

Example:
    >>> run = Run.from_resource(
    ...     {"id": "run-1", "type": "runs", "attributes": {"status": "planned"}}
    ... )
    >>> run.status, run.permissions.can_apply
    ('planned', False)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

RUN_PENDING = "pending"
RUN_ERRORED = "errored"
RUN_PLANNED = "planned"
RUN_COST_ESTIMATED = "cost_estimated"
RUN_POLICY_CHECKED = "policy_checked"

RUN_STATUS_VALUES = (
    "applied",
    "apply_queued",
    "applying",
    "canceled",
    "confirmed",
    "cost_estimated",
    "cost_estimating",
    "discarded",
    "errored",
    "fetching",
    "fetching_completed",
    "pending",
    "plan_queued",
    "planned",
    "planned_and_finished",
    "planned_and_saved",
    "planning",
    "policy_checked",
    "policy_checking",
    "policy_override",
    "policy_soft_failed",
    "post_apply_running",
    "post_apply_completed",
    "post_plan_awaiting_decision",
    "post_plan_completed",
    "post_plan_running",
    "pre_apply_running",
    "pre_apply_completed",
    "pre_plan_completed",
    "pre_plan_running",
    "queuing",
    "queuing_apply",
)
DEFAULT_STUCK_STATUS = RUN_COST_ESTIMATED

ItemT = TypeVar("ItemT")


class _Flags(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _none_is_false(cls, value: object) -> object:
        if value is None:
            return False
        return value


class RunPermissions(_Flags):
    """What the API token is allowed to do with a run."""

    can_apply: bool = Field(default=False, alias="can-apply")
    can_cancel: bool = Field(default=False, alias="can-cancel")
    can_discard: bool = Field(default=False, alias="can-discard")


class RunActions(_Flags):
    """Which transitions the server currently accepts for a run."""

    is_confirmable: bool = Field(default=False, alias="is-confirmable")
    is_cancelable: bool = Field(default=False, alias="is-cancelable")
    is_discardable: bool = Field(default=False, alias="is-discardable")


class WorkspacePermissions(_Flags):
    """What the API token is allowed to do with a workspace."""

    can_queue_run: bool = Field(default=False, alias="can-queue-run")


class Run(BaseModel):
    """One plan/apply cycle in a workspace's run queue.

    Attributes:
        id: Run identifier (``run-...``).
        status: Run status, one of ``RUN_STATUS_VALUES`` for known servers.
        permissions: Permission flags for the current token.
        actions: Transition availability reported by the server.

    Example:
        >>> Run(id="run-1", status="pending").actions.is_cancelable
        False
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    status: str = ""
    permissions: RunPermissions = Field(default_factory=RunPermissions)
    actions: RunActions = Field(default_factory=RunActions)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @classmethod
    def from_resource(cls, resource: dict) -> Run:
        attributes = resource.get("attributes") or {}
        return cls(
            id=resource.get("id"),
            status=attributes.get("status"),
            permissions=attributes.get("permissions") or {},
            actions=attributes.get("actions") or {},
        )


class Workspace(BaseModel):
    """A Terraform workspace with its current run resolved.

    Attributes:
        id: Workspace identifier (``ws-...``).
        name: Display name.
        auto_apply: Whether confirmable runs apply without a manual confirm.
        permissions: Permission flags for the current token.
        current_run: The run the workspace currently points at, if any.

    Example:
        >>> Workspace(id="ws-1", name="network").current_run is None
        True
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    name: str = ""
    auto_apply: bool = False
    permissions: WorkspacePermissions = Field(default_factory=WorkspacePermissions)
    current_run: Run | None = None

    @field_validator("auto_apply", mode="before")
    @classmethod
    def normalize_auto_apply(cls, value: object) -> object:
        if value is None:
            return False
        return value

    @classmethod
    def from_resource(
        cls, resource: dict, included_runs: dict[str, Run] | None = None
    ) -> Workspace:
        attributes = resource.get("attributes") or {}
        relationships = resource.get("relationships") or {}
        current_run = None
        run_ref = (relationships.get("current-run") or {}).get("data")
        if isinstance(run_ref, dict) and run_ref.get("id"):
            run_id = run_ref["id"]
            current_run = (included_runs or {}).get(run_id) or Run(id=run_id)
        return cls(
            id=resource.get("id"),
            name=attributes.get("name") or "",
            auto_apply=attributes.get("auto-apply"),
            permissions=attributes.get("permissions") or {},
            current_run=current_run,
        )


@dataclass(frozen=True)
class Page(Generic[ItemT]):
    """One page of a paginated listing.

    ``next_page`` is the server's next page number. Zero, ``None`` or any
    value not past the page just fetched means there are no more pages.
    """

    items: list[ItemT]
    next_page: int | None = None

    def has_next(self, current: int) -> bool:
        return self.next_page is not None and self.next_page > current


def included_runs(payload: dict) -> dict[str, Run]:
    """Index the ``runs`` entries of a JSON:API ``included`` array by id."""
    runs: dict[str, Run] = {}
    for resource in payload.get("included") or []:
        if not isinstance(resource, dict) or resource.get("type") != "runs":
            continue
        run = Run.from_resource(resource)
        runs[run.id] = run
    return runs


def next_page_number(payload: dict) -> int | None:
    """Return ``meta.pagination.next-page`` from a listing payload."""
    pagination = (payload.get("meta") or {}).get("pagination") or {}
    value = pagination.get("next-page")
    if isinstance(value, int):
        return value
    return None
