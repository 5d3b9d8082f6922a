"""Confirmation gate and ordered dispatch of queued changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal, Sequence

from . import io, log
from .client import TfeApi

BatchKind = Literal["create", "confirm", "discard", "cancel", "skip"]

# Cancels must precede discards; a discard moves the workspace head.
CLEANUP_ORDER: tuple[BatchKind, ...] = ("cancel", "discard", "confirm", "skip")


@dataclass(frozen=True)
class Change:
    """One queued state transition.

    Attributes:
        workspace: Workspace display name, for logging.
        target_id: Run id, or workspace id for ``create`` batches.
    """

    workspace: str
    target_id: str


@dataclass
class Batch:
    """Changes of one kind, dispatched together in insertion order."""

    kind: BatchKind
    changes: list[Change] = field(default_factory=list)

    def add(self, workspace: str, target_id: str) -> None:
        self.changes.append(Change(workspace=workspace, target_id=target_id))

    def target_ids(self) -> list[str]:
        return [change.target_id for change in self.changes]

    def __len__(self) -> int:
        return len(self.changes)


def change_count(batches: Sequence[Batch]) -> int:
    """Count every queued change, informational ``skip`` entries included."""
    return sum(len(batch) for batch in batches)


def confirm_changes(
    count: int,
    assume_yes: bool,
    *,
    prompt: Callable[[], bool] | None = None,
) -> bool:
    """Decide whether queued changes may be dispatched.

    Args:
        count: Total number of queued changes.
        assume_yes: Skip the prompt and approve.
        prompt: Interactive approval callback; defaults to ``io.confirm_prompt``.

    Returns:
        ``True`` when dispatch should proceed. Declining is not an error.
    """
    if count <= 0:
        log.info("Nothing to do")
        return False
    if assume_yes:
        return True
    if (prompt or io.confirm_prompt)():
        return True
    log.info("Action(s) aborted")
    return False


def _create(api: TfeApi, change: Change) -> None:
    run = api.create_run(change.target_id)
    log.success(f"started {run.id}")


def _confirm(api: TfeApi, change: Change) -> None:
    log.info(f"confirming {change.target_id}")
    api.apply_run(change.target_id)


def _discard(api: TfeApi, change: Change) -> None:
    log.info(f"discarding {change.target_id}")
    api.discard_run(change.target_id)


def _cancel(api: TfeApi, change: Change) -> None:
    log.info(f"canceling {change.target_id}")
    api.cancel_run(change.target_id)


def _skip(api: TfeApi, change: Change) -> None:
    log.debug(f"leaving {change.target_id} to queue on its own")


_HANDLERS: dict[BatchKind, Callable[[TfeApi, Change], None]] = {
    "create": _create,
    "confirm": _confirm,
    "discard": _discard,
    "cancel": _cancel,
    "skip": _skip,
}


def dispatch(api: TfeApi, batches: Sequence[Batch]) -> None:
    """Issue every queued change, one call at a time, in batch order.

    The first failing call raises and stops the remaining dispatch. Calls
    already issued are not undone.

    Raises:
        TfeApiError: From the first call that fails.
    """
    for batch in batches:
        handler = _HANDLERS[batch.kind]
        for change in batch.changes:
            handler(api, change)


def run_gated(
    api: TfeApi,
    batches: Sequence[Batch],
    assume_yes: bool,
    *,
    prompt: Callable[[], bool] | None = None,
) -> bool:
    """Pass ``batches`` through the confirmation gate and dispatch them.

    Returns:
        ``True`` when the batches were dispatched.
    """
    if not confirm_changes(change_count(batches), assume_yes, prompt=prompt):
        return False
    dispatch(api, batches)
    return True
