import pytest

from tfe_bulk import eligibility
from tfe_bulk.models import Run, RunActions, RunPermissions, Workspace

BOTH_FLAGS = [(False, False), (False, True), (True, False), (True, True)]


@pytest.mark.parametrize("permitted,available", BOTH_FLAGS)
def test_can_confirm_requires_apply_permission_and_confirmable(
    permitted: bool, available: bool
) -> None:
    run = Run(
        id="run-1",
        permissions=RunPermissions(can_apply=permitted),
        actions=RunActions(is_confirmable=available),
    )

    assert eligibility.can_confirm(run) is (permitted and available)


@pytest.mark.parametrize("permitted,available", BOTH_FLAGS)
def test_can_discard_requires_discard_permission_and_discardable(
    permitted: bool, available: bool
) -> None:
    run = Run(
        id="run-1",
        permissions=RunPermissions(can_discard=permitted),
        actions=RunActions(is_discardable=available),
    )

    assert eligibility.can_discard(run) is (permitted and available)


@pytest.mark.parametrize("permitted,available", BOTH_FLAGS)
def test_can_cancel_requires_cancel_permission_and_cancelable(
    permitted: bool, available: bool
) -> None:
    run = Run(
        id="run-1",
        permissions=RunPermissions(can_cancel=permitted),
        actions=RunActions(is_cancelable=available),
    )

    assert eligibility.can_cancel(run) is (permitted and available)


def test_flags_for_other_actions_do_not_count() -> None:
    run = Run(
        id="run-1",
        permissions=RunPermissions(can_cancel=True, can_discard=True),
        actions=RunActions(is_confirmable=True),
    )

    assert eligibility.can_confirm(run) is False


def test_run_checks_cover_each_run_action() -> None:
    assert eligibility.RUN_CHECKS == {
        "confirm": eligibility.can_confirm,
        "discard": eligibility.can_discard,
        "cancel": eligibility.can_cancel,
    }


def test_is_errored_reads_current_run_status() -> None:
    errored = Workspace(id="ws-1", current_run=Run(id="run-1", status="errored"))
    applied = Workspace(id="ws-2", current_run=Run(id="run-2", status="applied"))
    no_run = Workspace(id="ws-3")

    assert eligibility.is_errored(errored) is True
    assert eligibility.is_errored(applied) is False
    assert eligibility.is_errored(no_run) is False
