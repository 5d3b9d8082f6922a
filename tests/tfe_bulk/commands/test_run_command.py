from types import SimpleNamespace

import pytest
from fakes import FakeApi, make_run, make_workspace

from tfe_bulk.commands import start_runs


def _args(**overrides: object) -> SimpleNamespace:
    data = {"org": "acme", "search": "", "assume_yes": True, "errored_only": False}
    data.update(overrides)
    return SimpleNamespace(**data)


def _api() -> FakeApi:
    return FakeApi.with_workspaces(
        make_workspace("ws-a", make_run("run-a", "errored")),
        make_workspace("ws-b", make_run("run-b", "applied")),
        make_workspace("ws-c", make_run("run-c", "errored"), can_queue_run=False),
    )


def test_starts_runs_where_queueing_is_permitted(
    capsys: pytest.CaptureFixture[str],
) -> None:
    api = _api()

    start_runs(_args(), api=api)

    assert api.mutations() == [("create_run", "ws-a"), ("create_run", "ws-b")]
    captured = capsys.readouterr()
    assert "acme c cannot queue a run" in captured.err
    assert "started run-new-1" in captured.out


def test_errored_only_skips_healthy_workspaces_silently(
    capsys: pytest.CaptureFixture[str],
) -> None:
    api = _api()

    start_runs(_args(errored_only=True), api=api)

    assert api.mutations() == [("create_run", "ws-a")]
    captured = capsys.readouterr()
    assert "acme b" not in captured.out + captured.err
    assert "acme c cannot queue a run" in captured.err


def test_prompt_yes_starts_runs(monkeypatch: pytest.MonkeyPatch) -> None:
    api = _api()
    monkeypatch.setattr("builtins.input", lambda _prompt: "yes")

    start_runs(_args(assume_yes=False), api=api)

    assert len(api.mutations()) == 2


def test_no_workspaces_is_a_no_op(capsys: pytest.CaptureFixture[str]) -> None:
    api = FakeApi()

    start_runs(_args(assume_yes=False), api=api)

    assert api.mutations() == []
    assert "Nothing to do" in capsys.readouterr().out
