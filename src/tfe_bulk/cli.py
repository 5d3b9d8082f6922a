"""Command-line entry point for tfe-bulk.

Example:
    $ TFE_TOKEN=... tfe-bulk cleanup --org acme --search network --assume-yes
"""

from __future__ import annotations

import time
from types import SimpleNamespace
from typing import Callable, Optional

import typer

from . import __version__
from . import config
from . import log as tfe_log
from .client import TfeApiError, TfeClient
from .commands import cancel_runs as cancel_cmd
from .commands import cleanup_runs as cleanup_cmd
from .commands import confirm_runs as confirm_cmd
from .commands import discard_runs as discard_cmd
from .commands import start_runs as run_cmd
from .io import die
from .models import DEFAULT_STUCK_STATUS, RUN_STATUS_VALUES

app = typer.Typer(
    name="tfe-bulk",
    help="Bulk run actions across Terraform Cloud/Enterprise workspaces.",
    add_completion=False,
)

ORG_HELP = "Terraform Cloud organization name"
SEARCH_HELP = "Workspace name search, passed to the API as-is"
ASSUME_YES_HELP = "Run without prompting for confirmation"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _log_level_callback(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in tfe_log.LEVEL_NAMES:
        raise typer.BadParameter(
            f"expected one of: {', '.join(tfe_log.LEVEL_NAMES)}"
        )
    return normalized


def _org_callback(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise typer.BadParameter("organization name must not be empty")
    return normalized


def _stuck_status_callback(value: str) -> str:
    normalized = value.strip()
    if normalized not in RUN_STATUS_VALUES:
        raise typer.BadParameter(f"unknown run status: {value}")
    return normalized


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help=f"Log level ({'|'.join(tfe_log.LEVEL_NAMES)})",
        callback=_log_level_callback,
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable colorized output"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Start, confirm, discard, cancel or clean up runs in bulk."""
    if log_level is not None:
        tfe_log.set_level(log_level)
    if no_color:
        tfe_log.set_no_color(True)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(2)


def _execute(action: Callable[..., None], args: SimpleNamespace) -> None:
    try:
        settings = config.load_settings()
    except config.ConfigError as exc:
        die(str(exc))
        return

    failure: TfeApiError | None = None
    start = time.monotonic()
    tfe_log.info("Running...")
    with TfeClient(settings) as api:
        try:
            action(args, api=api)
        except TfeApiError as exc:
            failure = exc
    if failure is not None:
        tfe_log.error(str(failure))
    tfe_log.info(f"Finished in {time.monotonic() - start:.3f}s")
    if failure is not None:
        raise typer.Exit(1)


@app.command("run")
def run_command(
    org: str = typer.Option(..., "--org", help=ORG_HELP, callback=_org_callback),
    search: str = typer.Option("", "--search", help=SEARCH_HELP),
    assume_yes: bool = typer.Option(False, "--assume-yes", "-y", help=ASSUME_YES_HELP),
    errored_only: bool = typer.Option(
        False,
        "--errored-only",
        help="Only start runs in workspaces whose current run errored",
    ),
) -> None:
    """Start a new run in each matching workspace."""
    _execute(
        run_cmd,
        SimpleNamespace(
            org=org, search=search, assume_yes=assume_yes, errored_only=errored_only
        ),
    )


@app.command("confirm")
def confirm_command(
    org: str = typer.Option(..., "--org", help=ORG_HELP, callback=_org_callback),
    search: str = typer.Option("", "--search", help=SEARCH_HELP),
    assume_yes: bool = typer.Option(False, "--assume-yes", "-y", help=ASSUME_YES_HELP),
) -> None:
    """Confirm the current run of each matching workspace."""
    _execute(
        confirm_cmd, SimpleNamespace(org=org, search=search, assume_yes=assume_yes)
    )


@app.command("discard")
def discard_command(
    org: str = typer.Option(..., "--org", help=ORG_HELP, callback=_org_callback),
    search: str = typer.Option("", "--search", help=SEARCH_HELP),
    assume_yes: bool = typer.Option(False, "--assume-yes", "-y", help=ASSUME_YES_HELP),
) -> None:
    """Discard the current run of each matching workspace."""
    _execute(
        discard_cmd, SimpleNamespace(org=org, search=search, assume_yes=assume_yes)
    )


@app.command("cancel")
def cancel_command(
    org: str = typer.Option(..., "--org", help=ORG_HELP, callback=_org_callback),
    search: str = typer.Option("", "--search", help=SEARCH_HELP),
    assume_yes: bool = typer.Option(False, "--assume-yes", "-y", help=ASSUME_YES_HELP),
) -> None:
    """Cancel the current run of each matching workspace."""
    _execute(
        cancel_cmd, SimpleNamespace(org=org, search=search, assume_yes=assume_yes)
    )


@app.command("cleanup")
def cleanup_command(
    org: str = typer.Option(..., "--org", help=ORG_HELP, callback=_org_callback),
    search: str = typer.Option("", "--search", help=SEARCH_HELP),
    assume_yes: bool = typer.Option(False, "--assume-yes", "-y", help=ASSUME_YES_HELP),
    stuck_status: str = typer.Option(
        DEFAULT_STUCK_STATUS,
        "--stuck-status",
        help="Run status at which runs wait for confirmation",
        callback=_stuck_status_callback,
    ),
) -> None:
    """Confirm, discard or cancel runs until each queue holds at most one."""
    _execute(
        cleanup_cmd,
        SimpleNamespace(
            org=org, search=search, assume_yes=assume_yes, stuck_status=stuck_status
        ),
    )


if __name__ == "__main__":
    app()
