"""HTTP client for the Terraform Cloud / Enterprise workspace and run API."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Protocol

import httpx

from .config import Settings, load_settings
from .models import Page, Run, Workspace, included_runs, next_page_number

API_PREFIX = "/api/v2"
JSONAPI_CONTENT_TYPE = "application/vnd.api+json"

_RATE_LIMIT_STATUS = 429
_RATE_LIMIT_RETRY_ATTEMPTS = 3
_RATE_LIMIT_BACKOFF_SECONDS = 1.0


@dataclass(eq=False)
class TfeApiError(RuntimeError):
    """Raised when an API call fails at the transport or HTTP level."""

    operation: str
    detail: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.status_code is None:
            return f"{self.operation}: {self.detail}"
        return f"{self.operation}: HTTP {self.status_code}: {self.detail}"


class TfeApi(Protocol):
    """Workspace and run operations the bulk actions depend on."""

    def list_workspaces(
        self, org: str, search: str = "", page: int = 0
    ) -> Page[Workspace]: ...

    def list_runs(self, workspace_id: str, page: int = 0) -> Page[Run]: ...

    def create_run(self, workspace_id: str) -> Run: ...

    def apply_run(self, run_id: str) -> None: ...

    def cancel_run(self, run_id: str) -> None: ...

    def discard_run(self, run_id: str) -> None: ...


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        messages = []
        for entry in payload.get("errors") or []:
            if isinstance(entry, dict):
                text = entry.get("detail") or entry.get("title")
                if text:
                    messages.append(str(text))
            elif entry:
                messages.append(str(entry))
        if messages:
            return "; ".join(messages)
    return response.reason_phrase or "request failed"


class TfeClient:
    """Synchronous ``TfeApi`` implementation backed by ``httpx.Client``.

    Requests rejected with HTTP 429 are retried with a linear backoff. Every
    other failure raises ``TfeApiError`` immediately.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.BaseTransport | None = None,
        retry_attempts: int = _RATE_LIMIT_RETRY_ATTEMPTS,
        retry_backoff_seconds: float = _RATE_LIMIT_BACKOFF_SECONDS,
    ) -> None:
        self.page_size = settings.page_size
        self.retry_attempts = max(int(retry_attempts), 1)
        self.retry_backoff_seconds = retry_backoff_seconds
        self._http = httpx.Client(
            base_url=f"{settings.address}{API_PREFIX}",
            headers={
                "Authorization": f"Bearer {settings.token}",
                "Content-Type": JSONAPI_CONTENT_TYPE,
                "Accept": JSONAPI_CONTENT_TYPE,
            },
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    def __enter__(self) -> TfeClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, object] | None = None,
        payload: dict | None = None,
    ) -> dict:
        attempt = 1
        while True:
            try:
                response = self._http.request(method, path, params=params, json=payload)
            except httpx.HTTPError as exc:
                raise TfeApiError(operation, str(exc) or type(exc).__name__) from exc
            if (
                response.status_code == _RATE_LIMIT_STATUS
                and attempt < self.retry_attempts
            ):
                time.sleep(self.retry_backoff_seconds * attempt)
                attempt += 1
                continue
            if response.is_error:
                raise TfeApiError(
                    operation, _error_detail(response), response.status_code
                )
            if not response.content:
                return {}
            try:
                body = response.json()
            except ValueError as exc:
                raise TfeApiError(
                    operation, "invalid JSON response", response.status_code
                ) from exc
            return body if isinstance(body, dict) else {}

    def _page_params(self, page: int) -> dict[str, object]:
        params: dict[str, object] = {"page[size]": self.page_size}
        if page > 0:
            params["page[number]"] = page
        return params

    def list_workspaces(
        self, org: str, search: str = "", page: int = 0
    ) -> Page[Workspace]:
        params = self._page_params(page)
        params["include"] = "current_run"
        if search:
            params["search[name]"] = search
        body = self._request(
            f"list workspaces in {org}",
            "GET",
            f"/organizations/{org}/workspaces",
            params=params,
        )
        runs = included_runs(body)
        items = [
            Workspace.from_resource(resource, runs)
            for resource in body.get("data") or []
        ]
        return Page(items=items, next_page=next_page_number(body))

    def list_runs(self, workspace_id: str, page: int = 0) -> Page[Run]:
        body = self._request(
            f"list runs in {workspace_id}",
            "GET",
            f"/workspaces/{workspace_id}/runs",
            params=self._page_params(page),
        )
        items = [Run.from_resource(resource) for resource in body.get("data") or []]
        return Page(items=items, next_page=next_page_number(body))

    def create_run(self, workspace_id: str) -> Run:
        body = self._request(
            f"create run in {workspace_id}",
            "POST",
            "/runs",
            payload={
                "data": {
                    "type": "runs",
                    "attributes": {},
                    "relationships": {
                        "workspace": {
                            "data": {"type": "workspaces", "id": workspace_id}
                        }
                    },
                }
            },
        )
        data = body.get("data")
        if not isinstance(data, dict) or not data.get("id"):
            raise TfeApiError(f"create run in {workspace_id}", "response has no run")
        return Run.from_resource(data)

    def _run_action(self, verb: str, run_id: str) -> None:
        self._request(
            f"{verb} run {run_id}",
            "POST",
            f"/runs/{run_id}/actions/{verb}",
            payload={},
        )

    def apply_run(self, run_id: str) -> None:
        self._run_action("apply", run_id)

    def cancel_run(self, run_id: str) -> None:
        self._run_action("cancel", run_id)

    def discard_run(self, run_id: str) -> None:
        self._run_action("discard", run_id)


@contextmanager
def connect(api: TfeApi | None = None) -> Iterator[TfeApi]:
    """Yield ``api`` unchanged, or a client built from the environment.

    Raises:
        ConfigError: When no ``api`` is given and settings are incomplete.
    """
    if api is not None:
        yield api
        return
    with TfeClient(load_settings()) as client:
        yield client
