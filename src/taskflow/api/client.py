"""HTTP client for the task server REST API."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import time
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from ..models import PaginationMeta, Task, TaskStats, strip_blank_fields, to_wire_fields
from .errors import (
    AuthError,
    ForbiddenError,
    NotFoundError,
    RequestValidationError,
    ServerError,
    TaskflowApiError,
)
from .protocol import TaskPage
from .session import Session

logger = logging.getLogger(__name__)


class TaskflowClient:
    """Async client for the task server.

    Provides a thin wrapper around the REST API with:
    - Bearer token attached from the shared Session on every request
    - Session invalidation on 401
    - Error mapping to TaskflowApiError subclasses, carrying the server's
      ``message`` when one is present
    """

    def __init__(
        self,
        base_url: str,
        session: Session,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Server root (e.g. http://localhost:5001); ``/api`` is appended
            session: Shared credential holder
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.session = session
        self._api_url = f"{self.base_url}/api"
        self._client = httpx.AsyncClient(
            base_url=self._api_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._attach_token]},
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> TaskflowClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def _attach_token(self, request: httpx.Request) -> None:
        token = self.session.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            AuthError: 401 (the session is invalidated first)
            ForbiddenError: 403
            NotFoundError: 404
            RequestValidationError: 400 / 422
            ServerError: 5xx
            TaskflowApiError: transport failures and other errors
        """
        op_name = f"{method} {path}"
        logger.debug("%s: params=%s", op_name, params)

        start_time = time.monotonic()
        try:
            response = await self._client.request(
                method, path, params=params, json=json, files=files
            )
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("%s failed after %.0fms: %s", op_name, elapsed_ms, e)
            raise TaskflowApiError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000

        if response.status_code >= 400:
            self._raise_for_status(op_name, response, elapsed_ms)

        logger.info("%s: %d (%.0fms)", op_name, response.status_code, elapsed_ms)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s: Invalid JSON response (%.0fms)", op_name, elapsed_ms)
            raise TaskflowApiError(f"Invalid JSON response: {e}") from e

    def _raise_for_status(self, op_name: str, response: httpx.Response, elapsed_ms: float) -> None:
        status = response.status_code
        server_message = _error_message(response)
        logger.error("%s: HTTP %d %s (%.0fms)", op_name, status, server_message or "", elapsed_ms)

        if status == 401:
            self.session.invalidate()
            raise AuthError(
                "Authentication failed. Log in again or set TASKFLOW_TOKEN.",
                status_code=status,
                server_message=server_message,
            )
        kwargs: dict[str, Any] = {"status_code": status, "server_message": server_message}
        if status == 403:
            raise ForbiddenError("Permission denied", **kwargs)
        if status == 404:
            raise NotFoundError("Resource not found", **kwargs)
        if status in (400, 422):
            raise RequestValidationError(f"HTTP {status}: request rejected", **kwargs)
        if status >= 500:
            raise ServerError(f"HTTP {status}: server error", **kwargs)
        raise TaskflowApiError(f"HTTP {status}: {response.text}", **kwargs)

    # ---- task endpoints ----

    async def list_tasks(self, params: dict[str, Any]) -> TaskPage:
        data = await self.request("GET", "/tasks", params=params)
        body = _unwrap_data(data)
        return TaskPage(
            tasks=_parse_tasks(body.get("tasks") or []),
            pagination=_parse_pagination(body.get("pagination") or {}),
        )

    async def get_stats(self) -> TaskStats:
        data = await self.request("GET", "/tasks/stats")
        try:
            return TaskStats.model_validate(_unwrap_data(data))
        except ValidationError as e:
            raise TaskflowApiError(f"Malformed stats in response: {e}") from e

    async def create_task(self, payload: dict[str, Any]) -> Task:
        data = await self.request("POST", "/tasks", json=strip_blank_fields(payload))
        return _parse_single_task(data)

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> Task:
        payload = strip_blank_fields(to_wire_fields(fields))
        data = await self.request("PUT", f"/tasks/{task_id}", json=payload)
        return _parse_single_task(data)

    async def delete_task(self, task_id: str) -> None:
        await self.request("DELETE", f"/tasks/{task_id}")

    async def parse_text(self, text: str) -> list[Task]:
        data = await self.request("POST", "/tasks/parse", json={"text": text})
        return extract_parsed_tasks(data)

    async def parse_file(self, path: Path) -> list[Task]:
        content_type = mimetypes.guess_type(path.name)[0] or "text/plain"
        content = await asyncio.to_thread(path.read_bytes)
        files = {"file": (path.name, content, content_type)}
        data = await self.request("POST", "/tasks/parse-file", files=files)
        return extract_parsed_tasks(data)


def _error_message(response: httpx.Response) -> str | None:
    """Pull ``message`` out of a JSON error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message.strip():
            return message
    return None


def _unwrap_data(data: Any) -> dict[str, Any]:
    """Some endpoints wrap their payload in ``{"data": ...}``."""
    if isinstance(data, dict):
        inner = data.get("data")
        if isinstance(inner, dict) and "tasks" not in data:
            return inner
        return data
    return {}


def _parse_tasks(items: list[Any]) -> list[Task]:
    try:
        return [Task.model_validate(item) for item in items]
    except ValidationError as e:
        raise TaskflowApiError(f"Malformed task in response: {e}") from e


def _parse_pagination(data: Any) -> PaginationMeta:
    try:
        return PaginationMeta.model_validate(data)
    except ValidationError as e:
        raise TaskflowApiError(f"Malformed pagination in response: {e}") from e


def _parse_single_task(data: Any) -> Task:
    """Accept a bare task, ``{"task": ...}`` or a singleton ``{"tasks": [...]}``."""
    body = _unwrap_data(data)
    if isinstance(body.get("tasks"), list) and body["tasks"]:
        return _parse_tasks(body["tasks"][:1])[0]
    if isinstance(body.get("task"), dict):
        return _parse_tasks([body["task"]])[0]
    return _parse_tasks([body])[0]


def extract_parsed_tasks(data: Any) -> list[Task]:
    """Normalize a parse response: ``{"tasks": [...]}`` or ``{"data": {"tasks": [...]}}``."""
    tasks: Any = None
    if isinstance(data, dict):
        tasks = data.get("tasks")
        if not tasks and isinstance(data.get("data"), dict):
            tasks = data["data"].get("tasks")
    if not tasks:
        return []
    if not isinstance(tasks, list):
        raise TaskflowApiError("Malformed parse response: 'tasks' is not a list")
    return _parse_tasks(tasks)
