# TaskBoard: HTTP client for the task API
#
# Thin wrapper over the /tasks endpoints. Every failure, transport or
# HTTP, surfaces as TaskClientError with a generic message.

import logging
from typing import Optional, Dict, Any, List

import requests

from .schema import Task, TaskStatus, ValidationError

logger = logging.getLogger(__name__)


class TaskClientError(Exception):
    """Raised when a task API call does not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TaskClient:
    """HTTP client for the TaskBoard API."""

    def __init__(self, base_url: str = "http://localhost:3000",
                 api_key: str = "", timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"X-API-Key": api_key} if api_key else {}

    @classmethod
    def from_settings(cls, settings) -> "TaskClient":
        return cls(settings.api_url, api_key=settings.api_secret, timeout=settings.timeout)

    def _request(self, method: str, path: str, failure: str,
                 payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            r = self.session.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TaskClientError(failure) from e
        if not r.ok:
            logger.warning("%s %s -> HTTP %s", method, path, r.status_code)
            raise TaskClientError(failure, status_code=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise TaskClientError(failure, status_code=r.status_code) from e

    @staticmethod
    def _task(data: Dict[str, Any], failure: str) -> Task:
        """Pull the `task` object out of a response body."""
        try:
            return Task.from_dict(data["task"])
        except (KeyError, TypeError, ValidationError) as e:
            raise TaskClientError(failure) from e

    def list_tasks(self) -> List[Task]:
        data = self._request("GET", "/tasks", "Failed to fetch tasks")
        try:
            return [Task.from_dict(t) for t in data.get("tasks", [])]
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise TaskClientError("Failed to fetch tasks") from e

    def get_task(self, task_id: str) -> Task:
        data = self._request("GET", f"/tasks/{task_id}", "Failed to fetch task")
        return self._task(data, "Failed to fetch task")

    def create_task(self, title: str, description: str = "",
                    status: TaskStatus = TaskStatus.TODO) -> Task:
        data = self._request("POST", "/tasks", "Failed to create task", {
            "title": title,
            "description": description,
            "status": status.value,
        })
        return self._task(data, "Failed to create task")

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> Task:
        """Partial update; `fields` may hold title, description and/or status."""
        payload = {
            k: (v.value if isinstance(v, TaskStatus) else v)
            for k, v in fields.items()
        }
        data = self._request("PUT", f"/tasks/{task_id}", "Failed to update task", payload)
        return self._task(data, "Failed to update task")

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}", "Failed to delete task")

    def health(self) -> bool:
        """Check if the API is reachable."""
        try:
            r = self.session.get(f"{self.base_url}/health", timeout=2)
            return r.ok
        except requests.RequestException:
            return False
