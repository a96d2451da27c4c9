"""
FILE: todopro/core/api.py
PURPOSE: HTTP client for the task REST API
EXPORTS:
  - TodoApiClient
DEPENDENCIES:
  - httpx
  - todopro.core.exceptions (RemoteFailure)
NOTES:
  - Synchronous httpx.Client; every request has a timeout
  - Transport errors, timeouts, HTTP >= 400 and undecodable bodies all
    become RemoteFailure, so callers handle a single error type
  - Returns decoded JSON (dicts/lists); model conversion happens in the gateway
  - A transport can be injected (httpx.MockTransport in tests)
"""

from typing import Any, Dict, List, Optional

import httpx

from .exceptions import RemoteFailure


class TodoApiClient:
    """
    Client for the todo backend.

    Endpoints:
        GET    /todos                         list all tasks
        GET    /todos/{id}                    one task
        POST   /todos                         create (server assigns id)
        PUT    /todos/{id}                    partial update
        DELETE /todos/{id}                    delete
        GET    /todos/range/{start}/{end}     tasks due in range
        GET    /categories                    categories
        GET    /stats                         grouped stat rows
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "TodoApiClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        """Close HTTP client."""
        self._client.close()

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        """Make an HTTP request and decode the JSON body."""
        try:
            response = self._client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteFailure(f"{method} {endpoint} failed: {e}") from e

        if response.status_code >= 400:
            raise RemoteFailure(
                f"API error: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RemoteFailure(
                f"Malformed response from {method} {endpoint}",
                status_code=response.status_code,
            ) from e

    # ============== Task Operations ==============

    def get_todos(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/todos")

    def get_todo(self, task_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/todos/{task_id}")

    def create_todo(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a task. Payload must not carry an id."""
        return self._request("POST", "/todos", json=payload)

    def update_todo(self, task_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/todos/{task_id}", json=patch)

    def delete_todo(self, task_id: str) -> Dict[str, Any]:
        """Returns {"deleted": bool}."""
        return self._request("DELETE", f"/todos/{task_id}")

    def get_todos_in_range(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        """Tasks with due_date between the bounds (inclusive), ascending."""
        return self._request("GET", f"/todos/range/{start_date}/{end_date}")

    # ============== Reference Data ==============

    def get_categories(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/categories")

    def get_stats(self) -> List[Dict[str, Any]]:
        """Rows of {status, priority, category, count, date}."""
        return self._request("GET", "/stats")


def _error_message(response: httpx.Response) -> str:
    """Pull {"error": ...} out of an error body, else the raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text
