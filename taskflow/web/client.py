# taskflow/web/client.py
# HTTP client for the TaskFlow API, doing what the frontend pages do with fetch.
import logging
from typing import Any, Dict, Iterable, List, MutableMapping, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
STORAGE_KEYS = ("token", "userRole", "userId", "fullName")

class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[str]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []

def search_tasks(tasks: Iterable[Dict[str, Any]], query: str) -> List[Dict[str, Any]]:
    """Case-insensitive match on the title; a blank query keeps everything."""
    if not query.strip():
        return list(tasks)
    needle = query.lower()
    return [task for task in tasks if needle in (task.get("title") or "").lower()]

class TaskFlowClient:
    """
    Talks to the API the way the browser app does. ``storage`` stands in for
    local storage: login fills it, logout empties it, and every authenticated
    call reads the bearer token from it.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http: Optional[httpx.Client] = None,
        storage: Optional[MutableMapping[str, str]] = None,
        timeout: float = 10.0,
    ):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.storage = storage if storage is not None else {}

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # --- plumbing ---

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.storage.get("token")
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise ApiError(0, f"Could not reach the server: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            if response.is_error:
                raise ApiError(response.status_code, f"HTTP error! status: {response.status_code}")
            raise ApiError(response.status_code, "Unexpected response from server")

        if response.is_error or body.get("success") is False:
            raise ApiError(
                response.status_code,
                body.get("message") or f"HTTP error! status: {response.status_code}",
                body.get("errors"),
            )
        return body

    def _require_token(self) -> None:
        if not self.storage.get("token"):
            raise ApiError(401, "Authentication required. Please login first.")

    # --- auth ---

    def _remember(self, data: Dict[str, Any]) -> None:
        self.storage["token"] = data["token"]
        self.storage["userRole"] = data["role"]
        self.storage["userId"] = str(data["userId"])
        self.storage["fullName"] = data["fullName"]

    def register(self, full_name: str, email: str, password: str) -> Dict[str, Any]:
        body = self._request(
            "POST", "/api/auth/register",
            json={"fullName": full_name, "email": email, "password": password},
        )
        return body["data"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self._remember(body["data"])
        return body["data"]

    def logout(self) -> None:
        try:
            if self.storage.get("token"):
                self._request("POST", "/api/auth/logout")
        except ApiError as exc:
            logger.warning("Logout call failed, clearing local session anyway: %s", exc.message)
        finally:
            for key in STORAGE_KEYS:
                self.storage.pop(key, None)

    # --- tasks ---

    def list_tasks(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        self._require_token()
        params = {"status": status, "priority": priority, "sortBy": sort_by, "order": order}
        params = {key: value for key, value in params.items() if value}
        return self._request("GET", "/api/tasks", params=params)["data"]

    def create_task(self, title: str, description: str, due_date: str, priority: str = "medium", **extra) -> Dict[str, Any]:
        self._require_token()
        payload = {"title": title, "description": description, "dueDate": due_date, "priority": priority, **extra}
        return self._request("POST", "/api/tasks", json=payload)["data"]

    def update_task(self, task_id: int, **fields) -> Dict[str, Any]:
        self._require_token()
        return self._request("PUT", f"/api/tasks/{task_id}", json=fields)["data"]

    def toggle_task(self, task_id: int) -> Dict[str, Any]:
        self._require_token()
        return self._request("PATCH", f"/api/tasks/{task_id}/toggle")["data"]

    def delete_task(self, task_id: int) -> None:
        self._require_token()
        self._request("DELETE", f"/api/tasks/{task_id}")

    # --- admin ---

    def stats(self) -> Dict[str, Any]:
        return self._request("GET", "/admin/stats")["data"]

    def list_users(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/admin/users")["data"]

    def list_admins(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/admin/admins")["data"]

    def create_admin(self, full_name: str, email: str, password: str) -> Dict[str, Any]:
        body = self._request(
            "POST", "/admin/create-admin", json={"fullName": full_name, "email": email, "password": password}
        )
        return body["data"]

    def update_user(self, email: str, **fields) -> Dict[str, Any]:
        return self._request("PUT", f"/admin/users/{email}", json=fields)["data"]

    def delete_user(self, email: str) -> None:
        self._request("DELETE", f"/admin/users/{email}")

    def list_logs(self, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        """Returns the whole body so callers get ``pagination`` alongside ``data``."""
        return self._request("GET", "/admin/logs", params={"page": page, "limit": limit})

    def delete_log(self, log_id: int) -> None:
        self._request("DELETE", f"/admin/logs/{log_id}")
