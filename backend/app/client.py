"""
HTTP client for the Job Board API.

Session state (token + current user) lives on an explicit ``ClientSession`` that
callers create, pass around and tear down, instead of a process-wide global.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_S = 10.0


class ApiError(RuntimeError):
    def __init__(self, *, status_code: int, message: str, details: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details or {}


@dataclass
class ClientSession:
    token: str | None = None
    user: dict[str, Any] | None = None
    _listeners: list = field(default_factory=list, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_employer(self) -> bool:
        return bool(self.user) and self.user.get("role") == "EMPLOYER"

    def start(self, token: str, user: dict[str, Any] | None) -> None:
        self.token = token
        self.user = user
        self._notify()

    def clear(self) -> None:
        if self.token is None and self.user is None:
            return
        self.token = None
        self.user = None
        self._notify()

    def on_change(self, callback) -> None:
        """Register ``callback(session)``, called after every start/clear."""
        self._listeners.append(callback)

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)


def _error_message(response: httpx.Response) -> tuple[str, dict]:
    try:
        data = response.json()
    except ValueError:
        return (response.text or f"HTTP {response.status_code}"), {}
    if isinstance(data, dict):
        return str(data.get("error") or data.get("detail") or f"HTTP {response.status_code}"), data.get("details") or {}
    return f"HTTP {response.status_code}", {}


def _is_session_rejection(status_code: int, message: str) -> bool:
    # 403 from an ownership or role check is not a session problem; only token failures are.
    return status_code == 401 or (status_code == 403 and "token" in message.lower())


class JobBoardClient:
    """
    Thin wrapper over the REST endpoints.

    Pass ``http`` to reuse an existing ``httpx.Client`` (FastAPI's ``TestClient`` works
    too); otherwise one is created for ``base_url`` and closed by ``close()``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http: httpx.Client | None = None,
        session: ClientSession | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ):
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout_s)
        self.session = session or ClientSession()

    def __enter__(self) -> "JobBoardClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.clear()
        if self._owns_http:
            self.http.close()

    def _request(self, method: str, path: str, *, auth: bool = False, json: Any = None) -> Any:
        headers = self.session.auth_headers() if auth else {}
        try:
            response = self.http.request(method, path, json=json, headers=headers)
        except httpx.TransportError as e:
            logger.error("API request %s %s failed: %s", method, path, e)
            raise ApiError(status_code=0, message="Cannot connect to backend server.") from e

        if response.status_code >= 400:
            message, details = _error_message(response)
            if auth and _is_session_rejection(response.status_code, message):
                # Token missing/expired/rejected: the session is over.
                self.session.clear()
            raise ApiError(status_code=response.status_code, message=message, details=details)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # -------------------- Auth --------------------

    def register(self, *, email: str, password: str, name: str, role: str) -> dict:
        data = self._request(
            "POST",
            "/api/auth/register",
            json={"email": email, "password": password, "name": name, "role": role},
        )
        self.session.start(data["token"], data["user"])
        return data["user"]

    def login(self, *, email: str, password: str) -> dict:
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.session.start(data["token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        try:
            self._request("POST", "/api/auth/logout")
        finally:
            self.session.clear()

    def restore(self, token: str) -> dict | None:
        """Resume a stored token; returns the user, or None (and a cleared session) if rejected."""
        self.session.start(token, None)
        try:
            user = self._request("GET", "/api/auth/me", auth=True)
        except ApiError as e:
            logger.info("Stored token rejected: %s", e.message)
            self.session.clear()
            return None
        self.session.start(token, user)
        return user

    def me(self) -> dict:
        return self._request("GET", "/api/auth/me", auth=True)

    # -------------------- Jobs --------------------

    def list_jobs(self) -> list[dict]:
        return self._request("GET", "/api/jobs")

    def get_job(self, job_id: int) -> dict:
        return self._request("GET", f"/api/jobs/{int(job_id)}")

    def create_job(self, **fields: Any) -> dict:
        return self._request("POST", "/api/jobs", auth=True, json=fields)

    def update_job(self, job_id: int, **fields: Any) -> dict:
        return self._request("PUT", f"/api/jobs/{int(job_id)}", auth=True, json=fields)

    def delete_job(self, job_id: int) -> None:
        self._request("DELETE", f"/api/jobs/{int(job_id)}", auth=True)

    def employer_jobs(self) -> list[dict]:
        return self._request("GET", "/api/employer/jobs", auth=True)

    def job_applications(self, job_id: int) -> list[dict]:
        return self._request("GET", f"/api/jobs/{int(job_id)}/applications", auth=True)

    # -------------------- Applications --------------------

    def apply(self, job_id: int) -> dict:
        return self._request("POST", f"/api/jobs/{int(job_id)}/apply", auth=True)

    def my_applications(self) -> list[dict]:
        return self._request("GET", "/api/applications/me", auth=True)

    def withdraw(self, application_id: int) -> None:
        self._request("DELETE", f"/api/applications/{int(application_id)}", auth=True)

    def update_application_status(self, application_id: int, status: str) -> dict:
        return self._request(
            "PUT",
            f"/api/applications/{int(application_id)}/status",
            auth=True,
            json={"status": status},
        )
