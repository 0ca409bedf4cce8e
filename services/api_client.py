"""REST gateway to the user-management backend"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from requests.exceptions import RequestException
from pydantic import ValidationError as SchemaValidationError

from config import API_URL
from schemas import (
    ActionResponse,
    HealthStatus,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UsersResponse
)
from services.auth_service import AuthService
from services.exceptions import (
    ApplicationError,
    BackendConnectionError,
    BackendUnavailableError
)

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Cannot connect to the server"
BACKEND_UNAVAILABLE_MESSAGE = "Backend server is unavailable"

JSON_HEADERS = {"Content-Type": "application/json"}

# Characters encodeURIComponent leaves unescaped besides the quote() defaults
URI_COMPONENT_SAFE = "!*'()"


class ApiClient:
    """
    One method per backend action. Each method sends exactly one request,
    with no retries and no timeout.

    Raises BackendConnectionError when no response arrives and
    ApplicationError when the backend answers with a non-2xx status or
    ``success: false``.
    """

    def __init__(
        self,
        auth_service: AuthService,
        base_url: str = API_URL,
        http: Optional[requests.Session] = None
    ):
        self.auth_service = auth_service
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, fallback_error: str, json_body: Any = None) -> Dict[str, Any]:
        url = self._url(path)
        try:
            response = self.http.request(method, url, headers=JSON_HEADERS, json=json_body)
        except RequestException as e:
            logger.error(f"{method} {url} failed before a response was received: {e}")
            raise BackendConnectionError(CONNECTION_ERROR_MESSAGE)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}

        if not response.ok or data.get("success") is False:
            message = data.get("error") or fallback_error
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise ApplicationError(message, status_code=response.status_code)

        return data

    def check_backend(self) -> HealthStatus:
        """Check backend health; any failure means the backend is unavailable"""
        url = self._url("/health")
        try:
            response = self.http.request("GET", url, headers=JSON_HEADERS)
        except RequestException as e:
            logger.warning(f"Health check failed: {e}")
            raise BackendUnavailableError(BACKEND_UNAVAILABLE_MESSAGE)

        if not response.ok:
            logger.warning(f"Health check returned {response.status_code}")
            raise BackendUnavailableError(BACKEND_UNAVAILABLE_MESSAGE)

        try:
            data = response.json()
            return HealthStatus(
                status=data.get("status"),
                database=data.get("database") or "unknown"
            )
        except (ValueError, AttributeError, SchemaValidationError) as e:
            logger.warning(f"Health check returned an unreadable body: {e}")
            raise BackendUnavailableError(BACKEND_UNAVAILABLE_MESSAGE)

    def login_user(self, credentials: LoginRequest) -> LoginResponse:
        """Log in and, on success, replace the stored session with the returned user"""
        data = self._request("POST", "/login", "Login failed", credentials.model_dump())
        user = data.get("user")
        result = LoginResponse(
            success=bool(data.get("success")),
            user=user if isinstance(user, dict) else None
        )

        if result.success and result.user:
            self.auth_service.save_session(result.user)

        return result

    def register_user(self, user_data: RegisterRequest) -> ActionResponse:
        data = self._request("POST", "/register", "Registration failed", user_data.model_dump())
        return ActionResponse(success=bool(data.get("success")), message=data.get("message"))

    def _users_response(self, data: Dict[str, Any], fallback_error: str) -> UsersResponse:
        try:
            return UsersResponse(success=bool(data.get("success")), users=data.get("users") or [])
        except SchemaValidationError as e:
            logger.warning(f"Malformed user list from backend: {e}")
            raise ApplicationError(fallback_error)

    def get_users(self) -> UsersResponse:
        data = self._request("GET", "/users", "Failed to load users")
        return self._users_response(data, "Failed to load users")

    def update_user(self, user_id: int, user_data: Dict[str, Any]) -> ActionResponse:
        data = self._request("PUT", f"/users/{user_id}", "Failed to update user", user_data)
        return ActionResponse(success=bool(data.get("success")), message=data.get("message"))

    def delete_user(self, user_id: int) -> ActionResponse:
        data = self._request("DELETE", f"/users/{user_id}", "Failed to delete user")
        return ActionResponse(success=bool(data.get("success")), message=data.get("message"))

    def search_users(self, query: str) -> UsersResponse:
        path = f"/users/search?q={quote(query, safe=URI_COMPONENT_SAFE)}"
        data = self._request("GET", path, "Search failed")
        return self._users_response(data, "Search failed")

    def get_stats(self) -> Dict[str, Any]:
        return self._request("GET", "/stats", "Failed to load statistics")

    def logout_user(self) -> ActionResponse:
        self.auth_service.logout()
        return ActionResponse(success=True, message="Logged out")
