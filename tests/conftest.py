import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError

from services.api_client import ApiClient
from services.app_service import AppService
from services.auth_service import AuthService
from services.session_store import InMemorySessionRepository
from services.user_admin_service import UserAdminService

BASE_URL = "http://backend.test/api"


class FakeResponse:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        self._body = body
        self._raw = raw

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._raw is not None:
            raise ValueError(f"Expecting value: {self._raw!r}")
        return self._body


class FakeHttp:
    """Stands in for requests.Session; replies are consumed in order"""

    def __init__(self):
        self.replies = []
        self.calls = []

    def reply(self, status_code=200, body=None, raw=None):
        self.replies.append(FakeResponse(status_code, body, raw))
        return self

    def fail(self, error=None):
        self.replies.append(error or RequestsConnectionError("connection refused"))
        return self

    def request(self, method, url, headers=None, json=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "json": json})
        if not self.replies:
            raise AssertionError(f"Unexpected request: {method} {url}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def repository():
    return InMemorySessionRepository()


@pytest.fixture
def auth_service(repository):
    return AuthService(repository)


@pytest.fixture
def api_client(auth_service, http):
    return ApiClient(auth_service, base_url=BASE_URL, http=http)


@pytest.fixture
def app(api_client, auth_service):
    return AppService(api_client, auth_service)


@pytest.fixture
def admin(api_client, auth_service):
    return UserAdminService(api_client, auth_service)


@pytest.fixture
def login_as(auth_service):
    def _login_as(username="root", role="admin", user_id=1):
        user = {"id": user_id, "username": username, "email": f"{username}@example.com", "role": role}
        auth_service.save_session(user)
        return user
    return _login_as
