"""Application service: login, registration, logout and view resolution"""
import logging
from typing import Optional
from pydantic import ValidationError as SchemaValidationError

from schemas import ActionResult, LoginResponse, User
from services.api_client import ApiClient
from services.auth_service import AuthService
from services.exceptions import (
    ApplicationError,
    BackendConnectionError,
    BackendUnavailableError,
    ValidationError
)
from services.validation import validate_login, validate_registration
from shared.enums import View

logger = logging.getLogger(__name__)


class AppService:
    """
    Root of the client. Every user action goes through here and comes back
    as an ActionResult; errors never escape as exceptions.
    """

    def __init__(self, api_client: ApiClient, auth_service: AuthService):
        self.api_client = api_client
        self.auth_service = auth_service

        # Cached copy of the session, read once at startup
        self.current_user: Optional[User] = auth_service.current_session()

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def resolve_view(self, requested: Optional[View] = None) -> View:
        """Pick the view a user may see given what they asked for"""
        if self.is_authenticated:
            return View.MAIN
        if requested == View.REGISTER:
            return View.REGISTER
        return View.LOGIN

    def login(self, username: str, password: str) -> ActionResult:
        try:
            credentials = validate_login(username, password)
            result = self.api_client.login_user(credentials)
        except ValidationError as e:
            return ActionResult(success=False, message=e.message)
        except ApplicationError as e:
            logger.warning(f"Login rejected for {username}: {e.message}")
            return ActionResult(success=False, message=e.message)
        except BackendConnectionError as e:
            logger.error(f"Login failed for {username}: {e.message}")
            return ActionResult(success=False, message=e.message)

        user = self._returned_user(result)
        # The stored session must be exactly the user the server returned
        if user is None or self.auth_service.current_session() != user:
            logger.warning(f"Login for {username} returned no usable user")
            self.auth_service.logout()
            self.current_user = None
            return ActionResult(success=False, message="Login failed")

        self.current_user = user
        logger.info(f"User {user.username} logged in with role {user.role.value}")
        return ActionResult(success=True, view=View.MAIN, data=user)

    def _returned_user(self, result: LoginResponse) -> Optional[User]:
        if not (result.success and result.user):
            return None
        try:
            return User.model_validate(result.user)
        except SchemaValidationError as e:
            logger.warning(f"Login returned a malformed user: {e}")
            return None

    def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str
    ) -> ActionResult:
        try:
            user_data = validate_registration(username, email, password, confirm_password)
            self.api_client.register_user(user_data)
        except ValidationError as e:
            return ActionResult(success=False, message=e.message)
        except ApplicationError as e:
            logger.warning(f"Registration rejected for {username}: {e.message}")
            return ActionResult(success=False, message=e.message)
        except BackendConnectionError as e:
            logger.error(f"Registration failed for {username}: {e.message}")
            return ActionResult(success=False, message=e.message)

        logger.info(f"Registered user {user_data.username}")
        return ActionResult(
            success=True,
            message="Registration successful! You can now log in.",
            view=View.LOGIN
        )

    def logout(self) -> ActionResult:
        response = self.api_client.logout_user()
        self.current_user = None
        return ActionResult(success=True, message=response.message, view=View.LOGIN)

    def check_backend(self) -> ActionResult:
        try:
            health = self.api_client.check_backend()
        except BackendUnavailableError as e:
            return ActionResult(success=False, message=e.message)

        return ActionResult(
            success=True,
            message=f"Backend status: {health.status}, database: {health.database}",
            data=health
        )

    def stats(self) -> ActionResult:
        try:
            stats = self.api_client.get_stats()
        except ApplicationError as e:
            return ActionResult(success=False, message=e.message)
        except BackendConnectionError as e:
            logger.error(f"Loading statistics failed: {e.message}")
            return ActionResult(success=False, message=e.message)

        return ActionResult(success=True, data=stats)
