"""Authentication service: who is logged in and what they may do"""
import json
import logging
from typing import Any, Dict, Optional
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError

from config import SESSION_STORAGE_KEY
from schemas import User
from services.session_store import SessionRepository
from shared.enums import UserRole

logger = logging.getLogger(__name__)


class AuthService:
    """
    Resolves the current session from a session repository.

    The stored role only gates the client UI. The backend still has to
    authorize every admin request on its own.
    """

    def __init__(self, repository: SessionRepository, storage_key: str = SESSION_STORAGE_KEY):
        self.repository = repository
        self.storage_key = storage_key

    def current_session(self) -> Optional[User]:
        """Return the persisted user, or None when missing or unreadable"""
        try:
            raw = self.repository.get(self.storage_key)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read session storage: {e}")
            return None

        if not raw:
            return None

        try:
            return User.model_validate(json.loads(raw))
        except (ValueError, TypeError, SchemaValidationError) as e:
            logger.warning(f"Stored session is corrupt, treating as logged out: {e}")
            return None

    def save_session(self, user_data: Dict[str, Any]) -> None:
        """Persist the user object exactly as the server returned it"""
        try:
            self.repository.set(self.storage_key, json.dumps(user_data))
            logger.info(f"Session stored for {user_data.get('username')}")
        except SQLAlchemyError as e:
            logger.error(f"Failed to write session storage: {e}")

    def is_authenticated(self) -> bool:
        return self.current_session() is not None

    def is_admin(self) -> bool:
        user = self.current_session()
        return user is not None and user.role == UserRole.ADMIN

    def logout(self) -> None:
        """Clear the session; clearing an absent session is fine"""
        try:
            self.repository.clear(self.storage_key)
            logger.info("Session cleared")
        except SQLAlchemyError as e:
            logger.error(f"Failed to clear session storage: {e}")

    def get_role_permissions(self, role: Optional[str]) -> Dict[str, bool]:
        """Get UI permissions for a role"""
        if role == UserRole.ADMIN:
            return {
                "view_users": True,
                "edit_users": True,
                "delete_users": True,
                "change_roles": True
            }
        else:
            return {
                "view_users": False,
                "edit_users": False,
                "delete_users": False,
                "change_roles": False
            }

    def check_permission(self, operation: str) -> bool:
        """Check if the current session may perform a UI operation"""
        user = self.current_session()
        if user is None:
            return False
        return self.get_role_permissions(user.role).get(operation, False)
