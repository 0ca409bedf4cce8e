"""Main view state: tabs and the admin user table"""
import logging
from typing import List, Optional
from pydantic import ValidationError as SchemaValidationError

from schemas import ActionResult, EditDraft, User
from services.api_client import ApiClient
from services.auth_service import AuthService
from services.exceptions import (
    ApplicationError,
    BackendConnectionError,
    ClientError,
    ValidationError
)
from services.validation import build_update_payload
from shared.enums import Tab, TAB_LABELS

logger = logging.getLogger(__name__)

ADMIN_ONLY_MESSAGE = "Only an administrator can view and edit users."

TAB_TEXT = {
    Tab.ABOUT: "This is a demo site shown after logging in.",
    Tab.GALLERY: "Your gallery could be here.",
    Tab.SUPPORT: "For support, please contact the administrator.",
}


def _invalid_fields(error: SchemaValidationError) -> str:
    return ", ".join(str(item["loc"][0]) for item in error.errors() if item.get("loc"))


class UserAdminService:
    """Tab navigation plus list, search, inline edit and delete of users"""

    def __init__(self, api_client: ApiClient, auth_service: AuthService):
        self.api_client = api_client
        self.auth_service = auth_service

        self.active_tab: Tab = Tab.HOME
        self.users: List[User] = []
        self.filter_query: str = ""
        self.draft: Optional[EditDraft] = None

    @property
    def tabs(self) -> List[tuple]:
        return [(tab, TAB_LABELS[tab]) for tab in Tab]

    def is_admin(self) -> bool:
        return self.auth_service.is_admin()

    def select_tab(self, tab: Tab) -> ActionResult:
        self.active_tab = tab
        if tab == Tab.USERS:
            return self.load_users()
        return ActionResult(success=True, message=self.tab_content(tab))

    def tab_content(self, tab: Tab) -> str:
        if tab == Tab.HOME:
            user = self.auth_service.current_session()
            name = user.username if user else "User"
            return f"Welcome, {name}! You have successfully logged in."
        if tab == Tab.USERS:
            return ADMIN_ONLY_MESSAGE if not self.is_admin() else f"Users: {len(self.users)}"
        return TAB_TEXT[tab]

    def _failure(self, action: str, error: ClientError) -> ActionResult:
        if isinstance(error, BackendConnectionError):
            logger.error(f"{action} failed: {error.message}")
        else:
            logger.warning(f"{action} failed: {error.message}")
        return ActionResult(success=False, message=error.message)

    def load_users(self) -> ActionResult:
        if not self.auth_service.check_permission("view_users"):
            return ActionResult(success=False, message=ADMIN_ONLY_MESSAGE)

        try:
            response = self.api_client.get_users()
        except (ApplicationError, BackendConnectionError) as e:
            return self._failure("Loading users", e)

        self.users = response.users
        if not self.users:
            return ActionResult(success=True, message="No users found.", data=[])
        return ActionResult(success=True, data=self.users)

    def search_users(self, query: str) -> ActionResult:
        """Search on the server and replace the table contents with the hits"""
        if not self.auth_service.check_permission("view_users"):
            return ActionResult(success=False, message=ADMIN_ONLY_MESSAGE)

        try:
            response = self.api_client.search_users(query)
        except (ApplicationError, BackendConnectionError) as e:
            return self._failure("Searching users", e)

        self.users = response.users
        return ActionResult(success=True, data=self.users)

    def set_filter(self, query: str) -> None:
        self.filter_query = query or ""

    @property
    def visible_users(self) -> List[User]:
        """Users matching the local filter by username, email or id"""
        query = self.filter_query.strip().lower()
        if not query:
            return list(self.users)
        return [
            user for user in self.users
            if query in user.username.lower()
            or query in (user.email or "").lower()
            or query in str(user.id)
        ]

    def start_edit(self, user: User) -> EditDraft:
        # Only one row is edited at a time; starting another drops the old draft
        if self.draft is not None and self.draft.user_id != user.id:
            logger.info(f"Discarding edit of user {self.draft.user_id}")
        self.draft = EditDraft(
            user_id=user.id,
            username=user.username,
            email=user.email or "",
            password="",
            role=user.role
        )
        return self.draft

    def update_draft(self, **fields) -> EditDraft:
        """Change draft fields; raises ValidationError for values a user row cannot hold"""
        if self.draft is None:
            raise ValueError("No user is being edited")
        try:
            self.draft = EditDraft.model_validate({**self.draft.model_dump(), **fields})
        except SchemaValidationError as e:
            logger.warning(f"Rejected draft change for user {self.draft.user_id}: {e}")
            raise ValidationError(f"Invalid value for {_invalid_fields(e)}")
        return self.draft

    def _may_edit(self, user_id: int) -> bool:
        """Admins edit any row, everyone else only their own"""
        if self.auth_service.check_permission("edit_users"):
            return True
        user = self.auth_service.current_session()
        return user is not None and user.id is not None and user.id == user_id

    def cancel_edit(self) -> None:
        self.draft = None

    def save_edit(self) -> ActionResult:
        if self.draft is None:
            return ActionResult(success=False, message="No user is being edited")
        if not self._may_edit(self.draft.user_id):
            return ActionResult(success=False, message=ADMIN_ONLY_MESSAGE)

        try:
            payload = build_update_payload(self.draft, acting_is_admin=self.is_admin())
            self.api_client.update_user(self.draft.user_id, payload)
        except ValidationError as e:
            return ActionResult(success=False, message=e.message)
        except (ApplicationError, BackendConnectionError) as e:
            return self._failure(f"Updating user {self.draft.user_id}", e)

        logger.info(f"Updated user {self.draft.user_id}")
        self.draft = None
        self.load_users()
        return ActionResult(success=True, message="User data updated")

    def delete_user(self, user_id: int) -> ActionResult:
        if not self.auth_service.check_permission("delete_users"):
            return ActionResult(success=False, message=ADMIN_ONLY_MESSAGE)

        try:
            self.api_client.delete_user(user_id)
        except (ApplicationError, BackendConnectionError) as e:
            return self._failure(f"Deleting user {user_id}", e)

        logger.info(f"Deleted user {user_id}")
        if self.draft is not None and self.draft.user_id == user_id:
            self.draft = None
        self.load_users()
        return ActionResult(success=True, message="User deleted")
