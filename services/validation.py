"""Form validation rules for login, registration and user edits"""
from typing import Any, Dict

from schemas import EditDraft, LoginRequest, RegisterRequest
from services.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 6

SHORT_PASSWORD_MESSAGE = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"


def validate_login(username: str, password: str) -> LoginRequest:
    """Reject empty credentials; the values are sent as typed"""
    if not (username or "").strip() or not (password or "").strip():
        raise ValidationError("Enter username and password")
    return LoginRequest(username=username, password=password)


def validate_registration(
    username: str,
    email: str,
    password: str,
    confirm_password: str
) -> RegisterRequest:
    """
    Check a registration form. Only the first violated rule is reported,
    in the order the checks appear below.
    """
    username = username or ""
    email = email or ""
    password = password or ""

    if not username.strip():
        raise ValidationError("Enter a username")
    if not email.strip():
        raise ValidationError("Enter an email")
    if "@" not in email:
        raise ValidationError("Enter a valid email")
    if not password.strip():
        raise ValidationError("Enter a password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(SHORT_PASSWORD_MESSAGE)
    if password != confirm_password:
        raise ValidationError("Passwords do not match")

    return RegisterRequest(
        username=username.strip(),
        email=email.strip(),
        password=password
    )


def build_update_payload(draft: EditDraft, acting_is_admin: bool) -> Dict[str, Any]:
    """Validate an edit draft and build the body of the update request"""
    if not draft.username.strip() or not draft.email.strip():
        raise ValidationError("Fill in all required fields")

    payload: Dict[str, Any] = {
        "username": draft.username,
        "email": draft.email,
    }

    # Blank password means "keep the current one"
    if draft.password.strip():
        if len(draft.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(SHORT_PASSWORD_MESSAGE)
        payload["password"] = draft.password

    if acting_is_admin and draft.role:
        payload["role"] = draft.role.value

    return payload
