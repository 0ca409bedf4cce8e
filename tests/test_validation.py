import pytest

from schemas import EditDraft
from services.exceptions import ValidationError
from services.validation import (
    SHORT_PASSWORD_MESSAGE,
    build_update_payload,
    validate_login,
    validate_registration
)
from shared.enums import UserRole


@pytest.mark.parametrize("username,password", [
    ("", "secret1"),
    ("   ", "secret1"),
    ("alice", ""),
    ("alice", "  \t"),
])
def test_login_rejects_blank_credentials(username, password):
    with pytest.raises(ValidationError, match="Enter username and password"):
        validate_login(username, password)


def test_login_keeps_values_as_typed():
    request = validate_login(" alice ", "secret1")
    assert request.username == " alice "
    assert request.password == "secret1"


@pytest.mark.parametrize("form,message", [
    (("", "", "", "x"), "Enter a username"),
    (("bob", " ", "", ""), "Enter an email"),
    (("bob", "bob.example.com", "", ""), "Enter a valid email"),
    (("bob", "bob@example.com", "   ", ""), "Enter a password"),
    (("bob", "bob@example.com", "abc", "abc"), SHORT_PASSWORD_MESSAGE),
    (("bob", "bob@example.com", "secret1", "secret2"), "Passwords do not match"),
])
def test_registration_reports_first_violation(form, message):
    with pytest.raises(ValidationError) as exc_info:
        validate_registration(*form)
    assert exc_info.value.message == message


def test_registration_trims_username_and_email():
    request = validate_registration("  bob ", " bob@example.com ", "secret1", "secret1")
    assert request.username == "bob"
    assert request.email == "bob@example.com"
    assert request.password == "secret1"


def make_draft(**overrides):
    fields = {"user_id": 7, "username": "carol", "email": "carol@example.com", "role": UserRole.USER}
    fields.update(overrides)
    return EditDraft(**fields)


def test_blank_password_is_left_out_of_payload():
    payload = build_update_payload(make_draft(password=""), acting_is_admin=False)
    assert payload == {"username": "carol", "email": "carol@example.com"}

    payload = build_update_payload(make_draft(password="   "), acting_is_admin=False)
    assert "password" not in payload


def test_short_password_blocks_update():
    with pytest.raises(ValidationError, match=SHORT_PASSWORD_MESSAGE):
        build_update_payload(make_draft(password="12345"), acting_is_admin=True)


def test_password_included_when_long_enough():
    payload = build_update_payload(make_draft(password="newpass"), acting_is_admin=False)
    assert payload["password"] == "newpass"


@pytest.mark.parametrize("overrides", [{"username": " "}, {"email": ""}])
def test_update_requires_username_and_email(overrides):
    with pytest.raises(ValidationError, match="Fill in all required fields"):
        build_update_payload(make_draft(**overrides), acting_is_admin=True)


def test_role_only_sent_by_admins():
    draft = make_draft(role=UserRole.ADMIN)
    assert build_update_payload(draft, acting_is_admin=True)["role"] == "admin"
    assert "role" not in build_update_payload(draft, acting_is_admin=False)
