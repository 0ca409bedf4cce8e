import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base
from services.auth_service import AuthService
from services.session_store import DatabaseSessionRepository, InMemorySessionRepository


@pytest.fixture
def db_repository():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield DatabaseSessionRepository(sessionmaker(bind=engine))
    engine.dispose()


def test_no_session_means_logged_out(auth_service):
    assert auth_service.current_session() is None
    assert not auth_service.is_authenticated()
    assert not auth_service.is_admin()


def test_saved_session_is_read_back(auth_service, login_as):
    login_as("alice", "user")
    user = auth_service.current_session()
    assert user.username == "alice"
    assert auth_service.is_authenticated()
    assert not auth_service.is_admin()


def test_admin_role_is_detected(auth_service, login_as):
    login_as("root", "admin")
    assert auth_service.is_admin()
    assert auth_service.check_permission("edit_users")


def test_missing_role_defaults_to_user(repository, auth_service):
    repository.set("currentUser", json.dumps({"id": 5, "username": "dave"}))
    assert auth_service.current_session().role.value == "user"


@pytest.mark.parametrize("raw", [
    "{not json",
    "null",
    "[]",
    json.dumps({"id": 1, "username": ""}),
    json.dumps({"id": 1, "username": "eve", "role": "superuser"}),
])
def test_corrupt_session_reads_as_logged_out(raw):
    service = AuthService(InMemorySessionRepository({"currentUser": raw}))
    assert service.current_session() is None
    assert not service.is_authenticated()


def test_logout_clears_and_is_idempotent(auth_service, login_as):
    login_as()
    auth_service.logout()
    assert not auth_service.is_authenticated()
    auth_service.logout()
    assert not auth_service.is_authenticated()


def test_logout_without_prior_activity(auth_service):
    auth_service.logout()
    assert not auth_service.is_authenticated()


def test_regular_user_has_no_admin_permissions(auth_service, login_as):
    login_as("alice", "user")
    assert not auth_service.check_permission("view_users")
    assert not auth_service.check_permission("unknown")


def test_database_repository_round_trip(db_repository):
    service = AuthService(db_repository)
    user = {"id": 1, "username": "alice", "role": "user"}
    service.save_session(user)
    assert json.loads(db_repository.get("currentUser")) == user

    service.save_session({"id": 2, "username": "root", "role": "admin"})
    assert service.is_admin()

    service.logout()
    assert db_repository.get("currentUser") is None
    service.logout()


def test_storage_failure_degrades_to_logged_out():
    engine = create_engine("sqlite://", poolclass=StaticPool)
    # No tables created: every query fails
    service = AuthService(DatabaseSessionRepository(sessionmaker(bind=engine)))

    assert service.current_session() is None
    service.logout()
    service.save_session({"id": 1, "username": "alice"})
    assert not service.is_authenticated()

    with pytest.raises(OperationalError):
        service.repository.get("currentUser")


def test_default_repository_survives_unusable_database(monkeypatch, tmp_path):
    import database

    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'session.db'}")
    monkeypatch.setattr(database, "engine", engine)
    monkeypatch.setattr(database, "SessionLocal", sessionmaker(bind=engine))

    service = AuthService(DatabaseSessionRepository())

    assert not service.is_authenticated()
    service.save_session({"id": 1, "username": "alice"})
    assert service.current_session() is None
