"""Session repositories: where the client keeps its persisted state"""
import logging
from typing import Dict, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from models.client_state import ClientState

logger = logging.getLogger(__name__)


class SessionRepository:
    """Key/value storage for serialized client state"""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def clear(self, key: str) -> None:
        raise NotImplementedError


class InMemorySessionRepository(SessionRepository):
    """Process-local storage, lost on exit"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def clear(self, key: str) -> None:
        self._values.pop(key, None)


class DatabaseSessionRepository(SessionRepository):
    """Storage backed by the client_state table"""

    def __init__(self, session_factory: sessionmaker = None):
        if session_factory is None:
            from database import SessionLocal, init_db
            try:
                init_db()
            except SQLAlchemyError as e:
                # Reads and writes will fail too and read as logged out
                logger.error(f"Failed to initialize session storage: {e}")
            session_factory = SessionLocal
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            record = db.query(ClientState).filter(ClientState.key == key).first()
            return record.value if record else None
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db = self.session_factory()
        try:
            record = db.query(ClientState).filter(ClientState.key == key).first()
            if record:
                record.value = value
            else:
                db.add(ClientState(key=key, value=value))
            db.commit()
            logger.debug(f"Stored client state '{key}'")
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def clear(self, key: str) -> None:
        db = self.session_factory()
        try:
            db.query(ClientState).filter(ClientState.key == key).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
