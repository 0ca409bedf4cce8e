"""Local database used to persist client state"""
import logging
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import SESSION_DATABASE_URL

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_session_engine(database_url: str = SESSION_DATABASE_URL) -> Engine:
    """Create an engine for the client state database"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=False)


engine = create_session_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """Create the client state tables if they don't exist"""
    # Import models so they register on Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def test_connection(bind: Engine = None) -> bool:
    """Check that the client state database is reachable"""
    try:
        with (bind or engine).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Session database connection failed: {e}")
        return False
