from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from utilities.initialize_database import initialize_database


def test_creates_client_state_table():
    engine = create_engine("sqlite://", poolclass=StaticPool)
    assert initialize_database(engine)
    assert "client_state" in inspect(engine).get_table_names()
    # Running twice is harmless
    assert initialize_database(engine)
