"""Client state model"""
from datetime import datetime
from sqlalchemy import Column, DateTime, String, Text
from database import Base


class ClientState(Base):
    """Key/value record of persisted client state, e.g. the current session"""
    __tablename__ = "client_state"

    key = Column("Key", String(100), primary_key=True)
    value = Column("Value", Text, nullable=False)
    updated_at = Column("UpdatedAt", DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
