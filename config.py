"""Client configuration loaded from the environment"""
import os
from dotenv import load_dotenv

load_dotenv()

API_URL = os.getenv("API_URL", "http://localhost:3001/api").rstrip("/")

# Where the persisted session lives; any SQLAlchemy URL works
SESSION_DATABASE_URL = os.getenv("SESSION_DATABASE_URL", "sqlite:///./session.db")
SESSION_STORAGE_KEY = os.getenv("SESSION_STORAGE_KEY", "currentUser")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
