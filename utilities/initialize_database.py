#!/usr/bin/env python3
"""
Initialize the local session database
This script creates the client state table if it doesn't exist
"""

import logging
import sys
from pathlib import Path

# Add the project root to the path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import inspect

from config import SESSION_DATABASE_URL
from database import engine, init_db, test_connection
from models.client_state import ClientState

logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')
logger = logging.getLogger(__name__)


def initialize_database(bind=engine) -> bool:
    """Create the client state table and confirm it exists"""
    try:
        if not test_connection(bind):
            logger.error("❌ Session database connection failed")
            return False

        logger.info("🔗 Session database connection successful")
        init_db(bind)

        table = ClientState.__tablename__
        if table not in inspect(bind).get_table_names():
            logger.error(f"❌ Table {table} is missing")
            return False

        logger.info(f"✅ Table {table} is ready")
        return True

    except Exception as e:
        logger.error(f"❌ Session database initialization failed: {e}")
        return False


def main():
    """Main entry point"""
    logger.info(f"🚀 Initializing session database at {SESSION_DATABASE_URL}")

    if initialize_database():
        print("✅ SESSION DATABASE READY")
        return 0
    print("❌ SESSION DATABASE INITIALIZATION FAILED")
    return 1


if __name__ == "__main__":
    sys.exit(main())
