"""
Script to register default user accounts through the backend API
Run this once against a fresh backend
"""
import sys
import os
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv()

import logging

from services.api_client import ApiClient
from services.auth_service import AuthService
from services.exceptions import ClientError
from services.session_store import InMemorySessionRepository
from services.validation import validate_registration

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def default_users():
    return [
        {
            "username": os.getenv("DEFAULT_ADMIN_USERNAME", "admin"),
            "email": os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com"),
            "password": os.getenv("DEFAULT_ADMIN_PASSWORD", "admin@123")
        },
        {
            "username": os.getenv("DEFAULT_USER_USERNAME", "user"),
            "email": os.getenv("DEFAULT_USER_EMAIL", "user@example.com"),
            "password": os.getenv("DEFAULT_USER_PASSWORD", "user@123")
        }
    ]


def create_initial_users(api_client: ApiClient = None, users=None) -> bool:
    """Register the default users; existing accounts are reported and skipped"""
    # Registration never logs anyone in, so the session can stay in memory
    if api_client is None:
        api_client = ApiClient(AuthService(InMemorySessionRepository()))

    try:
        api_client.check_backend()
    except ClientError as e:
        logger.error(f"Backend check failed: {e.message}")
        return False

    users_created = []
    for user_data in users or default_users():
        try:
            request = validate_registration(
                user_data["username"],
                user_data["email"],
                user_data["password"],
                user_data["password"]
            )
            api_client.register_user(request)
        except ClientError as e:
            logger.info(f"Skipped '{user_data['username']}': {e.message}")
            continue

        users_created.append(user_data["username"])
        logger.info(f"Registered user '{user_data['username']}'")

    if users_created:
        logger.info(f"Successfully registered {len(users_created)} users")
    else:
        logger.info("No new users were registered")
    return True


if __name__ == "__main__":
    logger.info("Registering default users...")
    if create_initial_users():
        logger.info("✅ User registration completed")
        logger.info("Promote the admin account to the admin role from an existing admin session")
    else:
        logger.error("❌ User registration failed!")
        sys.exit(1)
