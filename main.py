#!/usr/bin/env python3
"""
Command line client for the user-management backend
"""

import argparse
import getpass
import logging
import sys
from typing import Optional, Tuple

from config import API_URL, LOG_LEVEL
from services.api_client import ApiClient
from services.app_service import AppService
from services.auth_service import AuthService
from services.exceptions import ValidationError
from services.session_store import DatabaseSessionRepository, SessionRepository
from services.user_admin_service import UserAdminService
from shared.enums import Tab, UserRole

logger = logging.getLogger(__name__)


def build_services(
    repository: Optional[SessionRepository] = None,
    base_url: str = API_URL,
    http=None
) -> Tuple[AppService, UserAdminService]:
    """Wire the client together around one session repository"""
    auth_service = AuthService(repository or DatabaseSessionRepository())
    api_client = ApiClient(auth_service, base_url=base_url, http=http)
    return AppService(api_client, auth_service), UserAdminService(api_client, auth_service)


def format_user(user) -> str:
    return (
        f"{str(user.id):>4}  {user.username:<20} {user.email or '':<30} "
        f"{user.role.value:<6} {user.created_at or '':<20} {user.updated_at or ''}"
    )


def print_users(users) -> None:
    print(f"{'ID':>4}  {'Username':<20} {'Email':<30} {'Role':<6} {'Created':<20} Updated")
    for user in users:
        print(format_user(user))


def report(result) -> int:
    if result.message:
        print(result.message if result.success else f"❌ {result.message}")
    return 0 if result.success else 1


def run_users_command(args, admin: UserAdminService) -> int:
    if args.users_command == 'list':
        result = admin.select_tab(Tab.USERS)
        if not result.success:
            return report(result)
        admin.set_filter(args.filter or "")
        print(f"Total: {len(admin.users)}")
        if args.filter:
            print(f"Filtered: {len(admin.visible_users)}")
        print_users(admin.visible_users)
        return 0

    if args.users_command == 'search':
        result = admin.search_users(args.query)
        if not result.success:
            return report(result)
        print_users(admin.users)
        return 0

    if args.users_command == 'edit':
        result = admin.load_users()
        if not result.success:
            return report(result)
        user = next((u for u in admin.users if u.id == args.user_id), None)
        if user is None:
            print(f"❌ User {args.user_id} not found")
            return 1

        admin.start_edit(user)
        changes = {}
        if args.username is not None:
            changes["username"] = args.username
        if args.email is not None:
            changes["email"] = args.email
        if args.password:
            changes["password"] = getpass.getpass("New password: ")
        if args.role is not None:
            changes["role"] = args.role
        try:
            admin.update_draft(**changes)
        except ValidationError as e:
            print(f"❌ {e.message}")
            return 1
        return report(admin.save_edit())

    if args.users_command == 'delete':
        if not args.yes:
            answer = input(f"Delete user {args.user_id}? (y/n): ").strip().lower()
            if answer != 'y':
                print("Cancelled.")
                return 0
        return report(admin.delete_user(args.user_id))

    return 1


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(description="User management client")
    parser.add_argument('--api-url', default=API_URL, help='Backend API base URL')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('health', help='Check backend availability')

    login_parser = subparsers.add_parser('login', help='Log in')
    login_parser.add_argument('username')

    register_parser = subparsers.add_parser('register', help='Create an account')
    register_parser.add_argument('username')
    register_parser.add_argument('email')

    subparsers.add_parser('logout', help='Log out')
    subparsers.add_parser('whoami', help='Show the logged in user')
    subparsers.add_parser('stats', help='Show backend statistics')

    users_parser = subparsers.add_parser('users', help='Manage users (admin only)')
    users_sub = users_parser.add_subparsers(dest='users_command')

    list_parser = users_sub.add_parser('list', help='List users')
    list_parser.add_argument('--filter', help='Filter by username, email or id')

    search_parser = users_sub.add_parser('search', help='Search users on the server')
    search_parser.add_argument('query')

    edit_parser = users_sub.add_parser('edit', help='Edit a user')
    edit_parser.add_argument('user_id', type=int)
    edit_parser.add_argument('--username')
    edit_parser.add_argument('--email')
    edit_parser.add_argument('--password', action='store_true', help='Prompt for a new password')
    edit_parser.add_argument('--role', choices=[role.value for role in UserRole])

    delete_parser = users_sub.add_parser('delete', help='Delete a user')
    delete_parser.add_argument('user_id', type=int)
    delete_parser.add_argument('--yes', action='store_true', help='Do not ask for confirmation')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format='%(levelname)s:%(name)s:%(message)s'
    )

    if args.command is None:
        parser.print_help()
        return 1

    app, admin = build_services(base_url=args.api_url)

    if args.command == 'health':
        return report(app.check_backend())

    if args.command == 'login':
        password = getpass.getpass("Password: ")
        result = app.login(args.username, password)
        if result.success:
            print(f"✅ Logged in as {app.current_user.username} ({app.current_user.role.value})")
        return report(result)

    if args.command == 'register':
        password = getpass.getpass("Password: ")
        confirm_password = getpass.getpass("Confirm password: ")
        return report(app.register(args.username, args.email, password, confirm_password))

    if args.command == 'logout':
        return report(app.logout())

    if args.command == 'whoami':
        if not app.is_authenticated:
            print("Not logged in")
            return 1
        print(f"{app.current_user.username} ({app.current_user.role.value})")
        return 0

    if args.command == 'stats':
        result = app.stats()
        if result.success:
            for key, value in result.data.items():
                print(f"{key}: {value}")
        return report(result)

    if args.command == 'users':
        if not app.is_authenticated:
            print("❌ Log in first")
            return 1
        if args.users_command is None:
            users_parser.print_help()
            return 1
        return run_users_command(args, admin)

    return 1


if __name__ == "__main__":
    sys.exit(main())
