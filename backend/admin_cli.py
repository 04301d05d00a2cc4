"""
Command-line admin session: log in once, then reuse the session from disk.

    python admin_cli.py login --email admin@example.com
    python admin_cli.py whoami
    python admin_cli.py logout

The session record is kept under SESSION_STORE_DIR (default ~/.voyage_admin)
and expires 24 hours after login like any other admin session.
"""
import argparse
import getpass
import sys
from typing import List, Optional

from voyage_admin.auth.permissions import permissions_for
from voyage_admin.auth.service import AdminAuth, build_admin_auth
from voyage_admin.auth.session_store import get_session_store
from voyage_admin.config import settings
from voyage_admin.database import SessionLocal


def _login(auth: AdminAuth, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    result = auth.login(args.email, password)
    if not result.success:
        print(f"❌ {result.error.message}")
        return 1
    print(f"✓ Logged in as {result.user.display_name} <{result.user.email}> ({result.user.role})")
    return 0


def _whoami(auth: AdminAuth, args: argparse.Namespace) -> int:
    user = auth.get_current_user()
    if user is None:
        print("Not logged in")
        return 1
    print(f"{user.display_name} <{user.email}>")
    print(f"role: {user.role}")
    print(f"permissions: {', '.join(sorted(permissions_for(user.role))) or '-'}")
    return 0


def _logout(auth: AdminAuth, args: argparse.Namespace) -> int:
    auth.logout()
    print("✓ Logged out")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Voyage admin session from the command line")
    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Sign in and store the session")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Prompted for when omitted")
    login.set_defaults(handler=_login)

    commands.add_parser("whoami", help="Show the stored session").set_defaults(handler=_whoami)
    commands.add_parser("logout", help="End the stored session").set_defaults(handler=_logout)

    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        auth = build_admin_auth(
            db,
            session_store=get_session_store(settings),
            user_agent="voyage-admin-cli",
        )
        return args.handler(auth, args)
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
