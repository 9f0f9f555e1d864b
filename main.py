#!/usr/bin/env python3
"""
TaskGuard -- operator command line.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080
  python main.py create-user admin@example.com --role admin

Environment variables (see core/config.py):
  SECRET_KEY     Token signing key, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL   SQLAlchemy URL for users and tasks (default: sqlite:///taskguard.db).
  BCRYPT_ROUNDS  Password hashing cost factor (default: 12).
"""

import argparse
import getpass
import sys
from typing import Optional

from auth.errors import AccessError
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import Settings, get_settings


def create_user(email: str, password: str, role: str, settings: Settings) -> int:
    """Register a user directly against the configured database. Returns the new id.

    Raises AccessError (ValidationError / ConflictError) exactly like the
    register endpoint does.
    """
    store = UserStore(db_url=settings.database_url)
    try:
        service = AuthService(
            store=store,
            hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
            tokens=TokenService(secret=settings.secret_key, lifetime_seconds=settings.token_expire_seconds),
        )
        return service.register(email, password, role).id
    finally:
        store.close()


def _read_password() -> str:
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        print("  [!] Passwords do not match.")
        sys.exit(1)
    return password


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="taskguard",
        description="Task records API with token authentication and ownership checks.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve --reload
  python main.py create-user admin@example.com --role admin
  SECRET_KEY=... python main.py serve --host 0.0.0.0
        """,
    )
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the API server with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development only)")

    create = sub.add_parser("create-user", help="Create a user account (prompts for the password)")
    create.add_argument("email", help="Email address used to log in")
    create.add_argument(
        "--role",
        choices=["user", "admin"],
        default="user",
        help="Role for the new account (default: user)",
    )

    args = parser.parse_args(argv)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)

    elif args.command == "create-user":
        password = _read_password()
        try:
            user_id = create_user(args.email, password, args.role, get_settings())
        except AccessError as exc:
            print(f"  [!] {exc.message}")
            sys.exit(1)
        print(f"  Created {args.role} {args.email} (id={user_id}).")

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
