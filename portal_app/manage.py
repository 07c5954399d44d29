"""Account provisioning: ``python -m portal_app.manage create-user EMAIL --role evaluator``."""
from __future__ import annotations
import argparse
import getpass
import sys

from .config import DB_PATH, configure_logging
from .db import migrate
from .errors import PortalError
from .models import Role
from .services.auth import LocalAuth


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portal-manage")
    parser.add_argument("--db", default=DB_PATH, help="sqlite database path")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("migrate", help="create the database tables")

    create = sub.add_parser("create-user", help="add a developer or evaluator account")
    create.add_argument("email")
    create.add_argument("--role", choices=[r.value for r in Role], default=Role.DEVELOPER.value)
    create.add_argument("--password", help="prompted for when omitted")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "migrate":
        migrate(args.db)
        print(f"Database ready at {args.db}")
        return 0

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters", file=sys.stderr)
        return 2
    try:
        identity = LocalAuth(args.db).create_profile(args.email, password, Role(args.role))
    except PortalError as e:
        print(e.message, file=sys.stderr)
        return 1
    print(f"Created {args.role} {identity.email} ({identity.user_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
