"""Command-line entry point for account bootstrap.

Creates the first admin account from a shell, so that an installation without
ADMIN_TOKEN can still be administered.

Usage:
    python main.py create-admin --username warden --name "Hostel Warden" \
        --email warden@college.edu
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from core.database import SessionLocal
from core.exceptions import ComplaintTrackerError, ValidationError
from core.logging_config import setup_logging
from schemas.account import AccountCreate, Role
from utils.account_manager import AccountManager

logger = logging.getLogger(__name__)


def prompt_password() -> str:
    """Prompt for a password twice.

    Raises:
        ValidationError: If the two entries differ.
    """
    password = getpass.getpass("Password: ")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        raise ValidationError("Passwords don't match")
    return password


def create_admin(args: argparse.Namespace) -> int:
    password = args.password or prompt_password()
    db = SessionLocal()
    try:
        account = AccountManager(db).create_account(
            AccountCreate(
                username=args.username,
                password=password,
                name=args.name,
                role=Role.ADMIN,
                college_email=args.email,
            )
        )
    finally:
        db.close()
    print(f"Created admin '{account.username}' (id={account.id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hostel Complaint Tracker admin tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--name", required=True)
    admin_parser.add_argument("--email", required=True, help="Institutional email")
    admin_parser.add_argument(
        "--password", help="Password (prompted for when omitted)"
    )
    admin_parser.set_defaults(handler=create_admin)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except ComplaintTrackerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
