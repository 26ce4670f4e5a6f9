"""
Create a user from a shell (e.g. a second admin). Run from project root:
  python -m labeldesk.scripts.create_user LOGIN PASSWORD [role]
Example:
  python -m labeldesk.scripts.create_user operator s3cret user
"""
import argparse
import logging
import sys

from labeldesk.core.database import SessionLocal, init_db
from labeldesk.core.security import LOGIN_MAX_LEN
from labeldesk.models.user import USER_ROLES
from labeldesk.services.users import LoginAlreadyExistsError, create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a LabelDesk user.")
    parser.add_argument("login", help=f"Login (1-{LOGIN_MAX_LEN} chars)")
    parser.add_argument("password", help="Password (non-empty)")
    parser.add_argument("role", nargs="?", default="user", choices=list(USER_ROLES))
    args = parser.parse_args(argv)

    login = args.login.strip()
    if not login or len(login) > LOGIN_MAX_LEN:
        print("Invalid login length.", file=sys.stderr)
        return 1
    if not args.password:
        print("Password must not be empty.", file=sys.stderr)
        return 1

    init_db()
    db = SessionLocal()
    try:
        create_user(db, login, args.password, role=args.role)
    except LoginAlreadyExistsError:
        print(f"User '{login}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{login}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
