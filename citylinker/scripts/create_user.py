"""
Create a user (e.g. first admin). Run from project root:
  python -m citylinker.scripts.create_user EMAIL PASSWORD FIRST_NAME LAST_NAME [role]
Example:
  python -m citylinker.scripts.create_user admin@citylinker.cd your-secure-password Admin CityLinker admin
"""
import argparse
import sys

from citylinker.core.database import SessionLocal
from citylinker.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
)
from citylinker.models import UserRole
from citylinker.services.storage import DatabaseStorage


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a CityLinker user (any role, including admin).")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("first_name", help="First name")
    parser.add_argument("last_name", help="Last name")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.CLIENT.value,
        choices=[r.value for r in UserRole],
    )
    args = parser.parse_args()

    email = args.email.strip()
    if not email or "@" not in email or len(email) > 255:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    for name in (args.first_name, args.last_name):
        if not (NAME_MIN_LEN <= len(name.strip()) <= NAME_MAX_LEN):
            print(f"Names must be {NAME_MIN_LEN}-{NAME_MAX_LEN} characters.", file=sys.stderr)
            return 1

    db = SessionLocal()
    try:
        storage = DatabaseStorage(db)
        if storage.get_user_by_email(email):
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        role = UserRole(args.role)
        storage.create_user(
            {
                "email": email,
                "password": hash_password(args.password),
                "first_name": args.first_name.strip(),
                "last_name": args.last_name.strip(),
                "role": role,
                "business_verified": role == UserRole.ADMIN,
            }
        )
        print(f"Created user '{email}' with role '{role.value}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
