"""Create the platform admin account if none exists yet.

Usage:
    python scripts/create_platform_admin.py --email ops@example.com --first-name Ops --last-name Admin

The password is read from --password, the STAFFPICKS_ADMIN_PASSWORD
environment variable, or prompted for.
"""

import argparse
import getpass
import os
import sys

from staffpicks.application.services.auth_service import hash_password, normalize_email, validate_password_policy
from staffpicks.core.exceptions import ValidationException
from staffpicks.core.logging import configure_logging
from staffpicks.domain.models.user import User
from staffpicks.domain.roles import UserRole
from staffpicks.infrastructure.database import close_client, ensure_indexes, get_database
from staffpicks.infrastructure.repositories.user_repository import MongoUserRepository


def create_platform_admin(email: str, first_name: str, last_name: str, password: str) -> bool:
    """Returns False when an admin already exists."""
    db = get_database()
    ensure_indexes(db)
    users = MongoUserRepository(db)

    if users.find_one(users.active_filter({"role": UserRole.ADMIN.value})) is not None:
        print("A platform admin already exists; nothing to do.")
        return False

    email = normalize_email(email)
    if users.get_by_email(email) is not None:
        raise ValidationException(f"A user with email {email} already exists")
    validate_password_policy(password)

    doc = users.create(
        User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=hash_password(password),
            role=UserRole.ADMIN,
        )
    )
    print(f"Platform admin created: {doc['email']} ({doc['_id']})")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the StaffPicks platform admin")
    parser.add_argument("--email", required=True)
    parser.add_argument("--first-name", default="Platform")
    parser.add_argument("--last-name", default="Admin")
    parser.add_argument("--password")
    args = parser.parse_args()

    configure_logging()
    password = args.password or os.environ.get("STAFFPICKS_ADMIN_PASSWORD") or getpass.getpass("Password: ")

    try:
        create_platform_admin(args.email, args.first_name, args.last_name, password)
    except ValidationException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        close_client()
    return 0


if __name__ == "__main__":
    sys.exit(main())
