"""
Create Admin Account

Operator path for creating dashboard admins once the public registration
endpoint has closed (it only stays open until the first admin exists).

Usage:
    python scripts/create_admin.py --email admin@example.org
    python scripts/create_admin.py --email admin@example.org --password 'S3cretPass'

The password is prompted for when --password is omitted.
"""

import argparse
import asyncio
import getpass
import sys

from volunteer_api.core.database import async_session_maker, close_db
from volunteer_api.core.security import hash_password
from volunteer_api.modules.admins import AdminRepository
from volunteer_api.modules.auth.schemas import RegisterRequest


async def create_admin(email: str, password: str) -> int:
    """Create the admin account if it doesn't exist. Returns a process exit code."""

    # Same email format and password policy as the HTTP endpoint
    data = RegisterRequest(email=email, password=password)

    try:
        async with async_session_maker() as db:
            existing = await AdminRepository.get_by_email(db, data.email)

            if existing:
                print(f"Admin already exists: {existing.email}")
                print(f"  ID: {existing.id}")
                return 0

            admin = await AdminRepository.create(
                db,
                email=data.email,
                password_hash=hash_password(data.password),
            )

            print("Admin created successfully!")
            print(f"  Email: {admin.email}")
            print(f"  ID: {admin.id}")
    finally:
        await close_db()

    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a dashboard admin account.")
    parser.add_argument("--email", required=True, help="Admin email address")
    parser.add_argument("--password", help="Admin password (prompted if omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")

    try:
        return asyncio.run(create_admin(args.email, password))
    except ValueError as e:
        # pydantic.ValidationError subclasses ValueError
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
