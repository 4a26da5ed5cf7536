from __future__ import annotations

import argparse
import getpass

from sqlalchemy.orm import Session

import potluck.models  # noqa: F401
from potluck.auth.security import hash_password
from potluck.core.config import settings
from potluck.core.db import Database
from potluck.models.user import ROLE_ADMIN, User


def create_admin(db: Session, *, email: str, name: str, password: str) -> User:
    """Create an admin account, or promote and reset the password of an existing one."""

    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, name=name, hashed_password=hash_password(password), role=ROLE_ADMIN)
        db.add(user)
    else:
        user.role = ROLE_ADMIN
        user.is_active = True
        user.hashed_password = hash_password(password)
    db.commit()
    db.refresh(user)
    return user


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or promote an admin user.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Admin")
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        raise SystemExit("Password must be at least 8 characters")

    database = Database(settings.DATABASE_URL)
    try:
        with database.session() as db:
            user = create_admin(db, email=args.email, name=args.name, password=password)
            print(f"Admin ready: {user.email} (id={user.id})")
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
