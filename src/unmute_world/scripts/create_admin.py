"""Create an administrator account, or promote an existing one."""
from __future__ import annotations

import argparse
import getpass
import logging
import sys

from sqlalchemy.orm import Session

from unmute_world.core import security
from unmute_world.core.settings import settings
from unmute_world.db.session import SessionLocal
from unmute_world.models import User
from unmute_world.repositories import UserRepository
from unmute_world.repositories.user_repo import normalize_email
from unmute_world.schemas.user import PASSWORD_MIN_LENGTH

logger = logging.getLogger(__name__)


def ensure_admin(db: Session, email: str, name: str, password: str | None) -> User:
    """Promote the account registered under ``email`` or create it as an admin.

    A password is only required when the account does not exist yet.
    """
    users = UserRepository(db)
    user = users.find_by_email(email)
    if user is None:
        if not password:
            raise ValueError("A password is required to create a new admin account")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        user = User(
            name=name,
            email=normalize_email(email),
            password_hash=security.hash_password(password),
            profile_pic=settings.default_profile_pic,
            is_admin=True,
        )
        users.add(user)
        logger.info("Created admin account %s", user.email)
    else:
        user.is_admin = True
        user.is_blocked = False
        logger.info("Promoted %s to admin", user.email)
    db.commit()
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email", help="Email address of the admin account")
    parser.add_argument("--name", default="Admin", help="Display name for a new account")
    parser.add_argument(
        "--password",
        help="Password for a new account; prompted for when omitted",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())

    with SessionLocal() as db:
        password = args.password
        if password is None and UserRepository(db).find_by_email(args.email) is None:
            password = getpass.getpass("Password: ")
        try:
            ensure_admin(db, args.email, args.name, password)
        except ValueError as exc:
            parser.error(str(exc))
    return 0


if __name__ == "__main__":
    sys.exit(main())
