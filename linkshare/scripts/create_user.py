"""
Create a user (e.g. an extra admin). Run from project root:
  python -m linkshare.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m linkshare.scripts.create_user alice your-secure-password admin
"""
import argparse
import sys

from linkshare.core.config import get_settings
from linkshare.core.database import build_engine, build_session_factory
from linkshare.core.security import hash_password
from linkshare.models import Base
from linkshare.models.user import ROLES
from linkshare.services.credentials import UsernameTakenError, create_user


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create a Linkshare user.")
    parser.add_argument(
        "username",
        help=f"Username ({settings.USERNAME_MIN_LEN}-{settings.USERNAME_MAX_LEN} chars)",
    )
    parser.add_argument(
        "password",
        help=f"Password ({settings.PASSWORD_MIN_LEN}-{settings.PASSWORD_MAX_LEN} chars)",
    )
    parser.add_argument("role", nargs="?", default="user", choices=list(ROLES))
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not (settings.USERNAME_MIN_LEN <= len(username) <= settings.USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (settings.PASSWORD_MIN_LEN <= len(args.password) <= settings.PASSWORD_MAX_LEN):
        print(
            f"Password must be {settings.PASSWORD_MIN_LEN}-{settings.PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    engine = build_engine(settings)
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    db = build_session_factory(engine)()
    try:
        create_user(
            db,
            username,
            hash_password(args.password, settings.BCRYPT_ROUNDS),
            role=args.role,
        )
    except UsernameTakenError:
        print(f"User '{username}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"Created user '{username}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
