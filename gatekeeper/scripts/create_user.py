"""
Create a user (e.g. the first administrator). Every /advance route needs a
bearer token, so the first account has to come from here. Run from project root:
  python -m gatekeeper.scripts.create_user USERNAME PASSWORD --name "Ada" --email ada@example.com [--role-id N]
"""
import argparse
import logging
import sys

from gatekeeper.core.config import get_settings
from gatekeeper.core.database import SessionLocal
from gatekeeper.core.errors import ServiceError
from gatekeeper.core.security import PasswordHasher
from gatekeeper.services.accounts import UserAccountManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Gatekeeper user.")
    parser.add_argument("username", help="Unique username")
    parser.add_argument("password", help="Plain-text password (stored as a bcrypt hash)")
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--mobile-no", default="", help="Mobile number")
    parser.add_argument("--role-id", type=int, default=None, help="Role to assign")
    args = parser.parse_args(argv)

    settings = get_settings()
    db = SessionLocal()
    try:
        manager = UserAccountManager(db, PasswordHasher(rounds=settings.BCRYPT_ROUNDS))
        user_id = manager.register(
            {
                "name": args.name,
                "email": args.email,
                "mobile_no": args.mobile_no,
                "username": args.username,
                "password": args.password,
                "role_id": args.role_id,
            }
        )
    except ServiceError as e:
        print(f"{e.code}: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
    logger.info("Created user '%s' with id %s.", args.username, user_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
