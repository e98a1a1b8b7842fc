"""
Create an identity from the command line (e.g. the first administrator). Run from project root:
  python -m portal_api.scripts.create_user EMAIL PASSWORD [ROLE]
Example:
  python -m portal_api.scripts.create_user admin@senado.bo 'Secure-pass1' ADMIN
"""
import argparse
import logging
import sys

from portal_api.core.config import get_settings
from portal_api.core.database import SessionLocal
from portal_api.core.errors import ValidationFailed
from portal_api.core.roles import ROLES
from portal_api.services.identity import build_user, email_exists, normalize_email

logger = logging.getLogger("portal_api.scripts.create_user")


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Create a portal identity (ACTIVE).")
    parser.add_argument("email", help="Account email")
    parser.add_argument("password", help="Password (8-128 chars, upper, lower and digit)")
    parser.add_argument("role", nargs="?", default="ADMIN", choices=ROLES)
    args = parser.parse_args()

    settings = get_settings()
    email = normalize_email(args.email)
    db = SessionLocal()
    try:
        if email_exists(db, email):
            logger.error("User '%s' already exists.", email)
            return 1
        try:
            user = build_user(settings, email, args.password, args.role, "ACTIVE")
        except ValidationFailed as e:
            for err in e.errors or []:
                logger.error("%s", err["message"])
            return 1
        db.add(user)
        db.commit()
        logger.info("Created user '%s' with role '%s'.", email, args.role)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
