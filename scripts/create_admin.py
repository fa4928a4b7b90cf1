"""
Create (or reset) the admin account.
Run: python scripts/create_admin.py --password <password>
"""

import argparse
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from app.config import get_settings  # noqa: E402
from app.core.security import password_hasher  # noqa: E402
from app.crud.user import UserCRUD  # noqa: E402
from app.dependencies import get_db_client  # noqa: E402
from app.models.user import Subscription, UserModel, UserRole  # noqa: E402
from app.utils.logger import configure_logging, get_logger  # noqa: E402

logger = get_logger("scripts.create_admin")

DEFAULT_EMAIL = "admin@example.com"


def create_or_reset_admin(db, email: str, password: str, name: str = "Admin User") -> tuple:
    """
    Create the admin account, or reset the password and role of an existing one.

    Returns:
        Tuple of (user document, created flag)
    """
    users = UserCRUD(db)
    subscription = Subscription(tier="premium", status="active").model_dump()
    existing = users.get_by_email(email)

    if existing:
        user = users.update(existing["id"], {
            "password": password_hasher.hash(password),
            "role": UserRole.ADMIN.value,
            "active": True,
            "verified": True,
            "subscription": subscription,
        })
        return user, False

    user = users.create_user(UserModel(
        name=name,
        email=email,
        password=password_hasher.hash(password),
        role=UserRole.ADMIN,
        active=True,
        verified=True,
        subscription=subscription,
    ))
    return user, True


def main():
    parser = argparse.ArgumentParser(description="Create or reset the Windspire admin account")
    parser.add_argument("--email", default=DEFAULT_EMAIL, help=f"Admin email (default {DEFAULT_EMAIL})")
    parser.add_argument("--password", required=True, help="Password to set (minimum 8 characters)")
    parser.add_argument("--name", default="Admin User", help="Display name for a new account")
    args = parser.parse_args()

    if len(args.password) < 8:
        parser.error("Password must be at least 8 characters")

    settings = get_settings()
    configure_logging(debug=settings.debug, log_format=settings.log_format)
    db = get_db_client(settings)

    user, created = create_or_reset_admin(db, args.email, args.password, args.name)
    action = "Created" if created else "Reset"
    logger.info(f"{action} admin account {user['email']} (id: {user['id']})")
    print(f"{action} admin account: {user['email']}")


if __name__ == "__main__":
    main()
