#!/usr/bin/env python3
"""
grant_admin.py
--------------

Promote an existing account to the admin role, or create a confirmed admin
account when none exists for the e-mail.

Usage:
    python scripts/grant_admin.py EMAIL [--password PASSWORD] [--revoke]
"""

import sys
import os
import argparse

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.config import ProductionConfig
from app.models.user import User
from app.services.audit import audit_logger
from app.logger import logger


def grant_admin(email, password=None, revoke=False):
    """
    Set the role of ``email`` to ``admin`` (or back to ``user`` with
    ``revoke``).

    Returns:
        User or None: the updated user, or None when the account does not
        exist and could not be created.
    """
    role = "user" if revoke else "admin"
    user = User.query.filter_by(email=email.strip().lower()).first()
    if user is None:
        if revoke or not password:
            logger.error("User not found.", email=email)
            return None
        user = User.create(email, password, role=role, confirmed=True)
        logger.info("Admin account created.", user_id=user.id, email=user.email)
    else:
        previous = user.role
        user.update(role=role)
        logger.info(
            "Role updated.", user_id=user.id, email=user.email, previous=previous, role=role
        )

    audit_logger.log_sensitive_operation(
        "ROLE_CHANGE", {"user_id": user.id, "to": role, "source": "grant_admin"}
    )
    return user


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Grant or revoke the admin role")
    parser.add_argument("email", help="Account e-mail")
    parser.add_argument(
        "--password",
        help="Create the account with this password when it does not exist",
    )
    parser.add_argument(
        "--revoke", action="store_true", help="Demote the account to user"
    )
    args = parser.parse_args()

    app = create_app(ProductionConfig)

    with app.app_context():
        user = grant_admin(args.email, password=args.password, revoke=args.revoke)
        sys.exit(0 if user is not None else 1)


if __name__ == "__main__":
    main()
