"""Utility script to register a notification recipient and issue a token."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from notification_engine.application.use_cases.preferences import create_default_preferences
from notification_engine.domain.entities import UserProfile
from notification_engine.infrastructure.database import SessionLocal, initialize_database
from notification_engine.infrastructure.repositories import UserProfileRepository
from notification_engine.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for profile creation."""

    parser = argparse.ArgumentParser(
        description="Register a user profile with default notification preferences.",
    )
    parser.add_argument("--user-id", required=True, help="Identifier of the user")
    parser.add_argument(
        "--organization-id", required=True, help="Organization the user belongs to"
    )
    parser.add_argument("--email", required=True, help="Address used for urgent emails")
    parser.add_argument("--name", default=None, help="Display name (optional)")
    parser.add_argument(
        "--print-token",
        action="store_true",
        help="Print a bearer token for the user after registration.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    initialize_database()

    session = SessionLocal()
    try:
        profile = UserProfileRepository(session).save(
            UserProfile(
                user_id=args.user_id,
                organization_id=args.organization_id,
                email=args.email,
                name=args.name,
            )
        )
        create_default_preferences(session, profile.user_id)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the user profile: {exc}") from exc
    finally:
        session.close()

    print(
        "Profile registered:\n"
        f"  User: {profile.user_id}\n"
        f"  Organization: {profile.organization_id}\n"
        f"  Email: {profile.email}"
    )
    if args.print_token:
        print(f"  Token: {create_access_token({'sub': profile.user_id})}")


if __name__ == "__main__":
    main()
