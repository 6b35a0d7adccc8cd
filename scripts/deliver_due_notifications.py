"""Deliver notifications whose quiet-hours deferral has elapsed.

Meant to run from cron every few minutes. Several copies may run at once;
each notification is claimed before it is dispatched.
"""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from notification_engine.application.use_cases.notifications import (
    build_default_dispatcher,
    deliver_due_notifications,
)
from notification_engine.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Deliver deferred notifications whose snooze has elapsed.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=500,
        help="Maximum number of notifications delivered per run (default: 500)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every claimed notification.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    initialize_database()

    session = SessionLocal()
    try:
        delivered = deliver_due_notifications(
            session, dispatcher=build_default_dispatcher(), limit=args.limit
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not read deferred notifications: {exc}") from exc
    finally:
        session.close()

    print(f"Delivered {len(delivered)} notification(s)")


if __name__ == "__main__":
    main()
