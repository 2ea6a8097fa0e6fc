"""Run the notification delivery sweep and expiry purge once, e.g. from cron."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from hathak.application.use_cases.notifications import (
    deliver_scheduled_notifications,
    purge_expired_notifications,
)
from hathak.infrastructure.database import SessionLocal, initialize_database


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the maintenance run."""

    parser = argparse.ArgumentParser(
        description="Deliver due notifications and purge expired ones.",
    )
    parser.add_argument(
        "--skip-sweep",
        action="store_true",
        help="Do not deliver scheduled notifications.",
    )
    parser.add_argument(
        "--skip-purge",
        action="store_true",
        help="Do not delete expired notifications.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    initialize_database()

    session = SessionLocal()
    try:
        processed = 0 if args.skip_sweep else deliver_scheduled_notifications(session)
        deleted = 0 if args.skip_purge else purge_expired_notifications(session)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Notification maintenance failed: {exc}") from exc
    finally:
        session.close()

    print(f"Processed: {processed}\nDeleted: {deleted}")


if __name__ == "__main__":
    main()
