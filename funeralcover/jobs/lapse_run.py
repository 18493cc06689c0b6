"""Scheduled entry point: run the lapse check (and optionally reminders) once."""

import argparse
import asyncio
import logging
from datetime import datetime

from funeralcover.core.clock import SystemClock, as_utc
from funeralcover.core.config import settings
from funeralcover.db.base import SessionLocal
from funeralcover.services.lapse import run_lapse_check, send_arrears_reminders
from funeralcover.services.notifications import EmailNotificationSender

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lapse Active policies that are behind on premiums.")
    parser.add_argument(
        "--at",
        type=datetime.fromisoformat,
        default=None,
        help="Evaluate as of this ISO-8601 instant instead of now (naive values are UTC)",
    )
    parser.add_argument(
        "--reminders",
        action="store_true",
        help="Also email arrears reminders for policies that stay Active",
    )
    return parser.parse_args(argv)


async def _run(now: datetime, reminders: bool) -> int:
    notifier = EmailNotificationSender()
    db = SessionLocal()
    try:
        summary = await run_lapse_check(db, now, notifier)
        print(summary.model_dump_json())
        if reminders:
            reminder_summary = await send_arrears_reminders(db, now, notifier)
            print(reminder_summary.model_dump_json())
    finally:
        db.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = _parse_args(argv)
    now = as_utc(args.at) if args.at is not None else SystemClock().now()
    logger.info("Starting lapse run at %s", now.isoformat())
    return asyncio.run(_run(now, args.reminders))


if __name__ == "__main__":
    raise SystemExit(main())
