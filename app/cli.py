"""CLI for JobMow: set up the database, price a lawn, inspect and shift the schedule."""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date


async def _load_service():
    from app.config import get_settings
    from app.db.engine import async_session_factory, create_tables
    from app.db.store import SqlStore
    from app.services.job_service import JobService

    await create_tables()
    service = JobService(SqlStore(async_session_factory), get_settings().organization_id)
    await service.load()
    return service


async def cmd_init_db(args):
    """Create tables and the organization's default settings row."""
    service = await _load_service()
    print(f"Database ready for organization {service.organization_id}")


async def cmd_quote(args):
    from app.schemas import Frequency, LawnSize, QuoteRequest

    service = await _load_service()
    request = QuoteRequest(
        lawn_size=LawnSize(args.size) if args.size else None,
        lawn_area=args.area,
        frequency=Frequency(args.frequency),
        extras=args.extra or [],
    )
    quote = service.quote(request)
    currency = service.settings.currency
    b = quote.price_breakdown
    print(f"{currency}{quote.estimated_price:.2f} ({quote.estimated_duration_minutes} min)")
    print(f"  base {currency}{b.base:.2f}, extras {currency}{b.extras:.2f}, discount {currency}{b.discount:.2f}")
    print(f"  {quote.explanation}")


async def cmd_schedule(args):
    service = await _load_service()
    day = date.fromisoformat(args.date) if args.date else service.today()
    plan = service.day_plan(day)
    if not plan.slots:
        print(f"No jobs on {day.isoformat()}")
        return
    print(f"Route for {day.isoformat()}:")
    for slot in plan.slots:
        flag = "  (overruns)" if slot.overruns else ""
        print(f"  {slot.start_label:>5}-{slot.end_label:<5} {slot.customer_name}{flag}")


async def cmd_rain_delay(args):
    service = await _load_service()
    today = date.fromisoformat(args.today) if args.today else None
    affected = await service.rain_delay(date.fromisoformat(args.new_date), today)
    print(f"Moved {len(affected)} job(s) to {args.new_date}")
    for job in affected:
        print(f"  {job.customer_name} - {job.address}")


def main():
    parser = argparse.ArgumentParser(description="JobMow CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Create tables and default settings")

    qt = subparsers.add_parser("quote", help="Price a lawn with the current settings")
    qt.add_argument("--size", choices=["Small", "Medium", "Large", "Estate"], default=None)
    qt.add_argument("--area", type=float, default=None, help="Lawn area in m²")
    qt.add_argument("--frequency", choices=["One-off", "Weekly", "Fortnightly", "Monthly"], default="One-off")
    qt.add_argument("--extra", action="append", help="Extra service (repeatable)")

    sc = subparsers.add_parser("schedule", help="Show the time slots for a day")
    sc.add_argument("--date", default="", help="YYYY-MM-DD (defaults to today)")

    rd = subparsers.add_parser("rain-delay", help="Move today's scheduled jobs to another date")
    rd.add_argument("new_date", help="YYYY-MM-DD")
    rd.add_argument("--today", default="", help="Day to move jobs from (defaults to today)")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "quote":
        asyncio.run(cmd_quote(args))
    elif args.command == "schedule":
        asyncio.run(cmd_schedule(args))
    elif args.command == "rain-delay":
        asyncio.run(cmd_rain_delay(args))


if __name__ == "__main__":
    main()
