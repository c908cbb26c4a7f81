#!/usr/bin/env python3
"""
Reminders management CLI.

Usage:
    python manage.py list [--view active]   List reminders
    python manage.py upcoming [--days 7]    Active reminders due soon
    python manage.py add TITLE --due ISO    Create a reminder
    python manage.py complete ID            Complete the current occurrence
    python manage.py snooze ID              Snooze overdue detection
    python manage.py delete ID              Delete a reminder
    python manage.py sweep                  Run one overdue sweep
    python manage.py watch [--interval 60]  Sweep periodically until Ctrl+C
"""

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime

from src.application import (
    OperationResult,
    ReminderLifecycleService,
    get_lifecycle_service,
    get_notification_reconciler,
    get_sweep_runner,
)
from src.config import configure_logging, get_logger, get_settings
from src.core.entities.reminder import (
    CustomInterval,
    IntervalUnit,
    Reminder,
    ReminderFrequency,
    ReminderView,
)
from src.infrastructure.notifications import InProcessNotificationScheduler
from src.infrastructure.storage import close_pool

logger = get_logger(__name__)

Command = Callable[[ReminderLifecycleService, argparse.Namespace], Awaitable[bool]]


def _format_reminder(reminder: Reminder) -> str:
    parts = [
        f"{reminder.id}",
        f"[{reminder.status.value}]",
        reminder.due_date.strftime("%Y-%m-%d %H:%M"),
        reminder.title,
    ]
    if reminder.amount is not None:
        kind = reminder.transaction_type.value if reminder.transaction_type else ""
        parts.append(f"{reminder.amount:.2f} {kind}".rstrip())
    if reminder.is_recurring:
        parts.append(f"({reminder.frequency.value.lower()})")
    if reminder.snooze_until is not None:
        parts.append(f"snoozed until {reminder.snooze_until:%H:%M}")
    return "  ".join(parts)


def _report(result: OperationResult) -> bool:
    if result.success:
        if result.reminder is not None:
            print(_format_reminder(result.reminder))
        if result.transaction_id:
            print(f"Transaction created: {result.transaction_id}")
    else:
        print(f"Error: {result.message}", file=sys.stderr)
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    return result.success


async def cmd_list(service: ReminderLifecycleService, args: argparse.Namespace) -> bool:
    """Print reminders in a view plus per-view counts."""
    reminders = service.list_reminders(args.view)
    for reminder in reminders:
        print(_format_reminder(reminder))
    counts = service.status_counts()
    print(", ".join(f"{name}: {count}" for name, count in counts.items()))
    return True


async def cmd_upcoming(service: ReminderLifecycleService, args: argparse.Namespace) -> bool:
    for reminder in service.upcoming(args.days):
        print(_format_reminder(reminder))
    return True


async def cmd_add(service: ReminderLifecycleService, args: argparse.Namespace) -> bool:
    data: dict = {
        "title": args.title,
        "description": args.description,
        "due_date": args.due,
        "frequency": args.frequency,
        "is_recurring": args.recurring,
        "notify_before": args.notify_before,
        "amount": args.amount,
        "transaction_type": args.type,
        "wallet_id": args.wallet,
        "category_id": args.category,
        "auto_create_transaction": args.auto_transaction,
    }
    if args.every is not None:
        data["custom_interval"] = CustomInterval(unit=IntervalUnit(args.unit), count=args.every)
    return _report(await service.create(data))


async def cmd_complete(service: ReminderLifecycleService, args: argparse.Namespace) -> bool:
    return _report(await service.complete(args.id))


async def cmd_snooze(service: ReminderLifecycleService, args: argparse.Namespace) -> bool:
    return _report(await service.snooze(args.id, args.minutes))


async def cmd_delete(service: ReminderLifecycleService, args: argparse.Namespace) -> bool:
    result = await service.delete(args.id)
    if not result.success:
        return _report(result)
    print(f"Deleted {args.id}")
    return True


async def cmd_sweep(service: ReminderLifecycleService, args: argparse.Namespace) -> bool:
    report = await service.sweep()
    if not report.success:
        print(f"Error: {report.message}", file=sys.stderr)
        return False
    print(f"{report.transitioned} reminder(s) became overdue")
    return True


async def cmd_watch(service: ReminderLifecycleService, args: argparse.Namespace) -> bool:
    """Sweep on an interval and deliver notifications until interrupted."""
    runner = get_sweep_runner(service, args.interval)
    runner.start()
    print("Watching reminders. Press Ctrl+C to stop.")
    try:
        await asyncio.Event().wait()
    finally:
        await runner.stop()
    return True


async def _run(command: Command, args: argparse.Namespace) -> bool:
    scheduler = InProcessNotificationScheduler()
    reconciler = get_notification_reconciler(scheduler=scheduler)
    service = await get_lifecycle_service(reconciler=reconciler)
    try:
        loaded = await service.load()
        if not loaded.success:
            return _report(loaded)
        for warning in loaded.warnings:
            print(f"Warning: {warning}", file=sys.stderr)
        return await command(service, args)
    finally:
        await scheduler.close()
        await close_pool()


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description=f"{settings.app_name} management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # list
    p_list = sub.add_parser("list", help="List reminders")
    p_list.add_argument(
        "--view",
        choices=[v.value for v in ReminderView],
        default=ReminderView.ALL.value,
        help="Which reminders to show (default: all)",
    )
    p_list.set_defaults(func=cmd_list)

    # upcoming
    p_upcoming = sub.add_parser("upcoming", help="List active reminders due soon")
    p_upcoming.add_argument(
        "--days",
        type=int,
        default=None,
        help=f"Window in days (default: {settings.reminders.upcoming_window_days})",
    )
    p_upcoming.set_defaults(func=cmd_upcoming)

    # add
    p_add = sub.add_parser("add", help="Create a reminder")
    p_add.add_argument("title", help="Reminder title")
    p_add.add_argument("--due", required=True, type=datetime.fromisoformat, help="Due date (ISO-8601)")
    p_add.add_argument("--description", help="Notification body")
    p_add.add_argument(
        "--frequency",
        choices=[f.value for f in ReminderFrequency],
        default=ReminderFrequency.MONTHLY.value,
    )
    p_add.add_argument("--recurring", action="store_true", help="Repeat after completion")
    p_add.add_argument("--every", type=int, help="Custom interval count (CUSTOM frequency)")
    p_add.add_argument("--unit", choices=[u.value for u in IntervalUnit], default="days")
    p_add.add_argument("--notify-before", type=int, default=0, help="Minutes before due date")
    p_add.add_argument("--amount", type=float)
    p_add.add_argument("--type", choices=["INCOME", "EXPENSE"], help="Transaction type")
    p_add.add_argument("--wallet", help="Wallet ID for auto transactions")
    p_add.add_argument("--category", help="Category ID")
    p_add.add_argument("--auto-transaction", action="store_true", help="Create a transaction on completion")
    p_add.set_defaults(func=cmd_add)

    # complete
    p_complete = sub.add_parser("complete", help="Complete a reminder")
    p_complete.add_argument("id")
    p_complete.set_defaults(func=cmd_complete)

    # snooze
    p_snooze = sub.add_parser("snooze", help="Snooze a reminder")
    p_snooze.add_argument("id")
    p_snooze.add_argument(
        "--minutes",
        type=int,
        default=None,
        help=f"Snooze length (default: {settings.reminders.default_snooze_minutes})",
    )
    p_snooze.set_defaults(func=cmd_snooze)

    # delete
    p_delete = sub.add_parser("delete", help="Delete a reminder")
    p_delete.add_argument("id")
    p_delete.set_defaults(func=cmd_delete)

    # sweep
    p_sweep = sub.add_parser("sweep", help="Run one overdue sweep")
    p_sweep.set_defaults(func=cmd_sweep)

    # watch
    p_watch = sub.add_parser("watch", help="Sweep periodically until interrupted")
    p_watch.add_argument(
        "--interval",
        type=float,
        default=None,
        help=f"Seconds between sweeps (default: {settings.reminders.sweep_interval_seconds})",
    )
    p_watch.set_defaults(func=cmd_watch)

    args = parser.parse_args()
    configure_logging()

    try:
        ok = asyncio.run(_run(args.func, args))
    except KeyboardInterrupt:
        print("\nStopped.")
        ok = True
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
