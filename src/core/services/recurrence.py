"""
Recurrence engine.

Maps a due date and a frequency to the next occurrence. Calendar-month
steps clamp to the last day of the target month, so a reminder due on
Jan 31 recurs on Feb 28 (or 29) rather than rolling into March.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta

from src.core.entities.reminder import CustomInterval, ReminderFrequency

_MONTH_STEPS: dict[ReminderFrequency, int] = {
    ReminderFrequency.MONTHLY: 1,
    ReminderFrequency.QUARTERLY: 3,
    ReminderFrequency.YEARLY: 12,
}


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole calendar months, clamping the day to the month's end."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def coerce_frequency(frequency: ReminderFrequency | str | None) -> ReminderFrequency:
    """Parse a frequency, falling back to MONTHLY for anything unknown."""
    if isinstance(frequency, ReminderFrequency):
        return frequency
    try:
        return ReminderFrequency(str(frequency).upper())
    except ValueError:
        return ReminderFrequency.MONTHLY


def next_due_date(
    current: datetime,
    frequency: ReminderFrequency | str | None,
    custom_interval: CustomInterval | None = None,
) -> datetime:
    """
    Compute the next due date after current.

    Args:
        current: The occurrence being advanced from
        frequency: Recurrence frequency; unknown values behave as MONTHLY
        custom_interval: Step used for CUSTOM; without one CUSTOM behaves as MONTHLY

    Returns:
        The next occurrence, always later than current
    """
    freq = coerce_frequency(frequency)

    if freq == ReminderFrequency.DAILY:
        return current + timedelta(days=1)
    if freq == ReminderFrequency.WEEKLY:
        return current + timedelta(days=7)
    if freq == ReminderFrequency.CUSTOM:
        if custom_interval is not None:
            return current + custom_interval.as_timedelta()
        return add_months(current, 1)

    return add_months(current, _MONTH_STEPS[freq])


def advance(
    current: datetime,
    frequency: ReminderFrequency | str | None,
    steps: int,
    custom_interval: CustomInterval | None = None,
) -> datetime:
    """Apply next_due_date repeatedly."""
    result = current
    for _ in range(steps):
        result = next_due_date(result, frequency, custom_interval)
    return result


class RecurrenceEngine:
    """
    Recurrence engine bound to a default CUSTOM interval.

    Reminders carrying their own custom_interval use it; otherwise the
    configured default applies.
    """

    def __init__(self, default_custom_interval: CustomInterval | None = None) -> None:
        self._default_custom = default_custom_interval

    def next_due_date(
        self,
        current: datetime,
        frequency: ReminderFrequency | str | None,
        custom_interval: CustomInterval | None = None,
    ) -> datetime:
        return next_due_date(
            current, frequency, custom_interval or self._default_custom
        )

    def advance(
        self,
        current: datetime,
        frequency: ReminderFrequency | str | None,
        steps: int,
        custom_interval: CustomInterval | None = None,
    ) -> datetime:
        return advance(
            current, frequency, steps, custom_interval or self._default_custom
        )
