"""Tests for the recurrence engine."""

from datetime import datetime, timedelta

import pytest

from src.core.entities.reminder import CustomInterval, IntervalUnit, ReminderFrequency
from src.core.services.recurrence import (
    RecurrenceEngine,
    add_months,
    advance,
    coerce_frequency,
    next_due_date,
)

START = datetime(2025, 1, 15, 8, 30)


class TestNextDueDate:
    """Tests for next_due_date."""

    @pytest.mark.parametrize(
        "frequency,expected",
        [
            (ReminderFrequency.DAILY, datetime(2025, 1, 16, 8, 30)),
            (ReminderFrequency.WEEKLY, datetime(2025, 1, 22, 8, 30)),
            (ReminderFrequency.MONTHLY, datetime(2025, 2, 15, 8, 30)),
            (ReminderFrequency.QUARTERLY, datetime(2025, 4, 15, 8, 30)),
            (ReminderFrequency.YEARLY, datetime(2026, 1, 15, 8, 30)),
        ],
    )
    def test_fixed_frequencies(self, frequency: ReminderFrequency, expected: datetime):
        assert next_due_date(START, frequency) == expected

    def test_time_of_day_preserved(self):
        result = next_due_date(START, ReminderFrequency.MONTHLY)
        assert (result.hour, result.minute) == (8, 30)

    def test_monthly_clamps_to_month_end(self):
        """Jan 31 monthly lands on the last day of February."""
        assert next_due_date(datetime(2025, 1, 31), "MONTHLY") == datetime(2025, 2, 28)

    def test_monthly_clamps_to_leap_day(self):
        assert next_due_date(datetime(2024, 1, 31), "MONTHLY") == datetime(2024, 2, 29)

    def test_yearly_from_leap_day(self):
        assert next_due_date(datetime(2024, 2, 29), "YEARLY") == datetime(2025, 2, 28)

    def test_quarterly_clamps(self):
        assert next_due_date(datetime(2025, 11, 30), "QUARTERLY") == datetime(2026, 2, 28)

    def test_custom_days(self):
        interval = CustomInterval(unit=IntervalUnit.DAYS, count=10)
        assert next_due_date(START, "CUSTOM", interval) == START + timedelta(days=10)

    def test_custom_weeks(self):
        interval = CustomInterval(unit=IntervalUnit.WEEKS, count=2)
        assert next_due_date(START, "CUSTOM", interval) == START + timedelta(weeks=2)

    def test_custom_without_interval_behaves_monthly(self):
        assert next_due_date(START, ReminderFrequency.CUSTOM) == datetime(2025, 2, 15, 8, 30)

    @pytest.mark.parametrize("frequency", ["FORTNIGHTLY", None, "", 42])
    def test_unknown_frequency_behaves_monthly(self, frequency):
        assert next_due_date(START, frequency) == datetime(2025, 2, 15, 8, 30)

    def test_lowercase_frequency_accepted(self):
        assert next_due_date(START, "weekly") == datetime(2025, 1, 22, 8, 30)

    @pytest.mark.parametrize("frequency", list(ReminderFrequency))
    def test_strictly_later(self, frequency: ReminderFrequency):
        assert next_due_date(START, frequency) > START


class TestAdvance:
    """Tests for advancing several steps."""

    def test_zero_steps(self):
        assert advance(START, "DAILY", 0) == START

    def test_daily_steps(self):
        assert advance(START, "DAILY", 45) == START + timedelta(days=45)

    def test_weekly_steps(self):
        assert advance(START, "WEEKLY", 5) == START + timedelta(weeks=5)

    def test_monthly_clamping_drifts(self):
        """Once clamped, later steps keep the clamped day."""
        assert advance(datetime(2025, 1, 31), "MONTHLY", 2) == datetime(2025, 3, 28)

    def test_monthly_year_rollover(self):
        assert advance(datetime(2025, 11, 15), "MONTHLY", 3) == datetime(2026, 2, 15)

    def test_monotonic(self):
        dates = [advance(datetime(2025, 1, 31), "MONTHLY", n) for n in range(24)]
        assert dates == sorted(dates)
        assert len(set(dates)) == len(dates)


class TestHelpers:
    """Tests for add_months and coerce_frequency."""

    def test_add_months_negative(self):
        assert add_months(datetime(2025, 3, 31), -1) == datetime(2025, 2, 28)

    def test_add_months_twelve(self):
        assert add_months(datetime(2025, 5, 5), 12) == datetime(2026, 5, 5)

    def test_coerce_enum_passthrough(self):
        assert coerce_frequency(ReminderFrequency.YEARLY) is ReminderFrequency.YEARLY

    def test_coerce_unknown(self):
        assert coerce_frequency("hourly") == ReminderFrequency.MONTHLY


class TestRecurrenceEngine:
    """Tests for the engine's default custom interval."""

    def test_default_interval_applies(self):
        engine = RecurrenceEngine(CustomInterval(unit=IntervalUnit.DAYS, count=30))
        assert engine.next_due_date(START, "CUSTOM") == START + timedelta(days=30)

    def test_reminder_interval_wins(self):
        engine = RecurrenceEngine(CustomInterval(unit=IntervalUnit.DAYS, count=30))
        own = CustomInterval(unit=IntervalUnit.WEEKS, count=1)
        assert engine.next_due_date(START, "CUSTOM", own) == START + timedelta(weeks=1)

    def test_no_default_falls_back_to_monthly(self):
        assert RecurrenceEngine().next_due_date(START, "CUSTOM") == datetime(2025, 2, 15, 8, 30)

    def test_advance(self):
        engine = RecurrenceEngine(CustomInterval(unit=IntervalUnit.WEEKS, count=2))
        assert engine.advance(START, "CUSTOM", 3) == START + timedelta(weeks=6)

    def test_fixed_frequency_ignores_default(self):
        engine = RecurrenceEngine(CustomInterval(unit=IntervalUnit.DAYS, count=3))
        assert engine.next_due_date(START, "DAILY") == START + timedelta(days=1)
