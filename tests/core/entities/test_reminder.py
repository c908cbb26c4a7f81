"""Tests for Reminder entity."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from src.core.entities.reminder import (
    CustomInterval,
    IntervalUnit,
    Reminder,
    ReminderDraft,
    ReminderFrequency,
    ReminderStatus,
    ReminderUpdate,
    ReminderView,
    TransactionType,
    to_wall_clock,
)

DUE = datetime(2025, 3, 1, 10, 0)


class TestReminder:
    """Tests for Reminder entity."""

    def test_create_minimal(self):
        """Defaults follow a freshly created reminder."""
        reminder = Reminder(id="r1", title="Rent", due_date=DUE)
        assert reminder.frequency == ReminderFrequency.MONTHLY
        assert reminder.status == ReminderStatus.PENDING
        assert reminder.is_recurring is False
        assert reminder.is_active is True
        assert reminder.enable_push_notification is True
        assert reminder.enable_email_notification is False
        assert reminder.completed_count == 0
        assert reminder.notify_before == 0
        assert reminder.snooze_until is None

    def test_fire_at_subtracts_notify_before(self):
        reminder = Reminder(id="r1", title="Rent", due_date=DUE, notify_before=90)
        assert reminder.fire_at == DUE - timedelta(minutes=90)

    def test_fire_at_defaults_to_due_date(self):
        reminder = Reminder(id="r1", title="Rent", due_date=DUE)
        assert reminder.fire_at == DUE

    def test_negative_notify_before_rejected(self):
        with pytest.raises(ValidationError):
            Reminder(id="r1", title="Rent", due_date=DUE, notify_before=-5)

    def test_aware_timestamps_become_wall_clock(self):
        aware = datetime(2025, 3, 1, 10, 0, tzinfo=UTC)
        reminder = Reminder(id="r1", title="Rent", due_date=aware)
        assert reminder.due_date.tzinfo is None
        assert reminder.due_date == aware.astimezone().replace(tzinfo=None)

    def test_has_transaction_details_requires_all_fields(self):
        complete = Reminder(
            id="r1",
            title="Gym",
            due_date=DUE,
            auto_create_transaction=True,
            amount=50,
            transaction_type=TransactionType.EXPENSE,
            wallet_id="w1",
        )
        assert complete.has_transaction_details is True

        assert complete.model_copy(update={"wallet_id": None}).has_transaction_details is False
        assert complete.model_copy(update={"amount": None}).has_transaction_details is False
        assert (
            complete.model_copy(update={"auto_create_transaction": False}).has_transaction_details
            is False
        )

    def test_category_label_prefers_name(self):
        reminder = Reminder(
            id="r1",
            title="Power",
            due_date=DUE,
            category_id="c9",
            category={"name": "Utility Bills"},
        )
        assert reminder.category_label == "Utility Bills"
        assert reminder.model_copy(update={"category": None}).category_label == "c9"


class TestToWallClock:
    """Tests for to_wall_clock."""

    def test_naive_is_unchanged(self):
        assert to_wall_clock(DUE) is DUE

    def test_aware_is_converted(self):
        aware = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
        result = to_wall_clock(aware)
        assert result.tzinfo is None
        assert result.replace(tzinfo=aware.astimezone().tzinfo) == aware


class TestCustomInterval:
    """Tests for CustomInterval."""

    def test_days(self):
        assert CustomInterval(unit=IntervalUnit.DAYS, count=10).as_timedelta() == timedelta(days=10)

    def test_weeks(self):
        assert CustomInterval(unit="weeks", count=2).as_timedelta() == timedelta(days=14)

    def test_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            CustomInterval(count=0)


class TestReminderDraft:
    """Tests for ReminderDraft validation."""

    def test_title_is_stripped(self):
        draft = ReminderDraft(title="  Rent  ", due_date=DUE)
        assert draft.title == "Rent"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_rejected(self, title: str):
        with pytest.raises(ValidationError):
            ReminderDraft(title=title, due_date=DUE)

    def test_due_date_required(self):
        with pytest.raises(ValidationError):
            ReminderDraft(title="Rent")

    def test_iso_string_due_date(self):
        draft = ReminderDraft(title="Rent", due_date="2025-03-01T10:00:00")
        assert draft.due_date == DUE


class TestReminderUpdate:
    """Tests for ReminderUpdate.changes."""

    def test_only_set_fields(self):
        update = ReminderUpdate(title="New title")
        assert update.changes() == {"title": "New title"}

    def test_explicit_none_clears_optional_field(self):
        update = ReminderUpdate(description=None)
        assert update.changes() == {"description": None}

    def test_explicit_none_for_required_field_is_dropped(self):
        update = ReminderUpdate(title=None, due_date=None, is_active=False)
        assert update.changes() == {"is_active": False}


class TestReminderView:
    """Tests for ReminderView.matches."""

    def test_views(self):
        pending = Reminder(id="a", title="A", due_date=DUE)
        inactive = Reminder(id="b", title="B", due_date=DUE, is_active=False)
        overdue = Reminder(id="c", title="C", due_date=DUE, status=ReminderStatus.OVERDUE)
        done = Reminder(id="d", title="D", due_date=DUE, status=ReminderStatus.COMPLETED)
        everything = [pending, inactive, overdue, done]

        def ids(view: ReminderView) -> list[str]:
            return [r.id for r in everything if view.matches(r)]

        assert ids(ReminderView.ALL) == ["a", "b", "c", "d"]
        assert ids(ReminderView.ACTIVE) == ["a"]
        assert ids(ReminderView.OVERDUE) == ["c"]
        assert ids(ReminderView.COMPLETED) == ["d"]
