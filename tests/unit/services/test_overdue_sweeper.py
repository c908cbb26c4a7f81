"""Tests for the overdue sweeper."""

from datetime import datetime, timedelta

from src.core.entities.reminder import ReminderStatus
from src.core.services.overdue_sweeper import OverdueSweeper, is_newly_overdue

NOW = datetime(2025, 1, 15, 9, 0)


class TestIsNewlyOverdue:
    """Tests for the overdue predicate."""

    def test_past_due_pending(self, make_reminder):
        assert is_newly_overdue(make_reminder(due_date=NOW - timedelta(minutes=1)), NOW)

    def test_exactly_due_is_not_overdue(self, make_reminder):
        assert not is_newly_overdue(make_reminder(due_date=NOW), NOW)

    def test_future_not_overdue(self, make_reminder):
        assert not is_newly_overdue(make_reminder(due_date=NOW + timedelta(hours=1)), NOW)

    def test_inactive_not_overdue(self, make_reminder):
        reminder = make_reminder(due_date=NOW - timedelta(days=1), is_active=False)
        assert not is_newly_overdue(reminder, NOW)

    def test_completed_not_overdue(self, make_reminder):
        reminder = make_reminder(
            due_date=NOW - timedelta(days=1), status=ReminderStatus.COMPLETED
        )
        assert not is_newly_overdue(reminder, NOW)

    def test_snooze_masks(self, make_reminder):
        reminder = make_reminder(
            due_date=NOW - timedelta(hours=1),
            snooze_until=NOW + timedelta(minutes=5),
        )
        assert not is_newly_overdue(reminder, NOW)

    def test_expired_snooze_does_not_mask(self, make_reminder):
        reminder = make_reminder(
            due_date=NOW - timedelta(hours=1),
            snooze_until=NOW - timedelta(minutes=5),
        )
        assert is_newly_overdue(reminder, NOW)


class TestOverdueSweeper:
    """Tests for OverdueSweeper.sweep."""

    def test_transitions_only_eligible(self, make_reminder):
        late = make_reminder(id="late", due_date=NOW - timedelta(days=1))
        upcoming = make_reminder(id="upcoming", due_date=NOW + timedelta(days=1))

        result = OverdueSweeper().sweep([late, upcoming], NOW)

        assert result.changed is True
        assert [r.id for r in result.newly_overdue] == ["late"]
        by_id = {r.id: r for r in result.reminders}
        assert by_id["late"].status == ReminderStatus.OVERDUE
        assert by_id["late"].updated_at == NOW
        assert by_id["upcoming"] is upcoming

    def test_does_not_mutate_input(self, make_reminder):
        late = make_reminder(due_date=NOW - timedelta(days=1))
        OverdueSweeper().sweep([late], NOW)
        assert late.status == ReminderStatus.PENDING

    def test_idempotent(self, make_reminder):
        reminders = [
            make_reminder(due_date=NOW - timedelta(days=2)),
            make_reminder(due_date=NOW - timedelta(hours=1)),
            make_reminder(due_date=NOW + timedelta(hours=1)),
        ]
        sweeper = OverdueSweeper()

        first = sweeper.sweep(reminders, NOW)
        second = sweeper.sweep(first.reminders, NOW)

        assert len(first.newly_overdue) == 2
        assert second.changed is False
        assert [r.status for r in second.reminders] == [r.status for r in first.reminders]

    def test_snooze_window(self, make_reminder):
        """A snoozed reminder stays pending until the snooze lapses."""
        due = NOW
        reminder = make_reminder(due_date=due, snooze_until=due + timedelta(minutes=30))
        sweeper = OverdueSweeper()

        assert not sweeper.sweep([reminder], due + timedelta(minutes=1)).changed
        assert sweeper.sweep([reminder], due + timedelta(minutes=31)).changed

    def test_preserves_order(self, make_reminder):
        reminders = [make_reminder(id=str(i), due_date=NOW - timedelta(days=i)) for i in range(4)]
        result = OverdueSweeper().sweep(reminders, NOW)
        assert [r.id for r in result.reminders] == ["0", "1", "2", "3"]

    def test_empty(self):
        result = OverdueSweeper().sweep([], NOW)
        assert result.reminders == []
        assert result.changed is False
