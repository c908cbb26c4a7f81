"""Unit tests for domain exceptions."""

import pytest

from src.core.exceptions import (
    DatabaseError,
    DuplicateReminderError,
    NotificationCancelError,
    NotificationError,
    NotificationSchedulingError,
    ReminderCoreError,
    ReminderNotFoundError,
    SnapshotReadError,
    SnapshotWriteError,
    StorageError,
    TransactionCreationError,
    ValidationError,
)


class TestReminderCoreError:
    """Tests for base ReminderCoreError exception."""

    def test_basic_initialization(self):
        error = ReminderCoreError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "ReminderCoreError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = ReminderCoreError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = ReminderCoreError("Boom", code="X", details={"a": 1})
        assert error.to_dict() == {"error": "X", "message": "Boom", "details": {"a": 1}}


class TestStorageErrors:
    """Tests for storage exceptions."""

    def test_snapshot_write_error(self):
        error = SnapshotWriteError("key", "disk full", count=3)
        assert isinstance(error, StorageError)
        assert error.code == "SNAPSHOT_WRITE_FAILED"
        assert error.details == {"key": "key", "reason": "disk full", "count": 3}
        assert "disk full" in error.message

    def test_snapshot_read_error(self):
        error = SnapshotReadError("key", "locked")
        assert error.code == "SNAPSHOT_READ_FAILED"

    def test_reminder_not_found(self):
        error = ReminderNotFoundError("abc")
        assert error.code == "REMINDER_NOT_FOUND"
        assert error.details["reminder_id"] == "abc"
        assert isinstance(error, ReminderCoreError)
        assert not isinstance(error, StorageError)

    def test_database_error(self):
        error = DatabaseError("kv_set", "locked")
        assert error.details == {"operation": "kv_set", "error": "locked"}

    def test_duplicate_reminder(self):
        assert DuplicateReminderError("r1").code == "DUPLICATE_REMINDER"


class TestOtherErrors:
    """Tests for notification, transaction and validation exceptions."""

    @pytest.mark.parametrize(
        "error",
        [
            NotificationSchedulingError("r1", "offline"),
            NotificationCancelError("n1", "offline"),
        ],
    )
    def test_notification_errors(self, error: NotificationError):
        assert isinstance(error, NotificationError)
        assert "offline" in error.message

    def test_transaction_creation_error(self):
        error = TransactionCreationError("r1", "wallet closed")
        assert error.code == "TRANSACTION_CREATION_FAILED"
        assert "wallet closed" in error.message

    def test_validation_error_truncates_value(self):
        error = ValidationError("title", "too long", "x" * 500)
        assert error.code == "VALIDATION_ERROR"
        assert len(error.details["value"]) == 100

    def test_validation_error_without_value(self):
        assert ValidationError("minutes", "must be at least 1").details["value"] is None
