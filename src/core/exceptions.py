"""
Domain exceptions for the reminder core.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ReminderCoreError(Exception):
    """Base exception for all reminder core errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for structured results."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(ReminderCoreError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class SnapshotReadError(StorageError):
    """Reminder snapshot could not be read from the key-value store."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Failed to read reminder snapshot '{key}': {reason}",
            code="SNAPSHOT_READ_FAILED",
            details={"key": key, "reason": reason},
        )


class SnapshotWriteError(StorageError):
    """Reminder snapshot could not be written to the key-value store."""

    def __init__(self, key: str, reason: str, count: int | None = None):
        super().__init__(
            f"Failed to write reminder snapshot '{key}': {reason}",
            code="SNAPSHOT_WRITE_FAILED",
            details={"key": key, "reason": reason, "count": count},
        )


class ReminderNotFoundError(ReminderCoreError):
    """Reminder not found in the collection."""

    def __init__(self, reminder_id: str):
        super().__init__(
            f"Reminder not found: {reminder_id}",
            code="REMINDER_NOT_FOUND",
            details={"reminder_id": reminder_id},
        )


class DuplicateReminderError(StorageError):
    """Two reminders in one snapshot share an id."""

    def __init__(self, reminder_id: str):
        super().__init__(
            f"Duplicate reminder id in collection: {reminder_id}",
            code="DUPLICATE_REMINDER",
            details={"reminder_id": reminder_id},
        )


# Notification Exceptions
class NotificationError(ReminderCoreError):
    """Base exception for notification scheduler operations."""

    pass


class NotificationSchedulingError(NotificationError):
    """The scheduler rejected or failed a schedule request."""

    def __init__(self, reminder_id: str, reason: str):
        super().__init__(
            f"Could not schedule notification for reminder {reminder_id}: {reason}",
            code="NOTIFICATION_SCHEDULING_FAILED",
            details={"reminder_id": reminder_id, "reason": reason},
        )


class NotificationCancelError(NotificationError):
    """The scheduler failed to cancel a notification."""

    def __init__(self, notification_id: str, reason: str):
        super().__init__(
            f"Could not cancel notification {notification_id}: {reason}",
            code="NOTIFICATION_CANCEL_FAILED",
            details={"notification_id": notification_id, "reason": reason},
        )


# Transaction Exceptions
class TransactionCreationError(ReminderCoreError):
    """The transaction collaborator failed to record a transaction."""

    def __init__(self, reminder_id: str, reason: str):
        super().__init__(
            f"Automatic transaction for reminder {reminder_id} failed: {reason}",
            code="TRANSACTION_CREATION_FAILED",
            details={"reminder_id": reminder_id, "reason": reason},
        )


# Validation Exceptions
class ValidationError(ReminderCoreError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )
