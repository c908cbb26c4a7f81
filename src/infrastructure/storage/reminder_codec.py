"""
Serialization of the reminder snapshot.

The snapshot is a JSON array of camelCase records. Timestamps are ISO-8601
UTC strings; on the way back they are converted to local wall-clock time.
Records that cannot be parsed are dropped individually.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.config import get_logger
from src.core.entities.reminder import (
    CustomInterval,
    Reminder,
    ReminderStatus,
    to_wall_clock,
)
from src.core.services.recurrence import coerce_frequency

logger = get_logger(__name__)

_TIMESTAMP_FIELDS: dict[str, str] = {
    "due_date": "dueDate",
    "last_completed": "lastCompleted",
    "next_due": "nextDue",
    "snooze_until": "snoozeUntil",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

_PLAIN_FIELDS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "description": "description",
    "category_id": "categoryId",
    "category": "category",
    "wallet_id": "walletId",
    "wallet": "wallet",
    "is_recurring": "isRecurring",
    "is_active": "isActive",
    "auto_create_transaction": "autoCreateTransaction",
    "notify_before": "notifyBefore",
    "enable_push_notification": "enablePushNotification",
    "enable_email_notification": "enableEmailNotification",
    "completed_count": "completedCount",
}

# Defaults applied when a stored record omits a field
_RECORD_DEFAULTS: dict[str, Any] = {
    "isRecurring": False,
    "isActive": True,
    "autoCreateTransaction": False,
    "notifyBefore": 0,
    "enablePushNotification": True,
    "enableEmailNotification": False,
    "completedCount": 0,
}


class MalformedRecordError(ValueError):
    """A stored record cannot be turned into a Reminder."""


def format_timestamp(value: datetime) -> str:
    """Format as an ISO-8601 UTC instant."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string; naive strings are taken as wall-clock time."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_wall_clock(value)
    if not isinstance(value, str):
        raise MalformedRecordError(f"timestamp must be a string, got {type(value).__name__}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise MalformedRecordError(f"invalid timestamp {value!r}") from e
    return to_wall_clock(parsed)


def _parse_amount(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def serialize_reminder(reminder: Reminder) -> dict[str, Any]:
    """Convert a reminder to its stored record. None fields are omitted."""
    record: dict[str, Any] = {}

    for attr, key in _PLAIN_FIELDS.items():
        value = getattr(reminder, attr)
        if value is not None:
            record[key] = value

    for attr, key in _TIMESTAMP_FIELDS.items():
        value = getattr(reminder, attr)
        if value is not None:
            record[key] = format_timestamp(value)

    if reminder.amount is not None:
        record["amount"] = reminder.amount
    if reminder.transaction_type is not None:
        record["transactionType"] = reminder.transaction_type.value
    if reminder.custom_interval is not None:
        record["customInterval"] = {
            "unit": reminder.custom_interval.unit.value,
            "count": reminder.custom_interval.count,
        }
    record["frequency"] = reminder.frequency.value
    record["status"] = reminder.status.value

    return record


def deserialize_reminder(raw: Any) -> Reminder:
    """
    Convert a stored record to a Reminder.

    Raises:
        MalformedRecordError: If the record is unusable
    """
    if not isinstance(raw, dict):
        raise MalformedRecordError("record is not an object")

    reminder_id = raw.get("id")
    if isinstance(reminder_id, int) and not isinstance(reminder_id, bool):
        reminder_id = str(reminder_id)
    if not isinstance(reminder_id, str) or not reminder_id:
        raise MalformedRecordError("record has no id")

    data: dict[str, Any] = {}
    for attr, key in _PLAIN_FIELDS.items():
        value = raw.get(key)
        if value is None:
            value = _RECORD_DEFAULTS.get(key)
        if value is not None:
            data[attr] = value
    data["id"] = reminder_id

    for attr, key in _TIMESTAMP_FIELDS.items():
        value = parse_timestamp(raw.get(key))
        if value is not None:
            data[attr] = value
    if "due_date" not in data:
        raise MalformedRecordError("record has no dueDate")

    data["amount"] = _parse_amount(raw.get("amount"))
    data["transaction_type"] = raw.get("transactionType") or None
    data["frequency"] = coerce_frequency(raw.get("frequency"))
    data["status"] = raw.get("status") or ReminderStatus.PENDING

    interval = raw.get("customInterval")
    if isinstance(interval, dict):
        try:
            data["custom_interval"] = CustomInterval.model_validate(interval)
        except PydanticValidationError:
            logger.warning("reminder_custom_interval_ignored", reminder_id=reminder_id)

    try:
        return Reminder.model_validate(data)
    except PydanticValidationError as e:
        raise MalformedRecordError(str(e)) from e


def serialize_snapshot(reminders: Sequence[Reminder]) -> str:
    """Serialize the full collection to JSON text."""
    return json.dumps([serialize_reminder(r) for r in reminders], ensure_ascii=False)


def deserialize_snapshot(text: str | None) -> list[Reminder]:
    """
    Parse JSON snapshot text.

    A missing value, invalid JSON or a non-array root yields an empty
    collection. Malformed records and duplicate ids are dropped.
    """
    if not text:
        return []

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("reminder_snapshot_invalid_json", exc_info=True)
        return []

    if not isinstance(parsed, list):
        logger.warning("reminder_snapshot_not_a_list", root_type=type(parsed).__name__)
        return []

    reminders: list[Reminder] = []
    seen: set[str] = set()
    for index, raw in enumerate(parsed):
        try:
            reminder = deserialize_reminder(raw)
        except MalformedRecordError as e:
            logger.warning("reminder_record_dropped", index=index, reason=str(e))
            continue
        if reminder.id in seen:
            logger.warning("reminder_duplicate_id_dropped", index=index, reminder_id=reminder.id)
            continue
        seen.add(reminder.id)
        reminders.append(reminder)

    return reminders
