"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining result DTOs returned to callers
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for the CLI.
"""

from src.application.dto import OperationResult, SweepReport
from src.application.services import (
    get_lifecycle_service,
    get_notification_reconciler,
    get_reminder_store,
    get_sweep_runner,
    reset_services,
)
from src.application.use_cases import (
    OverdueSweepRunner,
    ReminderLifecycleService,
    SweepRunnerStatus,
)

__all__ = [
    # Result DTOs
    "OperationResult",
    "SweepReport",
    # Use Cases
    "ReminderLifecycleService",
    "OverdueSweepRunner",
    "SweepRunnerStatus",
    # Service factories
    "get_reminder_store",
    "get_notification_reconciler",
    "get_lifecycle_service",
    "get_sweep_runner",
    "reset_services",
]
