"""Data Transfer Objects returned by the reminder use cases.

Operations report storage, scheduler and collaborator failures through
these results instead of raising.
"""

from src.application.dto.results import OperationResult, SweepReport

__all__ = [
    "OperationResult",
    "SweepReport",
]
