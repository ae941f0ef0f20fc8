"""Domain layer - status and error classification enums."""

from .enums import BackoffKind, ErrorKind, StepStatus, WorkflowStatus

__all__ = [
    "BackoffKind",
    "ErrorKind",
    "StepStatus",
    "WorkflowStatus",
]
