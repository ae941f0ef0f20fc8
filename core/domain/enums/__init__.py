"""Domain enums."""

from .execution_status import StepStatus, WorkflowStatus
from .retry import BackoffKind, ErrorKind

__all__ = [
    "BackoffKind",
    "ErrorKind",
    "StepStatus",
    "WorkflowStatus",
]
