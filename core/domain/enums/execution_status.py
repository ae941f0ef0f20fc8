"""
Execution Status Enums.

Status values for workflow and step execution tracking.
"""
from enum import Enum


class WorkflowStatus(str, Enum):
    """Workflow execution status values."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StepStatus(str, Enum):
    """Step execution status values."""

    SUCCESS = "success"
    FAILURE = "failure"
