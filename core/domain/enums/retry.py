"""Retry and error classification enums."""
from enum import Enum


class BackoffKind(str, Enum):
    """Delay policy between retry attempts."""

    FIXED = "fixed"
    EXPONENTIAL = "exponential"


class ErrorKind(str, Enum):
    """Why a workflow run failed."""

    VALIDATION_FAILED = "validation_failed"
    RETRY_EXHAUSTED = "retry_exhausted"
    NON_RETRYABLE = "non_retryable"
    HOOK_FAILED = "hook_failed"
