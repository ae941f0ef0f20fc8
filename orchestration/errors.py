"""Workflow errors - one error kind per failure mode."""

from core.domain.enums import ErrorKind


class WorkflowError(Exception):
    """Base class for errors raised by the engine."""

    kind: ErrorKind | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ContextValidationError(WorkflowError):
    """A validator rejected the context of a step or workflow."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, name: str, errors: list[str]) -> None:
        """Initialize validation error.

        Args:
            name: Name of the step or workflow whose validator failed
            errors: Validation messages, in validator order
        """
        super().__init__(f"Context validation failed for '{name}': {', '.join(errors)}")
        self.name = name
        self.errors = list(errors)


class StepExecutionError(WorkflowError):
    """A step's retry loop gave up."""

    def __init__(
        self,
        step_name: str,
        cause: BaseException,
        *,
        kind: ErrorKind = ErrorKind.RETRY_EXHAUSTED,
        attempts: int = 1,
        reason: str | None = None,
    ) -> None:
        """Initialize step execution error.

        Args:
            step_name: Name of the failing step
            cause: Error raised by the last attempt
            kind: RETRY_EXHAUSTED or NON_RETRYABLE
            attempts: Number of attempts made
            reason: Message to report instead of the cause's message
        """
        super().__init__(f"Step '{step_name}' failed: {reason or cause}")
        self.step_name = step_name
        self.cause = cause
        self.kind = kind
        self.attempts = attempts


class HookExecutionError(WorkflowError):
    """A lifecycle hook raised."""

    kind = ErrorKind.HOOK_FAILED

    def __init__(
        self, hook_name: str, cause: BaseException, *, step_name: str | None = None
    ) -> None:
        where = f" for step '{step_name}'" if step_name else ""
        super().__init__(f"Hook '{hook_name}' failed{where}: {cause}")
        self.hook_name = hook_name
        self.step_name = step_name
        self.cause = cause
