"""Step - the atomic unit of work and its retry/backoff loop."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from core.domain.enums import ErrorKind
from core.settings import get_engine_settings
from flowstep_sdk.logging import get_logger

from .errors import ContextValidationError, StepExecutionError
from .models import WorkflowContext
from .retry import NO_RETRY, RetryConfig
from .utils import maybe_await
from .validation import Validator, run_validator

# Type alias for step work functions
StepFunction = Callable[[WorkflowContext], Awaitable[None] | None]

_logger = get_logger("orchestration.step")


@dataclass(frozen=True)
class StepConfig:
    """Configuration of a step.

    ``timeout`` (seconds) is carried for callers that inspect it; the engine
    does not enforce it.
    """

    name: str
    validator: Validator | None = None
    retries: RetryConfig | None = None
    timeout: float | None = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Step name cannot be empty")


class Step:
    """A named work function with optional validation and retries."""

    def __init__(self, fn: StepFunction, config: StepConfig) -> None:
        """Initialize step.

        Args:
            fn: Work function, called with the shared context
            config: StepConfig for this step
        """
        self._fn = fn
        self._config = config

        if config.timeout is not None and get_engine_settings().warn_unenforced_timeout:
            _logger.warning(
                "step '%s' has timeout=%ss which is not enforced", config.name, config.timeout
            )

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def config(self) -> StepConfig:
        return self._config

    async def execute(self, context: WorkflowContext) -> None:
        """Validate the context, then run the work function with retries.

        Raises:
            ContextValidationError: the step's validator rejected the context
            StepExecutionError: attempts exhausted or ``should_retry`` refused
        """
        await self._validate(context)

        policy = self._config.retries or NO_RETRY

        for attempt in range(1, policy.max_attempts + 1):
            try:
                await maybe_await(self._fn(context))
                return
            except Exception as exc:
                _logger.warning(
                    "step_attempt_failed: step=%s attempt=%d/%d error=%s",
                    self.name,
                    attempt,
                    policy.max_attempts,
                    exc,
                )

                if policy.should_retry is not None and not policy.should_retry(exc):
                    raise StepExecutionError(
                        self.name, exc, kind=ErrorKind.NON_RETRYABLE, attempts=attempt
                    ) from exc

                if attempt == policy.max_attempts:
                    raise StepExecutionError(
                        self.name,
                        exc,
                        kind=ErrorKind.RETRY_EXHAUSTED,
                        attempts=attempt,
                        reason=f"Failed after {attempt} attempts. Last error: {exc}",
                    ) from exc

                delay = policy.delay_for(attempt)
                if delay > 0:
                    await self._sleep(delay)

    async def _validate(self, context: WorkflowContext) -> None:
        validator = self._config.validator
        if validator is None:
            return

        result = await run_validator(validator, context)
        if not result.success:
            _logger.warning(
                "step_validation_failed: step=%s errors=%s", self.name, result.messages
            )
            raise ContextValidationError(self.name, result.messages)

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
