"""Workflow - ordered steps with hooks, validation and metrics."""

import time
import uuid
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import Any

from core.domain.enums import StepStatus, WorkflowStatus
from core.settings import get_engine_settings
from flowstep_sdk.logging import get_logger
from flowstep_sdk.utils.datetime import utc_now

from .constructs import ConditionBranch, ConditionStep, ParallelStep, SubWorkflow
from .errors import ContextValidationError, HookExecutionError
from .hooks import WorkflowHooks
from .metrics import MetricsCollector, NullMetricsCollector
from .models import StepMetrics, WorkflowContext, WorkflowMetrics
from .retry import RetryConfig
from .step import Step, StepConfig, StepFunction
from .utils import maybe_await
from .validation import Validator, run_validator


class Workflow:
    """Run steps in order over one shared context.

    ``execute`` keeps all per-run state local, so one instance may be executed
    any number of times, including concurrently.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        hooks: WorkflowHooks | None = None,
        validator: Validator | None = None,
        metrics_collector: MetricsCollector | None = None,
    ) -> None:
        """Initialize workflow.

        Args:
            name: Display name (defaults to EngineSettings.default_workflow_name)
            hooks: Lifecycle hooks; omitted means no-op hooks
            validator: Validator applied to the initial context
            metrics_collector: Sink for step and workflow records
        """
        self._id = str(uuid.uuid4())
        self._name = name or get_engine_settings().default_workflow_name
        self._steps: list[Step] = []
        self._hooks = hooks or WorkflowHooks()
        self._validator = validator
        self._metrics = metrics_collector or NullMetricsCollector()
        self._logger = get_logger("orchestration.workflow")

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._steps)

    def add(self, step: Step) -> "Workflow":
        """Append a pre-built step."""
        self._steps.append(step)
        return self

    def add_step(
        self,
        name: str,
        fn: StepFunction,
        *,
        validator: Validator | None = None,
        retries: RetryConfig | None = None,
        timeout: float | None = None,
    ) -> "Workflow":
        """Append a step running ``fn`` against the context."""
        config = StepConfig(name=name, validator=validator, retries=retries, timeout=timeout)
        return self.add(Step(fn, config))

    def add_condition(
        self,
        branches: Sequence[ConditionBranch],
        default: SubWorkflow | None = None,
        *,
        name: str = "condition-step",
    ) -> "Workflow":
        """Append a step running the first matching branch (or ``default``)."""
        return self.add(ConditionStep(branches, default, name=name))

    def parallel(
        self, workflows: Sequence[SubWorkflow], *, name: str = "parallel-step"
    ) -> "Workflow":
        """Append a step running ``workflows`` concurrently."""
        return self.add(ParallelStep(workflows, name=name))

    async def execute(self, context: WorkflowContext) -> WorkflowContext:
        """Run every step in order and return the final context.

        Args:
            context: Initial context; it is copied, never mutated

        Returns:
            A snapshot of the working context after the last step

        Raises:
            ContextValidationError: the workflow validator rejected ``context``
            WorkflowError: the first step or hook failure, unchanged
        """
        if self._validator is not None:
            validation = await run_validator(self._validator, context)
            if not validation.success:
                self._logger.warning(
                    "workflow_validation_failed: %s errors=%s", self._name, validation.messages
                )
                raise ContextValidationError(self._name, validation.messages)

        run_id = str(uuid.uuid4())
        started = time.perf_counter()
        metrics = WorkflowMetrics(
            workflow_id=self._id,
            workflow_name=self._name,
            started_at=utc_now(),
            run_id=run_id,
        )

        self._logger.info(
            "workflow_starting: %s (id=%s, run=%s, steps=%d)",
            self._name,
            self._id,
            run_id,
            len(self._steps),
        )

        try:
            working = dict(context)
            await self._call_hook("before_workflow", self._hooks.before_workflow, working)

            for step in self._steps:
                await self._execute_step(step, working, run_id)

            result = dict(working)
            await self._call_hook("after_workflow", self._hooks.after_workflow, result)

            metrics.status = WorkflowStatus.COMPLETED
            return result
        except Exception as exc:
            metrics.status = WorkflowStatus.FAILED
            self._logger.warning("workflow_failed: %s (run=%s) error=%s", self._name, run_id, exc)
            raise
        finally:
            metrics.finished_at = utc_now()
            metrics.total_duration_ms = (time.perf_counter() - started) * 1000
            self._metrics.record_workflow_execution(metrics)
            self._logger.info(
                "workflow_finished: %s (run=%s) status=%s duration_ms=%.1f",
                self._name,
                run_id,
                metrics.status.value,
                metrics.total_duration_ms,
            )

    async def _execute_step(self, step: Step, context: WorkflowContext, run_id: str) -> None:
        started_at = utc_now()
        started = time.perf_counter()

        try:
            await self._call_hook(
                "before_step", self._hooks.before_step, step.name, context, step_name=step.name
            )
            await step.execute(context)
            await self._call_hook(
                "after_step", self._hooks.after_step, step.name, context, step_name=step.name
            )
        except Exception as exc:
            self._record_step(step, run_id, started_at, started, StepStatus.FAILURE, exc)
            await self._call_hook(
                "on_error", self._hooks.on_error, exc, step.name, context, step_name=step.name
            )
            raise

        self._record_step(step, run_id, started_at, started, StepStatus.SUCCESS)

    def _record_step(
        self,
        step: Step,
        run_id: str,
        started_at: datetime,
        started: float,
        status: StepStatus,
        error: BaseException | None = None,
    ) -> None:
        self._metrics.record_step_execution(
            StepMetrics(
                step_name=step.name,
                started_at=started_at,
                finished_at=utc_now(),
                duration_ms=(time.perf_counter() - started) * 1000,
                status=status,
                error=error,
                workflow_id=self._id,
                run_id=run_id,
            )
        )

    async def _call_hook(
        self,
        hook_name: str,
        hook: Callable[..., Awaitable[None] | None],
        *args: Any,
        step_name: str | None = None,
    ) -> None:
        try:
            await maybe_await(hook(*args))
        except Exception as exc:
            raise HookExecutionError(hook_name, exc, step_name=step_name) from exc

    def __repr__(self) -> str:
        return f"Workflow(name={self._name!r}, id={self._id!r}, steps={len(self._steps)})"
