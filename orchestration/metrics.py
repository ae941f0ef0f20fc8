"""Metrics collectors - MetricsCollector protocol and implementations."""

from typing import Protocol

from flowstep_sdk.logging import get_logger

from .models import StepMetrics, WorkflowMetrics


class MetricsCollector(Protocol):
    """Sink for execution records. Called synchronously by the workflow."""

    def record_step_execution(self, metrics: StepMetrics) -> None:
        ...

    def record_workflow_execution(self, metrics: WorkflowMetrics) -> None:
        ...


class NullMetricsCollector:
    """Discards every record."""

    def record_step_execution(self, metrics: StepMetrics) -> None:
        pass

    def record_workflow_execution(self, metrics: WorkflowMetrics) -> None:
        pass


class InMemoryMetricsCollector:
    """Keeps every record in memory.

    When a workflow record arrives, its ``steps`` list is filled with the step
    records carrying the same run id, in arrival order.
    """

    def __init__(self) -> None:
        self._step_metrics: list[StepMetrics] = []
        self._workflow_metrics: list[WorkflowMetrics] = []
        # Step records of runs that have not reported yet, keyed by run id
        self._open_runs: dict[str | None, list[StepMetrics]] = {}

    def record_step_execution(self, metrics: StepMetrics) -> None:
        self._step_metrics.append(metrics)
        self._open_runs.setdefault(metrics.run_id, []).append(metrics)

    def record_workflow_execution(self, metrics: WorkflowMetrics) -> None:
        metrics.steps = self._open_runs.pop(metrics.run_id, [])
        self._workflow_metrics.append(metrics)

    @property
    def step_metrics(self) -> list[StepMetrics]:
        return list(self._step_metrics)

    @property
    def workflow_metrics(self) -> list[WorkflowMetrics]:
        return list(self._workflow_metrics)

    def clear(self) -> None:
        self._step_metrics = []
        self._workflow_metrics = []
        self._open_runs = {}


class LoggingMetricsCollector:
    """Writes every record to the ``orchestration.metrics`` logger."""

    def __init__(self) -> None:
        self._logger = get_logger("orchestration.metrics")

    def record_step_execution(self, metrics: StepMetrics) -> None:
        self._logger.info(
            "Step: %s - Duration: %.1fms - Status: %s",
            metrics.step_name,
            metrics.duration_ms,
            metrics.status.value,
        )
        if metrics.error is not None:
            self._logger.error("Error in step %s: %s", metrics.step_name, metrics.error)

    def record_workflow_execution(self, metrics: WorkflowMetrics) -> None:
        self._logger.info(
            "Workflow: %s (%s) - Total Duration: %.1fms - Status: %s",
            metrics.workflow_name,
            metrics.workflow_id,
            metrics.total_duration_ms,
            metrics.status.value,
        )
