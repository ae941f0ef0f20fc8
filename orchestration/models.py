"""Orchestration models - WorkflowContext, StepMetrics, WorkflowMetrics."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from core.domain.enums import StepStatus, WorkflowStatus

# Shared mutable record threaded through one workflow execution
WorkflowContext = dict[str, Any]


@dataclass
class StepMetrics:
    """Execution record for one step of one workflow run."""

    step_name: str
    started_at: datetime
    finished_at: datetime
    duration_ms: float
    status: StepStatus
    error: BaseException | None = None
    workflow_id: str | None = None
    run_id: str | None = None


@dataclass
class WorkflowMetrics:
    """Execution record for one workflow run.

    ``steps`` is left for the collector to fill; the workflow reports each
    step separately through ``record_step_execution``. Both records carry
    the ``run_id`` of the ``execute`` call that produced them.
    """

    workflow_id: str
    workflow_name: str
    started_at: datetime
    run_id: str | None = None
    finished_at: datetime | None = None
    total_duration_ms: float = 0.0
    steps: list[StepMetrics] = field(default_factory=list)
    status: WorkflowStatus = WorkflowStatus.RUNNING
