"""Orchestration layer - workflow engine with retries, branching and eventing."""

from core.domain.enums import BackoffKind, ErrorKind, StepStatus, WorkflowStatus

from .bus import EventBusProtocol, InMemoryEventBus
from .constructs import ConditionBranch, ConditionStep, ParallelStep, SubWorkflow
from .errors import (
    ContextValidationError,
    HookExecutionError,
    StepExecutionError,
    WorkflowError,
)
from .events import Event, EventMetadata
from .hooks import CallbackHooks, EventBusHooks, WorkflowHooks
from .metrics import (
    InMemoryMetricsCollector,
    LoggingMetricsCollector,
    MetricsCollector,
    NullMetricsCollector,
)
from .models import StepMetrics, WorkflowContext, WorkflowMetrics
from .retry import Backoff, RetryConfig
from .step import Step, StepConfig, StepFunction
from .validation import (
    CallableValidator,
    PydanticValidator,
    ValidationIssue,
    ValidationResult,
    Validator,
)
from .workflow import Workflow

__all__ = [
    "Backoff",
    "BackoffKind",
    "CallableValidator",
    "CallbackHooks",
    "ConditionBranch",
    "ConditionStep",
    "ContextValidationError",
    "ErrorKind",
    "Event",
    "EventBusHooks",
    "EventBusProtocol",
    "EventMetadata",
    "HookExecutionError",
    "InMemoryEventBus",
    "InMemoryMetricsCollector",
    "LoggingMetricsCollector",
    "MetricsCollector",
    "NullMetricsCollector",
    "ParallelStep",
    "PydanticValidator",
    "RetryConfig",
    "Step",
    "StepConfig",
    "StepExecutionError",
    "StepFunction",
    "StepMetrics",
    "StepStatus",
    "SubWorkflow",
    "ValidationIssue",
    "ValidationResult",
    "Validator",
    "Workflow",
    "WorkflowContext",
    "WorkflowError",
    "WorkflowHooks",
    "WorkflowMetrics",
    "WorkflowStatus",
    "create_workflow",
]


def create_workflow(
    name: str,
    *,
    event_bus: EventBusProtocol | None = None,
    metrics_collector: MetricsCollector | None = None,
    validator: Validator | None = None,
) -> Workflow:
    """Create a workflow publishing lifecycle events.

    Args:
        name: Workflow name
        event_bus: Bus receiving the events (a new in-memory bus if omitted)
        metrics_collector: Optional metrics sink
        validator: Optional validator for the initial context

    Returns:
        Workflow instance
    """
    bus = event_bus or InMemoryEventBus()
    return Workflow(
        name,
        hooks=EventBusHooks(bus, name),
        validator=validator,
        metrics_collector=metrics_collector,
    )
