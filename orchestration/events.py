"""Orchestration events - Event, EventMetadata."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class EventMetadata:
    """Metadata for an event."""

    workflow_name: str
    timestamp: datetime


@dataclass
class Event:
    """Lifecycle event published while a workflow runs."""

    name: str
    payload: dict[str, object]
    metadata: EventMetadata


WORKFLOW_STARTED = "workflow.started"
WORKFLOW_FINISHED = "workflow.finished"
STEP_STARTED = "workflow.step.started"
STEP_SUCCEEDED = "workflow.step.succeeded"
STEP_FAILED = "workflow.step.failed"
