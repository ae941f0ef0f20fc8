"""Lifecycle hooks - WorkflowHooks, CallbackHooks, EventBusHooks."""

from collections.abc import Awaitable, Callable
from typing import Any

from flowstep_sdk.utils.datetime import utc_now

from .bus import EventBusProtocol
from .events import (
    STEP_FAILED,
    STEP_STARTED,
    STEP_SUCCEEDED,
    WORKFLOW_FINISHED,
    WORKFLOW_STARTED,
    Event,
    EventMetadata,
)
from .models import WorkflowContext
from .utils import maybe_await


class WorkflowHooks:
    """Lifecycle callbacks invoked by a workflow.

    Every method is a no-op here, so a bare ``WorkflowHooks()`` stands for
    "no hooks". Subclasses override what they need.
    """

    async def before_workflow(self, context: WorkflowContext) -> None:
        pass

    async def after_workflow(self, context: WorkflowContext) -> None:
        pass

    async def before_step(self, step_name: str, context: WorkflowContext) -> None:
        pass

    async def after_step(self, step_name: str, context: WorkflowContext) -> None:
        pass

    async def on_error(
        self, error: BaseException, step_name: str, context: WorkflowContext
    ) -> None:
        pass


class CallbackHooks(WorkflowHooks):
    """Hooks built from optional plain or async callables."""

    def __init__(
        self,
        *,
        before_workflow: Callable[[WorkflowContext], Awaitable[None] | None] | None = None,
        after_workflow: Callable[[WorkflowContext], Awaitable[None] | None] | None = None,
        before_step: Callable[[str, WorkflowContext], Awaitable[None] | None] | None = None,
        after_step: Callable[[str, WorkflowContext], Awaitable[None] | None] | None = None,
        on_error: Callable[[BaseException, str, WorkflowContext], Awaitable[None] | None]
        | None = None,
    ) -> None:
        self._before_workflow = before_workflow
        self._after_workflow = after_workflow
        self._before_step = before_step
        self._after_step = after_step
        self._on_error = on_error

    async def before_workflow(self, context: WorkflowContext) -> None:
        await _call(self._before_workflow, context)

    async def after_workflow(self, context: WorkflowContext) -> None:
        await _call(self._after_workflow, context)

    async def before_step(self, step_name: str, context: WorkflowContext) -> None:
        await _call(self._before_step, step_name, context)

    async def after_step(self, step_name: str, context: WorkflowContext) -> None:
        await _call(self._after_step, step_name, context)

    async def on_error(
        self, error: BaseException, step_name: str, context: WorkflowContext
    ) -> None:
        await _call(self._on_error, error, step_name, context)


class EventBusHooks(WorkflowHooks):
    """Publish workflow lifecycle events to an event bus."""

    def __init__(self, event_bus: EventBusProtocol, workflow_name: str) -> None:
        """Initialize event hooks.

        Args:
            event_bus: EventBusProtocol for publishing events
            workflow_name: Name stamped on every event's metadata
        """
        self._event_bus = event_bus
        self._workflow_name = workflow_name

    async def before_workflow(self, context: WorkflowContext) -> None:
        await self._publish(WORKFLOW_STARTED, {"keys": sorted(context)})

    async def after_workflow(self, context: WorkflowContext) -> None:
        await self._publish(WORKFLOW_FINISHED, {"keys": sorted(context)})

    async def before_step(self, step_name: str, context: WorkflowContext) -> None:
        await self._publish(STEP_STARTED, {"step_name": step_name})

    async def after_step(self, step_name: str, context: WorkflowContext) -> None:
        await self._publish(STEP_SUCCEEDED, {"step_name": step_name})

    async def on_error(
        self, error: BaseException, step_name: str, context: WorkflowContext
    ) -> None:
        await self._publish(
            STEP_FAILED,
            {
                "step_name": step_name,
                "error": str(error),
                "error_kind": getattr(getattr(error, "kind", None), "value", None),
            },
        )

    async def _publish(self, name: str, payload: dict[str, object]) -> None:
        metadata = EventMetadata(workflow_name=self._workflow_name, timestamp=utc_now())
        await self._event_bus.publish(Event(name=name, payload=payload, metadata=metadata))


async def _call(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is not None:
        await maybe_await(callback(*args))
