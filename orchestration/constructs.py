"""Composite steps - conditional branching and parallel fan-out."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from flowstep_sdk.logging import get_logger

from .models import WorkflowContext
from .step import Step, StepConfig
from .utils import maybe_await

_logger = get_logger("orchestration.constructs")


class SubWorkflow(Protocol):
    """Anything that runs over a context and returns the resulting context."""

    async def execute(self, context: WorkflowContext) -> WorkflowContext:
        ...


Predicate = Callable[[WorkflowContext], bool | Awaitable[bool]]


@dataclass
class ConditionBranch:
    """A predicate guarding a sub-workflow."""

    name: str
    condition: Predicate
    workflow: SubWorkflow


class ConditionStep(Step):
    """Run the first branch whose predicate holds, else the default.

    The chosen sub-workflow's result is merged back into the context key by
    key; keys it does not return are left alone. With no match and no
    default the context passes through unchanged.

    Sub-workflow errors propagate as raised; the construct is never retried.
    """

    def __init__(
        self,
        branches: Sequence[ConditionBranch],
        default: SubWorkflow | None = None,
        *,
        name: str = "condition-step",
    ) -> None:
        super().__init__(self._run, StepConfig(name=name))
        self._branches = list(branches)
        self._default = default

    @property
    def branches(self) -> list[ConditionBranch]:
        return list(self._branches)

    async def execute(self, context: WorkflowContext) -> None:
        await self._run(context)

    async def _run(self, context: WorkflowContext) -> None:
        for branch in self._branches:
            if await maybe_await(branch.condition(context)):
                _logger.debug("condition '%s': branch '%s' selected", self.name, branch.name)
                context.update(await branch.workflow.execute(context))
                return

        if self._default is not None:
            _logger.debug("condition '%s': default branch selected", self.name)
            context.update(await self._default.execute(context))


class ParallelStep(Step):
    """Run sub-workflows concurrently and merge what each of them changed.

    Each sub-workflow gets its own shallow copy of the context. Once all of
    them finish, the keys each one added or rebound are written back in
    declaration order, so a later workflow wins on a shared key.

    If any sub-workflow fails, the step fails with that error; the others are
    left to finish and their results are dropped.
    """

    def __init__(self, workflows: Sequence[SubWorkflow], *, name: str = "parallel-step") -> None:
        super().__init__(self._run, StepConfig(name=name))
        self._workflows = list(workflows)

    @property
    def workflows(self) -> list[SubWorkflow]:
        return list(self._workflows)

    async def execute(self, context: WorkflowContext) -> None:
        await self._run(context)

    async def _run(self, context: WorkflowContext) -> None:
        base = dict(context)
        deltas = await asyncio.gather(*(self._run_one(wf, base) for wf in self._workflows))
        for delta in deltas:
            context.update(delta)

        _logger.debug(
            "parallel '%s': merged %d workflows", self.name, len(self._workflows)
        )

    @staticmethod
    async def _run_one(workflow: SubWorkflow, base: WorkflowContext) -> WorkflowContext:
        result = await workflow.execute(dict(base))
        return {
            key: value
            for key, value in result.items()
            if key not in base or base[key] is not value
        }
