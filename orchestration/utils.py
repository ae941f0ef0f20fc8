"""Small helpers shared by the engine."""

import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it as is.

    Work functions, hooks, predicates and validators may be plain or async.
    """
    if inspect.isawaitable(value):
        return await value
    return value
