"""Invoke helpers — call sync or async callables uniformly.

Handlers, hooks, and not-found handlers can be ``def`` or ``async def``.
The sync/async check lives here and nowhere else.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(hook, request, response)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
