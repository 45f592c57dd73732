"""Invoke helpers — call sync or async handlers from async code.

Handlers can be ``def`` or ``async def``. ``Router.adispatch()`` must
handle both without blocking the event loop, so the check lives here.

Usage::

    from tinyroute._internal.invoke import invoke

    result = await invoke(handler, *args, **kwargs)
"""

import functools
import inspect
from typing import Any

import anyio


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result.

    Coroutine functions are awaited on the current event loop. Plain
    callables run in an anyio worker thread so a blocking handler does
    not stall other requests; if one of those returns an awaitable it
    is awaited as well.
    """
    if inspect.iscoroutinefunction(handler):
        return await handler(*args, **kwargs)

    result = await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))
    if inspect.isawaitable(result):
        result = await result
    return result
