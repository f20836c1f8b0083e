"""
Lift — turning handler calls into LazyCoroResult.

Handlers may be plain functions or coroutine functions (or return any
awaitable). Either way the call is lifted into a lazy Result whose error
is the raised exception, unchanged.
"""

from __future__ import annotations

import inspect
from typing import Any
from collections.abc import Callable

from kungfu import LazyCoroResult

# Re-export from combinators.lift
from combinators.lift import catching_async


def from_call(invoke: Callable[[], Any]) -> LazyCoroResult[Any, Exception]:
    """
    Lift a zero-argument call, sync or async.

        op = from_call(lambda: handler(node))
        result = await op  # Ok(value) | Error(exc)
    """
    async def _run() -> Any:
        value = invoke()
        if inspect.isawaitable(value):
            return await value
        return value

    return catching_async(_run, on_error=_verbatim)


def _verbatim(exc: Exception) -> Exception:
    return exc


__all__ = (
    # From combinators.lift
    "catching_async",
    # precedent additions
    "from_call",
)
