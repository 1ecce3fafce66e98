"""Timeout racing for async operations.

A timeout here is logical: the caller stops waiting, but the operation that
lost the race is not cancelled. It keeps running in the background on a
detached task whose eventual result is discarded.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Set, Union

from ..exceptions import BaseBatchError
from ..logging import get_logger

logger = get_logger(__name__)

# Strong references to operations that lost a race and are still running
_detached_tasks: Set["asyncio.Future[Any]"] = set()


class OperationTimeoutError(BaseBatchError):
    def __init__(self, operation: str, timeout_seconds: float, **kwargs: Any):
        message = f"Operation '{operation}' timed out after {timeout_seconds}s"
        details = {"operation": operation, "timeout_seconds": timeout_seconds}
        details.update(kwargs)
        super().__init__(message, details)
        self.operation = operation
        self.timeout_seconds = timeout_seconds


def operation_name(obj: Any) -> str:
    return (
        getattr(obj, "__qualname__", None)
        or getattr(obj, "__name__", None)
        or type(obj).__name__
    )


def _discard_detached(task: "asyncio.Future[Any]") -> None:
    _detached_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Detached operation finished with {type(exc).__name__}: {exc}")


def detach(task: "asyncio.Future[Any]") -> None:
    """Let ``task`` run to completion without anyone awaiting its result."""
    if task.done():
        _discard_detached(task)
        return
    _detached_tasks.add(task)
    task.add_done_callback(_discard_detached)


def detached_count() -> int:
    """Number of detached operations that have not settled yet."""
    return len(_detached_tasks)


async def race_timeout(
    awaitable: Awaitable[Any],
    timeout_seconds: float,
    operation: Optional[str] = None,
) -> Any:
    """
    Race ``awaitable`` against a timer; whichever settles first wins.

    Returns the awaitable's result (or raises its exception) if it settles
    in time, otherwise raises :class:`OperationTimeoutError` and detaches the
    still-running operation.
    """
    name = operation or operation_name(awaitable)
    task = asyncio.ensure_future(awaitable)

    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_seconds)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task in done:
        return task.result()

    detach(task)
    logger.warning(
        f"Operation '{name}' timed out after {timeout_seconds}s, leaving it to finish in the background",
        extra={"operation": name, "timeout": timeout_seconds},
    )
    raise OperationTimeoutError(name, timeout_seconds)


async def with_timeout(
    coro_or_func: Union[Awaitable[Any], Callable[..., Any]],
    timeout_seconds: Optional[float],
    *args: Any,
    **kwargs: Any
) -> Any:
    """
    Await an awaitable, or call a function and await what it returns,
    giving up after ``timeout_seconds``.

    A function returning a plain value is treated as already settled. A
    ``timeout_seconds`` of ``None`` disables the race.
    """
    if inspect.isawaitable(coro_or_func):
        awaitable = coro_or_func
        name = operation_name(coro_or_func)
    else:
        awaitable = coro_or_func(*args, **kwargs)
        name = operation_name(coro_or_func)
        if not inspect.isawaitable(awaitable):
            return awaitable

    if timeout_seconds is None:
        return await awaitable
    return await race_timeout(awaitable, timeout_seconds, operation=name)
