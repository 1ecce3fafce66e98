"""
Batch engine: runs items in sequential batches, each batch concurrently.

At most ``batch_size`` worker invocations are in flight at any time. Results
keep the input order regardless of which invocation finishes first.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, List, Optional, TypeVar, Union

from telemetry.exceptions import log_exception
from telemetry.logging import get_logger
from telemetry.resilience import Attempt, RetryConfig, detach, retry_async
from telemetry.timing import TimingContext

from .config import BatchOptions, ProgressCallback, resolve_options
from .models import Err, Ok, Outcome
from .partition import partition

T = TypeVar("T")
R = TypeVar("R")

logger = get_logger(__name__)


async def _run_item(
    item: T,
    index: int,
    worker: Callable[[T], Awaitable[R]],
    options: BatchOptions,
    retry_config: RetryConfig,
) -> Outcome:
    attempts: List[Attempt] = []
    try:
        value = await retry_async(
            worker,
            item,
            config=retry_config,
            timeout=options.timeout,
            on_attempt=attempts.append,
        )
    except Exception as exc:
        if not options.continue_on_error:
            raise
        log_exception(
            exc,
            logger_instance=logger,
            level=logging.WARNING,
            include_traceback=False,
            extra_context={"index": index, "attempts": len(attempts)},
        )
        return Err(error=exc, index=index, attempts=tuple(attempts))
    return Ok(value=value, index=index, attempts=tuple(attempts))


async def _run_group(
    group: List[T],
    offset: int,
    worker: Callable[[T], Awaitable[R]],
    options: BatchOptions,
    retry_config: RetryConfig,
) -> List[Outcome]:
    """
    Run every item of ``group`` concurrently and wait for all of them.

    Without ``continue_on_error`` the first permanent failure ends the wait.
    When several items fail in the same wake-up, the one with the lowest
    index wins. Items still running are detached, not cancelled.
    """
    tasks = [
        asyncio.ensure_future(_run_item(item, offset + i, worker, options, retry_config))
        for i, item in enumerate(group)
    ]

    pending = set(tasks)
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)
            failed = [
                task for task in tasks
                if task in done and not task.cancelled() and task.exception() is not None
            ]
            if failed:
                for task in pending:
                    detach(task)
                raise failed[0].exception()
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    return [task.result() for task in tasks]


async def _report_progress(callback: Optional[ProgressCallback], completed: int, total: int) -> None:
    if callback is None:
        return
    result = callback(completed, total)
    if inspect.isawaitable(result):
        await result


async def batch_process(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    options: Optional[BatchOptions] = None,
    **overrides: Any,
) -> Union[List[List[Any]], List[Any]]:
    """
    Process items in batches: items of a batch run concurrently, batches run
    one after another.

    Args:
        items: Items to process
        worker: Async function called once per item (per attempt)
        options: Run options, defaults when omitted
        **overrides: Option fields overriding ``options``
            (e.g. ``batch_size=3, continue_on_error=True``)

    Returns:
        One list of results per batch, or a single list when ``flatten`` is
        set. Results are the worker's values, or ``Ok``/``Err`` outcomes when
        ``continue_on_error`` is set.

    Raises:
        InvalidConfigurationError: If ``batch_size`` is not a positive integer
        pydantic.ValidationError: If an override names no option, or a value
            has the wrong type
        Exception: The worker's exception (or ``OperationTimeoutError``) of the
            first item that fails permanently, without ``continue_on_error``

    Example:
        >>> await batch_process(range(1, 11), double, batch_size=3)
        [[2, 4, 6], [8, 10, 12], [14, 16, 18], [20]]
    """
    options = resolve_options(options, **overrides)
    groups = partition(items, options.batch_size)
    total = len(groups)
    if not groups:
        return []

    retry_config = options.retry.to_retry_config()
    item_count = sum(len(group) for group in groups)
    logger.debug(
        f"Processing {item_count} items in {total} batches of up to {options.batch_size}"
    )

    results: List[List[Any]] = []
    offset = 0
    for number, group in enumerate(groups, start=1):
        if number > 1 and options.delay_between_batches > 0:
            await asyncio.sleep(options.delay_between_batches)

        with TimingContext(f"batch {number}/{total}", logger_instance=logger, level=logging.DEBUG):
            outcomes = await _run_group(group, offset, worker, options, retry_config)

        if options.continue_on_error:
            results.append(outcomes)
        else:
            results.append([outcome.value for outcome in outcomes])
        offset += len(group)

        await _report_progress(options.on_progress, number, total)

    if options.continue_on_error:
        failures = sum(1 for group in results for outcome in group if not outcome.ok)
        if failures:
            logger.warning(f"{failures} of {item_count} items failed permanently")

    if options.flatten:
        return [result for group in results for result in group]
    return results
