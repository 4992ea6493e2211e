"""
Task helpers for concurrent outline traversal.

Results are always assembled in the order the work was submitted, never in
completion order, and a failure anywhere cancels the work still in flight.
"""
import asyncio
import contextlib
from typing import Any, AsyncContextManager, Awaitable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def call_limiter(max_concurrency: Optional[int] = None) -> AsyncContextManager[Any]:
    """
    Build the context manager that guards each store call.

    Args:
        max_concurrency: Maximum store calls in flight, or None for no limit

    Returns:
        An asyncio.Semaphore, or a no-op context manager when unlimited
    """
    if max_concurrency is None:
        return contextlib.nullcontext()
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
    return asyncio.Semaphore(max_concurrency)


async def cancel_all(tasks: Iterable["asyncio.Future[Any]"]) -> None:
    """Cancel tasks and wait until every one of them has settled."""
    tasks = list(tasks)
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def gather_ordered(aws: Iterable[Awaitable[T]]) -> List[T]:
    """
    Await all awaitables concurrently and return results positionally.

    Args:
        aws: Coroutines or tasks, in the order their results are wanted

    Returns:
        Results in submission order

    Raises:
        The first exception raised by any awaitable, after the others were
        cancelled
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        await cancel_all(tasks)
        raise
