"""Chunked processing helpers that yield to the event loop between chunks."""

import asyncio
import inspect
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

T = TypeVar('T')
R = TypeVar('R')

ChunkProgress = Callable[[int, int], None]


async def yield_control():
    """Let other coroutines on the loop run."""
    await asyncio.sleep(0)


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


async def process_in_chunks(
    items: Sequence[T],
    processor: Callable[[T, int], Union[R, Awaitable[R]]],
    chunk_size: int = 10,
    on_progress: Optional[ChunkProgress] = None
) -> List[R]:
    """
    Apply ``processor(item, index)`` to every item, yielding after each chunk.

    ``processor`` may be a plain function or a coroutine function.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    results: List[R] = []
    total = len(items)

    for start in range(0, total, chunk_size):
        chunk = items[start:start + chunk_size]
        for offset, item in enumerate(chunk):
            results.append(await _maybe_await(processor(item, start + offset)))

        processed = min(start + chunk_size, total)
        if on_progress:
            on_progress(processed, total)

        if processed < total:
            await yield_control()

    return results


async def process_batch_in_chunks(
    items: Sequence[T],
    batch_processor: Callable[[Sequence[T]], Union[Sequence[R], Awaitable[Sequence[R]]]],
    chunk_size: int = 10,
    on_progress: Optional[ChunkProgress] = None
) -> List[R]:
    """Hand each chunk to ``batch_processor`` as a whole, yielding between chunks."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    results: List[R] = []
    total = len(items)

    for start in range(0, total, chunk_size):
        chunk = items[start:start + chunk_size]
        results.extend(await _maybe_await(batch_processor(chunk)))

        processed = min(start + chunk_size, total)
        if on_progress:
            on_progress(processed, total)

        if processed < total:
            await yield_control()

    return results
