"""Bounded-concurrency fan-out that keeps results aligned with their inputs."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .constants import OPTIMIZATION_CONFIG

T = TypeVar("T")
R = TypeVar("R")


@dataclass(slots=True)
class ItemError:
    """Failure raised by the processor for the item at ``index``."""

    index: int
    error: Exception


@dataclass(slots=True)
class ParallelResult(Generic[R]):
    """Outcome of :func:`process_in_parallel`.

    ``results`` has one slot per input item; failed items keep ``None``.
    """

    results: list[R | None]
    errors: list[ItemError] = field(default_factory=list)

    @property
    def failed_indices(self) -> list[int]:
        return [item.index for item in self.errors]

    @property
    def succeeded_indices(self) -> list[int]:
        failed = set(self.failed_indices)
        return [index for index in range(len(self.results)) if index not in failed]


@dataclass(slots=True)
class _Settled(Generic[R]):
    index: int
    value: R | None = None
    error: Exception | None = None


async def _settle(
    processor: Callable[[T, int], Awaitable[R]], item: T, index: int
) -> _Settled[R]:
    try:
        value = await processor(item, index)
    except Exception as exc:
        return _Settled(index=index, error=exc)
    return _Settled(index=index, value=value)


async def process_in_parallel(
    items: Sequence[T],
    processor: Callable[[T, int], Awaitable[R]],
    concurrency: int = OPTIMIZATION_CONFIG.max_concurrent_posts,
    *,
    delay_between_chunks: float = OPTIMIZATION_CONFIG.delay_between_posts,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> ParallelResult[R]:
    """Run ``processor(item, index)`` over ``items`` in chunks of ``concurrency``.

    Every chunk settles completely before the next one starts; one item's
    exception is recorded in ``errors`` and never cancels its siblings.
    """

    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    pause = sleep or asyncio.sleep

    outcome: ParallelResult[R] = ParallelResult(results=[None] * len(items))
    for start in range(0, len(items), concurrency):
        chunk = items[start : start + concurrency]
        settled = await asyncio.gather(
            *(
                _settle(processor, item, start + offset)
                for offset, item in enumerate(chunk)
            )
        )
        for entry in settled:
            if entry.error is not None:
                outcome.errors.append(ItemError(index=entry.index, error=entry.error))
            else:
                outcome.results[entry.index] = entry.value

        if start + concurrency < len(items) and delay_between_chunks > 0:
            await pause(delay_between_chunks)

    return outcome


__all__ = ["ItemError", "ParallelResult", "process_in_parallel"]
