"""
Bounded fan-out helper for running many coroutines with a cap on in-flight work.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Literal, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_CONCURRENT = 5


@dataclass(frozen=True)
class SettledResult(Generic[R]):
    """
    Outcome of a single task: either fulfilled with a value or rejected with a reason.
    """

    status: Literal["fulfilled", "rejected"]
    value: R | None = None
    reason: BaseException | None = None

    @classmethod
    def fulfilled(cls, value: R) -> "SettledResult[R]":
        return cls(status="fulfilled", value=value)

    @classmethod
    def rejected(cls, reason: BaseException) -> "SettledResult[R]":
        return cls(status="rejected", reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == "fulfilled"


async def run_bounded(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    max_concurrent: int = DEFAULT_MAX_CONCURRENT,
) -> list[SettledResult[R]]:
    """
    Run ``worker`` over every item with at most ``max_concurrent`` calls in flight.

    Each item is processed exactly once. A failing item is recorded as rejected and
    never stops the remaining items. The returned list is in input order, regardless
    of the order in which the tasks completed.
    """
    if max_concurrent < 1:
        raise ValueError(f"max_concurrent must be at least 1, received {max_concurrent}.")

    items = list(items)
    results: list[Any] = [None] * len(items)
    cursor = iter(range(len(items)))

    async def _drain() -> None:
        # Claiming the next index never awaits, so the shared iterator needs no lock.
        for index in cursor:
            try:
                value = await worker(items[index])
            except Exception as exc:
                results[index] = SettledResult.rejected(exc)
            else:
                results[index] = SettledResult.fulfilled(value)

    worker_count = min(max_concurrent, len(items))
    await asyncio.gather(*(_drain() for _ in range(worker_count)))
    return results
