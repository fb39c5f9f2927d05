"""Point-in-time statistics of the interpreter's memory pools.

A memory pool is anything implementing the MemoryPool protocol. Readings a
pool cannot provide are reported as ``-1`` instead of raising, so a
snapshot always succeeds.

Default pools:
- ``gc-generation-N``: one per garbage collector generation, usage counts
  objects allocated since the last collection against the generation's
  threshold
- ``tracemalloc``: bytes traced by tracemalloc, valid only while tracing

Example:
    >>> from iopipe_generic.profiler import snapshots
    >>> for pool in snapshots():
    ...     print(pool.name, pool.usage.used, pool.usage_threshold_bytes)
"""

from __future__ import annotations

import gc
import tracemalloc
from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator

from ..logging import log_trace

UNKNOWN = -1


class MemoryUsageStatistic(BaseModel):
    """Usage reading of one pool, ``-1`` for unknown magnitudes."""

    init: int = Field(default=UNKNOWN, description="Initially requested amount.")
    used: int = Field(default=UNKNOWN, description="Amount currently used.")
    committed: int = Field(default=UNKNOWN, description="Amount guaranteed to be available.")
    max: int = Field(default=UNKNOWN, description="Upper bound of the pool.")

    model_config = {"frozen": True}

    @field_validator("init", "used", "committed", "max", mode="before")
    @classmethod
    def _clamp(cls, value: int) -> int:
        return max(UNKNOWN, int(value))


class MemoryPoolStatistics(BaseModel):
    """Statistics for a single memory pool."""

    name: str = Field(default="Unknown", description="Name of the memory pool.")
    usage: MemoryUsageStatistic = Field(default_factory=MemoryUsageStatistic)
    peak_usage: MemoryUsageStatistic = Field(default_factory=MemoryUsageStatistic)
    collection_usage: MemoryUsageStatistic = Field(
        default_factory=MemoryUsageStatistic,
        description="Usage right after the most recent collection.",
    )
    usage_threshold_bytes: int = Field(default=UNKNOWN)
    usage_threshold_count: int = Field(
        default=UNKNOWN, description="Times the usage threshold was exceeded."
    )
    collection_usage_threshold_bytes: int = Field(default=UNKNOWN)
    collection_usage_threshold_count: int = Field(
        default=UNKNOWN, description="Times the collection threshold was reached."
    )

    model_config = {"frozen": True}

    @field_validator(
        "usage_threshold_bytes",
        "usage_threshold_count",
        "collection_usage_threshold_bytes",
        "collection_usage_threshold_count",
        mode="before",
    )
    @classmethod
    def _clamp(cls, value: int) -> int:
        return max(UNKNOWN, int(value))


@runtime_checkable
class MemoryPool(Protocol):
    """Source of readings for one memory pool.

    Readings the pool does not support raise NotImplementedError.
    """

    name: str

    def is_valid(self) -> bool: ...

    def usage(self) -> MemoryUsageStatistic | None: ...

    def peak_usage(self) -> MemoryUsageStatistic | None: ...

    def collection_usage(self) -> MemoryUsageStatistic | None: ...

    def usage_threshold(self) -> int: ...

    def usage_threshold_count(self) -> int: ...

    def collection_usage_threshold(self) -> int: ...

    def collection_usage_threshold_count(self) -> int: ...


class GcGenerationPool:
    """One generation of the cyclic garbage collector."""

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self.name = f"gc-generation-{generation}"

    def is_valid(self) -> bool:
        return gc.isenabled()

    def usage(self) -> MemoryUsageStatistic | None:
        return MemoryUsageStatistic(
            used=gc.get_count()[self.generation],
            max=gc.get_threshold()[self.generation],
        )

    def peak_usage(self) -> MemoryUsageStatistic | None:
        raise NotImplementedError

    def collection_usage(self) -> MemoryUsageStatistic | None:
        raise NotImplementedError

    def usage_threshold(self) -> int:
        return gc.get_threshold()[self.generation]

    def usage_threshold_count(self) -> int:
        return gc.get_stats()[self.generation]["collections"]

    def collection_usage_threshold(self) -> int:
        raise NotImplementedError

    def collection_usage_threshold_count(self) -> int:
        raise NotImplementedError


class TracemallocPool:
    """Memory blocks traced by tracemalloc, in bytes."""

    name = "tracemalloc"

    def is_valid(self) -> bool:
        return tracemalloc.is_tracing()

    def usage(self) -> MemoryUsageStatistic | None:
        current, _ = tracemalloc.get_traced_memory()
        return MemoryUsageStatistic(used=current, committed=tracemalloc.get_tracemalloc_memory())

    def peak_usage(self) -> MemoryUsageStatistic | None:
        _, peak = tracemalloc.get_traced_memory()
        return MemoryUsageStatistic(used=peak)

    def collection_usage(self) -> MemoryUsageStatistic | None:
        raise NotImplementedError

    def usage_threshold(self) -> int:
        raise NotImplementedError

    def usage_threshold_count(self) -> int:
        raise NotImplementedError

    def collection_usage_threshold(self) -> int:
        raise NotImplementedError

    def collection_usage_threshold_count(self) -> int:
        raise NotImplementedError


def default_pools() -> list[MemoryPool]:
    """Get the pools read by ``snapshots()`` when none are given."""
    pools: list[MemoryPool] = [GcGenerationPool(n) for n in range(len(gc.get_threshold()))]
    pools.append(TracemallocPool())
    return pools


def snapshots(pools: Iterable[MemoryPool | None] | None = None) -> list[MemoryPoolStatistics]:
    """Take a snapshot of every valid memory pool.

    Args:
        pools: Pools to read, defaults to ``default_pools()``. None entries
            and invalid pools are skipped.

    Returns:
        One statistics entry per valid pool.
    """
    if pools is None:
        pools = default_pools()

    result: list[MemoryPoolStatistics] = []
    for pool in pools:
        if pool is None or not pool.is_valid():
            continue

        result.append(
            MemoryPoolStatistics(
                name=getattr(pool, "name", None) or "Unknown",
                usage=_usage(pool.usage),
                peak_usage=_usage(pool.peak_usage),
                collection_usage=_usage(pool.collection_usage),
                usage_threshold_bytes=_reading(pool.usage_threshold),
                usage_threshold_count=_reading(pool.usage_threshold_count),
                collection_usage_threshold_bytes=_reading(pool.collection_usage_threshold),
                collection_usage_threshold_count=_reading(pool.collection_usage_threshold_count),
            )
        )
    return result


def _reading(read: Callable[[], int]) -> int:
    try:
        return read()
    except NotImplementedError:
        log_trace(f"Unsupported memory pool reading: {getattr(read, '__name__', read)}")
        return UNKNOWN


def _usage(read: Callable[[], MemoryUsageStatistic | None]) -> MemoryUsageStatistic:
    try:
        usage = read()
    except NotImplementedError:
        log_trace(f"Unsupported memory pool reading: {getattr(read, '__name__', read)}")
        usage = None
    return usage if usage is not None else MemoryUsageStatistic()


__all__ = [
    "UNKNOWN",
    "GcGenerationPool",
    "MemoryPool",
    "MemoryPoolStatistics",
    "MemoryUsageStatistic",
    "TracemallocPool",
    "default_pools",
    "snapshots",
]
