"""Memory profiling support.

Exposes point-in-time memory pool statistics for reporters that ship
them alongside invocation telemetry.
"""

from __future__ import annotations

from .memory_pool_statistics import (
    UNKNOWN,
    GcGenerationPool,
    MemoryPool,
    MemoryPoolStatistics,
    MemoryUsageStatistic,
    TracemallocPool,
    default_pools,
    snapshots,
)

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
