"""
iopipe-generic

Resolves a user supplied handler class and method name into one
normalized entry point, whatever shape the method was declared in.

Example:
    >>> from iopipe_generic import EntryPoint
    >>> entry = EntryPoint.from_spec("myapp.handlers.Greeter::greet")
    >>> entry.is_static
    False
    >>> handle = entry.handle_with_new_instance()
    >>> handle({"name": "world"}, context)

    >>> # Or let the generic runtime read IOPIPE_GENERIC_HANDLER
    >>> from iopipe_generic.runtime import handle_request
"""

from __future__ import annotations

from iopipe_generic.context import Context, Execution
from iopipe_generic.exceptions import (
    GenericHandlerError,
    IllegalStateError,
    InvalidEntryPointError,
    NoEntryPointFoundError,
    UnsupportedShapeError,
)
from iopipe_generic.generic import (
    DEFAULT_METHOD,
    EntryPoint,
    HandlerSpec,
    Shape,
    variants,
)
from iopipe_generic.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from iopipe_generic.profiler import MemoryPoolStatistics, MemoryUsageStatistic, snapshots
from iopipe_generic.runtime import GenericHandler
from iopipe_generic.telemetry import CustomMetric, EventNames, TelemetryBridge
from iopipe_generic.types import GenericHandlerConfig, LogContext

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Entry points
    "EntryPoint",
    "HandlerSpec",
    "Shape",
    "DEFAULT_METHOD",
    "variants",
    # Invocation context
    "Context",
    "Execution",
    # Runtime
    "GenericHandler",
    "GenericHandlerConfig",
    # Errors
    "GenericHandlerError",
    "InvalidEntryPointError",
    "NoEntryPointFoundError",
    "UnsupportedShapeError",
    "IllegalStateError",
    # Telemetry
    "TelemetryBridge",
    "EventNames",
    "CustomMetric",
    "MemoryPoolStatistics",
    "MemoryUsageStatistic",
    "snapshots",
    # Logging
    "LogContext",
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
