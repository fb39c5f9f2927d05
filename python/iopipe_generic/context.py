"""Invocation context types seen by generic handlers.

``Context`` stands for the platform context passed with every request
(the ``context`` argument of an AWS Lambda handler). Handler methods
annotate a parameter with it so the entry point scanner can tell a context
apart from the request value.

``Execution`` is the richer handle this package hands to handler methods
that ask for it: it carries the platform context and records custom
metrics on the telemetry bridge.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, BinaryIO

from .logging import log_trace
from .telemetry import CustomMetric, EventNames, TelemetryBridge

# Placeholder types for stream parameters the handler did not declare
INPUT_STREAM_TYPE = BinaryIO
OUTPUT_STREAM_TYPE = BinaryIO

_CONTEXT_MEMBERS = ("get_remaining_time_in_millis",)


class Context(ABC):
    """Platform context supplied by the invoking runtime.

    Any class defining ``get_remaining_time_in_millis`` is treated as a
    subclass, so the context object of the AWS Lambda Python runtime
    qualifies without inheriting from this class.

    Attributes:
        aws_request_id: Identifier of the current request.
        function_name: Name of the invoked function.
    """

    aws_request_id: str
    function_name: str

    @abstractmethod
    def get_remaining_time_in_millis(self) -> int:
        """Milliseconds left before the platform terminates the request."""
        ...

    @classmethod
    def __subclasshook__(cls, subclass: type) -> bool:
        if cls is not Context:
            return NotImplemented

        mro = subclass.__mro__
        for member in _CONTEXT_MEMBERS:
            if not any(member in vars(base) for base in mro):
                return NotImplemented
        return True


class Execution:
    """Execution handle wrapping the platform context of one request.

    Attributes:
        context: The platform context of the request.

    Example:
        >>> execution = Execution(context)
        >>> execution.custom_metric("items.processed", 42)
        >>> execution.custom_metrics()
        [CustomMetric(name='items.processed', value='42')]
    """

    def __init__(self, context: Any, bridge: TelemetryBridge | None = None) -> None:
        """Initialize the execution handle.

        Args:
            context: The platform context of the request.
            bridge: Telemetry bridge receiving custom metrics. Defaults to
                the TelemetryBridge singleton.
        """
        self._context = context
        self._bridge = bridge if bridge is not None else TelemetryBridge.instance()
        self._metrics: list[CustomMetric] = []
        self._lock = threading.Lock()

    @property
    def context(self) -> Any:
        """Get the platform context."""
        return self._context

    def custom_metric(self, name: str, value: str | int | float) -> CustomMetric:
        """Record a custom metric and publish it on the telemetry bridge.

        Args:
            name: Metric name.
            value: Metric value, converted to a string.

        Returns:
            The recorded metric.
        """
        metric = CustomMetric(name=name, value=str(value))
        with self._lock:
            self._metrics.append(metric)
        log_trace("Custom metric recorded", {"name": name})
        self._bridge.publish(EventNames.CUSTOM_METRIC, metric)
        return metric

    def custom_metrics(self) -> list[CustomMetric]:
        """Get the metrics recorded so far, oldest first."""
        with self._lock:
            return list(self._metrics)


__all__ = [
    "Context",
    "Execution",
    "INPUT_STREAM_TYPE",
    "OUTPUT_STREAM_TYPE",
]
