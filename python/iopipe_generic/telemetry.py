"""In-process telemetry bus for generic handler invocations.

Handler code reaches the bus through ``Execution.custom_metric()``; the
generic runtime uses it to announce the resolved entry point, failed
invocations and memory snapshots. Forwarding any of this to a collector is
up to whoever subscribes.

Example:
    >>> bridge = TelemetryBridge.instance()
    >>> bridge.start()
    >>> bridge.subscribe(EventNames.CUSTOM_METRIC, lambda m: print(m.name, m.value))
    >>> Execution(context).custom_metric("items", 3)
    items 3
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field
from pyee.base import EventEmitter

from .logging import log_debug, log_info, log_warn


class EventNames:
    """Names of the events carried by the telemetry bridge.

    Attributes:
        CUSTOM_METRIC: A CustomMetric recorded by handler code.
        ENTRY_POINT_RESOLVED: The EntryPoint the runtime will call.
        HANDLER_ERROR: The exception an invocation raised.
        MEMORY_SNAPSHOT: list[MemoryPoolStatistics] read after an invocation.
    """

    CUSTOM_METRIC = "execution.custom_metric"
    ENTRY_POINT_RESOLVED = "entry_point.resolved"
    HANDLER_ERROR = "handler.error"
    MEMORY_SNAPSHOT = "profiler.memory_snapshot"


class CustomMetric(BaseModel):
    """A named, string valued metric recorded during an invocation.

    Example:
        >>> CustomMetric(name="source.class", value="dict")
        CustomMetric(name='source.class', value='dict')
    """

    name: str = Field(min_length=1, description="Metric name.")
    value: str = Field(description="Metric value, always transmitted as a string.")

    model_config = {"frozen": True}


class TelemetryBridge:
    """Process-wide event bus built on a pyee EventEmitter.

    The bus starts inactive; anything published before ``start()`` or
    after ``stop()`` is dropped. A listener that raises is reported and
    never affects the publisher.
    """

    _instance: TelemetryBridge | None = None

    def __init__(self) -> None:
        self._emitter = EventEmitter()
        self._active = False

    @classmethod
    def instance(cls) -> TelemetryBridge:
        """Get the shared bridge, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Stop and forget the shared bridge (primarily for testing)."""
        if cls._instance is not None:
            cls._instance.stop()
        cls._instance = None

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Begin delivering events. No-op when already active."""
        if not self._active:
            self._active = True
            log_info("TelemetryBridge started")

    def stop(self) -> None:
        """Stop delivering events and drop every listener."""
        if self._active:
            self._active = False
            self._emitter.remove_all_listeners()
            log_info("TelemetryBridge stopped")

    def subscribe(self, event: str, listener: Callable[..., Any]) -> None:
        """Call ``listener`` with the payload of every ``event``."""
        self._emitter.on(event, listener)
        log_debug("Telemetry listener added", {"event": event})

    def listener_count(self, event: str) -> int:
        return len(self._emitter.listeners(event))

    def publish(self, event: str, *payload: Any) -> None:
        """Deliver a payload to the listeners of an event.

        Args:
            event: One of the EventNames.
            *payload: Positional arguments handed to each listener.
        """
        if not self._active:
            log_warn(f"TelemetryBridge not active, dropping event: {event}")
            return

        try:
            self._emitter.emit(event, *payload)
        except Exception as e:
            log_warn(f"Telemetry listener failed: {e}", {"event": event})


__all__ = ["CustomMetric", "EventNames", "TelemetryBridge"]
