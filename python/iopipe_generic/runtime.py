"""Generic Lambda handler forwarding to the configured entry point.

Point the platform at ``iopipe_generic.runtime.handle_request`` (or
``handle_stream`` for stream handlers) and name the real handler in
``IOPIPE_GENERIC_HANDLER``. The entry point is resolved on the first
request and reused by every later one.

Example:
    IOPIPE_GENERIC_HANDLER=myapp.handlers.Greeter::greet
    handler: iopipe_generic.runtime.handle_request
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, BinaryIO

from .exceptions import GenericHandlerError, IllegalStateError, InvalidEntryPointError
from .generic.entry_point import EntryPoint
from .logging import configure_logging, log_error, log_info
from .profiler import snapshots
from .telemetry import EventNames, TelemetryBridge
from .types import HANDLER_ENV_VAR, GenericHandlerConfig, LogContext


class GenericHandler:
    """Forwards platform requests to the resolved entry point.

    Instance handlers share one instance across requests unless the
    configuration asks for one instance per request.

    Example:
        >>> handler = GenericHandler(GenericHandlerConfig(handler="myapp.Greeter"))
        >>> handler.handle_request({"name": "world"}, context)
    """

    _instance: GenericHandler | None = None
    _instance_lock = threading.Lock()

    def __init__(
        self,
        config: GenericHandlerConfig | None = None,
        bridge: TelemetryBridge | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            config: Runtime configuration, read from the environment when
                not given.
            bridge: Telemetry bridge, defaults to the singleton.
        """
        self._config = config if config is not None else GenericHandlerConfig.from_env()
        self._bridge = bridge if bridge is not None else TelemetryBridge.instance()
        self._entry_point: EntryPoint | None = None
        self._shared_handle: Callable[..., Any] | None = None
        self._lock = threading.RLock()

    @classmethod
    def instance(cls) -> GenericHandler:
        """Get the process-wide handler, configured from the environment."""
        with cls._instance_lock:
            if cls._instance is None:
                config = GenericHandlerConfig.from_env()
                configure_logging(config.log_level)
                cls._instance = cls(config)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    @property
    def config(self) -> GenericHandlerConfig:
        return self._config

    @property
    def entry_point(self) -> EntryPoint:
        """Get the entry point, resolving it on first access.

        Raises:
            InvalidEntryPointError: If the handler spec is missing or invalid.
        """
        with self._lock:
            if self._entry_point is None:
                self._entry_point = self._resolve()
            return self._entry_point

    def handle_request(self, event: Any, context: Any) -> Any:
        """Invoke a value shaped entry point.

        Raises:
            IllegalStateError: If the entry point takes streams.
        """
        entry = self.entry_point
        if entry.shape.is_stream:
            raise IllegalStateError(
                f"Entry point {entry.owner_type.__qualname__} takes streams, "
                "use handle_stream instead."
            )
        return self._invoke(entry, event, context)

    def handle_stream(self, input_stream: BinaryIO, output_stream: BinaryIO, context: Any) -> Any:
        """Invoke a stream shaped entry point.

        Raises:
            IllegalStateError: If the entry point takes a value.
        """
        entry = self.entry_point
        if not entry.shape.is_stream:
            raise IllegalStateError(
                f"Entry point {entry.owner_type.__qualname__} takes a value, "
                "use handle_request instead."
            )
        return self._invoke(entry, input_stream, output_stream, context)

    def _resolve(self) -> EntryPoint:
        try:
            if self._config.handler is None:
                raise InvalidEntryPointError(
                    f"The environment variable {HANDLER_ENV_VAR} has not been set, "
                    "execution cannot continue."
                )
            entry = EntryPoint.from_spec(self._config.handler)
        except GenericHandlerError as e:
            log_error(
                f"Could not resolve entry point: {e}",
                LogContext(handler=self._config.handler, operation="resolve"),
            )
            raise

        log_info(
            "Entry point resolved",
            LogContext(handler=self._config.handler, shape=entry.shape.name, operation="resolve"),
        )
        self._bridge.publish(EventNames.ENTRY_POINT_RESOLVED, entry)
        return entry

    def _handle(self, entry: EntryPoint) -> Callable[..., Any]:
        if entry.is_static or self._config.instance_per_request:
            return entry.handle_with_new_instance()

        with self._lock:
            if self._shared_handle is None:
                self._shared_handle = entry.handle_with_new_instance()
            return self._shared_handle

    def _invoke(self, entry: EntryPoint, *args: Any) -> Any:
        try:
            return self._handle(entry)(*args)
        except Exception as e:
            request_id = getattr(args[-1], "aws_request_id", None)
            if request_id is not None:
                request_id = str(request_id)
            log_error(
                f"Handler invocation failed: {e}",
                LogContext(
                    handler=self._config.handler,
                    request_id=request_id,
                    operation="invoke",
                ),
            )
            self._bridge.publish(EventNames.HANDLER_ERROR, e)
            raise
        finally:
            if self._bridge.is_active and self._bridge.listener_count(EventNames.MEMORY_SNAPSHOT):
                self._bridge.publish(EventNames.MEMORY_SNAPSHOT, snapshots())


def handle_request(event: Any, context: Any) -> Any:
    """Platform handler for value shaped entry points."""
    return GenericHandler.instance().handle_request(event, context)


def handle_stream(input_stream: BinaryIO, output_stream: BinaryIO, context: Any) -> Any:
    """Platform handler for stream shaped entry points."""
    return GenericHandler.instance().handle_stream(input_stream, output_stream, context)


__all__ = ["GenericHandler", "handle_request", "handle_stream"]
