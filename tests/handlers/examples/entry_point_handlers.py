"""Handler classes covering every entry point shape.

Each handler returns something that tells the tests which method ran, so
they can verify the selected shape and the arguments it received.

Example IOPIPE_GENERIC_HANDLER values:
    tests.handlers.examples.entry_point_handlers.ValueContextHandler
    tests.handlers.examples.entry_point_handlers.CustomMethodHandler::bar
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO, TYPE_CHECKING, Any, BinaryIO

from iopipe_generic import Context, Execution, variants

if TYPE_CHECKING:
    from decimal import Decimal

# =============================================================================
# One handler per shape
# =============================================================================


class NoArgsHandler:
    """Shape 0: () on an instance method."""

    def handle_request(self) -> dict[str, Any]:
        return {"invoked": "no_args"}


class ValueHandler:
    """Shape 1: (A)."""

    def handle_request(self, event: dict[str, Any]) -> dict[str, Any]:
        return {"invoked": "value", "event": event}


class ValueContextHandler:
    """Shape 2: (A, Context)."""

    def handle_request(self, event: dict[str, Any], context: Context) -> dict[str, Any]:
        return {"invoked": "value_context", "event": event, "request_id": context.aws_request_id}


class StreamPairHandler:
    """Shape 3: (I, O), reserved."""

    def handle_request(self, input_stream: BinaryIO, output_stream: BinaryIO) -> None:
        output_stream.write(input_stream.read())


class StreamHandler:
    """Shape 4: (I, O, Context)."""

    def handle_request(
        self, input_stream: IO[bytes], output_stream: IO[bytes], context: Context
    ) -> str:
        output_stream.write(input_stream.read().upper())
        return context.aws_request_id


class ExecutionValueHandler:
    """Shape 5: (Execution, A), reserved."""

    def handle_request(self, execution: Execution, event: dict[str, Any]) -> None:
        execution.custom_metric("event.size", len(event))


class ExecutionStreamsHandler:
    """Shape 6: (Execution, I, O), reserved."""

    def handle_request(
        self, execution: Execution, input_stream: BinaryIO, output_stream: BinaryIO
    ) -> None:
        output_stream.write(input_stream.read())


# =============================================================================
# Dispatch kinds
# =============================================================================


class StaticHandler:
    """Static (A, Context)."""

    @staticmethod
    def handle_request(event: Any, context: Context) -> dict[str, Any]:
        return {"invoked": "static", "event": event}


class StaticNoArgsHandler:
    """Static ()."""

    @staticmethod
    def handle_request() -> str:
        return "static_no_args"


class ClassMethodHandler:
    """Class method (A), bound to the class it is resolved on."""

    prefix = "base"

    @classmethod
    def handle_request(cls, event: str) -> str:
        return f"{cls.prefix}:{event}"


class DerivedClassMethodHandler(ClassMethodHandler):
    prefix = "derived"


# =============================================================================
# Several shapes under one name
# =============================================================================


class MixedShapesHandler:
    """(A) registered before (A, Context)."""

    @variants
    def handle_request(self, event: dict[str, Any]) -> str:
        return "value"

    @handle_request.variant
    def handle_request(self, event: dict[str, Any], context: Context) -> str:
        return "value_context"


class ReversedMixedShapesHandler:
    """(A, Context) registered before (A)."""

    @variants
    def handle_request(self, event: dict[str, Any], context: Context) -> str:
        return "value_context"

    @handle_request.variant
    def handle_request(self, event: dict[str, Any]) -> str:
        return "value"


class NoArgsAndStreamsHandler:
    """() and (I, O, Context) on one class, the stream form must win."""

    @variants
    def handle_request(self) -> str:
        return "no_args"

    @handle_request.variant
    def handle_request(self, input_stream: BinaryIO, output_stream: BinaryIO, context: Context) -> str:
        return "streams_context"


class DuplicateShapeHandler:
    """Two (A) variants, the first one is kept."""

    @variants
    def handle_request(self, event: Any) -> str:
        return "first"

    @handle_request.variant
    def handle_request(self, other: Any) -> str:
        return "second"


class AllShapesHandler:
    """Every shape at once, the reserved (Execution, I, O) form wins."""

    @variants
    def handle_request(self) -> None: ...

    @handle_request.variant
    def handle_request(self, event: Any) -> None: ...

    @handle_request.variant
    def handle_request(self, event: Any, context: Context) -> None: ...

    @handle_request.variant
    def handle_request(self, input_stream: BinaryIO, output_stream: BinaryIO) -> None: ...

    @handle_request.variant
    def handle_request(self, input_stream: BinaryIO, output_stream: BinaryIO, context: Context) -> None: ...

    @handle_request.variant
    def handle_request(self, execution: Execution, event: Any) -> None: ...

    @handle_request.variant
    def handle_request(self, execution: Execution, input_stream: BinaryIO, output_stream: BinaryIO) -> None: ...


# =============================================================================
# Hierarchies
# =============================================================================


class BaseGreeter:
    """(A, Context) on the base class."""

    def handle_request(self, event: Any, context: Context) -> str:
        return "base"


class InheritingGreeter(BaseGreeter):
    """Declares nothing, the base method is found."""


class MaskingGreeter(BaseGreeter):
    """() hides the base's higher priority (A, Context)."""

    def handle_request(self) -> str:
        return "masking"


class UnclassifiableOverrideGreeter(BaseGreeter):
    """An override with no known shape does not hide the base method."""

    def handle_request(self, a: Any, b: Any, c: Any, d: Any) -> str:
        return "four"


class AbstractGreeter(ABC):
    @abstractmethod
    def handle_request(self, event: Any, context: Context) -> str: ...


class ConcreteGreeter(AbstractGreeter):
    def handle_request(self, event: Any) -> str:
        return "concrete"


class AbstractOverValueHandler(ValueHandler, ABC):
    """Re-declares the method abstract, so the scan moves on to ValueHandler."""

    @abstractmethod
    def handle_request(self, event: Any, context: Context) -> Any: ...


# =============================================================================
# Construction
# =============================================================================


class CountingHandler:
    """Counts its instances."""

    created = 0

    def __init__(self) -> None:
        type(self).created += 1
        self.number = type(self).created

    def handle_request(self, event: Any) -> int:
        return self.number


class RequiresArgumentsHandler:
    def __init__(self, client: Any) -> None:
        self.client = client

    def handle_request(self, event: Any) -> Any:
        return self.client


class PrivateFactoryHandler:
    """Only constructible through its private factory."""

    def __init__(self, greeting: str) -> None:
        self.greeting = greeting

    @classmethod
    def _new_default(cls) -> PrivateFactoryHandler:
        return cls("hello")

    def handle_request(self, event: str) -> str:
        return f"{self.greeting} {event}"


class WrongFactoryHandler:
    def __init__(self, greeting: str) -> None:
        self.greeting = greeting

    @staticmethod
    def _new_default() -> str:
        return "not a handler"

    def handle_request(self, event: str) -> str:
        return event


class FailingConstructorHandler:
    def __init__(self) -> None:
        raise ValueError("constructor failed")

    def handle_request(self, event: Any) -> Any:
        return event


class StopIterationConstructorHandler:
    def __init__(self) -> None:
        raise StopIteration

    def handle_request(self, event: Any) -> Any:
        return event


# =============================================================================
# Misses and spec strings
# =============================================================================


class NoMatchHandler:
    """Nothing under handle_request matches a shape."""

    def handle_request(self, a: Any, b: Any, c: Any, d: Any) -> None: ...

    def other(self, event: Any) -> None: ...


class WrongOrderHandler:
    def handle_request(self, context: Context, event: Any) -> None: ...


class KeywordOnlyHandler:
    def handle_request(self, event: Any, *, required: Any) -> None: ...


class TypeCheckingOnlyEventHandler:
    """The event type is only imported for type checkers."""

    def handle_request(self, event: Decimal, context: Context) -> str:
        return f"{event}:{context.aws_request_id}"


class CustomMethodHandler:
    """Has both the default method and bar."""

    def handle_request(self) -> str:
        return "handle_request"

    def bar(self, event: Any) -> str:
        return f"bar:{event}"


class Outer:
    class Inner:
        def handle_request(self, event: Any) -> str:
            return "inner"


not_a_class = "handle_request"
