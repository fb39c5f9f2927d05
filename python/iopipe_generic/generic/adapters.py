"""Canonical adapters for resolved handler methods.

Every entry point is called in one of two canonical forms:

- ``(value, context)`` for shapes 0, 1, 2 and 5
- ``(input, output, context)`` for shapes 3, 4 and 6

Instance adapters additionally take the receiver as their first argument.
Methods already declared in a canonical form are used as is; shorter
methods get a ForwardingAdapter that drops the arguments they did not ask
for.

Example:
    >>> class Greeter:
    ...     def handle_request(self, name):
    ...         return f"hello {name}"
    ...
    >>> candidate = select_candidate(scan_candidates(Greeter, "handle_request"))
    >>> adapter = build_adapter(candidate)
    >>> adapter(Greeter(), "world", context)
    'hello world'
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..context import INPUT_STREAM_TYPE, OUTPUT_STREAM_TYPE, Context
from ..exceptions import UnsupportedShapeError
from .scanner import CandidateMethod
from .shapes import CATALOG, Shape


class ForwardingAdapter:
    """Canonical callable forwarding to a method with fewer parameters.

    The adapter keeps no per-call state, so a single instance can be
    called concurrently.

    Attributes:
        function: The wrapped handler method.
        shape: Shape of the wrapped method.
        is_static: No receiver is expected as first argument.
    """

    def __init__(self, function: Callable[..., Any], shape: Shape, is_static: bool) -> None:
        self._function = function
        self._shape = shape
        self._is_static = is_static
        self._kept = CATALOG[shape].arity
        self._arity = (3 if shape.is_stream else 2) + (0 if is_static else 1)

    @property
    def function(self) -> Callable[..., Any]:
        return self._function

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def is_static(self) -> bool:
        return self._is_static

    def __call__(self, *args: Any) -> Any:
        if len(args) != self._arity:
            raise TypeError(
                f"Entry point adapter takes {self._arity} positional arguments "
                f"but {len(args)} were given"
            )

        if self._is_static:
            return self._function(*args[: self._kept])
        return self._function(args[0], *args[1 : 1 + self._kept])

    def unwrap(self) -> Callable[..., Any]:
        """Get the original handler method."""
        return self._function

    def __repr__(self) -> str:
        name = getattr(self._function, "__qualname__", repr(self._function))
        kind = "static" if self._is_static else "instance"
        return f"ForwardingAdapter({name}, shape={self._shape.name}, {kind})"


def canonical_parameters(candidate: CandidateMethod) -> tuple[Any, ...]:
    """Get the canonical parameter types for a candidate.

    Args:
        candidate: The selected candidate.

    Returns:
        ``(value, Context)`` or ``(input, output, Context)``; declared types
        are kept where present.
    """
    declared = candidate.parameter_types
    first = declared[0] if len(declared) > 0 else None
    second = declared[1] if len(declared) > 1 else None

    if candidate.shape.is_stream:
        return (
            first if first is not None else INPUT_STREAM_TYPE,
            second if second is not None else OUTPUT_STREAM_TYPE,
            Context,
        )
    return (first if first is not None else object, Context)


def build_adapter(candidate: CandidateMethod) -> Callable[..., Any]:
    """Build the canonical adapter for a candidate.

    Args:
        candidate: The selected candidate.

    Returns:
        A callable taking the canonical arguments, preceded by the receiver
        for instance methods.

    Raises:
        UnsupportedShapeError: If the candidate has a reserved shape.
    """
    shape = candidate.shape
    if not CATALOG[shape].implemented:
        raise UnsupportedShapeError(shape)

    # Already canonical
    if shape in (Shape.VALUE_CONTEXT, Shape.STREAMS_CONTEXT):
        return candidate.function

    return ForwardingAdapter(candidate.function, shape, candidate.is_static)


__all__ = ["ForwardingAdapter", "build_adapter", "canonical_parameters"]
