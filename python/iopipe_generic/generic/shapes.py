"""Catalog of the parameter shapes a handler method may have.

Shapes are listed in priority order, lowest first. When a class declares
the requested method in several shapes the highest one is used.

    0: ()
    1: (A)
    2: (A, Context)
    3: (I, O)
    4: (I, O, Context)
    5: (Execution, A)
    6: (Execution, I, O)

Shapes 3, 5 and 6 are recognized but reserved: resolving to one of them
fails instead of degrading to another shape.
"""

from __future__ import annotations

import io
import typing
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from ..context import Context, Execution


class Shape(IntEnum):
    """Recognized parameter shapes, the value doubles as the priority."""

    NO_ARGS = 0
    VALUE = 1
    VALUE_CONTEXT = 2
    STREAMS = 3
    STREAMS_CONTEXT = 4
    EXECUTION_VALUE = 5
    EXECUTION_STREAMS = 6

    @property
    def signature(self) -> str:
        """Short parameter signature, e.g. ``(A, Context)``."""
        return CATALOG[self].description

    @property
    def is_stream(self) -> bool:
        """True for shapes canonicalized to (input, output, context)."""
        return CATALOG[self].stream


@dataclass(frozen=True)
class ShapeDescriptor:
    """Static facts about one shape.

    Attributes:
        shape: The shape this descriptor belongs to.
        arity: Number of declared parameters, receiver excluded.
        description: Parameter signature shown in errors and logs.
        stream: Canonical form is (input, output, context).
        implemented: An adapter can be built for this shape.
    """

    shape: Shape
    arity: int
    description: str
    stream: bool
    implemented: bool

    @property
    def priority(self) -> int:
        return int(self.shape)

    def matches(self, parameter_types: Sequence[Any]) -> bool:
        """Check whether the parameter types classify as this shape."""
        return classify(parameter_types) is self.shape


CATALOG: dict[Shape, ShapeDescriptor] = {
    d.shape: d
    for d in (
        ShapeDescriptor(Shape.NO_ARGS, 0, "()", stream=False, implemented=True),
        ShapeDescriptor(Shape.VALUE, 1, "(A)", stream=False, implemented=True),
        ShapeDescriptor(Shape.VALUE_CONTEXT, 2, "(A, Context)", stream=False, implemented=True),
        ShapeDescriptor(Shape.STREAMS, 2, "(I, O)", stream=True, implemented=False),
        ShapeDescriptor(Shape.STREAMS_CONTEXT, 3, "(I, O, Context)", stream=True, implemented=True),
        ShapeDescriptor(Shape.EXECUTION_VALUE, 2, "(Execution, A)", stream=False, implemented=False),
        ShapeDescriptor(
            Shape.EXECUTION_STREAMS, 3, "(Execution, I, O)", stream=True, implemented=False
        ),
    )
}

_STREAM_BASES: tuple[type, ...] = (io.IOBase, typing.IO)


def _as_class(annotation: Any) -> type | None:
    """Get the class behind an annotation, None for non-class annotations."""
    origin = typing.get_origin(annotation)
    candidate = origin if origin is not None else annotation
    return candidate if isinstance(candidate, type) else None


def is_context_type(annotation: Any) -> bool:
    cls = _as_class(annotation)
    return cls is not None and issubclass(cls, Context)


def is_execution_type(annotation: Any) -> bool:
    cls = _as_class(annotation)
    return cls is not None and issubclass(cls, Execution)


def is_stream_type(annotation: Any) -> bool:
    """Check whether a parameter can receive an input or output stream."""
    cls = _as_class(annotation)
    return cls is not None and issubclass(cls, _STREAM_BASES)


def classify(parameter_types: Sequence[Any]) -> Shape | None:
    """Classify a method's parameter types into a shape.

    The first parameter picks the branch (execution handle, stream pair,
    plain value), the count and remaining types narrow it down.

    Args:
        parameter_types: Declared parameter types, receiver excluded.

    Returns:
        The matching shape, or None if the combination is not recognized.
    """
    count = len(parameter_types)
    if count > 3:
        return None

    first = parameter_types[0] if count > 0 else None
    second = parameter_types[1] if count > 1 else None
    third = parameter_types[2] if count > 2 else None

    if count > 0 and is_execution_type(first):
        if count == 3 and is_stream_type(second) and is_stream_type(third):
            return Shape.EXECUTION_STREAMS
        if count == 2:
            return Shape.EXECUTION_VALUE
        return None

    if count >= 2 and is_stream_type(first) and is_stream_type(second):
        if count == 2:
            return Shape.STREAMS
        if is_context_type(third):
            return Shape.STREAMS_CONTEXT
        return None

    if count == 2 and is_context_type(second):
        return Shape.VALUE_CONTEXT
    if count == 1:
        return Shape.VALUE
    if count == 0:
        return Shape.NO_ARGS
    return None


__all__ = [
    "CATALOG",
    "Shape",
    "ShapeDescriptor",
    "classify",
    "is_context_type",
    "is_execution_type",
    "is_stream_type",
]
