"""Custom exceptions for iopipe-generic.

This module provides the hierarchy of exceptions raised while resolving
and invoking a generic handler entry point.

Resolution errors (``InvalidEntryPointError``, ``NoEntryPointFoundError``,
``UnsupportedShapeError``) are fatal to process startup and are never
retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .generic.shapes import Shape


class GenericHandlerError(Exception):
    """Base exception for all iopipe-generic errors.

    Example:
        >>> try:
        ...     entry = EntryPoint.default()
        ... except GenericHandlerError as e:
        ...     print(f"Cannot start: {e}")
    """

    pass


class InvalidEntryPointError(GenericHandlerError):
    """Raised when an entry point can be named but not used.

    Common causes:
    - IOPIPE_GENERIC_HANDLER is unset or malformed
    - The named module or class does not exist
    - The handler class cannot be constructed

    Example:
        >>> try:
        ...     EntryPoint.from_spec("missing.module.Handler")
        ... except InvalidEntryPointError as e:
        ...     print(f"Bad handler: {e}")
    """

    pass


class NoEntryPointFoundError(InvalidEntryPointError):
    """Raised when no method on the handler class matches a known shape.

    Example:
        >>> class Empty:
        ...     pass
        >>> EntryPoint.resolve(Empty, "handle_request")
        Traceback (most recent call last):
        ...
        NoEntryPointFoundError: ...
    """

    pass


class UnsupportedShapeError(GenericHandlerError, NotImplementedError):
    """Raised when the selected method has a reserved, unimplemented shape.

    The resolver never falls back to a lower priority shape when this
    happens, the handler has to be changed instead.

    Attributes:
        shape: The shape that was selected.
    """

    def __init__(self, shape: Shape, message: str | None = None) -> None:
        super().__init__(
            message or f"Entry points of shape {shape.name} {shape.signature} are not supported"
        )
        self.shape = shape


class IllegalStateError(GenericHandlerError, RuntimeError):
    """Raised when an operation does not fit the handler's dispatch mode.

    Example:
        >>> entry = EntryPoint.resolve(StaticHandler, "handle_request")
        >>> entry.new_instance()
        Traceback (most recent call last):
        ...
        IllegalStateError: Entry point is static, an instance cannot be created.
    """

    pass


__all__ = [
    "GenericHandlerError",
    "InvalidEntryPointError",
    "NoEntryPointFoundError",
    "UnsupportedShapeError",
    "IllegalStateError",
]
