"""Resolved entry point into a user supplied handler.

An EntryPoint hides how the handler method was declared: whatever its
shape, ``handle(receiver)`` returns a callable taking either
``(value, context)`` or ``(input, output, context)``.

Example:
    >>> entry = EntryPoint.from_spec("myapp.handlers.Greeter::greet")
    >>> entry.parameters()
    (<class 'object'>, <class 'iopipe_generic.context.Context'>)
    >>> handle = entry.handle_with_new_instance()
    >>> handle({"name": "world"}, context)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ..exceptions import IllegalStateError
from ..logging import log_debug
from .adapters import build_adapter, canonical_parameters
from .handler_spec import DEFAULT_METHOD, HandlerSpec
from .lifecycle import InstanceFactory, bind
from .resolver import select_candidate
from .scanner import scan_candidates
from .shapes import Shape


class EntryPoint:
    """The single normalized entry point of a handler class.

    Instances are immutable; build them with ``resolve``, ``from_spec`` or
    ``default`` rather than calling the constructor.

    Attributes:
        owner_type: The handler class.
        shape: Shape of the resolved method.
        is_static: No receiver is needed to call the method.
    """

    def __init__(
        self,
        owner_type: type,
        adapter: Callable[..., Any],
        is_static: bool,
        parameters: tuple[Any, ...],
        shape: Shape,
    ) -> None:
        self._owner_type = owner_type
        self._adapter = adapter
        self._is_static = is_static
        self._parameters = tuple(parameters)
        self._shape = shape
        self._instances = None if is_static else InstanceFactory(owner_type)

    @classmethod
    def resolve(cls, owner_type: type, method_name: str = DEFAULT_METHOD) -> EntryPoint:
        """Resolve the entry point of a class.

        Args:
            owner_type: Handler class.
            method_name: Method to resolve.

        Returns:
            The resolved entry point.

        Raises:
            NoEntryPointFoundError: If no method matches a known shape.
            UnsupportedShapeError: If the preferred method has a reserved shape.
        """
        candidate = select_candidate(scan_candidates(owner_type, method_name))
        parameters = canonical_parameters(candidate)
        adapter = build_adapter(candidate)

        log_debug(
            "Resolved entry point",
            {
                "owner": owner_type.__qualname__,
                "method": method_name,
                "shape": candidate.shape.name,
                "static": candidate.is_static,
            },
        )
        return cls(owner_type, adapter, candidate.is_static, parameters, candidate.shape)

    @classmethod
    def from_spec(cls, spec: str | HandlerSpec) -> EntryPoint:
        """Resolve the entry point named by a handler spec.

        Args:
            spec: A ``type[::method]`` string or a parsed HandlerSpec.

        Raises:
            InvalidEntryPointError: If the spec is malformed or the class
                cannot be loaded.
        """
        if isinstance(spec, str):
            spec = HandlerSpec.parse(spec)
        return cls.resolve(spec.load_type(), spec.method_name)

    @classmethod
    def default(cls, environ: Mapping[str, str] | None = None) -> EntryPoint:
        """Resolve the entry point named by ``IOPIPE_GENERIC_HANDLER``.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            InvalidEntryPointError: If the variable is unset or invalid.
        """
        return cls.from_spec(HandlerSpec.from_env(environ))

    @property
    def owner_type(self) -> type:
        return self._owner_type

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def is_static(self) -> bool:
        return self._is_static

    def parameters(self) -> tuple[Any, ...]:
        """Get the canonical parameter types, context type last."""
        return self._parameters

    def handle(self, receiver: Any = None) -> Callable[..., Any]:
        """Get the call-ready adapter.

        Args:
            receiver: Instance to call on. Ignored for static entry points.

        Returns:
            Callable taking the canonical arguments.
        """
        return bind(self._adapter, receiver, self._is_static)

    def handle_with_new_instance(self) -> Callable[..., Any]:
        """Get the call-ready adapter bound to a freshly built instance.

        Behaves like ``handle(None)`` for static entry points.
        """
        if self._is_static:
            return self.handle(None)
        return self.handle(self.new_instance())

    def new_instance(self) -> Any:
        """Create a new instance of the handler class.

        Raises:
            IllegalStateError: If the entry point is static.
            InvalidEntryPointError: If the class cannot be constructed.
        """
        if self._instances is None:
            raise IllegalStateError("Entry point is static, an instance cannot be created.")
        return self._instances.new_instance()

    def __repr__(self) -> str:
        kind = "static" if self._is_static else "instance"
        return f"EntryPoint({self._owner_type.__qualname__}, shape={self._shape.name}, {kind})"


__all__ = ["EntryPoint"]
