"""Several same-named handler methods on one class.

A class body can only bind one attribute per name, so a handler that
offers ``handle_request`` in more than one shape declares the extra shapes
as variants, in the style of ``property.setter``:

    >>> class Greeter:
    ...     @variants
    ...     def handle_request(self, event):
    ...         return f"hello {event}"
    ...
    ...     @handle_request.variant
    ...     def handle_request(self, event, context: Context):
    ...         return f"hello {event} from {context.aws_request_id}"

The entry point scanner sees every variant. Calling the attribute directly
dispatches to the first variant whose signature accepts the arguments.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any


class MethodVariants:
    """Descriptor holding the variants of one method name.

    Variants may be plain functions, ``staticmethod`` or ``classmethod``
    objects. They are kept in registration order.
    """

    def __init__(self, first: Any) -> None:
        self._members: list[Any] = []
        self.variant(first)

    def variant(self, member: Any) -> MethodVariants:
        """Register another variant.

        Args:
            member: Function, staticmethod or classmethod to add.

        Returns:
            This descriptor, so the decorated name keeps pointing at it.

        Raises:
            TypeError: If the member is not callable.
        """
        if not isinstance(member, (staticmethod, classmethod)) and not callable(member):
            raise TypeError(f"Variant must be callable, got {member!r}")
        self._members.append(member)
        return self

    @property
    def members(self) -> tuple[Any, ...]:
        """Get the registered variants, in registration order."""
        return tuple(self._members)

    @property
    def __isabstractmethod__(self) -> bool:
        return all(getattr(m, "__isabstractmethod__", False) for m in self._members)

    def __get__(self, instance: Any, owner: type | None = None) -> Callable[..., Any]:
        bound = [m.__get__(instance, owner) for m in self._members]

        def dispatch(*args: Any, **kwargs: Any) -> Any:
            for candidate in bound:
                try:
                    inspect.signature(candidate).bind(*args, **kwargs)
                except TypeError:
                    continue
                return candidate(*args, **kwargs)
            raise TypeError(f"No variant accepts {len(args)} positional argument(s)")

        return dispatch

    def __repr__(self) -> str:
        return f"MethodVariants({len(self._members)} variants)"


def variants(first: Any) -> MethodVariants:
    """Start a method with several variants, see the module docstring."""
    return MethodVariants(first)


__all__ = ["MethodVariants", "variants"]
