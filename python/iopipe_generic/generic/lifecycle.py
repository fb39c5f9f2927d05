"""Instance lifecycle for non-static entry points.

Instance handlers need a receiver. The InstanceFactory builds one with the
class's zero-argument constructor, or, when ``__init__`` requires
arguments, with a private zero-argument factory the class declares:

    >>> class Handler:
    ...     def __init__(self, client):
    ...         self.client = client
    ...
    ...     @classmethod
    ...     def _new_default(cls):
    ...         return cls(Client.from_env())

Private factories are closed by default. They are opened only for the
duration of a call, under a process-wide lock so concurrent calls never
leave one open or close it under another caller.
"""

from __future__ import annotations

import contextlib
import functools
import inspect
import threading
from collections.abc import Callable, Iterator
from typing import Any

from ..exceptions import InvalidEntryPointError
from ..logging import log_debug, log_warn

PRIVATE_FACTORY_NAME = "_new_default"

# Guards the accessible state of every Constructor
_ACCESS_LOCK = threading.RLock()


class Constructor:
    """A zero-argument way of building an instance of a class.

    Attributes:
        owner: The class being constructed.
        public: The class itself is the constructor.
    """

    def __init__(self, owner: type, factory: Callable[[], Any], public: bool) -> None:
        self.owner = owner
        self.public = public
        self._factory = factory
        self._accessible = public
        self._holders = 0

    @property
    def accessible(self) -> bool:
        return self._accessible

    def set_accessible(self, flag: bool) -> None:
        self._accessible = flag

    def invoke(self) -> Any:
        """Run the constructor.

        Raises:
            InvalidEntryPointError: If the constructor is not accessible or
                does not produce an instance of its class.
        """
        if not self._accessible:
            raise InvalidEntryPointError(
                f"Constructor of {self.owner.__qualname__} is not accessible."
            )

        try:
            instance = self._factory()
        except StopIteration as e:
            raise RuntimeError("Constructor raised StopIteration.") from e

        if not isinstance(instance, self.owner):
            raise InvalidEntryPointError(
                f"Constructor of {self.owner.__qualname__} returned {type(instance).__qualname__}."
            )
        return instance

    @contextlib.contextmanager
    def opened(self) -> Iterator[Constructor]:
        """Make the constructor accessible for the duration of the block.

        The original state is restored on every exit path. Failures while
        restoring are logged and suppressed.
        """
        if self.public:
            yield self
            return

        with _ACCESS_LOCK:
            if self._holders == 0:
                self.set_accessible(True)
            self._holders += 1

        try:
            yield self
        finally:
            with _ACCESS_LOCK:
                self._holders -= 1
                if self._holders == 0:
                    try:
                        self.set_accessible(False)
                    except Exception as e:
                        log_warn(f"Could not restore constructor access: {e}")

    def __repr__(self) -> str:
        kind = "public" if self.public else "private"
        return f"Constructor({self.owner.__qualname__}, {kind})"


def find_constructor(owner: type) -> Constructor:
    """Locate the zero-argument constructor of a class.

    Args:
        owner: The handler class.

    Returns:
        The public constructor, else the private ``_new_default`` factory.

    Raises:
        InvalidEntryPointError: If the class is abstract or has neither.
    """
    if inspect.isabstract(owner):
        raise InvalidEntryPointError(
            f"Could not construct an instance of the entry point class "
            f"{owner.__qualname__}, it is abstract."
        )

    if _accepts_no_arguments(owner):
        return Constructor(owner, owner, public=True)

    declared = vars(owner).get(PRIVATE_FACTORY_NAME)
    if isinstance(declared, (classmethod, staticmethod)):
        factory = declared.__get__(None, owner)
        if _accepts_no_arguments(factory):
            log_debug(f"Using private factory {PRIVATE_FACTORY_NAME} of {owner.__qualname__}")
            return Constructor(owner, factory, public=False)

    raise InvalidEntryPointError(
        f"Could not obtain the constructor for the entry point class {owner.__qualname__}."
    )


def _accepts_no_arguments(target: Callable[..., Any]) -> bool:
    try:
        inspect.signature(target).bind()
    except TypeError:
        return False
    except ValueError:
        # No signature available
        return False
    return True


class InstanceFactory:
    """Creates receivers for one instance entry point.

    The constructor is looked up on first use and shared afterwards.
    """

    def __init__(self, owner: type) -> None:
        self._owner = owner
        self._constructor: Constructor | None = None
        self._lock = threading.Lock()

    @property
    def constructor(self) -> Constructor:
        with self._lock:
            if self._constructor is None:
                self._constructor = find_constructor(self._owner)
            return self._constructor

    def new_instance(self) -> Any:
        """Create a new instance of the handler class.

        Exceptions raised by the constructor itself propagate unchanged.

        Raises:
            InvalidEntryPointError: If the class cannot be constructed.
        """
        constructor = self.constructor
        with constructor.opened():
            return constructor.invoke()


def bind(adapter: Callable[..., Any], receiver: Any, is_static: bool) -> Callable[..., Any]:
    """Attach the receiver to an adapter.

    Args:
        adapter: Canonical adapter of the entry point.
        receiver: Instance to call on, ignored for static entry points.
        is_static: Whether the entry point is static.

    Returns:
        A callable taking only the canonical arguments.
    """
    if is_static:
        return adapter
    return functools.partial(adapter, receiver)


__all__ = [
    "PRIVATE_FACTORY_NAME",
    "Constructor",
    "InstanceFactory",
    "bind",
    "find_constructor",
]
