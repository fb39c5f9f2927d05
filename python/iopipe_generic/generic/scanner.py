"""Candidate scanning across a handler class hierarchy.

The scanner walks the class and then its ancestors in MRO order, looking
at the callables each level declares under the requested name. It records
the first callable found for every shape and stops as soon as a level has
produced a match, so a subclass that declares the method hides every
ancestor declaration, even one with a higher priority shape.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from ..exceptions import NoEntryPointFoundError
from ..logging import log_debug, log_trace
from .shapes import CATALOG, Shape, classify
from .variants import MethodVariants

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True)
class CandidateMethod:
    """A declared callable that matched one of the shapes.

    Attributes:
        function: The callable to invoke. Takes the receiver first unless
            ``is_static`` is set.
        shape: Shape the declared parameters classify as.
        is_static: No receiver is passed at call time.
        parameter_types: Declared parameter types, receiver excluded.
        owner: Class whose namespace declares the callable.
        name: Attribute name the callable was found under.
    """

    function: Callable[..., Any]
    shape: Shape
    is_static: bool
    parameter_types: tuple[Any, ...]
    owner: type
    name: str


def scan_candidates(target: type, method_name: str) -> dict[Shape, CandidateMethod]:
    """Collect the candidate methods of a class, one per shape.

    Args:
        target: Handler class to scan.
        method_name: Name of the method to look for.

    Returns:
        Mapping of shape to the first candidate found with that shape.

    Raises:
        NoEntryPointFoundError: If no declared method matches any shape.
    """
    found: dict[Shape, CandidateMethod] = {}

    for level in target.__mro__:
        # An earlier level matched, ancestors are not considered
        if found:
            break

        for candidate in _declared_candidates(target, level, method_name):
            if candidate.shape in found:
                log_trace(
                    "Ignoring duplicate entry point candidate",
                    {"owner": level.__qualname__, "shape": candidate.shape.name},
                )
                continue

            found[candidate.shape] = candidate
            if len(found) == len(CATALOG):
                return found

    if not found:
        raise NoEntryPointFoundError(
            f"The entry point {method_name} in class {target.__module__}.{target.__qualname__} "
            "is not valid, no method was found."
        )

    log_debug(
        "Scanned entry point candidates",
        {
            "target": target.__qualname__,
            "method": method_name,
            "shapes": ",".join(s.name for s in sorted(found)),
        },
    )
    return found


def _declared_candidates(
    target: type, level: type, method_name: str
) -> Iterator[CandidateMethod]:
    """Yield the classifiable callables one class declares under a name."""
    declared = vars(level).get(method_name)
    if declared is None:
        return

    members = declared.members if isinstance(declared, MethodVariants) else (declared,)
    for member in members:
        # Abstract methods cannot be called
        if getattr(member, "__isabstractmethod__", False):
            log_trace("Skipping abstract method", {"owner": level.__qualname__})
            continue

        candidate = _candidate_for(target, level, method_name, member)
        if candidate is None:
            log_trace(
                "Skipping method with unrecognized parameters",
                {"owner": level.__qualname__, "method": method_name},
            )
            continue
        yield candidate


def _candidate_for(
    target: type, level: type, method_name: str, member: Any
) -> CandidateMethod | None:
    function: Callable[..., Any]
    if isinstance(member, staticmethod):
        function = raw = member.__func__
        skip, is_static = 0, True
    elif isinstance(member, classmethod):
        # Bound like getattr(target, name) would bind it
        raw = member.__func__
        function = member.__get__(None, target)
        skip, is_static = 1, True
    elif inspect.isfunction(member):
        function = raw = member
        skip, is_static = 1, False
    else:
        return None

    parameter_types = _parameter_types(raw, skip)
    if parameter_types is None:
        return None

    shape = classify(parameter_types)
    if shape is None:
        return None

    return CandidateMethod(
        function=function,
        shape=shape,
        is_static=is_static,
        parameter_types=parameter_types,
        owner=level,
        name=method_name,
    )


def _parameter_types(function: Callable[..., Any], skip: int) -> tuple[Any, ...] | None:
    """Get the positional parameter types of a function.

    Args:
        function: The raw function.
        skip: Leading parameters to drop (the receiver).

    Returns:
        The types, ``object`` for unannotated parameters, or None if the
        function cannot be called positionally.
    """
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None

    try:
        hints = typing.get_type_hints(function)
    except (NameError, TypeError) as e:
        log_debug(f"Could not evaluate all annotations of {function.__qualname__}: {e}")
        hints = _evaluate_each(function)

    parameters = list(signature.parameters.values())
    if len(parameters) < skip or any(p.kind not in _POSITIONAL for p in parameters[:skip]):
        return None

    types: list[Any] = []
    for parameter in parameters[skip:]:
        if parameter.kind in _POSITIONAL:
            types.append(hints.get(parameter.name, object))
        elif parameter.kind is inspect.Parameter.KEYWORD_ONLY and parameter.default is parameter.empty:
            return None
    return tuple(types)


def _evaluate_each(function: Callable[..., Any]) -> dict[str, Any]:
    """Evaluate annotations one by one, leaving out those that fail.

    Names imported only under ``TYPE_CHECKING`` cannot be evaluated at
    runtime; they become ``object`` without hiding the other annotations.
    """
    namespace = getattr(function, "__globals__", {})
    hints: dict[str, Any] = {}
    for name, annotation in inspect.get_annotations(function).items():
        if not isinstance(annotation, str):
            hints[name] = annotation
            continue
        try:
            hints[name] = eval(annotation, namespace)
        except Exception as e:
            log_trace(
                "Treating unresolvable annotation as object",
                {"function": function.__qualname__, "parameter": name, "error": e},
            )
    return hints


__all__ = ["CandidateMethod", "scan_candidates"]
