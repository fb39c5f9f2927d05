r"""Generic entry point resolution.

This package turns a handler class and a method name into one callable
with a canonical signature.

Pipeline:
- scan_candidates(): collect same-named methods along the MRO, one per shape
- select_candidate(): keep the highest priority shape
- build_adapter(): wrap the method into (value, context) or
  (input, output, context)
- InstanceFactory: build receivers for instance methods

Usage:
    from iopipe_generic.generic import EntryPoint

    entry = EntryPoint.from_spec("myapp.handlers.Greeter::greet")
    handle = entry.handle_with_new_instance()
    result = handle(event, context)

Shapes, lowest priority first:
    0: ()  1: (A)  2: (A, Context)  3: (I, O)  4: (I, O, Context)
    5: (Execution, A)  6: (Execution, I, O)
Shapes 3, 5 and 6 are reserved and raise UnsupportedShapeError.
"""

from __future__ import annotations

from .adapters import ForwardingAdapter, build_adapter, canonical_parameters
from .entry_point import EntryPoint
from .handler_spec import DEFAULT_METHOD, HandlerSpec
from .lifecycle import Constructor, InstanceFactory, bind, find_constructor
from .resolver import select_candidate
from .scanner import CandidateMethod, scan_candidates
from .shapes import CATALOG, Shape, ShapeDescriptor, classify
from .variants import MethodVariants, variants

__all__ = [
    # Facade
    "EntryPoint",
    "HandlerSpec",
    "DEFAULT_METHOD",
    # Shapes
    "Shape",
    "ShapeDescriptor",
    "CATALOG",
    "classify",
    # Resolution pipeline
    "CandidateMethod",
    "scan_candidates",
    "select_candidate",
    "ForwardingAdapter",
    "build_adapter",
    "canonical_parameters",
    # Instances
    "Constructor",
    "InstanceFactory",
    "bind",
    "find_constructor",
    # Variants
    "MethodVariants",
    "variants",
]
