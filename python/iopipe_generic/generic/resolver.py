"""Selection of a single candidate out of the scanned ones."""

from __future__ import annotations

from collections.abc import Mapping

from ..exceptions import NoEntryPointFoundError
from ..logging import log_debug
from .scanner import CandidateMethod
from .shapes import Shape


def select_candidate(candidates: Mapping[Shape, CandidateMethod]) -> CandidateMethod:
    """Pick the candidate with the highest priority shape.

    The choice depends only on which shapes are present, never on the
    order they were discovered in.

    Args:
        candidates: Mapping of shape to candidate, as built by the scanner.

    Returns:
        The preferred candidate.

    Raises:
        NoEntryPointFoundError: If there are no candidates.
    """
    if not candidates:
        raise NoEntryPointFoundError("No entry point candidates to select from.")

    shape = max(candidates)
    selected = candidates[shape]
    log_debug(
        "Selected entry point candidate",
        {
            "owner": selected.owner.__qualname__,
            "method": selected.name,
            "shape": shape.name,
            "static": selected.is_static,
        },
    )
    return selected


__all__ = ["select_candidate"]
