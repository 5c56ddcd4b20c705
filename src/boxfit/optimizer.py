"""
Engine entry point for the boxfit container packing project.

`optimize(request)` is the invocation contract of the packing engine:

1. Validate the request at the boundary (`validate_request`). Invalid
   input becomes a `configuration` failure, distinct from an infeasible
   packing.
2. Warn about fixed constraints smaller than the largest box on that axis
   (`constraint_warnings`); the run still proceeds.
3. Run the container size search and time it.
4. Return an `OptimizationResult`. Domain failures are returned as data,
   never raised, so a message channel driving this function always gets
   exactly one terminal outcome.

Unexpected internal errors are not caught here; `boxfit.worker` turns
them into an error message.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from pydantic import ValidationError

from .config import AXES
from .geometry import BoxInstance, max_extents
from .models import Constraints, OptimizationResult, OptimizeRequest
from .packers.container_search import ProgressCallback, SearchSettings, find_minimum_container
from .utils.timing import Timer

logger = logging.getLogger(__name__)

INFEASIBLE_MESSAGE = "Could not find valid packing"

_AXIS_LABELS = {"width": "W", "height": "H", "depth": "D"}


class ConfigurationError(ValueError):
    """Raised when a request cannot be run as given."""


# ---------------------------------------------------------------------------
# Boundary checks
# ---------------------------------------------------------------------------

def validate_request(request: OptimizeRequest) -> List[BoxInstance]:
    """
    Check a request beyond its field-level validation and expand its boxes.

    Raises
    ------
    ConfigurationError
        If a dimension or constraint is not finite, or expanded units do not
        carry unique instance ids.
    """
    instances = request.instances()
    if not instances:
        raise ConfigurationError("No boxes to pack.")

    for inst in instances:
        if not all(math.isfinite(v) for v in inst.dims):
            raise ConfigurationError(
                f"Box {inst.definition_id!r} has non-finite dimensions {inst.dims}."
            )

    ids = [inst.instance_id for inst in instances]
    if len(set(ids)) != len(ids):
        raise ConfigurationError("Expanded boxes must have unique instance ids.")

    for axis, value in request.constraints.as_dict().items():
        if value is not None and not math.isfinite(value):
            raise ConfigurationError(f"Constraint on {axis} must be finite, got {value}.")

    return instances


def constraint_warnings(boxes: Sequence[BoxInstance], constraints: Constraints) -> List[str]:
    """
    Messages for fixed axes smaller than the largest box extent on that axis.

    Such a constraint cannot be satisfied by the unrotated box; the engine
    still runs and reports whatever it manages to place.
    """
    extents = max_extents(boxes)
    fixed = constraints.as_dict()

    messages = []
    for axis in AXES:
        value = fixed[axis]
        if value is not None and value < extents[axis]:
            messages.append(f"{_AXIS_LABELS[axis]} must be ≥ {extents[axis]:g}")
    return messages


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def optimize(
    request: OptimizeRequest,
    progress: Optional[ProgressCallback] = None,
) -> OptimizationResult:
    """
    Find a near-minimal container and a stable placement for `request`.

    Parameters
    ----------
    request:
        Boxes, constraints, rotation flag and Monte-Carlo budgets.
    progress:
        Optional callback receiving (message, percent) updates, percent
        non-decreasing from 0 to 100.

    Returns
    -------
    OptimizationResult
        `success=False` with `failure_kind` 'configuration' or 'infeasible'
        when nothing could be packed; otherwise the rounded container and
        placed boxes (possibly fewer than requested).
    """
    try:
        boxes = validate_request(request)
    except ConfigurationError as exc:
        logger.error("rejected request: %s", exc)
        return OptimizationResult(success=False, error=str(exc), failure_kind="configuration")

    warnings = constraint_warnings(boxes, request.constraints)
    for message in warnings:
        logger.warning("constraint warning: %s", message)

    mc = request.monte_carlo_config
    settings = SearchSettings(
        allow_rotation=request.allow_rotation,
        search_attempts=mc.search_attempts,
        final_attempts=mc.final_attempts,
        use_noise=mc.use_noise,
    )

    with Timer("optimize") as timer:
        outcome = find_minimum_container(
            boxes,
            request.constraints.as_dict(),
            settings=settings,
            progress=progress,
        )

    if outcome is None:
        return OptimizationResult(
            success=False,
            execution_time_ms=timer.elapsed_ms,
            total_boxes=len(boxes),
            warnings=warnings,
            error=INFEASIBLE_MESSAGE,
            failure_kind="infeasible",
        )

    return OptimizationResult(
        success=True,
        container=outcome.container,
        placed_boxes=outcome.placed_boxes,
        execution_time_ms=timer.elapsed_ms,
        total_boxes=len(boxes),
        warnings=warnings,
    )


def optimize_payload(
    payload: dict,
    progress: Optional[ProgressCallback] = None,
) -> OptimizationResult:
    """
    Like `optimize`, but starting from a raw (camelCase or snake_case) dict.

    Field validation errors are returned as a configuration failure.
    """
    try:
        request = OptimizeRequest.model_validate(payload)
    except ValidationError as exc:
        logger.error("invalid request payload: %s", exc)
        return OptimizationResult(success=False, error=str(exc), failure_kind="configuration")
    return optimize(request, progress=progress)


__all__ = [
    "INFEASIBLE_MESSAGE",
    "ConfigurationError",
    "validate_request",
    "constraint_warnings",
    "optimize",
    "optimize_payload",
]
