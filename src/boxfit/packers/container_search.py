"""
Container size search for the boxfit container packing project.

This module drives the placement heuristic to find a near-minimal
container. The pipeline is linear:

1. Seed each axis: fixed constraints keep their value, free axes start at
   the largest box extent on that axis.
2. Re-estimate all free axes together from the total box volume
   (plus a VOLUME_BUFFER margin).
3. Binary search each free axis in turn (width, height, depth), holding
   the other axes fixed. A probe succeeds when any of `search_attempts`
   seeded attempts places every box.
4. Run `final_attempts` seeded attempts at the found size and keep the
   best one.
5. If boxes are still missing, grow the free axes by EXPANSION_FACTOR and
   retry a single seed-0 attempt, up to MAX_EXPANSION_ATTEMPTS times.
6. Round every axis up to a multiple of ROUNDING_INCREMENT.

The search never re-places boxes after rounding: rounding only grows the
container, so the accepted placement stays contained.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ..config import (
    AXES,
    EXPANSION_FACTOR,
    MAX_EXPANSION_ATTEMPTS,
    ROUNDING_DECIMALS,
    ROUNDING_INCREMENT,
    SEARCH_EPSILON,
    VOLUME_BUFFER,
)
from ..geometry import BoxInstance, Container, PlacedBox, max_extents, total_volume
from .heuristic import attempt_packing

logger = logging.getLogger(__name__)

# progress(message, percent)
ProgressCallback = Callable[[str, int], None]


# ---------------------------------------------------------------------------
# Small value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchSettings:
    """
    Knobs of one search run. Mirrors `models.MonteCarloConfig` plus rotation.
    """

    allow_rotation: bool = False
    search_attempts: int = 15
    final_attempts: int = 10
    use_noise: bool = True


@dataclass
class SearchOutcome:
    """
    Result of `find_minimum_container`.
    """

    container: Container
    placed_boxes: List[PlacedBox]
    search_probes: int = 0
    expansions: int = 0


class ProgressReporter:
    """
    Forwards progress to an optional callback, never letting the percent go down.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.last = 0

    def __call__(self, message: str, percent: float) -> None:
        self.last = max(self.last, min(100, int(percent)))
        logger.debug("progress %3d%% %s", self.last, message)
        if self.callback is not None:
            self.callback(message, self.last)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def round_container(container: Container, increment: float = ROUNDING_INCREMENT) -> Container:
    """
    Round every axis up to a multiple of `increment`, then to ROUNDING_DECIMALS.

    Already aligned sizes are left unchanged.
    """
    def _round(value: float) -> float:
        return round(math.ceil(value / increment) * increment, ROUNDING_DECIMALS)

    return Container(
        width=_round(container.width),
        height=_round(container.height),
        depth=_round(container.depth),
    )


def expand_value(value: float) -> float:
    """
    Grow one axis for the expansion fallback: ceil(value * EXPANSION_FACTOR),
    or value + 1 when that would not increase it.
    """
    grown = float(math.ceil(value * EXPANSION_FACTOR))
    if grown <= value:
        grown = value + 1
    return grown


def initial_container(
    boxes: Sequence[BoxInstance],
    constraints: Dict[str, Optional[float]],
) -> Container:
    """
    Starting container: fixed axes from constraints, free axes estimated
    from the total box volume.
    """
    extents = max_extents(boxes)
    free_axes = [axis for axis in AXES if constraints.get(axis) is None]

    sizes = {
        axis: float(constraints[axis]) if constraints.get(axis) is not None else extents[axis]
        for axis in AXES
    }

    if free_axes:
        fixed_volume = 1.0
        for axis in AXES:
            if constraints.get(axis) is not None:
                fixed_volume *= float(constraints[axis])

        target = total_volume(boxes) * VOLUME_BUFFER
        per_axis = (target / fixed_volume) ** (1.0 / len(free_axes))
        for axis in free_axes:
            sizes[axis] = max(extents[axis], float(math.ceil(per_axis)))

    return Container(**sizes)


def _places_all(
    boxes: Sequence[BoxInstance],
    container: Container,
    settings: SearchSettings,
) -> bool:
    for seed in range(settings.search_attempts):
        placed = attempt_packing(
            boxes,
            container,
            seed=seed,
            allow_rotation=settings.allow_rotation,
            use_noise=settings.use_noise,
        )
        if len(placed) == len(boxes):
            return True
    return False


# ---------------------------------------------------------------------------
# Binary search
# ---------------------------------------------------------------------------

def binary_search_dimension(
    boxes: Sequence[BoxInstance],
    base: Container,
    axis: str,
    low: float,
    high: float,
    settings: SearchSettings,
    report: Optional[ProgressReporter] = None,
    progress_base: float = 0.0,
    progress_range: float = 0.0,
) -> tuple[float, int]:
    """
    Find the smallest value of `axis` in [low, high] at which all boxes fit.

    Standard bisection with tolerance SEARCH_EPSILON: a successful probe
    narrows the upper bound, a failed one raises the lower bound by
    `mid + SEARCH_EPSILON`. If no probe succeeds, `high` is returned.

    Returns
    -------
    (best_fit, probes)
    """
    best_fit = high
    initial_range = high - low
    probes = 0

    while high - low > SEARCH_EPSILON:
        mid = (low + high) / 2
        probes += 1

        if report is not None and initial_range > 0:
            done = 1 - (high - low) / initial_range
            report(f"Optimizing {axis}: {mid:.1f}...", math.floor(progress_base + done * progress_range))

        if _places_all(boxes, base.with_axis(axis, mid), settings):
            best_fit = mid
            high = mid
        else:
            low = mid + SEARCH_EPSILON

    logger.debug("binary search on %s converged to %.4f after %d probes", axis, best_fit, probes)
    return best_fit, probes


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def find_minimum_container(
    boxes: Sequence[BoxInstance],
    constraints: Dict[str, Optional[float]],
    settings: Optional[SearchSettings] = None,
    progress: Optional[ProgressCallback] = None,
) -> Optional[SearchOutcome]:
    """
    Search for a near-minimal container and a placement of `boxes` inside it.

    Parameters
    ----------
    boxes:
        Expanded box instances (at least one).
    constraints:
        Mapping axis -> fixed size or None (free, to be minimized).
    settings:
        Rotation flag and Monte-Carlo budgets. Defaults to `SearchSettings()`.
    progress:
        Optional callback receiving (message, percent) updates.

    Returns
    -------
    SearchOutcome or None
        None when not a single box could be placed. Otherwise the rounded
        container and the best placement found, which may be partial.
    """
    settings = settings or SearchSettings()
    report = ProgressReporter(progress)
    report("Initializing optimization...", 0)

    def attempt(container: Container, seed: int) -> List[PlacedBox]:
        return attempt_packing(
            boxes,
            container,
            seed=seed,
            allow_rotation=settings.allow_rotation,
            use_noise=settings.use_noise,
        )

    free_axes = [axis for axis in AXES if constraints.get(axis) is None]
    extents = max_extents(boxes)
    current = initial_container(boxes, constraints)
    probes = 0

    logger.info(
        "searching container for %d boxes, free axes=%s, start=(%.3f, %.3f, %.3f)",
        len(boxes),
        free_axes,
        current.width,
        current.height,
        current.depth,
    )

    # Per-axis binary search
    if free_axes:
        dim_range = 40.0 / len(free_axes)
        for index, axis in enumerate(free_axes):
            dim_start = 10 + index * dim_range
            report(f"Optimizing dimension: {axis}...", math.floor(dim_start))

            value = getattr(current, axis)
            best_fit, n = binary_search_dimension(
                boxes,
                current,
                axis,
                low=extents[axis],
                high=max(value * 3, extents[axis] * 5),
                settings=settings,
                report=report,
                progress_base=dim_start,
                progress_range=dim_range,
            )
            probes += n
            current = current.with_axis(axis, best_fit)

    # Final Monte-Carlo pass
    report("Finalizing packing (Monte Carlo)...", 50)
    best: List[PlacedBox] = []
    for seed in range(settings.final_attempts):
        report(
            f"Finalizing packing (Seed {seed + 1}/{settings.final_attempts})...",
            50 + math.floor(seed / settings.final_attempts * 10),
        )
        placed = attempt(current, seed)
        if len(placed) > len(best):
            best = placed
        if len(best) == len(boxes):
            break

    # Expansion fallback
    expansions = 0
    if len(best) < len(boxes) and free_axes:
        while len(best) < len(boxes) and expansions < MAX_EXPANSION_ATTEMPTS:
            expansions += 1
            report(
                f"Expanding container (Attempt {expansions}/{MAX_EXPANSION_ATTEMPTS})...",
                60 + math.floor(expansions / MAX_EXPANSION_ATTEMPTS * 30),
            )
            for axis in free_axes:
                current = current.with_axis(axis, expand_value(getattr(current, axis)))
            best = attempt(current, 0)

    container = round_container(current)
    report("Done!", 100)

    logger.info(
        "container (%.4f, %.4f, %.4f): placed %d/%d boxes (%d probes, %d expansions)",
        container.width,
        container.height,
        container.depth,
        len(best),
        len(boxes),
        probes,
        expansions,
    )

    if not best:
        return None

    return SearchOutcome(
        container=container,
        placed_boxes=best,
        search_probes=probes,
        expansions=expansions,
    )


__all__ = [
    "ProgressCallback",
    "SearchSettings",
    "SearchOutcome",
    "ProgressReporter",
    "round_container",
    "expand_value",
    "initial_container",
    "binary_search_dimension",
    "find_minimum_container",
]
