"""
Validity solver for the boxfit container packing project.

Pure geometric / physical predicates used by the placement heuristic for
every candidate it considers:

- `overlaps` / `collides_with_any`: strict AABB interior overlap.
- `within_container`: inclusive containment in the open-top container.
- `drop_to_rest`: a discrete, stepped gravity drop.
- `support_ratio`: how much of a box's footprint rests on boxes below.
- `is_valid`: the combined placement predicate.

Every function takes "cuboids": objects exposing `x, y, z, width,
height, depth` with (x, y, z) the center (see `boxfit.geometry`).
None of them raise; degenerate dimensions are rejected at the boundary
(`boxfit.optimizer.validate_request`).
"""

from __future__ import annotations

from typing import Any, Sequence

from .config import (
    CANTILEVER_RATIO,
    DEFAULT_MIN_STABILITY,
    DROP_CLEARANCE,
    DROP_STEP,
    FLOOR_EPSILON,
    FLOOR_TOLERANCE,
    SUPPORT_THRESHOLD,
)
from .geometry import Container, PlacedBox, cuboid_bounds, footprint_polygon


# ---------------------------------------------------------------------------
# Collision and containment
# ---------------------------------------------------------------------------

def overlaps(a: Any, b: Any) -> bool:
    """
    Axis-aligned bounding box overlap test.

    Overlap exists only if the boxes overlap on ALL 3 axes with positive
    volume. Touching faces / edges (maxA == minB) are NOT considered overlap.
    """
    a_minx, a_miny, a_minz, a_maxx, a_maxy, a_maxz = cuboid_bounds(a)
    b_minx, b_miny, b_minz, b_maxx, b_maxy, b_maxz = cuboid_bounds(b)

    return (
        (a_maxx > b_minx and a_minx < b_maxx)
        and (a_maxy > b_miny and a_miny < b_maxy)
        and (a_maxz > b_minz and a_minz < b_maxz)
    )


def collides_with_any(box: Any, placed: Sequence[Any]) -> bool:
    """
    True if `box` overlaps any box in `placed`.
    """
    for other in placed:
        if overlaps(box, other):
            return True
    return False


def within_container(box: Any, container: Container) -> bool:
    """
    Check that all six faces of `box` lie inside the container (inclusive).
    """
    minx, miny, minz, maxx, maxy, maxz = cuboid_bounds(box)
    cminx, cminy, cminz, cmaxx, cmaxy, cmaxz = container.bounds()

    return (
        minx >= cminx
        and maxx <= cmaxx
        and miny >= cminy
        and maxy <= cmaxy
        and minz >= cminz
        and maxz <= cmaxz
    )


# ---------------------------------------------------------------------------
# Gravity
# ---------------------------------------------------------------------------

def drop_to_rest(box: PlacedBox, placed: Sequence[Any], container: Container) -> float:
    """
    Simulate gravity on `box` and return the y it comes to rest at.

    Starting from the box's current y, test positions DROP_STEP apart going
    down. At the first position that collides with a placed box, return
    that position plus DROP_CLEARANCE. If the floor is reached without an
    obstruction, return height / 2 + FLOOR_EPSILON.

    This is a discrete simulation on purpose: the step size bounds how
    many collision checks a drop costs, and it must not be replaced by an
    analytic "highest surface below" lookup.

    `box` must be a `PlacedBox` (it is moved with `with_y`). `container`
    is accepted for interface symmetry with the other predicates; the
    floor is always y = 0.
    """
    min_y = box.height / 2
    test_y = box.y

    while test_y > min_y:
        test_box = box.with_y(test_y)
        if collides_with_any(test_box, placed):
            return test_y + DROP_CLEARANCE
        test_y -= DROP_STEP

    return min_y + FLOOR_EPSILON


# ---------------------------------------------------------------------------
# Stability
# ---------------------------------------------------------------------------

def support_ratio(box: Any, placed: Sequence[Any], container: Container) -> float:
    """
    Fraction of the box's bottom face supported by boxes directly below.

    - A box whose bottom is within FLOOR_TOLERANCE of the floor returns 1.0.
    - Otherwise every placed box whose top lies within SUPPORT_THRESHOLD of
      the candidate's bottom contributes its x/z footprint overlap area.
      The summed area is divided by the candidate footprint and clamped
      to 1.0.
    - Ratios below CANTILEVER_RATIO are halved (cantilever penalty).

    Returns
    -------
    float
        A score in [0, 1]; higher is more stable.
    """
    bottom = box.y - box.height / 2
    if abs(bottom) < FLOOR_TOLERANCE:
        return 1.0

    footprint = footprint_polygon(box)
    bottom_area = box.width * box.depth

    supported_area = 0.0
    for other in placed:
        other_top = other.y + other.height / 2
        if abs(other_top - bottom) < SUPPORT_THRESHOLD:
            supported_area += footprint.intersection(footprint_polygon(other)).area

    ratio = min(supported_area / bottom_area, 1.0)

    if ratio < CANTILEVER_RATIO:
        return ratio * 0.5

    return ratio


def is_valid(
    box: Any,
    placed: Sequence[Any],
    container: Container,
    min_stability: float = DEFAULT_MIN_STABILITY,
) -> bool:
    """
    Check whether `box` can be placed as-is.

    Requires, in order:

    1. containment in `container`;
    2. no collision with any placed box;
    3. for boxes whose bottom is more than FLOOR_TOLERANCE above the floor,
       `support_ratio(...) >= min_stability`.
    """
    if not within_container(box, container):
        return False

    if collides_with_any(box, placed):
        return False

    bottom = box.y - box.height / 2
    if bottom > FLOOR_TOLERANCE:
        if support_ratio(box, placed, container) < min_stability:
            return False

    return True


__all__ = [
    "overlaps",
    "collides_with_any",
    "within_container",
    "drop_to_rest",
    "support_ratio",
    "is_valid",
]
