"""
Seeded greedy placement heuristic (one "attempt").

Given a box list, a fixed container and an integer seed, an attempt:

1. Orders the boxes by volume, perturbed by seeded noise when enabled.
2. Places boxes one by one, greedily and without backtracking:
   - enumerate orientations (all unique axis permutations if rotation is
     allowed, otherwise the canonical one),
   - generate candidates for each orientation (`packers.candidates`),
   - sort them bottom-back-left (ascending y, then z, then x),
   - drop non-stacking candidates with `physics.drop_to_rest`,
   - commit the first candidate accepted by `physics.is_valid`.
3. Returns the placed boxes. Boxes without a valid candidate are skipped;
   judging success on the placed count is left to the caller.

Randomness comes from `SineStream`, a tiny sine-hash generator chosen for
seed-to-output reproducibility rather than statistical quality. Seed 0
never draws from it and always yields pure descending-volume order.
"""

from __future__ import annotations

import functools
import logging
import math
from typing import List, Optional, Sequence

from ..config import MIN_STABILITY, NOISE_AMPLITUDE, SORT_TOLERANCE
from ..geometry import BoxInstance, Container, Orientation, PlacedBox, unique_orientations
from ..physics import drop_to_rest, is_valid
from .candidates import Candidate, generate_candidates

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seeded randomness
# ---------------------------------------------------------------------------

class SineStream:
    """
    Deterministic pseudo-random stream in [0, 1).

    Each draw returns frac(sin(state + 1) * 10000) and increments the
    state, so draw k of a stream seeded with s is frac(sin(s + 1 + k) * 10000).
    """

    def __init__(self, seed: int):
        self.state = seed

    def next(self) -> float:
        x = math.sin(self.state + 1) * 10000
        self.state += 1
        return x - math.floor(x)


def order_boxes(
    boxes: Sequence[BoxInstance],
    seed: int,
    use_noise: bool = True,
) -> List[BoxInstance]:
    """
    Sort boxes for placement: descending `volume * (1 + noise)`.

    One noise value in [-NOISE_AMPLITUDE, NOISE_AMPLITUDE] is drawn per box,
    in input order, only when `use_noise` is set and `seed > 0`. Ties keep
    their input order.
    """
    stream = SineStream(seed)
    noisy = use_noise and seed > 0

    scores = []
    for b in boxes:
        noise = (stream.next() * 2 * NOISE_AMPLITUDE - NOISE_AMPLITUDE) if noisy else 0.0
        scores.append(b.volume * (1 + noise))

    order = sorted(range(len(boxes)), key=lambda i: scores[i], reverse=True)
    return [boxes[i] for i in order]


# ---------------------------------------------------------------------------
# Candidate ordering
# ---------------------------------------------------------------------------

def _compare_candidates(a: Candidate, b: Candidate) -> int:
    """
    Bottom-back-left preference: lowest y, then lowest z, then lowest x.

    Coordinates within SORT_TOLERANCE of each other compare equal.
    """
    for ka, kb in ((a.y, b.y), (a.z, b.z), (a.x, b.x)):
        if abs(ka - kb) > SORT_TOLERANCE:
            return -1 if ka < kb else 1
    return 0


def sort_candidates(candidates: List[Candidate]) -> List[Candidate]:
    return sorted(candidates, key=functools.cmp_to_key(_compare_candidates))


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------

def orientations_for(box: BoxInstance, allow_rotation: bool) -> List[Orientation]:
    if allow_rotation:
        return unique_orientations(box)
    return [box.dims]


def find_placement(
    box: BoxInstance,
    placed: Sequence[PlacedBox],
    container: Container,
    allow_rotation: bool = False,
) -> Optional[PlacedBox]:
    """
    Find the first valid placement of `box` among all generated candidates.

    Returns None when no candidate validates.
    """
    candidates: List[Candidate] = []
    for orientation in orientations_for(box, allow_rotation):
        candidates.extend(generate_candidates(orientation, placed, container))

    for candidate in sort_candidates(candidates):
        test_box = PlacedBox.from_instance(
            box, candidate.orientation, candidate.x, candidate.y, candidate.z
        )

        if candidate.y > candidate.height / 2 and not candidate.skip_gravity:
            test_box = test_box.with_y(drop_to_rest(test_box, placed, container))

        if is_valid(test_box, placed, container, MIN_STABILITY):
            return test_box

    return None


def attempt_packing(
    boxes: Sequence[BoxInstance],
    container: Container,
    seed: int = 0,
    allow_rotation: bool = False,
    use_noise: bool = True,
) -> List[PlacedBox]:
    """
    Run one seeded placement attempt.

    Parameters
    ----------
    boxes:
        All box instances to pack.
    container:
        Fixed container size for this attempt.
    seed:
        Seed of the ordering noise. Seed 0 is pure descending volume.
    allow_rotation:
        Try every unique axis permutation of each box.
    use_noise:
        Enable the Monte-Carlo ordering noise for seeds > 0.

    Returns
    -------
    List[PlacedBox]
        Placed boxes in placement order; may be shorter than `boxes`.
    """
    placed: List[PlacedBox] = []

    for box in order_boxes(boxes, seed, use_noise=use_noise):
        placement = find_placement(box, placed, container, allow_rotation=allow_rotation)
        if placement is not None:
            placed.append(placement)

    logger.debug(
        "attempt seed=%d container=(%.4f, %.4f, %.4f): placed %d/%d",
        seed,
        container.width,
        container.height,
        container.depth,
        len(placed),
        len(boxes),
    )
    return placed


__all__ = [
    "SineStream",
    "order_boxes",
    "sort_candidates",
    "orientations_for",
    "find_placement",
    "attempt_packing",
]
