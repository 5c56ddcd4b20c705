"""
Candidate position generator for the placement heuristic.

For one orientation of a box and the boxes placed so far, this module
proposes center positions worth testing:

- The floor corner of the container (back-left in x/z).
- For every placed box: on top of it (centered and four offsets), to its
  right, behind it and at its four footprint corners.
- A uniform GRID_STEPS x GRID_STEPS grid on the floor.

That is `1 + 11 * len(placed) + GRID_STEPS**2` candidates per orientation,
which makes this the hot loop of the whole engine.

Candidates on top of a placed box are flagged `skip_gravity`: they are
meant to rest exactly on that box and must not be dropped further.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..config import GRID_STEPS
from ..geometry import Container, Orientation, PlacedBox


@dataclass
class Candidate:
    """
    A prospective center position for a box in a given orientation.
    """

    x: float
    y: float
    z: float
    width: float
    height: float
    depth: float
    skip_gravity: bool = False

    @property
    def orientation(self) -> Orientation:
        return (self.width, self.height, self.depth)


# Footprint corners visited around each placed box, as (dx, dz) signs.
_CORNERS = ((1, 1), (-1, 1), (1, -1), (-1, -1))


def floor_grid(container: Container, steps: int = GRID_STEPS) -> List[tuple[float, float]]:
    """
    Cell centers (x, z) of a `steps` x `steps` grid spanning the container floor.

    Ordered by x index first, then z index.
    """
    xs = -container.width / 2 + (np.arange(steps) + 0.5) * (container.width / steps)
    zs = -container.depth / 2 + (np.arange(steps) + 0.5) * (container.depth / steps)
    return [(float(x), float(z)) for x in xs for z in zs]


def generate_candidates(
    orientation: Orientation,
    placed: Sequence[PlacedBox],
    container: Container,
) -> List[Candidate]:
    """
    Generate candidate positions for a box in `orientation`.

    Parameters
    ----------
    orientation:
        Oriented (width, height, depth) of the box to place.
    placed:
        Boxes already committed in the current attempt.
    container:
        The container being packed.

    Returns
    -------
    List[Candidate]
        Unsorted candidates, each tagged with `orientation`.
    """
    w, h, d = orientation
    candidates: List[Candidate] = []

    def add(x: float, y: float, z: float, skip_gravity: bool = False) -> None:
        candidates.append(Candidate(x, y, z, w, h, d, skip_gravity))

    add(-container.width / 2 + w / 2, h / 2, -container.depth / 2 + d / 2)

    for p in placed:
        top_y = p.y + p.height / 2 + h / 2
        dx = (p.width - w) / 4
        dz = (p.depth - d) / 4

        # Stacking
        add(p.x, top_y, p.z, skip_gravity=True)
        add(p.x + dx, top_y, p.z, skip_gravity=True)
        add(p.x - dx, top_y, p.z, skip_gravity=True)
        add(p.x, top_y, p.z + dz, skip_gravity=True)
        add(p.x, top_y, p.z - dz, skip_gravity=True)

        # Same level: right, behind, corners
        add(p.x + p.width / 2 + w / 2, p.y, p.z)
        add(p.x, p.y, p.z + p.depth / 2 + d / 2)
        for sx, sz in _CORNERS:
            add(
                p.x + sx * (p.width / 2 + w / 2),
                p.y,
                p.z + sz * (p.depth / 2 + d / 2),
            )

    for x, z in floor_grid(container):
        add(x, h / 2, z)

    return candidates


__all__ = [
    "Candidate",
    "floor_grid",
    "generate_candidates",
]
