"""
Evaluation utilities for the boxfit container packing project.

The engine only returns a container and placed boxes. This module derives
what downstream consumers show or check:

- `summarize`: placed / total counts, volume utilization, empty space.
- `audit_layout`: re-checks the no-overlap, containment and stability
  invariants of a placement and lists every violation.
- `placements_table`: a pandas DataFrame with one row per placed box.

    result = optimize(request)
    stats = summarize(result)
    print(f"{stats.placed_count}/{stats.total_boxes} placed, "
          f"{stats.volume_utilization:.1f}% used")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import pandas as pd

from .config import FLOOR_TOLERANCE, MIN_STABILITY
from .geometry import Container, PlacedBox
from .models import OptimizationResult
from .physics import overlaps, support_ratio, within_container


# Column order of `placements_table`.
PLACEMENT_COLUMNS = [
    "instance_id",
    "definition_id",
    "x",
    "y",
    "z",
    "width",
    "height",
    "depth",
    "volume",
]


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

@dataclass
class PackingStats:
    """
    Summary statistics of one optimization result.

    volume_utilization and empty_space are percentages of the container volume.
    """

    placed_count: int
    total_boxes: int
    volume_utilization: float
    empty_space: float

    @property
    def all_placed(self) -> bool:
        return self.total_boxes > 0 and self.placed_count == self.total_boxes


def volume_utilization(placed: Sequence[PlacedBox], container: Container) -> float:
    """
    Percentage of the container volume occupied by `placed`.
    """
    if container.volume <= 0:
        return 0.0
    used = float(np.sum([b.volume for b in placed])) if placed else 0.0
    return used / container.volume * 100.0


def summarize(result: OptimizationResult) -> PackingStats:
    """
    Derive placed/total counts and volume statistics from a result.

    Failed results summarize to zero placed boxes and zero utilization.
    """
    if not result.success or result.container is None:
        return PackingStats(
            placed_count=0,
            total_boxes=result.total_boxes,
            volume_utilization=0.0,
            empty_space=100.0,
        )

    used = volume_utilization(result.placed_boxes, result.container)
    return PackingStats(
        placed_count=result.placed_count,
        total_boxes=result.total_boxes,
        volume_utilization=used,
        empty_space=max(0.0, 100.0 - used),
    )


# ---------------------------------------------------------------------------
# Invariant audit
# ---------------------------------------------------------------------------

def audit_layout(
    placed: Sequence[PlacedBox],
    container: Container,
    min_stability: float = MIN_STABILITY,
) -> List[str]:
    """
    Check a placement against the engine's invariants.

    - no two boxes overlap;
    - every box lies inside the container;
    - every box more than FLOOR_TOLERANCE above the floor has a support
      ratio of at least `min_stability`, measured against the boxes placed
      before it.

    Returns
    -------
    List[str]
        One message per violation; empty when the layout is sound.
    """
    problems: List[str] = []

    for i, a in enumerate(placed):
        if not within_container(a, container):
            problems.append(f"box {a.instance_id} is outside the container")

        for b in placed[i + 1:]:
            if overlaps(a, b):
                problems.append(f"boxes {a.instance_id} and {b.instance_id} overlap")

        if a.bottom > FLOOR_TOLERANCE:
            ratio = support_ratio(a, placed[:i], container)
            if ratio < min_stability:
                problems.append(
                    f"box {a.instance_id} is unstable (support ratio {ratio:.3f})"
                )

    return problems


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def placements_table(placed: Sequence[PlacedBox]) -> pd.DataFrame:
    """
    One row per placed box, in placement order, with PLACEMENT_COLUMNS.
    """
    records = [
        {
            "instance_id": b.instance_id,
            "definition_id": b.definition_id,
            "x": float(b.x),
            "y": float(b.y),
            "z": float(b.z),
            "width": float(b.width),
            "height": float(b.height),
            "depth": float(b.depth),
            "volume": float(b.volume),
        }
        for b in placed
    ]
    return pd.DataFrame(records, columns=PLACEMENT_COLUMNS)


def definition_counts(placed: Sequence[PlacedBox]) -> pd.DataFrame:
    """
    Number of placed units per box definition.

    Columns: definition_id, placed.
    """
    table = placements_table(placed)
    if table.empty:
        return pd.DataFrame({"definition_id": [], "placed": []})
    counts = (
        table.groupby("definition_id")["instance_id"]
        .count()
        .rename("placed")
        .reset_index()
    )
    return counts


__all__ = [
    "PLACEMENT_COLUMNS",
    "PackingStats",
    "volume_utilization",
    "summarize",
    "audit_layout",
    "placements_table",
    "definition_counts",
]
