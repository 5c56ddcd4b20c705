"""
Geometry primitives for the boxfit container packing project.

This module defines:

- `BoxInstance`: one physical box expanded from a user box definition.
- `Orientation`: an axis permutation of a box's (width, height, depth).
- `PlacedBox`: a box bound to an orientation and a center position.
- `Container`: the open-top, axis-aligned container.
- Helpers to expand box definitions, enumerate orientations and build
  Shapely footprints.

Coordinate convention
---------------------

- The container is centered on the world origin in x and z.
- The floor is the plane y = 0; y grows upward; the top is open.
- Box positions (x, y, z) are **centers**, so a box resting on the floor
  has y = height / 2.

A "cuboid" below is any object exposing `x, y, z, width, height, depth`;
both `PlacedBox` and the candidate test boxes of the heuristic qualify.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Tuple, Union

from shapely.geometry import Polygon, box as shapely_box


BoxId = Union[int, str]

# (width, height, depth) of a box in a given orientation.
Orientation = Tuple[float, float, float]

# (min_x, min_y, min_z, max_x, max_y, max_z)
Bounds = Tuple[float, float, float, float, float, float]


# ---------------------------------------------------------------------------
# Boxes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BoxInstance:
    """
    One physical unit expanded from a box definition.

    width / height / depth are the canonical (unrotated) dimensions.
    """

    instance_id: int
    definition_id: BoxId
    width: float
    height: float
    depth: float

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    @property
    def dims(self) -> Orientation:
        return (self.width, self.height, self.depth)


@dataclass(frozen=True)
class PlacedBox:
    """
    A box instance bound to an orientation and a center position.

    width / height / depth are the *oriented* dimensions.
    """

    instance_id: int
    definition_id: BoxId
    width: float
    height: float
    depth: float
    x: float
    y: float
    z: float

    @classmethod
    def from_instance(
        cls,
        instance: BoxInstance,
        orientation: Orientation,
        x: float,
        y: float,
        z: float,
    ) -> "PlacedBox":
        w, h, d = orientation
        return cls(
            instance_id=instance.instance_id,
            definition_id=instance.definition_id,
            width=w,
            height=h,
            depth=d,
            x=x,
            y=y,
            z=z,
        )

    def with_y(self, y: float) -> "PlacedBox":
        """Return a copy of this box moved to height `y`."""
        return replace(self, y=y)

    @property
    def bottom(self) -> float:
        return self.y - self.height / 2

    @property
    def top(self) -> float:
        return self.y + self.height / 2

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    def bounds(self) -> Bounds:
        return cuboid_bounds(self)


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Container:
    """
    Axis-aligned container, centered at the origin in x/z, floor at y=0.
    """

    width: float
    height: float
    depth: float

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    def bounds(self) -> Bounds:
        return (
            -self.width / 2,
            0.0,
            -self.depth / 2,
            self.width / 2,
            self.height,
            self.depth / 2,
        )

    def with_axis(self, axis: str, value: float) -> "Container":
        """Return a copy with one axis ('width', 'height' or 'depth') replaced."""
        return replace(self, **{axis: value})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def cuboid_bounds(c: Any) -> Bounds:
    """
    Bounds of a center-positioned cuboid as (minx, miny, minz, maxx, maxy, maxz).
    """
    hw, hh, hd = c.width / 2, c.height / 2, c.depth / 2
    return (c.x - hw, c.y - hh, c.z - hd, c.x + hw, c.y + hh, c.z + hd)


def footprint_polygon(c: Any) -> Polygon:
    """
    The x/z footprint of a cuboid as a Shapely rectangle.
    """
    hw, hd = c.width / 2, c.depth / 2
    return shapely_box(c.x - hw, c.z - hd, c.x + hw, c.z + hd)


def unique_orientations(b: Any) -> List[Orientation]:
    """
    Return the axis permutations of a box, de-duplicated by value.

    The order is fixed:

        (w, h, d), (w, d, h), (h, w, d), (h, d, w), (d, w, h), (d, h, w)

    Cubes yield a single orientation, square prisms three.
    """
    w, h, d = b.width, b.height, b.depth
    permutations = [
        (w, h, d),
        (w, d, h),
        (h, w, d),
        (h, d, w),
        (d, w, h),
        (d, h, w),
    ]

    seen = set()
    unique: List[Orientation] = []
    for p in permutations:
        if p not in seen:
            seen.add(p)
            unique.append(p)
    return unique


def expand_box_specs(specs: Iterable[Any]) -> List[BoxInstance]:
    """
    Expand box definitions into one `BoxInstance` per physical unit.

    Each definition must expose `id`, `width`, `height`, `depth` and
    `quantity`. Instance ids are dense and 0-based, assigned in
    definition order.
    """
    instances: List[BoxInstance] = []
    instance_id = 0
    for spec in specs:
        for _ in range(int(spec.quantity)):
            instances.append(
                BoxInstance(
                    instance_id=instance_id,
                    definition_id=spec.id,
                    width=float(spec.width),
                    height=float(spec.height),
                    depth=float(spec.depth),
                )
            )
            instance_id += 1
    return instances


def max_extents(boxes: Iterable[Any]) -> dict:
    """
    Largest canonical extent per axis, keyed by 'width' / 'height' / 'depth'.
    """
    boxes = list(boxes)
    return {
        "width": max(b.width for b in boxes),
        "height": max(b.height for b in boxes),
        "depth": max(b.depth for b in boxes),
    }


def total_volume(boxes: Iterable[Any]) -> float:
    return sum(b.width * b.height * b.depth for b in boxes)


__all__ = [
    "BoxId",
    "Orientation",
    "Bounds",
    "BoxInstance",
    "PlacedBox",
    "Container",
    "cuboid_bounds",
    "footprint_polygon",
    "unique_orientations",
    "expand_box_specs",
    "max_extents",
    "total_volume",
]
