"""
Tests for boxfit.geometry

These tests focus on:
- Orientation enumeration and de-duplication
- Expansion of box definitions into dense instances
- Container / placed-box bounds and footprints
"""

from __future__ import annotations

import pytest

from boxfit.geometry import (
    BoxInstance,
    Container,
    PlacedBox,
    cuboid_bounds,
    expand_box_specs,
    footprint_polygon,
    max_extents,
    total_volume,
    unique_orientations,
)
from boxfit.models import BoxSpec


def _instance(w, h, d, instance_id=0) -> BoxInstance:
    return BoxInstance(instance_id=instance_id, definition_id="a", width=w, height=h, depth=d)


def test_unique_orientations_of_distinct_dims_keeps_all_six_in_order():
    orientations = unique_orientations(_instance(1.0, 2.0, 3.0))
    assert orientations == [
        (1.0, 2.0, 3.0),
        (1.0, 3.0, 2.0),
        (2.0, 1.0, 3.0),
        (2.0, 3.0, 1.0),
        (3.0, 1.0, 2.0),
        (3.0, 2.0, 1.0),
    ]


@pytest.mark.parametrize(
    "dims, expected",
    [
        ((1.0, 1.0, 1.0), 1),
        ((1.0, 1.0, 2.0), 3),
        ((2.0, 1.0, 2.0), 3),
    ],
)
def test_unique_orientations_deduplicates_equal_axes(dims, expected):
    orientations = unique_orientations(_instance(*dims))
    assert len(orientations) == expected
    assert len(set(orientations)) == expected
    # Canonical orientation always comes first
    assert orientations[0] == dims


def test_expand_box_specs_assigns_dense_instance_ids():
    specs = [
        BoxSpec(id=1, width=1, height=2, depth=3, quantity=2),
        BoxSpec(id="b", width=4, height=4, depth=4, quantity=3),
    ]
    instances = expand_box_specs(specs)

    assert [i.instance_id for i in instances] == [0, 1, 2, 3, 4]
    assert [i.definition_id for i in instances] == [1, 1, "b", "b", "b"]
    assert instances[0].dims == (1.0, 2.0, 3.0)
    assert instances[4].volume == pytest.approx(64.0)


def test_container_bounds_are_centered_in_x_and_z():
    c = Container(width=4.0, height=3.0, depth=2.0)
    assert c.bounds() == (-2.0, 0.0, -1.0, 2.0, 3.0, 1.0)
    assert c.volume == pytest.approx(24.0)
    assert c.with_axis("height", 5.0) == Container(4.0, 5.0, 2.0)


def test_placed_box_bounds_and_faces():
    b = PlacedBox(instance_id=0, definition_id=1, width=2.0, height=1.0, depth=4.0, x=1.0, y=0.5, z=-1.0)
    assert cuboid_bounds(b) == (0.0, 0.0, -3.0, 2.0, 1.0, 1.0)
    assert b.bottom == pytest.approx(0.0)
    assert b.top == pytest.approx(1.0)
    assert b.with_y(2.5).bottom == pytest.approx(2.0)
    # The original is immutable
    assert b.y == 0.5


def test_footprint_polygon_matches_x_z_extent():
    b = PlacedBox(instance_id=0, definition_id=1, width=2.0, height=9.0, depth=3.0, x=0.0, y=4.5, z=0.0)
    poly = footprint_polygon(b)
    assert poly.area == pytest.approx(6.0)
    assert poly.bounds == (-1.0, -1.5, 1.0, 1.5)


def test_max_extents_and_total_volume():
    boxes = [_instance(1.0, 5.0, 2.0), _instance(3.0, 1.0, 1.0, instance_id=1)]
    assert max_extents(boxes) == {"width": 3.0, "height": 5.0, "depth": 2.0}
    assert total_volume(boxes) == pytest.approx(13.0)
