"""
Tests for boxfit.physics

These tests focus on:
- Strict AABB overlap (touching is not overlap)
- Inclusive containment in the open-top container
- The stepped gravity drop
- Support ratio, including the cantilever penalty
- The combined validity predicate
"""

from __future__ import annotations

import pytest

from boxfit.geometry import Container, PlacedBox
from boxfit.physics import (
    collides_with_any,
    drop_to_rest,
    is_valid,
    overlaps,
    support_ratio,
    within_container,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _box(x, y, z, w=1.0, h=1.0, d=1.0, instance_id=0) -> PlacedBox:
    return PlacedBox(
        instance_id=instance_id,
        definition_id="t",
        width=w,
        height=h,
        depth=d,
        x=x,
        y=y,
        z=z,
    )


ROOMY = Container(width=10.0, height=10.0, depth=10.0)


# ---------------------------------------------------------------------------
# Collision / containment
# ---------------------------------------------------------------------------

def test_face_touching_boxes_do_not_overlap():
    a = _box(0.0, 0.5, 0.0)
    b = _box(1.0, 0.5, 0.0)
    assert not overlaps(a, b)
    assert not overlaps(b, a)


def test_partially_overlapping_boxes_overlap():
    a = _box(0.0, 0.5, 0.0)
    b = _box(0.9, 0.5, 0.9)
    assert overlaps(a, b)
    assert collides_with_any(b, [_box(5.0, 0.5, 5.0), a])


def test_overlap_requires_all_three_axes():
    a = _box(0.0, 0.5, 0.0)
    # Overlaps in x and z, but sits exactly on top of `a`
    b = _box(0.2, 1.5, 0.2)
    assert not overlaps(a, b)


def test_containment_is_inclusive():
    c = Container(width=2.0, height=1.0, depth=2.0)
    flush = _box(-0.5, 0.5, 0.5)
    assert within_container(flush, c)


@pytest.mark.parametrize(
    "box",
    [
        _box(-0.6, 0.5, 0.0),  # past the left wall
        _box(0.0, 0.4, 0.0),   # below the floor
        _box(0.0, 0.6, 0.0),   # above the top
        _box(0.0, 0.5, 0.51),  # past the front wall
    ],
)
def test_containment_rejects_any_protruding_face(box):
    c = Container(width=2.0, height=1.0, depth=2.0)
    assert not within_container(box, c)


# ---------------------------------------------------------------------------
# Gravity
# ---------------------------------------------------------------------------

def test_drop_reaches_floor_with_epsilon():
    falling = _box(0.0, 5.0, 0.0)
    assert drop_to_rest(falling, [], ROOMY) == pytest.approx(0.501)


def test_drop_stops_above_obstruction_with_clearance():
    below = _box(0.0, 0.5, 0.0)
    falling = _box(0.0, 3.0, 0.0, instance_id=1)

    # 3.0, 2.5, 2.0 and 1.5 are free; 1.0 collides.
    assert drop_to_rest(falling, [below], ROOMY) == pytest.approx(1.1)


def test_drop_from_rest_position_returns_floor():
    resting = _box(0.0, 0.5, 0.0)
    assert drop_to_rest(resting, [], ROOMY) == pytest.approx(0.501)


# ---------------------------------------------------------------------------
# Support ratio
# ---------------------------------------------------------------------------

def test_support_ratio_on_floor_is_full():
    assert support_ratio(_box(0.0, 0.55, 0.0), [], ROOMY) == 1.0


def test_support_ratio_fully_stacked():
    below = _box(0.0, 0.5, 0.0)
    assert support_ratio(_box(0.0, 1.5, 0.0), [below], ROOMY) == pytest.approx(1.0)


def test_support_ratio_half_supported_is_not_penalized():
    below = _box(0.0, 0.5, 0.0)
    assert support_ratio(_box(0.5, 1.5, 0.0), [below], ROOMY) == pytest.approx(0.5)


def test_support_ratio_quarter_supported_is_halved():
    below = _box(0.0, 0.5, 0.0)
    assert support_ratio(_box(0.5, 1.5, 0.5), [below], ROOMY) == pytest.approx(0.125)


def test_support_ratio_sums_several_supports_and_clamps():
    left = _box(-0.5, 0.5, 0.0)
    right = _box(0.5, 0.5, 0.0)
    wide = _box(0.0, 1.5, 0.0, w=2.0)
    assert support_ratio(wide, [left, right], ROOMY) == pytest.approx(1.0)


def test_support_ratio_ignores_boxes_far_below():
    below = _box(0.0, 0.5, 0.0)
    floating = _box(0.0, 3.0, 0.0)
    assert support_ratio(floating, [below], ROOMY) == 0.0


# ---------------------------------------------------------------------------
# Validity
# ---------------------------------------------------------------------------

def test_is_valid_accepts_box_on_floor():
    assert is_valid(_box(0.0, 0.5, 0.0), [], ROOMY)


def test_is_valid_rejects_floating_box():
    assert not is_valid(_box(0.0, 3.0, 0.0), [], ROOMY)


def test_is_valid_rejects_collision():
    placed = [_box(0.0, 0.5, 0.0)]
    assert not is_valid(_box(0.5, 0.5, 0.0, instance_id=1), placed, ROOMY)


def test_is_valid_rejects_box_outside_container():
    small = Container(width=1.0, height=1.0, depth=1.0)
    assert not is_valid(_box(0.5, 0.5, 0.0), [], small)


def test_is_valid_uses_min_stability_threshold():
    below = _box(0.0, 0.5, 0.0)
    quarter = _box(0.5, 1.5, 0.5, instance_id=1)
    half = _box(0.5, 1.5, 0.0, instance_id=1)

    # Default threshold is 0.3
    assert not is_valid(quarter, [below], ROOMY)
    assert is_valid(half, [below], ROOMY)
    assert is_valid(quarter, [below], ROOMY, min_stability=0.1)
