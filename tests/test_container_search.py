"""
Tests for boxfit.packers.container_search

These tests focus on:
- Rounding and expansion helpers
- The volume-based starting container
- Per-axis bisection
- Progress reporting of a full search
- The expansion fallback and its attempt budget
"""

from __future__ import annotations

import pytest

from boxfit.config import MAX_EXPANSION_ATTEMPTS
from boxfit.evaluation import audit_layout
from boxfit.geometry import BoxInstance, Container
from boxfit.packers import container_search
from boxfit.packers.container_search import (
    ProgressReporter,
    SearchSettings,
    binary_search_dimension,
    expand_value,
    find_minimum_container,
    initial_container,
    round_container,
)


FAST = SearchSettings(search_attempts=2, final_attempts=2)


def _cubes(n, size=1.0):
    return [
        BoxInstance(instance_id=i, definition_id="cube", width=size, height=size, depth=size)
        for i in range(n)
    ]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def test_round_container_rounds_up_to_increment():
    rounded = round_container(Container(1.0, 1.01, 2.3))
    assert rounded == Container(1.0, 1.125, 2.375)


def test_round_container_is_idempotent_and_never_shrinks():
    for value in (0.3, 1.03125, 2.0, 7.77):
        once = round_container(Container(value, value, value))
        assert once.width >= value
        assert round_container(once) == once


@pytest.mark.parametrize(
    "value, expected",
    [
        (5.0, 6.0),
        (1.0, 2.0),
        (0.5, 1.0),
        (3.2, 4.0),
    ],
)
def test_expand_value(value, expected):
    assert expand_value(value) == expected


def test_expand_value_always_grows():
    for value in (0.01, 1.0, 2.0, 9.99, 100.0):
        assert expand_value(value) > value


def test_initial_container_unconstrained_uses_cube_root_of_volume():
    c = initial_container(_cubes(8), {"width": None, "height": None, "depth": None})
    assert c == Container(3.0, 3.0, 3.0)


def test_initial_container_keeps_fixed_axes():
    c = initial_container(_cubes(1), {"width": None, "height": 1.0, "depth": 1.0})
    assert c == Container(2.0, 1.0, 1.0)


def test_initial_container_never_below_largest_extent():
    boxes = [BoxInstance(instance_id=0, definition_id="tall", width=1.0, height=10.0, depth=1.0)]
    c = initial_container(boxes, {"width": None, "height": None, "depth": None})
    assert c.height == 10.0


def test_progress_reporter_never_decreases():
    seen = []
    report = ProgressReporter(lambda message, percent: seen.append(percent))
    for percent in (0, 20, 15, 50, 49.9, 120):
        report("step", percent)
    assert seen == [0, 20, 20, 50, 50, 100]


# ---------------------------------------------------------------------------
# Bisection
# ---------------------------------------------------------------------------

def test_binary_search_converges_within_epsilon():
    best, probes = binary_search_dimension(
        _cubes(1), Container(1.0, 1.0, 1.0), "width", low=1.0, high=5.0, settings=FAST
    )
    assert best == pytest.approx(1.03125)
    assert probes == 7


def test_binary_search_returns_high_when_nothing_fits():
    # Height 0.5 can never hold a unit cube, whatever the width.
    best, _ = binary_search_dimension(
        _cubes(1), Container(1.0, 0.5, 1.0), "width", low=1.0, high=5.0, settings=FAST
    )
    assert best == 5.0


# ---------------------------------------------------------------------------
# Full search
# ---------------------------------------------------------------------------

def test_find_minimum_container_single_free_axis():
    outcome = find_minimum_container(
        _cubes(1), {"width": None, "height": 1.0, "depth": 1.0}, settings=FAST
    )
    assert outcome is not None
    assert len(outcome.placed_boxes) == 1
    assert outcome.container.height == 1.0
    assert outcome.container.depth == 1.0
    assert 1.0 <= outcome.container.width <= 1.125
    assert outcome.expansions == 0
    # Floor corner at the searched (unrounded) width of 1.0390625
    b = outcome.placed_boxes[0]
    assert b.x - b.width / 2 == pytest.approx(-1.0390625 / 2)
    assert (b.y, b.z) == (0.5, 0.0)


def test_find_minimum_container_returns_none_when_nothing_fits():
    outcome = find_minimum_container(
        _cubes(1, size=2.0), {"width": 1.0, "height": 1.0, "depth": 1.0}, settings=FAST
    )
    assert outcome is None


def test_find_minimum_container_reports_monotonic_progress():
    events = []
    find_minimum_container(
        _cubes(2),
        {"width": None, "height": 1.0, "depth": 1.0},
        settings=FAST,
        progress=lambda message, percent: events.append((message, percent)),
    )
    percents = [p for _, p in events]

    assert events[0] == ("Initializing optimization...", 0)
    assert events[-1] == ("Done!", 100)
    assert percents == sorted(percents)
    assert all(0 <= p <= 100 for p in percents)
    assert any(message.startswith("Optimizing width") for message, _ in events)


# ---------------------------------------------------------------------------
# Expansion fallback
# ---------------------------------------------------------------------------

def test_expansion_grows_free_axes_until_seed_zero_fits(monkeypatch):
    real_attempt = container_search.attempt_packing
    expansion_calls = []

    def seed_zero_needs_room(boxes, container, seed=0, **kwargs):
        # Only seed 0 is picky: it needs a width of at least 3.
        if seed == 0:
            expansion_calls.append(container.width)
            if container.width < 3:
                return []
        return real_attempt(boxes, container, seed=seed, **kwargs)

    monkeypatch.setattr(container_search, "attempt_packing", seed_zero_needs_room)

    outcome = find_minimum_container(
        _cubes(1),
        {"width": None, "height": 1.0, "depth": 1.0},
        settings=SearchSettings(search_attempts=2, final_attempts=1),
    )

    assert outcome is not None
    # 1.0390625 -> ceil(1.14...) = 2 -> ceil(2.2) = 3
    assert outcome.expansions == 2
    assert expansion_calls[-2:] == [2.0, 3.0]
    assert outcome.container == Container(3.0, 1.0, 1.0)
    assert len(outcome.placed_boxes) == 1
    assert audit_layout(outcome.placed_boxes, outcome.container) == []


def test_expansion_on_mixed_boxes_places_everything():
    boxes = [
        BoxInstance(instance_id=0, definition_id="a", width=2.0, height=1.0, depth=1.0),
        BoxInstance(instance_id=1, definition_id="b", width=1.0, height=1.0, depth=1.0),
        BoxInstance(instance_id=2, definition_id="c", width=1.0, height=2.0, depth=1.0),
        BoxInstance(instance_id=3, definition_id="d", width=1.5, height=0.5, depth=1.0),
    ]
    outcome = find_minimum_container(
        boxes,
        {"width": None, "height": None, "depth": None},
        settings=SearchSettings(search_attempts=6, final_attempts=1),
    )

    assert outcome is not None
    assert outcome.expansions > 0
    assert len(outcome.placed_boxes) == len(boxes)
    assert audit_layout(outcome.placed_boxes, outcome.container) == []


def test_expansion_stops_after_budget_and_keeps_fixed_axes():
    # The tall box never fits under the fixed height; the cube always does.
    boxes = [
        BoxInstance(instance_id=0, definition_id="tall", width=1.0, height=2.0, depth=1.0),
        BoxInstance(instance_id=1, definition_id="cube", width=1.0, height=1.0, depth=1.0),
    ]
    outcome = find_minimum_container(
        boxes,
        {"width": None, "height": 1.0, "depth": None},
        settings=FAST,
    )

    assert outcome is not None
    assert outcome.expansions == MAX_EXPANSION_ATTEMPTS
    assert [b.definition_id for b in outcome.placed_boxes] == ["cube"]
    assert outcome.container.height == 1.0
    # Both free axes started the fallback at 6 and grew together
    assert outcome.container.width > 6.0
    assert outcome.container.depth == outcome.container.width
