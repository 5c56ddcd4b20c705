"""
Tests for boxfit.utils.io

These tests focus on:
- Loading box definitions from CSV and requests from JSON
- Writing result JSON / placement CSV and reading results back
"""

from __future__ import annotations

import json

import pandas as pd
import pytest

from boxfit.geometry import Container, PlacedBox
from boxfit.models import Constraints, OptimizationResult
from boxfit.utils.io import (
    get_timestamped_result_path,
    load_box_specs_csv,
    load_request,
    load_result_json,
    save_placements_csv,
    save_result_json,
)


def _result() -> OptimizationResult:
    return OptimizationResult(
        success=True,
        container=Container(2.0, 1.0, 1.0),
        placed_boxes=[
            PlacedBox(instance_id=0, definition_id=7, width=1.0, height=1.0, depth=1.0, x=-0.5, y=0.5, z=0.0),
        ],
        execution_time_ms=12,
        total_boxes=1,
        warnings=["W must be ≥ 3"],
    )


def test_load_box_specs_csv_defaults_quantity(tmp_path):
    path = tmp_path / "boxes.csv"
    path.write_text("id,width,height,depth\n1,1,2,3\npallet,4,1,4\n", encoding="utf-8")

    specs = load_box_specs_csv(path)

    # Mixed id columns are read as text
    assert [s.id for s in specs] == ["1", "pallet"]
    assert specs[0].height == 2.0
    assert all(s.quantity == 1 for s in specs)


def test_load_box_specs_csv_missing_columns(tmp_path):
    path = tmp_path / "boxes.csv"
    path.write_text("id,width,height\n1,1,2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="depth"):
        load_box_specs_csv(path)


def test_load_box_specs_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_box_specs_csv(tmp_path / "nope.csv")


def test_load_request_json_with_overrides(tmp_path):
    path = tmp_path / "request.json"
    path.write_text(
        json.dumps(
            {
                "boxes": [{"id": 1, "width": 2, "height": 1, "depth": 1, "quantity": 4}],
                "constraints": {"height": 2},
                "allowRotation": True,
            }
        ),
        encoding="utf-8",
    )

    request = load_request(path, constraints=Constraints(width=5))

    assert request.allow_rotation
    assert len(request.instances()) == 4
    assert request.constraints.as_dict() == {"width": 5, "height": None, "depth": None}


def test_result_json_and_placement_csv(tmp_path):
    result = _result()
    json_path = save_result_json(result, tmp_path / "out" / "result.json")
    csv_path = save_placements_csv(result, tmp_path / "out" / "result.csv")

    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload["placedBoxes"][0]["x"] == -0.5
    assert payload["warnings"] == ["W must be ≥ 3"]

    loaded = load_result_json(json_path)
    assert loaded.container == result.container
    assert loaded.placed_boxes == result.placed_boxes

    df = pd.read_csv(csv_path)
    assert df["definition_id"].tolist() == [7]


def test_get_timestamped_result_path(tmp_path):
    path = get_timestamped_result_path(prefix="run", suffix=".csv", directory=tmp_path)
    assert path.parent == tmp_path
    assert path.name.startswith("run_")
    assert path.suffix == ".csv"
