"""
I/O utilities for the boxfit container packing project.

This module centralizes file handling so that:
- Scripts do *not* hard-code paths.
- Requests and results are read / written consistently.

Supported inputs
----------------

- A JSON request file, in the wire format of `OptimizeRequest`:

      {
        "boxes": [{"id": 1, "width": 2, "height": 1, "depth": 1, "quantity": 4}],
        "constraints": {"width": null, "height": 2, "depth": null},
        "allowRotation": true
      }

- A CSV of box definitions with columns id, width, height, depth and an
  optional quantity column (default 1).

Outputs are a JSON result (camelCase, as sent on the message channel) and
a CSV with one row per placed box.
"""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from ..config import DATA_RESULTS_DIR
from ..evaluation import placements_table
from ..models import BoxSpec, OptimizationResult, OptimizeRequest


PathLike = Union[str, Path]

BOX_CSV_COLUMNS = ["id", "width", "height", "depth"]


# ---------------------------------------------------------------------------
# Directory helpers
# ---------------------------------------------------------------------------

def get_timestamped_result_path(
    prefix: str = "packing",
    suffix: str = ".json",
    directory: Optional[Path] = None,
) -> Path:
    """
    Build a timestamped path, by default under `data/results/`.

    Example output filename:
        packing_20261019_153045.json
    """
    directory = DATA_RESULTS_DIR if directory is None else Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    timestamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d_%H%M%S")
    return directory / f"{prefix}_{timestamp}{suffix}"


def _existing(path: PathLike, what: str) -> Path:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"{what} not found: {p}")
    return p


# ---------------------------------------------------------------------------
# Loading helpers
# ---------------------------------------------------------------------------

def load_box_specs_csv(path: PathLike) -> List[BoxSpec]:
    """
    Load box definitions from a CSV file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If required columns are missing.
    """
    df = pd.read_csv(_existing(path, "Box CSV"))

    missing = set(BOX_CSV_COLUMNS).difference(df.columns)
    if missing:
        raise ValueError(f"Box CSV is missing required columns: {sorted(missing)}")

    if "quantity" not in df.columns:
        df["quantity"] = 1

    return [
        BoxSpec(
            id=row["id"] if isinstance(row["id"], str) else int(row["id"]),
            width=float(row["width"]),
            height=float(row["height"]),
            depth=float(row["depth"]),
            quantity=int(row["quantity"]),
        )
        for _, row in df.iterrows()
    ]


def load_request_json(path: PathLike) -> OptimizeRequest:
    """
    Load a full `OptimizeRequest` from a JSON file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    pydantic.ValidationError
        If the payload does not describe a valid request.
    """
    with _existing(path, "Request JSON").open("r", encoding="utf-8") as f:
        payload = json.load(f)
    return OptimizeRequest.model_validate(payload)


def load_request(path: PathLike, **overrides) -> OptimizeRequest:
    """
    Load a request from a .json request file or a .csv of box definitions.

    Keyword overrides (e.g. `constraints=`, `allow_rotation=`) replace the
    corresponding request fields.
    """
    p = Path(path)
    if p.suffix.lower() == ".csv":
        request = OptimizeRequest(boxes=load_box_specs_csv(p))
    else:
        request = load_request_json(p)

    if overrides:
        request = request.model_copy(update=overrides)
    return request


# ---------------------------------------------------------------------------
# Saving helpers
# ---------------------------------------------------------------------------

def save_result_json(result: OptimizationResult, path: Optional[PathLike] = None) -> Path:
    """
    Write a result as camelCase JSON. Returns the written path.
    """
    if path is None:
        out_path = get_timestamped_result_path(suffix=".json")
    else:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8") as f:
        json.dump(result.to_payload(), f, indent=2, ensure_ascii=False)
    return out_path


def save_placements_csv(result: OptimizationResult, path: Optional[PathLike] = None) -> Path:
    """
    Write one CSV row per placed box (see `evaluation.placements_table`).
    """
    if path is None:
        out_path = get_timestamped_result_path(suffix=".csv")
    else:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)

    placements_table(result.placed_boxes).to_csv(out_path, index=False)
    return out_path


def load_result_json(path: PathLike) -> OptimizationResult:
    """
    Read back a result written by `save_result_json`.
    """
    with _existing(path, "Result JSON").open("r", encoding="utf-8") as f:
        payload = json.load(f)
    return OptimizationResult.model_validate(payload)


__all__ = [
    "PathLike",
    "BOX_CSV_COLUMNS",
    "get_timestamped_result_path",
    "load_box_specs_csv",
    "load_request_json",
    "load_request",
    "save_result_json",
    "save_placements_csv",
    "load_result_json",
]
