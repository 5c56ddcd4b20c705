#!/usr/bin/env python
"""
CLI helper to pack a set of boxes and save the result.

This script is a thin wrapper around the library entry point:

- boxfit.runner.main

Typical usage from the project root
-----------------------------------

    python scripts/pack_boxes.py --input data/input/boxes.csv
    python scripts/pack_boxes.py --input data/input/boxes.csv --height 2 --allow-rotation
    python scripts/pack_boxes.py --input request.json --simple --output data/results/run.json
    python scripts/pack_boxes.py --input request.json --plot data/results/run.png

The script automatically adds `src/` to PYTHONPATH so that it can import the
`boxfit` package without requiring installation.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Optional, List


def _ensure_src_on_path() -> Path:
    """
    Ensure that <project_root>/src is on sys.path and return project_root.

    Assumes this file lives in <project_root>/scripts/pack_boxes.py.
    """
    project_root = Path(__file__).resolve().parents[1]
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))
    return project_root


def main(argv: Optional[List[str]] = None) -> int:
    project_root = _ensure_src_on_path()

    # Imports done after path configuration
    from boxfit.runner import main as run_main

    print(f"[pack_boxes] Project root: {project_root}")
    return run_main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
