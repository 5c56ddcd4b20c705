"""
Global configuration for the boxfit container packing project.

This module centralizes:

- Project-root and data paths
- Numeric constants of the gravity / stability solver
- Constants of the candidate generator and container size search
- Default Monte-Carlo budgets

All of these are kept in one place so that experiments are easy to
reproduce and tuning doesn't require hunting through multiple files.
"""

from __future__ import annotations

from pathlib import Path


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# This file lives in: <repo>/src/boxfit/config.py
# Project root is therefore two levels up from here.
PROJECT_ROOT: Path = Path(__file__).resolve().parents[2]

DATA_DIR: Path = PROJECT_ROOT / "data"
DATA_RESULTS_DIR: Path = DATA_DIR / "results"


# ---------------------------------------------------------------------------
# Validity solver
# ---------------------------------------------------------------------------

# Gravity is simulated by stepping a box down in fixed increments. The step
# trades resolution for speed; it is not a physics time step.
DROP_STEP: float = 0.5

# Clearance added above the first obstruction hit while dropping.
DROP_CLEARANCE: float = 0.1

# Small lift applied to boxes that come to rest on the floor.
FLOOR_EPSILON: float = 0.001

# A bottom face within this distance of y=0 counts as resting on the floor.
FLOOR_TOLERANCE: float = 0.1

# A placed box supports a candidate when its top is within this distance
# of the candidate's bottom face.
SUPPORT_THRESHOLD: float = 0.5

# Support ratios below this are halved (cantilever penalty).
CANTILEVER_RATIO: float = 0.5

# Minimum support ratio the engine requires for a box above the floor.
MIN_STABILITY: float = 0.2

# Default of `physics.is_valid` when no threshold is passed.
DEFAULT_MIN_STABILITY: float = 0.3


# ---------------------------------------------------------------------------
# Placement heuristic
# ---------------------------------------------------------------------------

# Floor grid resolution of the candidate generator (GRID_STEPS x GRID_STEPS).
GRID_STEPS: int = 5

# Tolerance used when ordering candidates by (y, z, x).
SORT_TOLERANCE: float = 0.001

# Ordering noise is drawn uniformly from [-NOISE_AMPLITUDE, NOISE_AMPLITUDE].
NOISE_AMPLITUDE: float = 0.2


# ---------------------------------------------------------------------------
# Container size search
# ---------------------------------------------------------------------------

# Initial estimate targets this multiple of the total box volume.
VOLUME_BUFFER: float = 1.1

# Convergence tolerance of the per-axis binary search.
SEARCH_EPSILON: float = 0.05

# Expansion fallback budget and growth factor.
MAX_EXPANSION_ATTEMPTS: int = 20
EXPANSION_FACTOR: float = 1.1

# Reported container sizes are rounded up to a multiple of this increment.
ROUNDING_INCREMENT: float = 0.125
ROUNDING_DECIMALS: int = 4

# Fixed order in which axes are searched.
AXES: tuple[str, str, str] = ("width", "height", "depth")


# ---------------------------------------------------------------------------
# Monte-Carlo budgets
# ---------------------------------------------------------------------------

# Attempts per binary-search probe and for the final placement pass.
SEARCH_ATTEMPTS_DEFAULT: int = 15
FINAL_ATTEMPTS_DEFAULT: int = 10

# Budget of the simpler legacy heuristic (no rotation, no noise).
SIMPLE_ATTEMPTS: int = 3

# Upper bound of BoxSpec.quantity accepted at the boundary.
MAX_BOX_QUANTITY: int = 1000


__all__ = [
    # Paths
    "PROJECT_ROOT",
    "DATA_DIR",
    "DATA_RESULTS_DIR",
    # Validity solver
    "DROP_STEP",
    "DROP_CLEARANCE",
    "FLOOR_EPSILON",
    "FLOOR_TOLERANCE",
    "SUPPORT_THRESHOLD",
    "CANTILEVER_RATIO",
    "MIN_STABILITY",
    "DEFAULT_MIN_STABILITY",
    # Placement heuristic
    "GRID_STEPS",
    "SORT_TOLERANCE",
    "NOISE_AMPLITUDE",
    # Container search
    "VOLUME_BUFFER",
    "SEARCH_EPSILON",
    "MAX_EXPANSION_ATTEMPTS",
    "EXPANSION_FACTOR",
    "ROUNDING_INCREMENT",
    "ROUNDING_DECIMALS",
    "AXES",
    # Monte-Carlo
    "SEARCH_ATTEMPTS_DEFAULT",
    "FINAL_ATTEMPTS_DEFAULT",
    "SIMPLE_ATTEMPTS",
    "MAX_BOX_QUANTITY",
]
