"""
High-level runner for the boxfit container packing project.

This module glues together:

- Request loading from `boxfit.utils.io` (JSON request or CSV of boxes).
- The engine entry point `boxfit.optimizer.optimize`.
- Statistics from `boxfit.evaluation` and optional plotting.

It exposes functions to:

- Run a request and collect the result plus summary statistics.
- Write the result JSON and a placement CSV to disk.
- Use a small CLI for convenience:

      python -m boxfit.runner --input data/input/boxes.csv --height 2
      python -m boxfit.runner --input request.json --allow-rotation
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .evaluation import PackingStats, summarize
from .models import Constraints, MonteCarloConfig, OptimizationResult, OptimizeRequest
from .optimizer import optimize
from .utils.io import get_timestamped_result_path, load_request, save_placements_csv, save_result_json
from .utils.timing import timeit

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------

def _log_progress(message: str, percent: int) -> None:
    logger.info("[%3d%%] %s", percent, message)


@timeit("boxfit run")
def run_request(request: OptimizeRequest) -> Tuple[OptimizationResult, PackingStats]:
    """
    Optimize `request` and summarize the result.

    Progress is reported through the module logger at INFO level.
    """
    result = optimize(request, progress=_log_progress)
    return result, summarize(result)


def write_outputs(
    result: OptimizationResult,
    output_path: Optional[Path] = None,
) -> Tuple[Path, Path]:
    """
    Write the result JSON and a sibling placement CSV.

    Parameters
    ----------
    result:
        Result to write.
    output_path:
        Path of the JSON file. If None, a timestamped name is created
        under `data/results/`. The CSV gets the same stem.

    Returns
    -------
    (json_path, csv_path)
    """
    json_path = Path(output_path) if output_path is not None else get_timestamped_result_path()
    json_path = save_result_json(result, json_path)
    csv_path = save_placements_csv(result, json_path.with_suffix(".csv"))
    return json_path, csv_path


def format_summary(result: OptimizationResult, stats: PackingStats) -> List[str]:
    """
    Human-readable summary lines for a result.
    """
    if not result.success:
        return [f"Optimization failed ({result.failure_kind}): {result.error}"]

    c = result.container
    status = "Optimization Complete" if stats.all_placed else "Optimization Failed"
    lines = [
        status,
        f"Container: {c.width:g} × {c.height:g} × {c.depth:g}",
        f"Placed: {stats.placed_count}/{stats.total_boxes}",
        f"Volume Used: {stats.volume_utilization:.1f}%",
        f"Empty Space: {stats.empty_space:.1f}%",
        f"Time: {result.execution_time_ms} ms",
    ]
    if not stats.all_placed:
        lines.insert(1, "Could not fit all boxes inside constraints")
    lines.extend(f"Warning: {w}" for w in result.warnings)
    return lines


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find a near-minimal container and a stable placement for a set of boxes.",
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Request JSON file, or CSV of box definitions (id,width,height,depth[,quantity]).",
    )
    for axis in ("width", "height", "depth"):
        parser.add_argument(
            f"--{axis}",
            type=float,
            default=None,
            help=f"Fix the container {axis} (overrides the request's constraint).",
        )
    parser.add_argument(
        "--allow-rotation",
        action="store_true",
        help="Allow 90-degree rotations (axis permutations) of boxes.",
    )
    parser.add_argument(
        "--simple",
        action="store_true",
        help="Legacy heuristic: no rotation, 3 attempts per probe, no ordering noise.",
    )
    parser.add_argument("--search-attempts", type=int, default=None, help="Attempts per search probe.")
    parser.add_argument("--final-attempts", type=int, default=None, help="Attempts in the final pass.")
    parser.add_argument("--no-noise", action="store_true", help="Disable Monte-Carlo ordering noise.")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help=(
            "Optional output path for the result JSON. If omitted, a timestamped "
            "name will be created under data/results/."
        ),
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Optional path of a PNG rendering of the packing.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress.")
    return parser.parse_args(argv)


def build_request(args: argparse.Namespace) -> OptimizeRequest:
    """
    Load the request named by the CLI arguments and apply the overrides.

    Raises
    ------
    pydantic.ValidationError
        If the file or an override is not a valid request.
    """
    request = load_request(args.input)

    fixed = request.constraints.as_dict()
    for axis in ("width", "height", "depth"):
        value = getattr(args, axis)
        if value is not None:
            fixed[axis] = value

    mc = MonteCarloConfig.simple() if args.simple else request.monte_carlo_config
    mc = mc.model_copy(
        update={
            k: v
            for k, v in {
                "search_attempts": args.search_attempts,
                "final_attempts": args.final_attempts,
                "use_noise": False if args.no_noise else None,
            }.items()
            if v is not None
        }
    )

    return request.model_copy(
        update={
            "constraints": Constraints(**fixed),
            "allow_rotation": (request.allow_rotation or args.allow_rotation) and not args.simple,
            "monte_carlo_config": MonteCarloConfig.model_validate(mc.model_dump()),
        }
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        request = build_request(args)
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError
        logger.error("invalid request: %s", exc)
        failed = OptimizationResult(success=False, error=str(exc), failure_kind="configuration")
        for line in format_summary(failed, summarize(failed)):
            print(line)
        return 1

    result, stats = run_request(request)

    for line in format_summary(result, stats):
        print(line)

    json_path, csv_path = write_outputs(
        result,
        Path(args.output) if args.output is not None else None,
    )
    print(f"Result written to: {json_path}")
    print(f"Placements written to: {csv_path}")

    if args.plot is not None and result.success:
        import matplotlib

        matplotlib.use("Agg")
        from .utils.plotting import plot_packing

        ax = plot_packing(result.placed_boxes, result.container, title=Path(args.input).name)
        ax.figure.savefig(args.plot, dpi=150, bbox_inches="tight")
        print(f"Plot written to: {args.plot}")

    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
