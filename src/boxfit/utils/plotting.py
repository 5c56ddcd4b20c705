"""
Visualization helpers for the boxfit container packing project.

Thin convenience wrappers around matplotlib for:
- Plotting a packing result in 3D (container wireframe + box faces).
- Plotting the top-down (x/z) footprint of a placement.

These are static figures for reports and notebooks; they are not an
interactive viewer.

Typical usage in a notebook
---------------------------

    import matplotlib.pyplot as plt
    from boxfit.utils.plotting import plot_packing

    result = optimize(request)
    ax = plot_packing(result.placed_boxes, result.container, title="demo")
    plt.show()
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from ..geometry import Container, PlacedBox, cuboid_bounds


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _cuboid_faces(minx, miny, minz, maxx, maxy, maxz) -> List[list]:
    """
    Six faces of an axis-aligned cuboid, in matplotlib (x, z, y) order so the
    container floor lies in the plot's horizontal plane.
    """
    v = [
        (minx, minz, miny), (maxx, minz, miny), (maxx, maxz, miny), (minx, maxz, miny),
        (minx, minz, maxy), (maxx, minz, maxy), (maxx, maxz, maxy), (minx, maxz, maxy),
    ]
    return [
        [v[0], v[1], v[2], v[3]],
        [v[4], v[5], v[6], v[7]],
        [v[0], v[1], v[5], v[4]],
        [v[2], v[3], v[7], v[6]],
        [v[1], v[2], v[6], v[5]],
        [v[0], v[3], v[7], v[4]],
    ]


def _definition_colors(placed: Sequence[PlacedBox]) -> dict:
    """One palette color per box definition, in order of first appearance."""
    palette = plt.get_cmap("tab20")
    colors: dict = {}
    for b in placed:
        if b.definition_id not in colors:
            colors[b.definition_id] = palette(len(colors) % palette.N)
    return colors


# ---------------------------------------------------------------------------
# Public plotting helpers
# ---------------------------------------------------------------------------

def plot_packing(
    placed: Sequence[PlacedBox],
    container: Container,
    ax=None,
    title: Optional[str] = None,
    alpha: float = 0.6,
):
    """
    Plot placed boxes inside the container wireframe.

    Boxes of the same definition share a color.

    Parameters
    ----------
    placed:
        Boxes to draw.
    container:
        Container drawn as an edge-only cuboid.
    ax:
        Optional 3D Axes. If None, a new figure and 3D axes are created.
    title:
        Optional plot title.
    alpha:
        Face transparency of the boxes.
    """
    if ax is None:
        fig = plt.figure(figsize=(7, 6))
        ax = fig.add_subplot(projection="3d")

    colors = _definition_colors(placed)

    for b in placed:
        faces = _cuboid_faces(*cuboid_bounds(b))
        ax.add_collection3d(
            Poly3DCollection(
                faces,
                facecolors=colors[b.definition_id],
                edgecolors="k",
                linewidths=0.5,
                alpha=alpha,
            )
        )

    ax.add_collection3d(
        Poly3DCollection(
            _cuboid_faces(*container.bounds()),
            facecolors=(0, 0, 0, 0),
            edgecolors="gray",
            linestyles="--",
            linewidths=1.0,
        )
    )

    ax.set_xlim(-container.width / 2, container.width / 2)
    ax.set_ylim(-container.depth / 2, container.depth / 2)
    ax.set_zlim(0.0, container.height)
    ax.set_box_aspect((container.width, container.depth, container.height))
    ax.set_xlabel("x (width)")
    ax.set_ylabel("z (depth)")
    ax.set_zlabel("y (height)")
    if title is not None:
        ax.set_title(title)

    return ax


def plot_footprint(
    placed: Sequence[PlacedBox],
    container: Container,
    ax=None,
    title: Optional[str] = None,
):
    """
    Plot the x/z footprints of placed boxes seen from above.

    Higher boxes are drawn last so they cover the ones below.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))

    colors = _definition_colors(placed)

    for b in sorted(placed, key=lambda p: p.top):
        ax.add_patch(
            plt.Rectangle(
                (b.x - b.width / 2, b.z - b.depth / 2),
                b.width,
                b.depth,
                facecolor=colors[b.definition_id],
                edgecolor="k",
                linewidth=0.5,
                alpha=0.7,
            )
        )

    ax.add_patch(
        plt.Rectangle(
            (-container.width / 2, -container.depth / 2),
            container.width,
            container.depth,
            fill=False,
            linestyle="--",
            linewidth=2,
        )
    )

    pad = 0.05 * max(container.width, container.depth)
    ax.set_xlim(-container.width / 2 - pad, container.width / 2 + pad)
    ax.set_ylim(-container.depth / 2 - pad, container.depth / 2 + pad)
    ax.set_aspect("equal", adjustable="box")
    ax.set_xlabel("x (width)")
    ax.set_ylabel("z (depth)")
    if title is not None:
        ax.set_title(title)

    return ax


__all__ = [
    "plot_packing",
    "plot_footprint",
]
