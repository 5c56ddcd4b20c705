"""
boxfit – minimal container search and stable 3D box placement

This package finds a near-minimal axis-aligned container for a set of
boxes, together with a non-overlapping, gravity-stable placement inside
it. See `boxfit.optimizer` for the entry point, the `packers`
subpackage for the search and placement algorithms, and
`boxfit.worker` for running a search in the background.
"""

__all__ = []

__version__ = "0.1.0"
