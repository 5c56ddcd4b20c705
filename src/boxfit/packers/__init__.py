"""
Packing algorithms for the boxfit container packing project.

- Candidate positions for one box (`candidates.py`)
- One seeded greedy placement attempt (`heuristic.py`)
- The container size search driving many attempts (`container_search.py`)

High-level code (e.g. `boxfit.optimizer`) should depend on the public
functions here, `attempt_packing` and `find_minimum_container`.
"""

__all__ = []
