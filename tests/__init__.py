"""
Test package for the boxfit container packing project.

This directory collects unit and integration tests for the core modules:

- Geometry primitives (`test_geometry.py`)
- Validity solver (`test_physics.py`)
- Candidate generation and placement attempts (`test_heuristic.py`)
- Container size search (`test_container_search.py`)
- Engine boundary and end-to-end scenarios (`test_optimizer.py`)
- Background worker channel (`test_worker.py`)
- Statistics, audit, I/O and CLI (`test_evaluation.py`, `test_io.py`, `test_runner.py`)

You can run tests with:

    pytest
    # or, skipping the slower end-to-end searches
    pytest -m "not integration"

from the project root.
"""

__all__ = []
