"""
Utility helpers for the boxfit container packing project.

Small, reusable helpers that don't naturally belong in `geometry`,
`physics`, `evaluation` or `packers`:

- Timing helpers (`timing.py`)
- Request / result file handling (`io.py`)
- Static matplotlib figures (`plotting.py`)
"""

__all__ = []
