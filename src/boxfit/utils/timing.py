"""
Simple timing helpers for the boxfit container packing project.

These utilities provide lightweight ways to measure execution time for:

- Individual code blocks (context manager).
- Functions (decorator).

`Timer` is what the optimizer uses to fill `execution_time_ms`; durations
are reported through the `logging` module rather than printed, so library
callers stay in control of the output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Any, Optional

import functools
import logging
import time

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Context-manager timer
# ---------------------------------------------------------------------------

@dataclass
class Timer:
    """
    Context manager for measuring wall-clock time of a code block.

    Usage
    -----
        from boxfit.utils.timing import Timer

        with Timer("container search") as t:
            outcome = find_minimum_container(boxes, constraints)
        print(t.elapsed_ms)

    Attributes
    ----------
    name:
        Optional label logged when exiting the context.
    start:
        Start time (perf_counter units).
    end:
        End time (perf_counter units).
    elapsed:
        Duration in seconds (float). Available after the context exits.
    """

    name: Optional[str] = None
    start: float = 0.0
    end: float = 0.0
    elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start
        if self.name:
            logger.debug("[Timer] %s: %.4f s", self.name, self.elapsed)

    @property
    def elapsed_ms(self) -> int:
        """Elapsed time rounded to whole milliseconds."""
        return int(round(self.elapsed * 1000))


# ---------------------------------------------------------------------------
# Decorator for timing functions
# ---------------------------------------------------------------------------

def timeit(name: Optional[str] = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to time a function call and log its duration at INFO level.

    Usage
    -----
        from boxfit.utils.timing import timeit

        @timeit("pack demo")
        def run():
            return optimize(request)
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        label = name or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed = time.perf_counter() - start
            logger.info("[timeit] %s: %.4f s", label, elapsed)
            return result

        return wrapper

    return decorator


__all__ = [
    "Timer",
    "timeit",
]
