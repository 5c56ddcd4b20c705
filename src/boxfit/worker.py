"""
Background execution and message channel for optimization runs.

A run can take a while, so callers such as a UI do not call `optimize`
directly. They dispatch a `start` request to an `OptimizationWorker`,
which runs the engine on a background thread and publishes messages on a
queue:

- zero or more `ProgressMessage` (percent non-decreasing, 0..100);
- exactly one terminal `CompleteMessage` (carrying the result, successful
  or not) or `ErrorMessage` (an unexpected internal fault).

Usage
-----

    worker = OptimizationWorker()
    worker.start(request)
    for msg in worker.messages():
        if msg.type == "progress":
            print(msg.progress, msg.message)
    # the last message is terminal

There is no cancellation: once started, a run goes to completion. One
worker runs one request at a time; separate workers share no state.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterator, List, Optional, Tuple, Union

from .models import (
    CompleteMessage,
    ErrorMessage,
    OptimizeRequest,
    ProgressMessage,
    WorkerMessage,
)
from .optimizer import optimize, optimize_payload

logger = logging.getLogger(__name__)

TerminalMessage = Union[CompleteMessage, ErrorMessage]


class OptimizationWorker:
    """
    Runs one optimization at a time on a background thread.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[WorkerMessage]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._terminal: Optional[TerminalMessage] = None

    # -- lifecycle ----------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, request: Union[OptimizeRequest, dict]) -> None:
        """
        Dispatch a run. `request` may be an `OptimizeRequest` or a raw payload dict.

        Raises
        ------
        RuntimeError
            If a run is already in progress on this worker.
        """
        if self.busy:
            raise RuntimeError("An optimization run is already in progress.")

        self._queue = queue.Queue()
        self._terminal = None
        self._thread = threading.Thread(
            target=self._run,
            args=(request,),
            name="boxfit-optimizer",
            daemon=True,
        )
        self._thread.start()

    def _post_progress(self, message: str, percent: int) -> None:
        self._queue.put(ProgressMessage(message=message, progress=percent))

    def _run(self, request: Union[OptimizeRequest, dict]) -> None:
        try:
            if isinstance(request, OptimizeRequest):
                result = optimize(request, progress=self._post_progress)
            else:
                result = optimize_payload(request, progress=self._post_progress)
            terminal: TerminalMessage = CompleteMessage(result=result)
        except Exception as exc:
            logger.exception("optimization run failed")
            terminal = ErrorMessage(error=str(exc) or type(exc).__name__)
        self._queue.put(terminal)

    # -- consuming ----------------------------------------------------------

    def messages(self, timeout: Optional[float] = None) -> Iterator[WorkerMessage]:
        """
        Yield messages in order, up to and including the terminal one.

        Raises
        ------
        queue.Empty
            If no message arrives within `timeout` seconds.
        """
        if self._thread is None:
            raise RuntimeError("No run has been started.")

        while True:
            msg = self._queue.get(timeout=timeout)
            yield msg
            if msg.type != "progress":
                self._terminal = msg
                return

    def join(self, timeout: Optional[float] = None) -> TerminalMessage:
        """
        Wait for the terminal message, discarding progress.
        """
        if self._terminal is None:
            for _ in self.messages(timeout=timeout):
                pass
        if self._terminal is None:
            raise RuntimeError("Run ended without a terminal message.")
        return self._terminal


def run_sync(
    request: Union[OptimizeRequest, dict],
    timeout: Optional[float] = None,
) -> Tuple[List[ProgressMessage], TerminalMessage]:
    """
    Start a run on a fresh worker and collect all of its messages.
    """
    worker = OptimizationWorker()
    worker.start(request)

    progress: List[ProgressMessage] = []
    for msg in worker.messages(timeout=timeout):
        if isinstance(msg, ProgressMessage):
            progress.append(msg)
    return progress, worker.join()


__all__ = [
    "TerminalMessage",
    "OptimizationWorker",
    "run_sync",
]
