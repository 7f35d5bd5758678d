"""
Progress reporting and cooperative cancellation for the masking pipeline.

Progress is a percentage in [0, 100]: the flood fill covers 0..50 and alpha
compositing covers 50..100. Callbacks are invoked synchronously from the
processing loops; they observe, they never steer.
"""
from __future__ import annotations
import threading
from typing import Callable, Optional

ProgressCallback = Callable[[float], None]

MASK_STAGE = (0.0, 50.0)
COMPOSITE_STAGE = (50.0, 100.0)


class PipelineCancelled(RuntimeError):
    """Raised from inside a stage loop once its CancelToken has been set."""


class CancelToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise PipelineCancelled("background removal cancelled")


class ProgressReporter:
    """
    Wraps an optional callback so that reported values are clamped to [0, 100]
    and never go backwards. Values that would not advance the last report are
    dropped, so calling it every row is cheap for the sink.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None) -> None:
        self.callback = callback
        self.last = 0.0
        self.calls = 0

    def report(self, value: float) -> None:
        value = max(0.0, min(100.0, float(value)))
        if value < self.last or (self.calls and value == self.last):
            return
        self.last = value
        self.calls += 1
        if self.callback is not None:
            self.callback(value)

    def stage(self, span: tuple[float, float], done: int, total: int) -> None:
        """Report `done/total` of a stage occupying `span` of the overall bar."""
        lo, hi = span
        frac = 1.0 if total <= 0 else min(1.0, done / total)
        self.report(lo + (hi - lo) * frac)


def as_reporter(progress: "ProgressReporter | ProgressCallback | None") -> ProgressReporter:
    if isinstance(progress, ProgressReporter):
        return progress
    return ProgressReporter(progress)


def check(cancel: Optional[CancelToken]) -> None:
    if cancel is not None:
        cancel.raise_if_cancelled()
