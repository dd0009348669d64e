"""Timing helper for the rendering scripts."""

from __future__ import annotations

import logging
import time
from typing import Dict, Optional


class Timer:
    """Wall-clock timer usable as a context manager."""

    def __init__(self, name: str = "Timer", logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(__name__)
        self.start_time = None
        self.end_time = None

    def start(self) -> None:
        self.start_time = time.perf_counter()
        self.end_time = None

    def stop(self) -> float:
        """Stop the timer.

        Returns:
            Elapsed time in seconds, 0.0 if the timer was never started
        """
        if self.start_time is None:
            self.logger.warning(f"{self.name}: Timer stopped without being started")
            return 0.0

        self.end_time = time.perf_counter()
        elapsed = self.end_time - self.start_time
        self.logger.debug(f"{self.name}: {elapsed:.4f}s")
        return elapsed

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    @property
    def elapsed(self) -> float:
        """Elapsed seconds; frozen once the timer is stopped."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time


def summarize(timers: Dict[str, Timer]) -> Dict[str, float]:
    """Map stage names to elapsed seconds, rounded for reporting."""
    return {name: round(timer.elapsed, 6) for name, timer in timers.items()}
