"""Lightweight wall-clock profiling.

Provides:
    - timer(): context manager with an optional sink callback
    - TimerAccumulator: repeated measurements (per-frame noise timing)

Used to measure grid passes; timings go to the log and the render manifest.
"""

import time
from contextlib import contextmanager
from typing import Callable, Optional


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Context manager for wall-clock timing.

    Parameters
    ----------
    name : str
        Timer name
    sink : Optional[Callable[[str, float], None]]
        Callback(name, elapsed_seconds); prints to stdout if None

    Examples
    --------
    >>> with timer("fractal_pass", sink=lambda n, t: logger.info(f"{n}: {t:.3f} s")):
    ...     rows = driver.render_fractal(evaluator, ramp, lo, hi)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if sink is not None:
            sink(name, elapsed)
        else:
            print(f"{name}: {elapsed:.3f} s")


class TimerAccumulator:
    """Accumulate timing measurements for averaging.

    Examples
    --------
    >>> frame_timer = TimerAccumulator("noise_frame")
    >>> for frame in range(frames):
    ...     with frame_timer.measure():
    ...         rows = driver.render_noise(field, ramp, lo, hi)
    >>> frame_timer.mean()
    """

    def __init__(self, name: str):
        self.name = name
        self.total_time = 0.0
        self.count = 0

    @contextmanager
    def measure(self):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.total_time += time.perf_counter() - start
            self.count += 1

    def mean(self) -> float:
        """Mean seconds per measurement, 0.0 if none."""
        return self.total_time / self.count if self.count > 0 else 0.0

    def reset(self) -> None:
        self.total_time = 0.0
        self.count = 0

    def __repr__(self) -> str:
        return f"TimerAccumulator({self.name}, mean={self.mean():.4f}s, count={self.count})"
