"""
Deterministic time source for driving a `StakingPool`.

The pool reads "now" from any zero-argument callable returning integer
seconds; `ManualClock` is that callable with explicit control over time.
"""

from __future__ import annotations


class ManualClock:
    """Settable, non-decreasing clock (block-timestamp style)."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"start must be non-negative: {start}")
        self._now = start

    def __call__(self) -> int:
        return self._now

    @property
    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"cannot move the clock backwards by {-seconds}s")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> int:
        if timestamp < self._now:
            raise ValueError(f"cannot move the clock backwards: {timestamp} < {self._now}")
        self._now = timestamp
        return self._now

    def __repr__(self) -> str:
        return f"ManualClock(now={self._now})"
