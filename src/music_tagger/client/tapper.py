"""
BPM tap estimator.

Each tap records a timestamp; the BPM is derived from the mean interval
between the first and last retained taps.
"""

import math
import time
from typing import Optional

TAP_RESET_THRESHOLD_MS = 2000
MAX_TAPS_TO_AVERAGE = 128


def _now_ms() -> float:
    return time.monotonic() * 1000


class BpmTapper:
    """Tap-tempo estimator.

    A gap longer than reset_threshold_ms starts a new tapping session. At most
    max_taps timestamps are kept; the oldest are dropped first.
    """

    def __init__(
        self,
        reset_threshold_ms: float = TAP_RESET_THRESHOLD_MS,
        max_taps: int = MAX_TAPS_TO_AVERAGE,
    ):
        self.reset_threshold_ms = reset_threshold_ms
        self.max_taps = max_taps
        self.timestamps: list[float] = []
        self.bpm: Optional[int] = None

    def reset(self) -> None:
        self.timestamps = []
        self.bpm = None

    def tap(self, now_ms: Optional[float] = None) -> Optional[int]:
        """Record a tap and return the current BPM estimate.

        Args:
            now_ms: Tap time in milliseconds (defaults to a monotonic clock)

        Returns:
            Latest positive BPM estimate, or None until one exists
        """
        now = _now_ms() if now_ms is None else now_ms

        if self.timestamps and now - self.timestamps[-1] > self.reset_threshold_ms:
            self.timestamps = []

        self.timestamps.append(now)
        if len(self.timestamps) > self.max_taps:
            self.timestamps.pop(0)

        if len(self.timestamps) > 1:
            mean_interval = (self.timestamps[-1] - self.timestamps[0]) / (
                len(self.timestamps) - 1
            )
            if mean_interval > 0:
                bpm = math.floor(60000 / mean_interval + 0.5)
                if bpm > 0:
                    self.bpm = bpm

        return self.bpm
