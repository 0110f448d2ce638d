"""
Stability Module
Temporal filter over consecutive corner detections
"""
import math
from typing import Optional, Sequence
import logging

from .image_processing import Corners

logger = logging.getLogger(__name__)


def max_corner_displacement(previous: Sequence[Sequence[float]], current: Sequence[Sequence[float]]) -> float:
    """Largest Euclidean distance between matching corners"""
    return max(
        math.hypot(c[0] - p[0], c[1] - p[1])
        for p, c in zip(previous, current)
    )


class StabilityGate:
    """
    Signals when the detected sheet has held still long enough to capture.

    The initial detection counts as the first stable frame. Stability is
    reported on every low-jitter frame once the target is reached; call
    reset() after a capture to re-arm for the next sheet.
    """

    def __init__(self, threshold: float = 15.0, frame_count: int = 10):
        self.threshold = threshold
        self.frame_count = frame_count
        self.previous_corners: Optional[Corners] = None
        self.stable_frames = 0

    @property
    def is_tracking(self) -> bool:
        return self.previous_corners is not None

    def update(self, corners: Optional[Corners]) -> bool:
        """
        Feed the detection for one frame.

        Args:
            corners: Ordered corners, or None when nothing was detected

        Returns:
            True when the sheet is stable on this frame
        """
        if corners is None or len(corners) != 4:
            self.reset()
            return False

        corners = tuple(tuple(p) for p in corners)

        if self.previous_corners is None:
            self.previous_corners = corners
            self.stable_frames = 1
            return False

        displacement = max_corner_displacement(self.previous_corners, corners)
        self.previous_corners = corners

        if displacement < self.threshold:
            self.stable_frames += 1
        else:
            logger.debug(f"Corners moved {displacement:.1f}px, restarting stability count")
            self.stable_frames = 0
            return False

        return self.stable_frames >= self.frame_count

    def reset(self) -> None:
        self.previous_corners = None
        self.stable_frames = 0
