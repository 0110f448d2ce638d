"""
Unit tests for the stability gate
"""
import pytest

from sheetgrader.grader import StabilityGate
from sheetgrader.grader.stability import max_corner_displacement

CORNERS = ((100.0, 100.0), (500.0, 100.0), (500.0, 700.0), (100.0, 700.0))


def shifted(corners, dx=0.0, dy=0.0):
    return tuple((x + dx, y + dy) for x, y in corners)


class TestMaxCornerDisplacement:
    """Test cases for corner displacement"""

    def test_identical(self):
        assert max_corner_displacement(CORNERS, CORNERS) == 0.0

    def test_single_corner_moves(self):
        moved = list(CORNERS)
        moved[2] = (503.0, 704.0)
        assert max_corner_displacement(CORNERS, moved) == pytest.approx(5.0)


class TestStabilityGate:
    """Test cases for the stable-frame counter"""

    def test_stable_on_tenth_identical_frame(self):
        gate = StabilityGate(threshold=15.0, frame_count=10)
        results = [gate.update(CORNERS) for _ in range(10)]
        assert results == [False] * 9 + [True]
        assert gate.stable_frames == 10

    def test_first_detection_starts_tracking(self):
        gate = StabilityGate()
        assert not gate.is_tracking
        assert gate.update(CORNERS) is False
        assert gate.is_tracking
        assert gate.stable_frames == 1

    def test_small_jitter_counts(self):
        gate = StabilityGate(threshold=15.0, frame_count=3)
        assert not gate.update(CORNERS)
        assert not gate.update(shifted(CORNERS, 5, 5))
        assert gate.update(shifted(CORNERS, 10, 10))

    def test_missing_detection_resets(self):
        gate = StabilityGate(frame_count=3)
        gate.update(CORNERS)
        gate.update(CORNERS)

        assert gate.update(None) is False
        assert not gate.is_tracking
        assert gate.stable_frames == 0

        results = [gate.update(CORNERS) for _ in range(3)]
        assert results == [False, False, True]

    def test_large_jump_resets_count(self):
        gate = StabilityGate(threshold=15.0, frame_count=3)
        gate.update(CORNERS)
        gate.update(CORNERS)

        assert gate.update(shifted(CORNERS, 20, 0)) is False
        assert gate.stable_frames == 0
        assert gate.is_tracking

        # The jumped position becomes the new reference
        assert not gate.update(shifted(CORNERS, 20, 0))
        assert not gate.update(shifted(CORNERS, 20, 0))
        assert gate.update(shifted(CORNERS, 20, 0))

    def test_displacement_at_threshold_is_movement(self):
        gate = StabilityGate(threshold=15.0, frame_count=2)
        gate.update(CORNERS)
        assert gate.update(shifted(CORNERS, 15, 0)) is False
        assert gate.stable_frames == 0

    def test_reference_follows_slow_drift(self):
        gate = StabilityGate(threshold=15.0, frame_count=5)
        for step in range(5):
            stable = gate.update(shifted(CORNERS, 10 * step, 0))
        assert stable

    def test_stays_stable_until_reset(self):
        gate = StabilityGate(frame_count=2)
        gate.update(CORNERS)
        assert gate.update(CORNERS)
        assert gate.update(CORNERS)

        gate.reset()
        assert gate.update(CORNERS) is False
        assert gate.stable_frames == 1

    def test_wrong_point_count_resets(self):
        gate = StabilityGate()
        gate.update(CORNERS)
        assert gate.update(CORNERS[:3]) is False
        assert not gate.is_tracking


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
