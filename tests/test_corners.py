"""
Unit tests for corner ordering, rectification and paper detection
"""
import cv2
import numpy as np
import pytest

from sheetgrader.grader import PaperCornerDetector, PerspectiveRectifier, order_corners

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]


def sheet_frame(shape, corners, background=30, paper=235):
    """Dark frame with a bright convex sheet"""
    frame = np.full(shape, background, dtype=np.uint8)
    cv2.fillConvexPoly(frame, np.array(corners, dtype=np.int32), paper)
    return frame


def assert_corners_near(found, expected, tolerance):
    assert found is not None
    for (fx, fy), (ex, ey) in zip(found, expected):
        assert abs(fx - ex) <= tolerance
        assert abs(fy - ey) <= tolerance


class TestOrderCorners:
    """Test cases for canonical corner order"""

    @pytest.mark.parametrize("order", [
        [0, 1, 2, 3],
        [2, 0, 3, 1],
        [3, 2, 1, 0],
        [1, 3, 0, 2],
    ])
    def test_any_input_order(self, order):
        points = [SQUARE[i] for i in order]
        assert order_corners(points) == ((0, 0), (10, 0), (10, 10), (0, 10))

    def test_skewed_quadrilateral(self):
        points = [(320, 410), (110, 60), (40, 380), (300, 90)]
        tl, tr, br, bl = order_corners(points)
        assert tl == (110, 60)
        assert tr == (300, 90)
        assert br == (320, 410)
        assert bl == (40, 380)

    @pytest.mark.parametrize("order", [
        [0, 1, 2, 3],
        [3, 2, 1, 0],
        [2, 0, 3, 1],
    ])
    def test_diamond_uses_angle_order(self, order):
        """Tied extremes still give four distinct corners, independent of input order"""
        diamond = [(5, 0), (10, 5), (5, 10), (0, 5)]
        points = [diamond[i] for i in order]
        assert order_corners(points) == ((0, 5), (5, 0), (10, 5), (5, 10))

    def test_accepts_numpy_points(self):
        points = np.array([[10, 10], [0, 0], [0, 10], [10, 0]], dtype=np.float32)
        assert order_corners(points)[0] == (0.0, 0.0)

    def test_requires_four_points(self):
        with pytest.raises(ValueError):
            order_corners(SQUARE[:3])


class TestPerspectiveRectifier:
    """Test cases for perspective warping"""

    def test_output_size(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        warped = PerspectiveRectifier(800, 1000).warp(
            frame, [(100, 50), (500, 60), (520, 420), (90, 400)]
        )
        assert warped.shape == (1000, 800, 3)

    def test_corners_map_to_target(self):
        rectifier = PerspectiveRectifier(200, 300)
        corners = [(10, 20), (110, 25), (120, 230), (5, 220)]
        matrix = rectifier.transform_matrix(corners)

        src = np.float32(corners).reshape(-1, 1, 2)
        mapped = cv2.perspectiveTransform(src, matrix).reshape(-1, 2)

        np.testing.assert_allclose(mapped, [[0, 0], [200, 0], [200, 300], [0, 300]], atol=1e-3)

    def test_sheet_fills_output(self):
        corners = [(100, 80), (540, 80), (540, 400), (100, 400)]
        frame = sheet_frame((480, 640), corners)
        warped = PerspectiveRectifier(400, 300).warp(frame, corners)
        assert warped[150, 200] == 235

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            PerspectiveRectifier(0, 100)


class TestPaperCornerDetector:
    """Test cases for sheet detection"""

    def test_detects_axis_aligned_sheet(self):
        corners = [(100, 80), (540, 80), (540, 400), (100, 400)]
        frame = sheet_frame((480, 640), corners)

        found = PaperCornerDetector().detect(frame)

        assert_corners_near(found, corners, tolerance=15)

    def test_detects_tilted_sheet(self):
        corners = [(150, 60), (520, 100), (480, 430), (110, 390)]
        frame = sheet_frame((480, 640), corners)

        found = PaperCornerDetector().detect(cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR))

        assert_corners_near(found, corners, tolerance=20)

    def test_wide_frame_rescaled_to_frame_coordinates(self):
        corners = [(200, 160), (1080, 160), (1080, 800), (200, 800)]
        frame = sheet_frame((960, 1280), corners)

        found = PaperCornerDetector(max_width=640).detect(frame)

        assert_corners_near(found, corners, tolerance=30)

    def test_empty_frame(self):
        frame = np.full((480, 640), 30, dtype=np.uint8)
        assert PaperCornerDetector().detect(frame) is None

    def test_small_sheet_ignored(self):
        corners = [(300, 200), (340, 200), (340, 240), (300, 240)]
        frame = sheet_frame((480, 640), corners)
        assert PaperCornerDetector().detect(frame) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
