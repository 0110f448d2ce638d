"""
Paper Detection Module
Finds the exam sheet's outer quadrilateral in an unrectified frame
"""
import cv2
import numpy as np
from typing import Optional
import logging

from .image_processing import Corners, order_corners, to_grayscale

logger = logging.getLogger(__name__)


class PaperCornerDetector:
    """
    Detects the four sheet corners in a single frame.

    Detection has no memory of previous frames; temporal filtering is
    done by StabilityGate.
    """

    def __init__(
        self,
        max_width: int = 800,
        blur_size: int = 11,
        min_area_ratio: float = 0.2,
        approx_epsilon_ratio: float = 0.02,
        dilate_size: int = 5
    ):
        self.max_width = max_width
        self.blur_size = blur_size
        self.min_area_ratio = min_area_ratio
        self.approx_epsilon_ratio = approx_epsilon_ratio
        self.dilate_size = dilate_size

    def preprocess(self, frame: np.ndarray) -> np.ndarray:
        """
        Build the edge mask used for contour search.

        Frames wider than max_width are downscaled first.

        Returns:
            Binary mask with the sheet boundary as foreground
        """
        gray = to_grayscale(frame)

        if gray.shape[1] > self.max_width:
            scale = self.max_width / gray.shape[1]
            gray = cv2.resize(gray, None, fx=scale, fy=scale, interpolation=cv2.INTER_AREA)

        # Heavy blur washes out printed text but keeps the sheet edge
        blurred = cv2.GaussianBlur(gray, (self.blur_size, self.blur_size), 0)

        thresholded = cv2.adaptiveThreshold(
            blurred, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY, 11, 2
        )
        inverted = cv2.bitwise_not(thresholded)

        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (self.dilate_size, self.dilate_size))
        dilated = cv2.dilate(inverted, kernel)

        return dilated

    def find_quadrilateral(self, mask: np.ndarray) -> Optional[np.ndarray]:
        """
        Largest convex 4-vertex contour covering enough of the mask.

        Returns:
            Array of 4 (x, y) points in mask coordinates, or None
        """
        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        min_area = mask.shape[0] * mask.shape[1] * self.min_area_ratio
        best = None
        best_area = 0.0

        for cnt in contours:
            area = cv2.contourArea(cnt)
            if area < min_area:
                continue

            epsilon = cv2.arcLength(cnt, True) * self.approx_epsilon_ratio
            approx = cv2.approxPolyDP(cnt, epsilon, True)
            # Raw contours of slanted edges are pixel staircases; test the outline
            if not cv2.isContourConvex(approx):
                continue
            if len(approx) != 4:
                continue

            if area > best_area:
                best_area = area
                best = approx.reshape(4, 2).astype(np.float64)

        return best

    def detect(self, frame: np.ndarray) -> Optional[Corners]:
        """
        Detect sheet corners.

        Args:
            frame: Raw camera frame (grayscale, BGR or BGRA)

        Returns:
            Corners ordered [top-left, top-right, bottom-right, bottom-left]
            in frame coordinates, or None when no sheet is found
        """
        mask = self.preprocess(frame)
        quad = self.find_quadrilateral(mask)

        if quad is None:
            logger.debug("No paper corners detected")
            return None

        # Back to original frame coordinates
        scale_x = frame.shape[1] / mask.shape[1]
        scale_y = frame.shape[0] / mask.shape[0]
        points = [(float(x) * scale_x, float(y) * scale_y) for x, y in quad]

        return order_corners(points)
