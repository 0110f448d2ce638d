"""
Image Processing Module
Handles sheet enhancement, corner ordering and perspective rectification
"""
import math
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np
import logging

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Corners = Tuple[Point, Point, Point, Point]

DEFAULT_UPSCALE_FACTOR = 2.0
DEFAULT_WARP_WIDTH = 800
DEFAULT_WARP_HEIGHT = 1000


def to_grayscale(img: np.ndarray) -> np.ndarray:
    """
    Convert an image to single-channel grayscale.

    3-channel input is treated as BGR, 4-channel input as BGRA.
    Grayscale input is returned unchanged.
    """
    if img.ndim == 2:
        return img
    channels = img.shape[2]
    if channels == 1:
        return img[:, :, 0]
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def enhance_image(
    img: np.ndarray,
    upscale_factor: float = DEFAULT_UPSCALE_FACTOR,
    block_size: int = 11,
    bias: float = 2
) -> np.ndarray:
    """
    Turn a photographed sheet into a binary image.

    Steps: grayscale, bicubic upscaling, CLAHE and adaptive thresholding.

    Args:
        img: Input image (grayscale, BGR or BGRA)
        upscale_factor: Uniform resize factor
        block_size: Adaptive threshold neighbourhood size
        bias: Constant subtracted from the local mean

    Returns:
        Binary image (ink = 255) of size input * upscale_factor
    """
    gray = to_grayscale(img)
    if gray.dtype != np.uint8:
        gray = cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    upscaled = cv2.resize(
        gray, None, fx=upscale_factor, fy=upscale_factor,
        interpolation=cv2.INTER_CUBIC
    )

    clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(8, 8))
    equalized = clahe.apply(upscaled)

    binary = cv2.adaptiveThreshold(
        equalized, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
        cv2.THRESH_BINARY_INV, block_size, bias
    )

    return binary


def _angle_ordered(points: Sequence[Point]) -> Corners:
    cx = sum(p[0] for p in points) / len(points)
    cy = sum(p[1] for p in points) / len(points)
    # Sweep clockwise (y points down) starting from the left
    ordered = sorted(
        points,
        key=lambda p: (math.atan2(p[1] - cy, p[0] - cx) + math.pi) % (2 * math.pi)
    )
    return tuple(ordered)


def _has_unique_extremes(points: Sequence[Point]) -> bool:
    sums = [p[0] + p[1] for p in points]
    diffs = [p[0] - p[1] for p in points]
    return all(
        values.count(pick(values)) == 1
        for values in (sums, diffs)
        for pick in (min, max)
    )


def order_corners(points: Sequence[Sequence[float]]) -> Corners:
    """
    Order four points as [top-left, top-right, bottom-right, bottom-left].

    top-left minimises x+y, bottom-right maximises x+y, top-right
    maximises x-y and bottom-left minimises x-y. When any of these
    extremes is tied (a sheet rotated by about 45 degrees), the points
    are ordered by angle around their centroid instead.

    Raises:
        ValueError: If the input does not hold exactly 4 points
    """
    pts = [(float(p[0]), float(p[1])) for p in points]
    if len(pts) != 4:
        raise ValueError(f"Expected 4 corner points, got {len(pts)}")

    if not _has_unique_extremes(pts):
        return _angle_ordered(pts)

    top_left = min(pts, key=lambda p: p[0] + p[1])
    bottom_right = max(pts, key=lambda p: p[0] + p[1])
    top_right = max(pts, key=lambda p: p[0] - p[1])
    bottom_left = min(pts, key=lambda p: p[0] - p[1])

    return (top_left, top_right, bottom_right, bottom_left)


class PerspectiveRectifier:
    """
    Warps a detected sheet quadrilateral onto a canonical rectangle.
    """

    def __init__(self, width: int = DEFAULT_WARP_WIDTH, height: int = DEFAULT_WARP_HEIGHT):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid target size: {width}x{height}")
        self.width = width
        self.height = height
        self.target = np.float32([
            [0, 0],
            [width, 0],
            [width, height],
            [0, height],
        ])

    def transform_matrix(self, corners: Sequence[Sequence[float]]) -> np.ndarray:
        """Projective transform mapping the corners onto the target rectangle"""
        src = np.float32(order_corners(corners))
        return cv2.getPerspectiveTransform(src, self.target)

    def warp(self, img: np.ndarray, corners: Sequence[Sequence[float]]) -> np.ndarray:
        """
        Resample the frame into the canonical rectangle.

        Args:
            img: Source frame
            corners: Four sheet corners, any order

        Returns:
            Image of shape (height, width[, channels])
        """
        matrix = self.transform_matrix(corners)
        warped = cv2.warpPerspective(img, matrix, (self.width, self.height))
        logger.debug(f"Rectified frame {img.shape[1]}x{img.shape[0]} -> {self.width}x{self.height}")
        return warped


def draw_detected_rows(
    img: np.ndarray,
    row_centers: Sequence[int],
    upscale_factor: float = DEFAULT_UPSCALE_FACTOR,
    color: Tuple[int, int, int] = (0, 0, 255),
    thickness: int = 3
) -> Optional[np.ndarray]:
    """
    Overlay horizontal lines at detected row centers, for display only.

    Row centers are in enhanced-image coordinates and are scaled back
    by 1 / upscale_factor.

    Returns:
        BGR copy of the image with the lines drawn, or None without rows
    """
    if not row_centers:
        return None

    if img.ndim == 2:
        overlay = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    elif img.shape[2] == 4:
        overlay = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    else:
        overlay = img.copy()

    h, w = overlay.shape[:2]
    for y in row_centers:
        scaled_y = int(round(y / upscale_factor))
        if 0 <= scaled_y <= h:
            cv2.line(overlay, (0, scaled_y), (w, scaled_y), color, thickness)

    return overlay


def load_image(path: str, grayscale: bool = False) -> Optional[np.ndarray]:
    """
    Load image from file.

    Args:
        path: Path to image file
        grayscale: Whether to load as grayscale

    Returns:
        Image array or None if loading fails
    """
    flag = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
    img = cv2.imread(str(path), flag)

    if img is None:
        logger.warning(f"Failed to load image: {path}")

    return img


def decode_image(data: bytes) -> Optional[np.ndarray]:
    """Decode an encoded image buffer (PNG, JPEG, ...) into a BGR array"""
    buffer = np.frombuffer(data, dtype=np.uint8)
    if buffer.size == 0:
        return None
    return cv2.imdecode(buffer, cv2.IMREAD_COLOR)
