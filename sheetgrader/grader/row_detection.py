"""
Row Detection Module
Recovers answer row positions from timing-mark projections
"""
import numpy as np
from typing import List, Sequence, Tuple
from dataclasses import dataclass, field
import logging

from .config import RecognitionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerRegion:
    """Inner sheet area after the border margin is cropped"""
    start_x: int
    start_y: int
    width: int
    height: int
    block_width: int

    def block_start_x(self, block_index: int) -> int:
        return self.start_x + block_index * self.block_width


@dataclass
class RowDetection:
    """Result of row detection on one binary sheet"""
    row_centers: List[int]
    block_rows: List[List[int]] = field(default_factory=list)
    fallback_blocks: List[int] = field(default_factory=list)
    peak_counts: List[int] = field(default_factory=list)

    def in_block_order(self) -> List[int]:
        """Rows of block 0, then block 1, ... (the layout AnswerExtractor expects)"""
        return [y for rows in self.block_rows for y in rows]


def compute_answer_region(
    shape: Tuple[int, ...],
    num_blocks: int,
    margin_ratio: float = 0.05
) -> AnswerRegion:
    """
    Crop a margin from every edge and split the rest into equal blocks.

    Args:
        shape: Image shape (height, width[, channels])
        num_blocks: Number of vertical answer blocks
        margin_ratio: Fraction of each dimension dropped on every side

    Returns:
        AnswerRegion in image pixel coordinates
    """
    h, w = shape[:2]
    start_x = int(w * margin_ratio)
    start_y = int(h * margin_ratio)
    end_x = int(w * (1 - margin_ratio))
    end_y = int(h * (1 - margin_ratio))

    width = end_x - start_x
    return AnswerRegion(
        start_x=start_x,
        start_y=start_y,
        width=width,
        height=end_y - start_y,
        block_width=width // num_blocks,
    )


def extract_timing_strip(
    binary: np.ndarray,
    region: AnswerRegion,
    block_index: int,
    strip_ratio: float = 0.1
) -> np.ndarray:
    """
    Extract the left timing-mark strip of a block.

    Returns:
        View of the binary image, full region height
    """
    x = region.block_start_x(block_index)
    strip_width = max(1, int(region.block_width * strip_ratio))
    return binary[region.start_y:region.start_y + region.height, x:x + strip_width]


def compute_projection(strip: np.ndarray) -> np.ndarray:
    """Count foreground pixels on every image row of a strip"""
    return np.count_nonzero(strip, axis=1).astype(np.float64)


def find_projection_peaks(
    projection: Sequence[float],
    min_distance: int = 20,
    threshold_ratio: float = 0.3
) -> List[int]:
    """
    Find timing-mark positions in a 1-D projection.

    A row is a candidate when its value exceeds mean * (1 + threshold_ratio)
    and no value within min_distance / 2 rows is larger. A run of adjacent
    candidates is one mark and is reported at its center. A mark closer
    than min_distance to the last accepted peak is skipped.

    Args:
        projection: Foreground count per row
        min_distance: De-duplication window in pixels
        threshold_ratio: Sensitivity relative to the mean projection

    Returns:
        Sorted peak positions (indices into the projection)
    """
    values = np.asarray(projection, dtype=np.float64)
    n = values.size
    if n == 0:
        return []

    threshold = values.mean() * (1 + threshold_ratio)
    half = max(1, min_distance // 2)

    candidates = []
    for y in np.flatnonzero(values > threshold):
        lo = max(0, y - half)
        hi = min(n, y + half + 1)
        if values[lo:hi].max() > values[y]:
            continue
        candidates.append(int(y))

    # Contiguous candidates form one flat-topped mark
    plateaus = []
    for y in candidates:
        if plateaus and y == plateaus[-1][1] + 1:
            plateaus[-1][1] = y
        else:
            plateaus.append([y, y])

    peaks = []
    for first, last in plateaus:
        center = (first + last) // 2
        if peaks and center - peaks[-1] < min_distance:
            continue
        peaks.append(center)

    return peaks


def uniform_row_centers(top: int, height: int, n_rows: int) -> List[int]:
    """n_rows evenly spaced centers across [top, top + height)"""
    row_height = height // n_rows
    return [top + i * row_height + row_height // 2 for i in range(n_rows)]


def select_block_rows(
    peaks: Sequence[int],
    rows_per_block: int,
    block_top: int,
    block_height: int,
    min_peak_fraction: float = 0.8
) -> Tuple[List[int], bool]:
    """
    Turn the peaks of one block into row centers.

    Enough peaks (>= min_peak_fraction * rows_per_block): sorted and, when
    there are too many, thinned with stride len(peaks) // rows_per_block.
    Otherwise rows_per_block uniform centers are used.

    Args:
        peaks: Peak positions relative to block_top
        rows_per_block: Expected rows in the block
        block_top: Y offset of the block in the image
        block_height: Height of the block
        min_peak_fraction: Cutoff between peaks and the uniform grid

    Returns:
        Tuple of (row centers in image coordinates, used_fallback)
    """
    if peaks and len(peaks) >= rows_per_block * min_peak_fraction:
        selected = sorted(peaks)
        if len(selected) > rows_per_block:
            step = len(selected) // rows_per_block
            selected = selected[::step][:rows_per_block]
        return [block_top + p for p in selected], False

    return uniform_row_centers(block_top, block_height, rows_per_block), True


class RowLocator:
    """
    Locates answer rows block by block using the timing-mark column.
    """

    def __init__(self, config: RecognitionConfig = None):
        self.config = config or RecognitionConfig()

    def block_projections(self, binary: np.ndarray) -> Tuple[AnswerRegion, List[np.ndarray]]:
        """Projection of every block's timing strip"""
        cfg = self.config
        region = compute_answer_region(binary.shape, cfg.num_blocks, cfg.margin_ratio)
        projections = [
            compute_projection(
                extract_timing_strip(binary, region, block_index, cfg.timing_strip_ratio)
            )
            for block_index in range(cfg.num_blocks)
        ]
        return region, projections

    def detect(self, binary: np.ndarray) -> RowDetection:
        """
        Detect row centers on an enhanced binary image.

        Args:
            binary: Binary sheet image (ink = 255)

        Returns:
            RowDetection with sorted centers and the blocks that fell back
        """
        cfg = self.config
        region, projections = self.block_projections(binary)

        block_rows = []
        fallback_blocks = []
        peak_counts = []

        for block_index, projection in enumerate(projections):
            peaks = find_projection_peaks(
                projection, cfg.min_peak_distance, cfg.peak_threshold_ratio
            )
            peak_counts.append(len(peaks))

            rows, used_fallback = select_block_rows(
                peaks, cfg.rows_per_block, region.start_y, region.height,
                cfg.min_peak_fraction
            )
            if used_fallback:
                fallback_blocks.append(block_index)
                logger.warning(
                    f"Block {block_index}: {len(peaks)} timing marks found, "
                    f"expected {cfg.rows_per_block}; using uniform rows"
                )
            block_rows.append(rows)

        row_centers = sorted(y for rows in block_rows for y in rows)
        logger.debug(f"Detected {len(row_centers)} rows, peaks per block: {peak_counts}")

        return RowDetection(
            row_centers=row_centers,
            block_rows=block_rows,
            fallback_blocks=fallback_blocks,
            peak_counts=peak_counts,
        )

    def locate(self, binary: np.ndarray) -> List[int]:
        """Sorted row centers for the whole sheet"""
        return self.detect(binary).row_centers
