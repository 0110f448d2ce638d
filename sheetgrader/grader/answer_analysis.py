"""
Answer Analysis Module
Measures option cells on the binary sheet and picks the marked option
"""
import cv2
import numpy as np
from typing import List, Sequence
import logging

from .answers import Answer, Answered, AnswerVector, UNANSWERED
from .config import RecognitionConfig
from .row_detection import AnswerRegion, compute_answer_region

logger = logging.getLogger(__name__)


def cell_intensity(cell: np.ndarray) -> float:
    """
    Foreground ratio of a cell scaled to 0-255.

    Empty cells (clipped away entirely) measure 0.
    """
    total = cell.size
    if total == 0:
        return 0.0
    return cv2.countNonZero(cell) / total * 255.0


def pick_darkest_option(intensities: Sequence[float], threshold: float = 100) -> Answer:
    """
    Select the option with the lowest intensity.

    Adaptive thresholding keeps only edges of a solid fill, so a filled
    bubble measures less foreground than an empty outlined one.

    Args:
        intensities: One value per option, in option order
        threshold: Minimum must be strictly below this to count as a mark

    Returns:
        Answered(index) or UNANSWERED
    """
    if len(intensities) == 0:
        return UNANSWERED
    darkest = int(np.argmin(intensities))
    if intensities[darkest] < threshold:
        return Answered(darkest)
    return UNANSWERED


def split_option_cells(row_strip: np.ndarray, n_options: int, block_width: int) -> List[np.ndarray]:
    """Divide a block-wide strip into equal option cells"""
    option_width = block_width // n_options
    return [
        row_strip[:, i * option_width:(i + 1) * option_width]
        for i in range(n_options)
    ]


class AnswerExtractor:
    """
    Reads one answer per question from an enhanced binary sheet.
    """

    def __init__(self, config: RecognitionConfig = None):
        self.config = config or RecognitionConfig()

    def _region(self, binary: np.ndarray) -> AnswerRegion:
        return compute_answer_region(binary.shape, self.config.num_blocks, self.config.margin_ratio)

    def row_intensities(
        self,
        binary: np.ndarray,
        region: AnswerRegion,
        block_index: int,
        center_y: int
    ) -> List[float]:
        """
        Option intensities for the row centered at center_y.

        The strip is 2 * bubble_radius high, clipped to the image.
        """
        radius = self.config.bubble_radius
        top = max(0, int(center_y) - radius)
        bottom = min(binary.shape[0], int(center_y) + radius)
        x = region.block_start_x(block_index)

        strip = binary[top:max(top, bottom), x:x + region.block_width]
        cells = split_option_cells(strip, self.config.options_per_question, region.block_width)
        return [cell_intensity(cell) for cell in cells]

    def extract(self, binary: np.ndarray, row_centers: Sequence[int]) -> AnswerVector:
        """
        Read answers using detected row centers.

        Block i owns row_centers[i * rows_per_block:(i + 1) * rows_per_block].

        Args:
            binary: Enhanced binary image (ink = 255)
            row_centers: At least num_blocks * rows_per_block centers

        Returns:
            Answer per question in block-major order

        Raises:
            ValueError: If fewer row centers than questions are given
        """
        cfg = self.config
        if len(row_centers) < cfg.total_questions:
            raise ValueError(
                f"Insufficient row centers: got {len(row_centers)}, "
                f"need {cfg.total_questions}. Use fallback_grid_method instead."
            )

        region = self._region(binary)
        answers = []

        for block_index in range(cfg.num_blocks):
            block_rows = row_centers[
                block_index * cfg.rows_per_block:(block_index + 1) * cfg.rows_per_block
            ]
            for center_y in block_rows:
                intensities = self.row_intensities(binary, region, block_index, center_y)
                answers.append(pick_darkest_option(intensities, cfg.intensity_threshold))

        return tuple(answers)

    def fallback_grid_method(self, binary: np.ndarray) -> AnswerVector:
        """
        Read answers from a uniform grid over the answer region.

        Used by the caller when row detection returns too few rows.
        """
        cfg = self.config
        region = self._region(binary)
        row_height = region.height // cfg.rows_per_block

        answers = []
        for block_index in range(cfg.num_blocks):
            x = region.block_start_x(block_index)
            for row_index in range(cfg.rows_per_block):
                y = region.start_y + row_index * row_height
                strip = binary[y:y + row_height, x:x + region.block_width]
                cells = split_option_cells(strip, cfg.options_per_question, region.block_width)
                intensities = [cell_intensity(cell) for cell in cells]
                answers.append(pick_darkest_option(intensities, cfg.intensity_threshold))

        logger.info(f"Grid fallback read {len(answers)} answers")
        return tuple(answers)
