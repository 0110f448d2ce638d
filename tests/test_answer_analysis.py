"""
Unit tests for answer extraction
"""
import numpy as np
import pytest

from sheetgrader.grader import (
    Answered,
    AnswerExtractor,
    RecognitionConfig,
    UNANSWERED,
    cell_intensity,
    pick_darkest_option,
    uniform_row_centers,
)

# Default layout on a 1000 x 800 binary image
SHEET_SHAPE = (1000, 800)
BLOCK_X = (40, 400)
OPTION_WIDTH = 90


def mark_cell(binary, block_index, option_index, top, bottom):
    """Clear one option cell so it measures as the darkest"""
    x = BLOCK_X[block_index] + option_index * OPTION_WIDTH
    binary[top:bottom, x:x + OPTION_WIDTH] = 0


class TestPickDarkestOption:
    """Test cases for option selection"""

    def test_darkest_below_threshold(self):
        assert pick_darkest_option([200, 50, 180, 220]) == Answered(1)

    def test_darkest_at_threshold_is_blank(self):
        assert pick_darkest_option([200, 100, 180, 220], threshold=100) is UNANSWERED

    def test_tie_picks_first(self):
        assert pick_darkest_option([10, 10, 200, 200]) == Answered(0)

    def test_no_options(self):
        assert pick_darkest_option([]) is UNANSWERED


class TestCellIntensity:
    """Test cases for cell measurement"""

    def test_full_and_empty(self):
        assert cell_intensity(np.full((10, 10), 255, dtype=np.uint8)) == 255.0
        assert cell_intensity(np.zeros((10, 10), dtype=np.uint8)) == 0.0

    def test_half_filled(self):
        cell = np.zeros((10, 10), dtype=np.uint8)
        cell[:5] = 255
        assert cell_intensity(cell) == pytest.approx(127.5)

    def test_clipped_cell(self):
        assert cell_intensity(np.zeros((0, 10), dtype=np.uint8)) == 0.0


class TestAnswerExtractor:
    """Test cases for row-based and grid extraction"""

    def test_extract_marked_rows(self):
        binary = np.full(SHEET_SHAPE, 255, dtype=np.uint8)
        rows = uniform_row_centers(50, 900, 20)

        # Block 0: question i marks option i % 4; block 1 left blank
        for i, y in enumerate(rows):
            mark_cell(binary, 0, i % 4, y - 15, y + 15)

        answers = AnswerExtractor().extract(binary, rows + rows)

        assert len(answers) == 40
        assert answers[:20] == tuple(Answered(i % 4) for i in range(20))
        assert all(a is UNANSWERED for a in answers[20:])

    def test_extract_uses_block_order(self):
        binary = np.full(SHEET_SHAPE, 255, dtype=np.uint8)
        rows = uniform_row_centers(50, 900, 20)
        mark_cell(binary, 1, 3, rows[0] - 15, rows[0] + 15)

        answers = AnswerExtractor().extract(binary, rows + rows)

        assert answers[20] == Answered(3)
        assert answers[0] is UNANSWERED

    def test_extract_requires_all_rows(self):
        binary = np.full(SHEET_SHAPE, 255, dtype=np.uint8)
        with pytest.raises(ValueError):
            AnswerExtractor().extract(binary, list(range(39)))

    def test_row_near_edge_is_clipped(self):
        config = RecognitionConfig(num_blocks=1, rows_per_block=1)
        binary = np.full((100, 100), 255, dtype=np.uint8)
        answers = AnswerExtractor(config).extract(binary, [2])
        assert answers == (UNANSWERED,)

    def test_fallback_grid_method(self):
        binary = np.full(SHEET_SHAPE, 255, dtype=np.uint8)
        for row_index in range(20):
            top = 50 + row_index * 45
            mark_cell(binary, 1, 2, top, top + 45)

        answers = AnswerExtractor().fallback_grid_method(binary)

        assert len(answers) == 40
        assert all(a is UNANSWERED for a in answers[:20])
        assert answers[20:] == (Answered(2),) * 20


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
