"""
Shared fixtures: a synthetic bubble sheet in the default layout
"""
import numpy as np
import pytest

from sheetgrader.grader import Answered

PAPER = 235
INK = 20

# 400 x 500 sheet; two blocks of 20 rows, 4 options, one timing mark per row
SHEET_HEIGHT = 500
SHEET_WIDTH = 400
FIRST_ROW_Y = 36
ROW_PITCH = 22
BLOCK_X = (20, 200)
OPTION_WIDTH = 45


def marked_option(block_index: int, row_index: int) -> int:
    return (row_index + block_index) % 4


def render_sheet() -> np.ndarray:
    """
    Grayscale sheet with a timing mark beside every row, a hatched
    outline for each empty bubble and a solid fill for the marked one.
    """
    sheet = np.full((SHEET_HEIGHT, SHEET_WIDTH), PAPER, dtype=np.uint8)

    for block_index, block_x in enumerate(BLOCK_X):
        for row_index in range(20):
            y = FIRST_ROW_Y + row_index * ROW_PITCH
            sheet[y - 1:y + 2, block_x + 4:block_x + 12] = INK

            for option in range(4):
                x0 = block_x + option * OPTION_WIDTH + 22
                if option == marked_option(block_index, row_index):
                    sheet[y - 10:y + 11, x0:x0 + 20] = INK
                else:
                    for bar_y in range(y - 6, y + 7, 4):
                        sheet[bar_y:bar_y + 3, x0:x0 + 20] = INK

    return sheet


@pytest.fixture
def marked_sheet():
    return render_sheet()


@pytest.fixture
def marked_answers():
    return tuple(
        Answered(marked_option(block_index, row_index))
        for block_index in range(len(BLOCK_X))
        for row_index in range(20)
    )
