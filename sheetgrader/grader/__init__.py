"""
Grader Module
Reads bubble-sheet photos into answer vectors and grades them

Usage:
    from sheetgrader.grader import SheetProcessor, GradingEngine

    engine = GradingEngine()
    processor = SheetProcessor(grading_engine=engine)

    # Capture the master key from a filled-in key sheet
    processor.capture_master_key(key_image)

    # Grade a student sheet
    result = processor.grade_image(student_image)
    print(result.score_display)

    # Live camera stream
    scanner = LiveScanner(processor)
    scanner.start()
    scanner.offer(frame)
    capture = scanner.captures.get()
"""

from .answers import (
    Answer,
    Answered,
    AnswerVector,
    UNANSWERED,
    answer_label,
    from_int_vector,
    parse_answer,
    to_answer_vector,
    to_int_vector,
    to_label_vector,
)

from .config import RecognitionConfig

from .image_processing import (
    Corners,
    PerspectiveRectifier,
    decode_image,
    draw_detected_rows,
    enhance_image,
    load_image,
    order_corners,
    to_grayscale,
)

from .row_detection import (
    AnswerRegion,
    RowDetection,
    RowLocator,
    compute_answer_region,
    find_projection_peaks,
    select_block_rows,
    uniform_row_centers,
)

from .answer_analysis import (
    AnswerExtractor,
    cell_intensity,
    pick_darkest_option,
)

from .paper_detection import PaperCornerDetector

from .stability import StabilityGate

from .grading_engine import (
    AnswerCountMismatchError,
    GradingEngine,
    GradingError,
    GradingResult,
    MasterKey,
    MasterKeyNotSetError,
    WrongAnswer,
)

from .processor import SheetProcessor, SheetReading

from .live import LatestFrameSlot, LiveFrameResult, LiveScanner

__all__ = [
    # Answers
    "Answer",
    "Answered",
    "AnswerVector",
    "UNANSWERED",
    "answer_label",
    "from_int_vector",
    "parse_answer",
    "to_answer_vector",
    "to_int_vector",
    "to_label_vector",
    # Configuration
    "RecognitionConfig",
    # Image processing
    "Corners",
    "PerspectiveRectifier",
    "decode_image",
    "draw_detected_rows",
    "enhance_image",
    "load_image",
    "order_corners",
    "to_grayscale",
    # Row detection
    "AnswerRegion",
    "RowDetection",
    "RowLocator",
    "compute_answer_region",
    "find_projection_peaks",
    "select_block_rows",
    "uniform_row_centers",
    # Answer analysis
    "AnswerExtractor",
    "cell_intensity",
    "pick_darkest_option",
    # Live capture
    "PaperCornerDetector",
    "StabilityGate",
    "LatestFrameSlot",
    "LiveFrameResult",
    "LiveScanner",
    # Grading
    "AnswerCountMismatchError",
    "GradingEngine",
    "GradingError",
    "GradingResult",
    "MasterKey",
    "MasterKeyNotSetError",
    "WrongAnswer",
    # Processor
    "SheetProcessor",
    "SheetReading",
]
