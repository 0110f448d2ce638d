"""
Sheet Processor Module
Main entry point for turning a sheet image into answers and grades
"""
import numpy as np
from pathlib import Path
from typing import List, Optional, Union
from dataclasses import dataclass, field
import logging

from .answers import AnswerVector
from .answer_analysis import AnswerExtractor
from .config import RecognitionConfig
from .grading_engine import GradingEngine, GradingResult, MasterKey
from .image_processing import draw_detected_rows, enhance_image, load_image
from .row_detection import RowLocator

logger = logging.getLogger(__name__)


@dataclass
class SheetReading:
    """Answers read from one sheet plus detection diagnostics"""
    answers: AnswerVector
    row_centers: List[int] = field(default_factory=list)
    used_grid_fallback: bool = False
    fallback_blocks: List[int] = field(default_factory=list)


class SheetProcessor:
    """
    Batch pipeline for already-cropped sheet images.

    Orchestrates:
    1. Image enhancement
    2. Row detection
    3. Answer extraction (grid fallback when rows are missing)
    4. Grading against the session's engine
    """

    def __init__(
        self,
        config: RecognitionConfig = None,
        grading_engine: GradingEngine = None
    ):
        """
        Args:
            config: Layout and detection parameters
            grading_engine: Session engine; a fresh one is created if omitted
        """
        self.config = config or RecognitionConfig()
        self.grading_engine = grading_engine if grading_engine is not None else GradingEngine()
        self.row_locator = RowLocator(self.config)
        self.extractor = AnswerExtractor(self.config)

    def recognize(self, img: np.ndarray) -> SheetReading:
        """
        Read the answers on a sheet image.

        Args:
            img: Cropped sheet image (grayscale, BGR or BGRA)

        Returns:
            SheetReading with one answer per question
        """
        cfg = self.config
        enhanced = enhance_image(img, cfg.upscale_factor)

        detection = self.row_locator.detect(enhanced)

        rows = detection.in_block_order()
        if len(rows) < cfg.total_questions:
            logger.warning(
                f"Only {len(rows)} of {cfg.total_questions} rows detected, "
                "falling back to grid method"
            )
            answers = self.extractor.fallback_grid_method(enhanced)
            used_grid_fallback = True
        else:
            answers = self.extractor.extract(enhanced, rows)
            used_grid_fallback = False

        return SheetReading(
            answers=answers,
            row_centers=detection.row_centers,
            used_grid_fallback=used_grid_fallback,
            fallback_blocks=detection.fallback_blocks,
        )

    def capture_master_key(self, img: np.ndarray, points_per_question: int = 1) -> MasterKey:
        """Read a filled-in key sheet and install it as the master key"""
        reading = self.recognize(img)
        return self.grading_engine.set_master_key(reading.answers, points_per_question)

    def grade_image(self, img: np.ndarray) -> GradingResult:
        """
        Read a student sheet and grade it.

        Raises:
            MasterKeyNotSetError: If the engine holds no master key
            AnswerCountMismatchError: If the key has a different length
        """
        reading = self.recognize(img)
        return self.grading_engine.grade(reading.answers)

    def draw_detected_rows(self, img: np.ndarray, reading: SheetReading) -> Optional[np.ndarray]:
        """Overlay the rows of a reading taken from this image"""
        return draw_detected_rows(img, reading.row_centers, self.config.upscale_factor)

    def process_file(self, image_path: Union[str, Path]) -> SheetReading:
        """
        Read answers from an image file.

        Raises:
            FileNotFoundError: If the image cannot be loaded
        """
        path = Path(image_path)
        img = load_image(str(path))

        if img is None:
            raise FileNotFoundError(f"Failed to load image: {path}")

        logger.info(f"Processing image: {path.name}")
        return self.recognize(img)
