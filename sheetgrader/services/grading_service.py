"""
Grading Service
Owns one exam session: master key, batch grading and live scanning
"""
import threading
import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from ..config import settings
from ..core import PreconditionFailedException, ValidationException, BadRequestException, Messages
from ..grader import (
    AnswerCountMismatchError,
    Corners,
    GradingEngine,
    GradingResult,
    LiveFrameResult,
    LiveScanner,
    MasterKey,
    MasterKeyNotSetError,
    PaperCornerDetector,
    RecognitionConfig,
    SheetProcessor,
    SheetReading,
    to_label_vector,
)

logger = logging.getLogger(__name__)


class GradingSession:
    """
    Service for one exam session.

    Created at application startup and discarded at shutdown. Master-key
    writes are serialized; live frames go through a single analysis path
    and frames arriving while one is analysed are dropped.
    """

    def __init__(self, config: RecognitionConfig = None):
        self.config = config or settings.recognition_config()
        self.engine = GradingEngine()
        self.processor = SheetProcessor(self.config, self.engine)
        self.detector = PaperCornerDetector()
        self.scanner = LiveScanner(self.processor, detector=self.detector)

        self._key_lock = threading.Lock()
        self._scan_lock = threading.Lock()

    # ----- Master key -----

    def set_master_key(self, answers: Sequence, points_per_question: int = 1) -> MasterKey:
        if not answers:
            raise BadRequestException(Messages.EMPTY_ANSWERS)
        try:
            with self._key_lock:
                return self.engine.set_master_key(answers, points_per_question)
        except ValueError as e:
            raise BadRequestException(str(e))

    def capture_master_key(
        self,
        img: np.ndarray,
        points_per_question: int = None
    ) -> Tuple[MasterKey, SheetReading]:
        """Read a key sheet image and install it"""
        points = points_per_question or settings.POINTS_PER_QUESTION
        reading = self.processor.recognize(img)
        with self._key_lock:
            key = self.engine.set_master_key(reading.answers, points)
        return key, reading

    def clear_master_key(self) -> None:
        with self._key_lock:
            self.engine.clear()
        logger.info("Master key cleared")

    def master_key_status(self) -> dict:
        key = self.engine.master_key
        return {
            "has_master_key": key is not None,
            "total_questions": key.total_questions if key else 0,
            "points_per_question": key.points_per_question if key else 1,
            "status_text": self.engine.status_text,
            "answers": to_label_vector(key.answers) if key else [],
        }

    # ----- Batch grading -----

    def recognize(self, img: np.ndarray) -> SheetReading:
        return self.processor.recognize(img)

    def grade_answers(self, answers: Sequence) -> GradingResult:
        """
        Grade an answer list against the master key.

        Raises:
            PreconditionFailedException: No master key set
            ValidationException: Answer count differs from the key
            BadRequestException: Unparseable answer values
        """
        try:
            return self.engine.grade(answers)
        except MasterKeyNotSetError:
            raise PreconditionFailedException(Messages.MASTER_KEY_NOT_SET)
        except AnswerCountMismatchError as e:
            raise ValidationException(str(e))
        except ValueError as e:
            raise BadRequestException(str(e))

    def grade_image(self, img: np.ndarray) -> Tuple[GradingResult, SheetReading]:
        if not self.engine.has_master_key():
            raise PreconditionFailedException(Messages.MASTER_KEY_NOT_SET)
        reading = self.processor.recognize(img)
        return self.grade_answers(reading.answers), reading

    # ----- Live scanning -----

    def detect_corners(self, img: np.ndarray) -> Optional[Corners]:
        return self.detector.detect(img)

    def scan_frame(self, img: np.ndarray) -> Optional[LiveFrameResult]:
        """
        Analyse one live frame.

        Returns:
            LiveFrameResult, or None when another frame is being analysed
        """
        if not self._scan_lock.acquire(blocking=False):
            return None
        try:
            return self.scanner.process_frame(img)
        finally:
            self._scan_lock.release()

    @property
    def stable_frames(self) -> int:
        return self.scanner.gate.stable_frames

    def reset_scan(self) -> None:
        self.scanner.reset()
