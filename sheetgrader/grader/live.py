"""
Live Scan Module
Single-slot frame hand-off and the consumer loop for camera streams
"""
import queue
import threading
import numpy as np
from typing import Optional
from dataclasses import dataclass
import logging

from .grading_engine import AnswerCountMismatchError, GradingResult
from .image_processing import Corners, PerspectiveRectifier
from .paper_detection import PaperCornerDetector
from .processor import SheetProcessor, SheetReading
from .stability import StabilityGate

logger = logging.getLogger(__name__)


class LatestFrameSlot:
    """
    Holds at most one pending frame for a single consumer.

    Frames offered while the consumer is analysing are dropped. A frame
    offered while another is still pending replaces it.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._frame: Optional[np.ndarray] = None
        self._busy = False
        self._closed = False
        self.dropped = 0

    @property
    def busy(self) -> bool:
        with self._cond:
            return self._busy

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def offer(self, frame: np.ndarray) -> bool:
        """
        Hand a frame to the consumer.

        Returns:
            False if the frame was dropped
        """
        with self._cond:
            if self._closed or self._busy:
                self.dropped += 1
                return False
            if self._frame is not None:
                self.dropped += 1
            self._frame = frame
            self._cond.notify()
            return True

    def take(self, timeout: Optional[float] = None) -> Optional[np.ndarray]:
        """
        Wait for the pending frame and mark the slot busy.

        Returns:
            The frame, or None on timeout or after close()
        """
        with self._cond:
            if self._frame is None and not self._closed:
                self._cond.wait(timeout)
            if self._frame is None:
                return None
            frame = self._frame
            self._frame = None
            self._busy = True
            return frame

    def done(self) -> None:
        """Mark the current analysis finished; new frames are accepted again"""
        with self._cond:
            self._busy = False

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._frame = None
            self._cond.notify_all()


@dataclass
class LiveFrameResult:
    """Outcome of analysing one frame"""
    corners: Optional[Corners]
    stable: bool = False
    reading: Optional[SheetReading] = None
    grading: Optional[GradingResult] = None

    @property
    def status(self) -> str:
        if self.corners is None:
            return "searching"
        if not self.stable:
            return "tracking"
        return "captured"


class LiveScanner:
    """
    Analyses a camera stream one frame at a time.

    Owns the StabilityGate; only the consumer thread (or a caller using
    process_frame directly, never both) touches it. Captures are pushed
    to the `captures` queue. The gate keeps reporting stable until
    reset() is called for the next sheet.
    """

    def __init__(
        self,
        processor: SheetProcessor,
        detector: PaperCornerDetector = None,
        gate: StabilityGate = None,
        rectifier: PerspectiveRectifier = None,
        max_pending_captures: int = 8
    ):
        cfg = processor.config
        self.processor = processor
        self.detector = detector or PaperCornerDetector()
        self.gate = gate or StabilityGate(cfg.stability_threshold, cfg.stability_frame_count)
        self.rectifier = rectifier or PerspectiveRectifier(cfg.warp_width, cfg.warp_height)

        self.slot = LatestFrameSlot()
        self.captures: "queue.Queue[LiveFrameResult]" = queue.Queue(maxsize=max_pending_captures)
        self.latest_result: Optional[LiveFrameResult] = None

        self._reset_requested = threading.Event()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def process_frame(self, frame: np.ndarray) -> LiveFrameResult:
        """
        Detect, gate and, once stable, rectify and read one frame.

        Args:
            frame: Raw camera frame

        Returns:
            LiveFrameResult; reading and grading are set only when stable
        """
        if self._reset_requested.is_set():
            self._reset_requested.clear()
            self.gate.reset()

        corners = self.detector.detect(frame)
        stable = self.gate.update(corners)
        if not stable:
            return LiveFrameResult(corners=corners, stable=False)

        warped = self.rectifier.warp(frame, corners)
        reading = self.processor.recognize(warped)

        grading = None
        engine = self.processor.grading_engine
        if engine.has_master_key():
            try:
                grading = engine.grade(reading.answers)
            except AnswerCountMismatchError as e:
                logger.warning(f"Captured sheet not graded: {e}")

        logger.info(f"Sheet captured ({len(reading.answers)} answers)")
        return LiveFrameResult(corners=corners, stable=True, reading=reading, grading=grading)

    def offer(self, frame: np.ndarray) -> bool:
        """Producer side: submit a frame, dropped if analysis is in flight"""
        return self.slot.offer(frame)

    def reset(self) -> None:
        """Re-arm the gate before the next frame is analysed"""
        self._reset_requested.set()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        if self.slot.closed:
            self.slot = LatestFrameSlot()
        self._thread = threading.Thread(target=self._run, name="live-scanner", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 2.0) -> None:
        self._stop.set()
        self.slot.close()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _publish(self, result: LiveFrameResult) -> None:
        try:
            self.captures.put_nowait(result)
        except queue.Full:
            logger.warning("Capture queue full, dropping oldest capture")
            try:
                self.captures.get_nowait()
            except queue.Empty:
                pass
            self.captures.put_nowait(result)

    def _run(self) -> None:
        logger.info("Live scanner started")
        while not self._stop.is_set():
            frame = self.slot.take(timeout=0.1)
            if frame is None:
                continue
            try:
                result = self.process_frame(frame)
                self.latest_result = result
                if result.stable:
                    self._publish(result)
            except Exception:
                # Keep scanning; a bad frame must not end the stream
                logger.exception("Frame analysis failed")
            finally:
                self.slot.done()
        logger.info("Live scanner stopped")
