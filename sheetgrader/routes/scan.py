"""
Scan API routes
Handles corner detection and live frame analysis
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ..core import ScanStatus, scan_logger
from ..grader import Corners, to_label_vector
from ..schemas import (
    CornerDetectionResponse,
    GradingResultSchema,
    PointSchema,
    ScanFrameResponse,
)
from ..services import GradingSession
from .dependencies import get_session, read_image_file, read_image_upload

router = APIRouter()


def _points(corners: Optional[Corners]) -> List[PointSchema]:
    if corners is None:
        return []
    return [PointSchema(x=x, y=y) for x, y in corners]


@router.post("/corners", response_model=CornerDetectionResponse)
async def detect_corners(
    file: UploadFile = File(...),
    session: GradingSession = Depends(get_session)
):
    """
    Detect the sheet corners in a single frame
    """
    img = await read_image_upload(file)
    corners = session.detect_corners(img)
    return CornerDetectionResponse(detected=corners is not None, corners=_points(corners))


@router.post("/frame", response_model=ScanFrameResponse)
def scan_frame(
    file: UploadFile = File(...),
    session: GradingSession = Depends(get_session)
):
    """
    Feed one live frame; the sheet is read once its corners hold still.
    Runs on the worker threadpool; a frame arriving while another is
    being analysed is dropped.
    """
    img = read_image_file(file)
    frame_result = session.scan_frame(img)

    if frame_result is None:
        return ScanFrameResponse(status=ScanStatus.DROPPED.value, stable_frames=session.stable_frames)

    response = ScanFrameResponse(
        status=frame_result.status,
        corners=_points(frame_result.corners),
        stable_frames=session.stable_frames,
    )

    if frame_result.reading is not None:
        response.answers = to_label_vector(frame_result.reading.answers)
        scan_logger.info(f"Sheet captured from live frame ({len(response.answers)} answers)")
    if frame_result.grading is not None:
        response.result = GradingResultSchema.from_result(
            frame_result.grading,
            frame_result.reading.answers,
            frame_result.reading.used_grid_fallback,
        )

    return response


@router.post("/reset")
async def reset_scan(session: GradingSession = Depends(get_session)):
    """
    Re-arm stability detection for the next sheet
    """
    session.reset_scan()
    return {"success": True, "status": ScanStatus.SEARCHING.value}
