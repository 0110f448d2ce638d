"""
Grading API routes
Handles master key capture and sheet grading
"""
import cv2
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from ..config import settings
from ..core import FileProcessingException, Messages, logger
from ..grader import to_answer_vector, to_label_vector
from ..schemas import (
    GradeAnswersRequest,
    GradingResultSchema,
    MasterKeyRequest,
    MasterKeyStatus,
    RecognitionResponse,
)
from ..services import GradingSession
from .dependencies import get_session, read_image_upload

router = APIRouter()


@router.get("/master-key", response_model=MasterKeyStatus)
async def get_master_key(session: GradingSession = Depends(get_session)):
    """
    Get master key status
    """
    return MasterKeyStatus(**session.master_key_status())


@router.post("/master-key", response_model=MasterKeyStatus)
async def capture_master_key(
    file: UploadFile = File(...),
    session: GradingSession = Depends(get_session)
):
    """
    Scan a filled-in answer key sheet and set it as the master key
    """
    img = await read_image_upload(file)
    key, reading = session.capture_master_key(img, settings.POINTS_PER_QUESTION)
    logger.info(
        f"Master key captured from {file.filename}: {key.total_questions} questions"
        f"{' (grid fallback)' if reading.used_grid_fallback else ''}"
    )
    return MasterKeyStatus(**session.master_key_status())


@router.put("/master-key", response_model=MasterKeyStatus)
async def set_master_key(
    request: MasterKeyRequest,
    session: GradingSession = Depends(get_session)
):
    """
    Set the master key from an answer list
    """
    session.set_master_key(request.answers, request.points_per_question)
    return MasterKeyStatus(**session.master_key_status())


@router.delete("/master-key")
async def clear_master_key(session: GradingSession = Depends(get_session)):
    """
    Clear the master key
    """
    session.clear_master_key()
    return {"success": True, "message": Messages.MASTER_KEY_CLEARED}


@router.post("/recognize", response_model=RecognitionResponse)
async def recognize_sheet(
    file: UploadFile = File(...),
    session: GradingSession = Depends(get_session)
):
    """
    Read the answers on a sheet without grading
    """
    img = await read_image_upload(file)
    reading = session.recognize(img)
    return RecognitionResponse(
        answers=to_label_vector(reading.answers),
        total_questions=len(reading.answers),
        row_centers=reading.row_centers,
        used_grid_fallback=reading.used_grid_fallback,
    )


@router.post("/grade", response_model=GradingResultSchema)
async def grade_sheet(
    file: UploadFile = File(...),
    session: GradingSession = Depends(get_session)
):
    """
    Scan a student sheet and grade it against the master key
    """
    img = await read_image_upload(file)
    result, reading = session.grade_image(img)
    return GradingResultSchema.from_result(
        result, reading.answers, reading.used_grid_fallback
    )


@router.post("/grade-answers", response_model=GradingResultSchema)
async def grade_answers(
    request: GradeAnswersRequest,
    session: GradingSession = Depends(get_session)
):
    """
    Grade an answer list against the master key
    """
    result = session.grade_answers(request.answers)
    return GradingResultSchema.from_result(result, to_answer_vector(request.answers))


@router.post("/debug/rows")
async def debug_rows(
    file: UploadFile = File(...),
    session: GradingSession = Depends(get_session)
):
    """
    Return the sheet with detected rows drawn as red lines (PNG)
    """
    img = await read_image_upload(file)
    reading = session.recognize(img)
    overlay = session.processor.draw_detected_rows(img, reading)
    if overlay is None:
        overlay = img

    ok, encoded = cv2.imencode(".png", overlay)
    if not ok:
        raise FileProcessingException(file.filename or "upload", "PNG encoding failed")

    return Response(
        content=encoded.tobytes(),
        media_type="image/png",
        headers={"X-Row-Count": str(len(reading.row_centers))}
    )
