"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Union

from .grader import GradingResult, to_label_vector


# ===== Master Key Schemas =====
class MasterKeyRequest(BaseModel):
    answers: List[Union[int, str, None]] = Field(
        ..., description="Answers per question: option letter, 0-based index, or -1 / '-' / null for blank"
    )
    points_per_question: int = Field(default=1, ge=1)


class MasterKeyStatus(BaseModel):
    has_master_key: bool
    total_questions: int = 0
    points_per_question: int = 1
    status_text: str
    answers: List[str] = []


# ===== Grading Schemas =====
class GradeAnswersRequest(BaseModel):
    answers: List[Union[int, str, None]] = Field(..., description="Student answers per question")


class WrongAnswerSchema(BaseModel):
    question_number: int
    student_label: str
    master_label: str
    display_text: str


class GradingResultSchema(BaseModel):
    success: bool = True
    score: int
    max_score: int
    total_questions: int
    valid_answer_count: int
    score_display: str
    wrong_answers: List[WrongAnswerSchema] = []
    student_answers: List[str] = []
    used_grid_fallback: bool = False

    @classmethod
    def from_result(
        cls,
        result: GradingResult,
        student_answers=None,
        used_grid_fallback: bool = False
    ) -> "GradingResultSchema":
        return cls(
            score=result.score,
            max_score=result.max_score,
            total_questions=result.total_questions,
            valid_answer_count=result.valid_answer_count,
            score_display=result.score_display,
            wrong_answers=[
                WrongAnswerSchema(
                    question_number=w.question_number,
                    student_label=w.student_label,
                    master_label=w.master_label,
                    display_text=w.display_text,
                )
                for w in result.wrong_answers
            ],
            student_answers=to_label_vector(student_answers or ()),
            used_grid_fallback=used_grid_fallback,
        )


class RecognitionResponse(BaseModel):
    success: bool = True
    answers: List[str]
    total_questions: int
    row_centers: List[int] = []
    used_grid_fallback: bool = False


# ===== Scan Schemas =====
class PointSchema(BaseModel):
    x: float
    y: float


class CornerDetectionResponse(BaseModel):
    detected: bool
    corners: List[PointSchema] = []


class ScanFrameResponse(BaseModel):
    status: str
    corners: List[PointSchema] = []
    stable_frames: int = 0
    result: Optional[GradingResultSchema] = None
    answers: List[str] = []
