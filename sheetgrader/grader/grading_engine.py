"""
Grading Engine Module
Holds the master key and compares student answers against it
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, Optional, Sequence, Tuple
import logging

from .answers import AnswerVector, answer_label, is_answered, to_answer_vector

logger = logging.getLogger(__name__)


class GradingError(Exception):
    """Base class for grading precondition failures"""


class MasterKeyNotSetError(GradingError, RuntimeError):
    """Grading attempted before a master key was set"""

    def __init__(self):
        super().__init__("Master key not set")


class AnswerCountMismatchError(GradingError, ValueError):
    """Student answer vector length differs from the master key"""

    def __init__(self, student_count: int, master_count: int):
        self.student_count = student_count
        self.master_count = master_count
        super().__init__(
            f"Student answers count ({student_count}) doesn't match "
            f"master key count ({master_count})"
        )


@dataclass(frozen=True)
class MasterKey:
    """Reference answers for one exam session"""
    answers: AnswerVector
    points_per_question: int = 1

    @property
    def total_questions(self) -> int:
        return len(self.answers)


@dataclass(frozen=True)
class WrongAnswer:
    """A question where the student differs from the key"""
    question_number: int
    student_label: str
    master_label: str

    @property
    def display_text(self) -> str:
        return f"Q{self.question_number}(Student:{self.student_label}, Key:{self.master_label})"


@dataclass(frozen=True)
class GradingResult:
    """Grading snapshot for one scanned sheet"""
    score: int
    total_questions: int
    valid_answer_count: int
    wrong_answers: Tuple[WrongAnswer, ...] = field(default_factory=tuple)
    points_per_question: int = 1

    @property
    def max_score(self) -> int:
        return self.total_questions * self.points_per_question

    @property
    def score_display(self) -> str:
        return f"{self.score} / {self.max_score}"

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        result = asdict(self)
        result["wrong_answers"] = [asdict(w) for w in self.wrong_answers]
        result["score_display"] = self.score_display
        return result


class GradingEngine:
    """
    Grades answer vectors against the session's master key.

    One instance per exam session. Setting a key swaps an immutable
    MasterKey, and grade() reads it once, so a grade in flight always
    sees one complete key. Ordering between set_master_key() and grade()
    calls from different threads is up to the caller.
    """

    def __init__(self, master_key: Optional[MasterKey] = None):
        self._master_key = master_key

    @property
    def master_key(self) -> Optional[MasterKey]:
        return self._master_key

    @property
    def total_questions(self) -> int:
        key = self._master_key
        return key.total_questions if key else 0

    def set_master_key(self, answers: Sequence, points_per_question: int = 1) -> MasterKey:
        """
        Replace the master key.

        Args:
            answers: Answer values (Answer, int with -1 as blank, or label)
            points_per_question: Points awarded per correct answer

        Returns:
            The new MasterKey
        """
        if points_per_question <= 0:
            raise ValueError(f"points_per_question must be positive, got {points_per_question}")

        key = MasterKey(
            answers=to_answer_vector(answers),
            points_per_question=points_per_question
        )
        self._master_key = key
        logger.info(f"Master key set ({key.total_questions} questions)")
        return key

    def has_master_key(self) -> bool:
        return self._master_key is not None

    @property
    def status_text(self) -> str:
        key = self._master_key
        if key is None:
            return "Not Set"
        return f"Set ({key.total_questions} Qs)"

    def grade(self, student_answers: Sequence) -> GradingResult:
        """
        Grade a student answer vector.

        A question scores when both answers match and the student marked
        it. Any mismatch, blank against a keyed answer included, is listed
        in wrong_answers.

        Args:
            student_answers: Answer per question, same length as the key

        Returns:
            GradingResult snapshot

        Raises:
            MasterKeyNotSetError: If no master key is set
            AnswerCountMismatchError: If the lengths differ
        """
        key = self._master_key
        if key is None:
            raise MasterKeyNotSetError()

        student: AnswerVector = to_answer_vector(student_answers)
        if len(student) != key.total_questions:
            raise AnswerCountMismatchError(len(student), key.total_questions)

        score = 0
        valid_answer_count = 0
        wrong_answers = []

        for i, (student_answer, master_answer) in enumerate(zip(student, key.answers)):
            if is_answered(student_answer):
                valid_answer_count += 1

            if student_answer == master_answer:
                if is_answered(student_answer):
                    score += key.points_per_question
            else:
                wrong_answers.append(WrongAnswer(
                    question_number=i + 1,
                    student_label=answer_label(student_answer),
                    master_label=answer_label(master_answer)
                ))

        result = GradingResult(
            score=score,
            total_questions=key.total_questions,
            valid_answer_count=valid_answer_count,
            wrong_answers=tuple(wrong_answers),
            points_per_question=key.points_per_question
        )

        logger.info(
            f"Graded sheet: score={result.score_display}, "
            f"answered={valid_answer_count}, wrong={len(wrong_answers)}"
        )
        return result

    def clear(self) -> None:
        """Drop the master key"""
        self._master_key = None
