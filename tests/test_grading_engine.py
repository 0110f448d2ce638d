"""
Unit tests for the grading engine
"""
import dataclasses

import pytest

from sheetgrader.grader import (
    Answered,
    AnswerCountMismatchError,
    GradingEngine,
    GradingError,
    MasterKeyNotSetError,
    UNANSWERED,
    from_int_vector,
)


class TestMasterKey:
    """Test cases for master key management"""

    def test_no_key_initially(self):
        engine = GradingEngine()
        assert not engine.has_master_key()
        assert engine.master_key is None
        assert engine.total_questions == 0
        assert engine.status_text == "Not Set"

    def test_set_master_key(self):
        engine = GradingEngine()
        key = engine.set_master_key([0, 1, 2, 3, -1])

        assert engine.has_master_key()
        assert key.total_questions == 5
        assert key.answers[4] is UNANSWERED
        assert key.answers[2] == Answered(2)
        assert engine.status_text == "Set (5 Qs)"

    def test_set_master_key_from_labels(self):
        engine = GradingEngine()
        key = engine.set_master_key(["A", "b", "-", None])
        assert key.answers == (Answered(0), Answered(1), UNANSWERED, UNANSWERED)

    def test_replace_master_key(self):
        engine = GradingEngine()
        engine.set_master_key([0, 1])
        engine.set_master_key([2, 2, 2])
        assert engine.total_questions == 3

    def test_invalid_points_per_question(self):
        engine = GradingEngine()
        with pytest.raises(ValueError):
            engine.set_master_key([0, 1], points_per_question=0)
        assert not engine.has_master_key()

    def test_clear(self):
        engine = GradingEngine()
        engine.set_master_key([0, 1])
        engine.clear()
        assert not engine.has_master_key()
        assert engine.status_text == "Not Set"


class TestGrading:
    """Test cases for grading student answers"""

    def test_reference_example(self):
        """Blank in both vectors neither scores nor counts as wrong"""
        engine = GradingEngine()
        engine.set_master_key(from_int_vector([0, 1, 2, 3, -1]))

        result = engine.grade(from_int_vector([0, 1, 1, 3, -1]))

        assert result.score == 3
        assert result.total_questions == 5
        assert result.valid_answer_count == 4
        assert len(result.wrong_answers) == 1

        wrong = result.wrong_answers[0]
        assert wrong.question_number == 3
        assert wrong.student_label == "B"
        assert wrong.master_label == "C"
        assert wrong.display_text == "Q3(Student:B, Key:C)"

    def test_blank_student_answer_is_wrong(self):
        engine = GradingEngine()
        engine.set_master_key(["A", "B"])

        result = engine.grade(["A", "-"])

        assert result.score == 1
        assert result.valid_answer_count == 1
        assert result.wrong_answers[0].student_label == "-"
        assert result.wrong_answers[0].master_label == "B"

    def test_answer_on_blank_key_is_wrong(self):
        engine = GradingEngine()
        engine.set_master_key(["A", "-"])

        result = engine.grade(["A", "C"])

        assert result.score == 1
        assert [w.question_number for w in result.wrong_answers] == [2]

    def test_points_per_question(self):
        engine = GradingEngine()
        engine.set_master_key([0, 1, 2, 3], points_per_question=2)

        result = engine.grade([0, 1, 0, 0])

        assert result.score == 4
        assert result.max_score == 8
        assert result.score_display == "4 / 8"

    def test_all_correct(self):
        engine = GradingEngine()
        engine.set_master_key([0, 1, 2, 3])

        result = engine.grade([0, 1, 2, 3])

        assert result.score == 4
        assert result.wrong_answers == ()
        assert result.score_display == "4 / 4"

    def test_grade_without_key(self):
        engine = GradingEngine()
        with pytest.raises(MasterKeyNotSetError):
            engine.grade([0, 1])

    def test_length_mismatch(self):
        engine = GradingEngine()
        engine.set_master_key([0, 1, 2])

        with pytest.raises(AnswerCountMismatchError) as exc_info:
            engine.grade([0, 1])

        assert exc_info.value.student_count == 2
        assert exc_info.value.master_count == 3
        assert isinstance(exc_info.value, GradingError)
        assert isinstance(exc_info.value, ValueError)

    def test_result_is_snapshot(self):
        """Later key changes do not alter an existing result"""
        engine = GradingEngine()
        engine.set_master_key([0, 1])
        result = engine.grade([0, 0])

        engine.set_master_key([1, 1])

        assert result.score == 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.score = 2

    def test_to_dict(self):
        engine = GradingEngine()
        engine.set_master_key(["A", "B"])
        data = engine.grade(["A", "C"]).to_dict()

        assert data["score"] == 1
        assert data["score_display"] == "1 / 2"
        assert data["wrong_answers"] == [
            {"question_number": 2, "student_label": "C", "master_label": "B"}
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
