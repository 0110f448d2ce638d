"""
Answer Types Module
Tagged answer values and conversions used across the grader
"""
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

UNANSWERED_LABEL = "-"


@dataclass(frozen=True)
class Answered:
    """A marked option, 0-based (0 = A, 1 = B, ...)"""
    index: int

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"Option index must be >= 0, got {self.index}")

    @property
    def label(self) -> str:
        return chr(ord("A") + self.index)


class _Unanswered:
    """No mark detected for the question"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def label(self) -> str:
        return UNANSWERED_LABEL

    def __repr__(self) -> str:
        return "UNANSWERED"

    def __reduce__(self):
        return (_Unanswered, ())


UNANSWERED = _Unanswered()

Answer = Union[Answered, _Unanswered]
AnswerVector = Tuple[Answer, ...]


def is_answered(answer: Answer) -> bool:
    return isinstance(answer, Answered)


def answer_label(answer: Answer) -> str:
    """Display label: A, B, C... or '-' when unanswered"""
    return answer.label


def parse_answer(value: Union[int, str, None, Answer]) -> Answer:
    """
    Convert a boundary value to an Answer.

    Accepts Answer instances, integers (-1 means unanswered), option
    letters ('A', 'b', ...) and None / '' / '-' for unanswered.
    """
    if isinstance(value, (Answered, _Unanswered)):
        return value
    if value is None:
        return UNANSWERED
    if isinstance(value, bool):
        raise ValueError(f"Invalid answer value: {value!r}")
    if isinstance(value, int):
        if value == -1:
            return UNANSWERED
        return Answered(value)
    if isinstance(value, str):
        text = value.strip().upper()
        if text in ("", UNANSWERED_LABEL):
            return UNANSWERED
        if len(text) == 1 and "A" <= text <= "Z":
            return Answered(ord(text) - ord("A"))
        if text.lstrip("-").isdigit():
            return parse_answer(int(text))
    raise ValueError(f"Invalid answer value: {value!r}")


def to_answer_vector(values: Iterable[Union[int, str, None, Answer]]) -> AnswerVector:
    return tuple(parse_answer(v) for v in values)


def from_int_vector(values: Sequence[int]) -> AnswerVector:
    """Decode the legacy integer encoding (0=A ... -1=unanswered)"""
    return tuple(UNANSWERED if v == -1 else Answered(v) for v in values)


def to_int_vector(answers: Sequence[Answer]) -> List[int]:
    return [a.index if isinstance(a, Answered) else -1 for a in answers]


def to_label_vector(answers: Sequence[Answer]) -> List[str]:
    return [answer_label(a) for a in answers]
