# Services package
from .grading_service import GradingSession

__all__ = [
    "GradingSession",
]
