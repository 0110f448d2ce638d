# Routes package
from . import grading, scan

__all__ = ["grading", "scan"]
