# Core package
from .constants import Messages, FileLimits, ScanStatus
from .exceptions import (
    BaseAPIException,
    BadRequestException,
    PreconditionFailedException,
    ValidationException,
    FileProcessingException,
)
from .logger import logger, setup_logger, grading_logger, scan_logger

__all__ = [
    # Constants
    "Messages",
    "FileLimits",
    "ScanStatus",
    # Exceptions
    "BaseAPIException",
    "BadRequestException",
    "PreconditionFailedException",
    "ValidationException",
    "FileProcessingException",
    # Logging
    "logger",
    "setup_logger",
    "grading_logger",
    "scan_logger",
]
