"""
Application constants
"""
from enum import Enum


class ScanStatus(str, Enum):
    """Live scan status reported per frame"""
    SEARCHING = "searching"
    TRACKING = "tracking"
    CAPTURED = "captured"
    DROPPED = "dropped"


# API Response Messages
class Messages:
    """API response messages"""

    # Success messages
    MASTER_KEY_CLEARED = "Master key cleared"

    # Error messages
    MASTER_KEY_NOT_SET = "Master key not set. Scan the answer key first"
    INVALID_FILE_TYPE = "Invalid file type, an image is required"
    IMAGE_DECODE_FAILED = "Image could not be decoded"
    FILE_TOO_LARGE = "File exceeds the maximum upload size"
    EMPTY_ANSWERS = "Answer list is empty"


# File size limits (in bytes)
class FileLimits:
    """File size limits"""
    MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB
