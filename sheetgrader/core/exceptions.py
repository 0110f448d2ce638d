"""
Custom exceptions for the sheet grader API
"""
from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """Base exception for all API errors"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str = None,
        headers: dict = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class BadRequestException(BaseAPIException):
    """Bad request - invalid input"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
            error_code="BAD_REQUEST"
        )


class PreconditionFailedException(BaseAPIException):
    """Operation requires state the session does not have yet"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_412_PRECONDITION_FAILED,
            detail=message,
            error_code="PRECONDITION_FAILED"
        )


class ValidationException(BaseAPIException):
    """Well-formed request that cannot be processed"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=message,
            error_code="VALIDATION_ERROR"
        )


class FileProcessingException(BaseAPIException):
    """Error processing file"""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Cannot process file '{filename}': {reason}",
            error_code="FILE_PROCESSING_ERROR"
        )
