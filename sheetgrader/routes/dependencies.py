"""
Shared route dependencies
"""
import numpy as np
from fastapi import Request, UploadFile

from ..core import BadRequestException, FileLimits, FileProcessingException, Messages
from ..grader import decode_image
from ..services import GradingSession
from ..utils import format_file_size, is_valid_image


def get_session(request: Request) -> GradingSession:
    """The exam session owned by this application instance"""
    return request.app.state.grading_session


def _check_type(file: UploadFile) -> None:
    if not is_valid_image(file.filename, file.content_type):
        raise BadRequestException(Messages.INVALID_FILE_TYPE)


def _decode_content(file: UploadFile, content: bytes) -> np.ndarray:
    if len(content) > FileLimits.MAX_IMAGE_SIZE:
        raise BadRequestException(
            f"{Messages.FILE_TOO_LARGE} ({format_file_size(len(content))})"
        )

    img = decode_image(content)
    if img is None:
        raise FileProcessingException(file.filename or "upload", Messages.IMAGE_DECODE_FAILED)
    return img


async def read_image_upload(file: UploadFile) -> np.ndarray:
    """
    Read and decode an uploaded image.

    Raises:
        BadRequestException: Not an image or too large
        FileProcessingException: The bytes could not be decoded
    """
    _check_type(file)
    content = await file.read()
    return _decode_content(file, content)


def read_image_file(file: UploadFile) -> np.ndarray:
    """Blocking variant of read_image_upload for routes run on the threadpool"""
    _check_type(file)
    file.file.seek(0)
    content = file.file.read()
    return _decode_content(file, content)
