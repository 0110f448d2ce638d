# Utils package
from .helpers import (
    get_file_extension,
    is_valid_image,
    format_file_size,
)

__all__ = [
    "get_file_extension",
    "is_valid_image",
    "format_file_size",
]
