"""
Utility functions for the application
"""
from pathlib import Path
from typing import Optional


def get_file_extension(filename: str) -> str:
    """Get file extension without dot"""
    return Path(filename).suffix.lstrip(".")


def is_valid_image(filename: Optional[str], content_type: Optional[str] = None) -> bool:
    """Check if an upload looks like an image, by content type or extension"""
    if content_type and content_type.startswith("image/"):
        return True
    if not filename:
        return False
    valid_extensions = {"jpg", "jpeg", "png", "bmp", "webp", "tif", "tiff"}
    return get_file_extension(filename).lower() in valid_extensions


def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format"""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.2f} TB"
