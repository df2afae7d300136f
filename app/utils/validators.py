"""
Custom validators for the application
"""
import re
from app.core.config import settings


def validate_username(username: str) -> bool:
    """
    Validate username format
    - 3-50 characters
    - Only alphanumeric, underscore, dash
    """
    if not username or len(username) < 3 or len(username) > 50:
        return False
    pattern = r'^[a-zA-Z0-9_-]+$'
    return bool(re.match(pattern, username))


def validate_video_file_extension(filename: str) -> bool:
    """Validate video file extension"""
    if not filename:
        return False
    return any(filename.lower().endswith(ext) for ext in settings.ALLOWED_VIDEO_EXTENSIONS)


def validate_image_file_extension(filename: str) -> bool:
    """Validate image file extension"""
    if not filename:
        return False
    return any(filename.lower().endswith(ext) for ext in settings.ALLOWED_IMAGE_EXTENSIONS)


def validate_file_size(file_size: int, max_size: int) -> bool:
    """Validate file size"""
    return 0 < file_size <= max_size
