"""
Utility functions for the application
"""
from .validators import (
    validate_username,
    validate_video_file_extension,
    validate_image_file_extension,
    validate_file_size
)
from .parsing import (
    Pagination,
    parse_pagination,
    parse_category,
    find_category,
    parse_tags
)

__all__ = [
    # Validators
    "validate_username",
    "validate_video_file_extension",
    "validate_image_file_extension",
    "validate_file_size",
    # Parsing
    "Pagination",
    "parse_pagination",
    "parse_category",
    "find_category",
    "parse_tags",
]
