"""
Parsing of loosely-typed client input: pagination, categories and tags
"""
from typing import List, NamedTuple, Optional
from app.core.config import settings
from app.models.video import DEFAULT_CATEGORY, VideoCategory


class Pagination(NamedTuple):
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def parse_pagination(page=None, limit=None) -> Pagination:
    """Absent, non-numeric or non-positive values fall back to page 1 / default size."""
    return Pagination(
        page=_positive_int(page, 1),
        limit=_positive_int(limit, settings.DEFAULT_PAGE_SIZE)
    )


def find_category(value: Optional[str]) -> Optional[VideoCategory]:
    if not value:
        return None
    value = value.strip()
    for category in VideoCategory:
        if category.value == value or category.name == value:
            return category
    return None


def parse_category(value: Optional[str]) -> VideoCategory:
    """Unknown or missing categories become the default one."""
    return find_category(value) or DEFAULT_CATEGORY


def parse_tags(value: Optional[str]) -> List[str]:
    """Split a comma-delimited tag string into unique, trimmed tags."""
    if not value:
        return []
    tags = []
    for tag in value.split(","):
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags
