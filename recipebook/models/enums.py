"""Enums for model fields."""

from enum import Enum


class RecipeLevel(str, Enum):
    """Difficulty levels, stored with the labels the UI shows."""

    EASY = "dễ"
    MEDIUM = "trung bình"
    HARD = "khó"

    @classmethod
    def is_valid(cls, value: str | None) -> bool:
        """Check a submitted level, ignoring case and surrounding whitespace."""
        if not value:
            return False
        return value.strip().lower() in {level.value for level in cls}


class ReportStatus(str, Enum):
    """Moderation status of a recipe report."""

    PENDING = "Đang xử lý"
    RESOLVED = "Đã xử lý"
