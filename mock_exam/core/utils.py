# mock_exam/core/utils.py
import math
import time
import uuid
from typing import Any, Optional

from .config import config
from .models import is_number


def clamp_question_count(count: Optional[int]) -> int:
    """Clamp a requested question count into the supported range"""
    if count is None:
        count = config.DEFAULT_QUESTION_COUNT
    return max(config.MIN_QUESTIONS, min(config.MAX_QUESTIONS, int(count)))


def generate_attempt_id() -> str:
    """Generate unique attempt ID"""
    return str(uuid.uuid4())


def to_number(value: Any) -> Optional[float]:
    """Coerce a submitted or stored value to float; None when it can't be"""
    if is_number(value):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def render_value(value: Any) -> str:
    """Render an answer for display, without a trailing .0 on whole floats"""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def floor_duration(duration_sec: Any) -> int:
    """Floor a duration to a non-negative whole number of seconds"""
    number = to_number(duration_sec)
    if number is None or not math.isfinite(number):
        return 0
    return max(0, math.floor(number))


class ValidationUtils:
    """Utility functions for data validation"""

    @staticmethod
    def validate_attempt_id(attempt_id: str) -> bool:
        """Validate attempt ID format"""
        try:
            uuid.UUID(attempt_id)
            return True
        except (ValueError, TypeError, AttributeError):
            return False

    @staticmethod
    def validate_difficulty(difficulty: str) -> bool:
        return difficulty in config.DIFFICULTIES


class DateTimeUtils:
    """Utility functions for date/time operations"""

    @staticmethod
    def get_current_timestamp() -> float:
        """Get current timestamp"""
        return time.time()
