"""
Business logic services for the attempt lifecycle, scoring and guidance
"""

from .exam_service import get_exam_service

__all__ = ["get_exam_service"]
