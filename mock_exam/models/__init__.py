"""
Pydantic models and schemas for request validation
"""

from .schemas import (
    GenerateExamRequest,
    QuestionData,
    CreateAttemptRequest,
    SubmitAttemptRequest
)

__all__ = [
    "GenerateExamRequest",
    "QuestionData",
    "CreateAttemptRequest",
    "SubmitAttemptRequest"
]
