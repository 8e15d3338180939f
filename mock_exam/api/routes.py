# mock_exam/api/routes.py
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header

from ..core.config import config
from ..core.exceptions import AuthenticationRequired
from ..core.models import ExamAttempt
from ..core.utils import DateTimeUtils
from ..models.schemas import CreateAttemptRequest, GenerateExamRequest, SubmitAttemptRequest
from ..services.exam_service import ExamService, get_exam_service

logger = logging.getLogger(__name__)

router = APIRouter()


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity; resolved before the request body is validated"""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise AuthenticationRequired()
    return user_id


def format_attempt(attempt: ExamAttempt) -> Dict[str, Any]:
    return {
        "attemptId": attempt.attempt_id,
        "questions": [q.to_dict() for q in attempt.questions],
        "answers": attempt.answers,
        "score": attempt.score,
        "total": attempt.total,
        "durationSec": attempt.duration_sec,
        "guidance": {
            "weakTopics": attempt.guidance.weak_topics,
            "suggestions": attempt.guidance.suggestions,
        },
        "state": attempt.state.value,
        "completed": attempt.completed,
        "startedAt": attempt.created_at,
        "submittedAt": attempt.submitted_at,
    }


@router.get("/")
async def home():
    """Home endpoint"""
    return {
        "service": config.API_TITLE,
        "version": config.API_VERSION,
        "status": "operational"
    }


@router.get("/api/health")
async def api_health():
    """Health check"""
    return {
        "status": "healthy",
        "timestamp": DateTimeUtils.get_current_timestamp()
    }


@router.post("/api/exams/generate")
def generate_exam(request: GenerateExamRequest,
                  service: ExamService = Depends(get_exam_service)):
    """Generate a mock exam question set"""
    questions = service.generate_exam(
        num_questions=request.num_questions,
        difficulty=request.difficulty,
        topic_hints=request.topic_hints,
        include_explanations=request.include_explanations,
    )
    return {
        "questions": [q.to_dict() for q in questions],
        "count": len(questions),
    }


@router.post("/api/attempts", status_code=201)
def create_attempt(request: CreateAttemptRequest,
                   user_id: str = Depends(get_current_user),
                   service: ExamService = Depends(get_exam_service)):
    """Create an open attempt from a question set"""
    questions = [q.to_question() for q in request.questions]
    attempt_id = service.create_attempt(user_id, questions)
    return {"attemptId": attempt_id}


@router.post("/api/attempts/{attempt_id}/submit")
def submit_attempt(attempt_id: str, request: SubmitAttemptRequest,
                   user_id: str = Depends(get_current_user),
                   service: ExamService = Depends(get_exam_service)):
    """Submit answers, grade the attempt and return guidance"""
    result = service.submit_attempt(user_id, attempt_id, request.answers, request.duration_sec)
    return {
        "score": result.score,
        "total": result.total,
        "weakTopics": result.weak_topics,
        "suggestions": result.suggestions,
        "mistakes": [m.to_dict() for m in result.mistakes],
    }


@router.get("/api/attempts")
def list_attempts(user_id: str = Depends(get_current_user),
                  service: ExamService = Depends(get_exam_service)):
    """Caller's most recent attempts, newest first"""
    attempts = service.list_attempts(user_id)
    return {"attempts": [format_attempt(a) for a in attempts]}


@router.get("/api/attempts/{attempt_id}")
def get_attempt(attempt_id: str,
                user_id: str = Depends(get_current_user),
                service: ExamService = Depends(get_exam_service)):
    """Single attempt owned by the caller"""
    return format_attempt(service.get_attempt(user_id, attempt_id))
