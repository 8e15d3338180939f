# mock_exam/services/exam_service.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..core.ai_services import ExamGenerationService, get_ai_service
from ..core.config import config
from ..core.database import AttemptRepository, get_attempt_repository
from ..core.exceptions import AlreadySubmitted, AttemptNotFound, AuthenticationRequired, NotAuthorized
from ..core.models import AnswerValue, AttemptState, ExamAttempt, Question
from ..core.utils import DateTimeUtils, ValidationUtils, floor_duration, generate_attempt_id
from .scoring import Mistake, build_guidance, grade_attempt

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    score: int
    total: int
    weak_topics: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    mistakes: List[Mistake] = field(default_factory=list)


class ExamService:
    """Service for managing the exam attempt lifecycle: open -> submitted"""

    def __init__(self, repository: Optional[AttemptRepository] = None,
                 ai_service: Optional[ExamGenerationService] = None):
        self.repository = repository or get_attempt_repository()
        self.ai_service = ai_service or get_ai_service()

    def generate_exam(self, num_questions: Optional[int] = None, difficulty: Optional[str] = None,
                      topic_hints: Optional[List[str]] = None,
                      include_explanations: bool = True) -> List[Question]:
        """Generate a question set; never fails thanks to local generation"""
        if difficulty is not None and not ValidationUtils.validate_difficulty(difficulty):
            raise ValueError(f"Unknown difficulty: {difficulty}")
        return self.ai_service.generate_exam(
            num_questions=num_questions,
            difficulty=difficulty,
            topic_hints=topic_hints,
            include_explanations=include_explanations,
        )

    def create_attempt(self, user_id: Optional[str], questions: List[Question]) -> str:
        """Create an open attempt owned by the caller"""
        self._require_user(user_id)

        if not questions:
            raise ValueError("An attempt needs at least one question")
        for question in questions:
            question.validate()
        if len({question.id for question in questions}) != len(questions):
            raise ValueError("Question ids must be unique within an attempt")

        attempt = ExamAttempt(
            attempt_id=generate_attempt_id(),
            owner=user_id,
            questions=list(questions),
            created_at=DateTimeUtils.get_current_timestamp(),
            total=len(questions),
        )
        attempt_id = self.repository.insert_attempt(attempt.to_document())

        logger.info(f"✅ Attempt created: {attempt_id} with {attempt.total} questions")
        return attempt_id

    def get_attempt(self, user_id: Optional[str], attempt_id: str) -> ExamAttempt:
        """Load an attempt, checking existence and then ownership"""
        self._require_user(user_id)

        document = None
        if ValidationUtils.validate_attempt_id(attempt_id):
            document = self.repository.get_attempt(attempt_id)
        if not document:
            raise AttemptNotFound(attempt_id)

        attempt = ExamAttempt.from_document(document)
        if attempt.owner != user_id:
            logger.warning(f"Attempt {attempt_id} requested by non-owner")
            raise NotAuthorized()
        return attempt

    def submit_attempt(self, user_id: Optional[str], attempt_id: str,
                       answers: Mapping[str, AnswerValue], duration_sec: Any) -> SubmissionResult:
        """Grade an open attempt and transition it to submitted exactly once"""
        attempt = self.get_attempt(user_id, attempt_id)
        if attempt.state != AttemptState.OPEN:
            raise AlreadySubmitted(attempt_id)

        answers = dict(answers or {})
        grading = grade_attempt(attempt.questions, answers)
        guidance = build_guidance(grading)

        updates = {
            "answers": answers,
            "score": grading.score,
            "duration_sec": floor_duration(duration_sec),
            "guidance": guidance.to_dict(),
            "submitted_at": DateTimeUtils.get_current_timestamp(),
        }
        if not self.repository.complete_attempt(attempt_id, user_id, updates):
            # Another submission flipped the state first
            raise AlreadySubmitted(attempt_id)

        logger.info(f"🏁 Attempt submitted: {attempt_id} score {grading.score}/{grading.total}")

        return SubmissionResult(
            score=grading.score,
            total=grading.total,
            weak_topics=guidance.weak_topics,
            suggestions=guidance.suggestions,
            mistakes=grading.mistakes,
        )

    def list_attempts(self, user_id: Optional[str], limit: Optional[int] = None) -> List[ExamAttempt]:
        """Caller's most recent attempts, newest first"""
        self._require_user(user_id)
        if limit is None:
            limit = config.RECENT_ATTEMPTS_LIMIT
        documents = self.repository.list_attempts(user_id, limit)
        return [ExamAttempt.from_document(document) for document in documents]

    def health_check(self) -> Dict[str, Any]:
        """Service health check"""
        try:
            storage = self.repository.validate_connection()
            generation = self.ai_service.health_check()
            return {
                "status": "healthy" if storage.get("overall") else "degraded",
                "storage": storage,
                "generation": generation,
            }
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return {"status": "error", "error": str(e)}

    @staticmethod
    def _require_user(user_id: Optional[str]):
        if not user_id:
            raise AuthenticationRequired()


# Singleton pattern for exam service
_exam_service = None


def get_exam_service() -> ExamService:
    """Get exam service instance (singleton)"""
    global _exam_service
    if _exam_service is None:
        _exam_service = ExamService()
    return _exam_service
