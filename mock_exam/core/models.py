# mock_exam/core/models.py
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

AnswerValue = Union[int, float, str]

MCQ_OPTION_COUNT = 4


class QuestionType(str, Enum):
    MCQ = "mcq"
    NAT = "nat"


class AttemptState(str, Enum):
    OPEN = "open"
    SUBMITTED = "submitted"


def is_number(value: Any) -> bool:
    """True for int/float values; bools are not numbers here"""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    return is_number(value) and math.isfinite(value)


@dataclass
class Question:
    """Canonical question every generation path converges to"""
    id: int
    type: QuestionType
    question: str
    answer: AnswerValue
    marks: int = 1
    topic: str = "general_aptitude"
    options: Optional[List[str]] = None
    explanation: Optional[str] = None

    def validate(self) -> None:
        """Raise ValueError when the question breaks a canonical invariant"""
        if self.id < 1:
            raise ValueError(f"Question id must be positive, got {self.id}")
        if self.marks not in (1, 2):
            raise ValueError(f"Question {self.id}: marks must be 1 or 2")
        if self.type == QuestionType.MCQ:
            if not self.options or len(self.options) != MCQ_OPTION_COUNT:
                raise ValueError(f"Question {self.id}: mcq needs exactly {MCQ_OPTION_COUNT} options")
            if not is_number(self.answer) or self.answer not in range(MCQ_OPTION_COUNT):
                raise ValueError(f"Question {self.id}: mcq answer must be an index in [0, 3]")
        else:
            if self.options is not None:
                raise ValueError(f"Question {self.id}: nat questions carry no options")
            if not (is_finite_number(self.answer) or isinstance(self.answer, str)):
                raise ValueError(f"Question {self.id}: nat answer must be a finite number or text")

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "type": self.type.value,
            "question": self.question,
            "answer": self.answer,
            "marks": self.marks,
            "topic": self.topic,
        }
        if self.options is not None:
            data["options"] = list(self.options)
        if self.explanation:
            data["explanation"] = self.explanation
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Question':
        options = data.get("options")
        return cls(
            id=int(data["id"]),
            type=QuestionType(data["type"]),
            question=data["question"],
            answer=data.get("answer"),
            marks=data.get("marks", 1),
            topic=data.get("topic") or "general_aptitude",
            options=list(options) if options is not None else None,
            explanation=data.get("explanation"),
        )


@dataclass
class Guidance:
    weak_topics: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"weak_topics": list(self.weak_topics), "suggestions": list(self.suggestions)}


@dataclass
class ExamAttempt:
    """One user's run through a generated exam"""
    attempt_id: str
    owner: str
    questions: List[Question]
    created_at: float
    answers: Dict[str, AnswerValue] = field(default_factory=dict)
    score: int = 0
    total: int = 0
    duration_sec: int = 0
    guidance: Guidance = field(default_factory=Guidance)
    state: AttemptState = AttemptState.OPEN
    submitted_at: Optional[float] = None

    @property
    def completed(self) -> bool:
        return self.state == AttemptState.SUBMITTED

    def to_document(self) -> Dict[str, Any]:
        document = {
            "attempt_id": self.attempt_id,
            "owner": self.owner,
            "questions": [q.to_dict() for q in self.questions],
            "answers": dict(self.answers),
            "score": self.score,
            "total": self.total,
            "duration_sec": self.duration_sec,
            "guidance": self.guidance.to_dict(),
            "state": self.state.value,
            "created_at": self.created_at,
        }
        if self.submitted_at is not None:
            document["submitted_at"] = self.submitted_at
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> 'ExamAttempt':
        guidance = document.get("guidance") or {}
        return cls(
            attempt_id=document["attempt_id"],
            owner=document["owner"],
            questions=[Question.from_dict(q) for q in document.get("questions", [])],
            created_at=document["created_at"],
            answers=dict(document.get("answers") or {}),
            score=document.get("score", 0),
            total=document.get("total", 0),
            duration_sec=document.get("duration_sec", 0),
            guidance=Guidance(
                weak_topics=list(guidance.get("weak_topics", [])),
                suggestions=list(guidance.get("suggestions", [])),
            ),
            state=AttemptState(document.get("state", AttemptState.OPEN.value)),
            submitted_at=document.get("submitted_at"),
        )
