# mock_exam/models/schemas.py
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, confloat

from ..core.config import config
from ..core.models import Question, QuestionType

# Booleans and non-finite floats are rejected rather than coerced
AnswerData = Union[StrictInt, confloat(strict=True, allow_inf_nan=False), StrictStr]


class GenerateExamRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic_hints: Optional[List[str]] = Field(default=None, alias="topicHints")
    num_questions: int = Field(default=config.DEFAULT_QUESTION_COUNT, alias="numQuestions")
    difficulty: Literal["easy", "medium", "hard", "mixed"] = config.DEFAULT_DIFFICULTY
    include_explanations: bool = Field(default=True, alias="includeExplanations")


class QuestionData(BaseModel):
    id: int = Field(ge=1)
    type: Literal["mcq", "nat"]
    question: str
    options: Optional[List[str]] = None
    answer: Optional[AnswerData] = None
    marks: int = 1
    topic: Optional[str] = None
    explanation: Optional[str] = None

    def to_question(self) -> Question:
        return Question(
            id=self.id,
            type=QuestionType(self.type),
            question=self.question,
            answer=self.answer,
            marks=self.marks,
            topic=self.topic or config.FALLBACK_TOPIC,
            options=self.options,
            explanation=self.explanation,
        )


class CreateAttemptRequest(BaseModel):
    questions: List[QuestionData]


class SubmitAttemptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    answers: Dict[str, AnswerData] = Field(default_factory=dict)
    duration_sec: float = Field(default=0, alias="durationSec")
