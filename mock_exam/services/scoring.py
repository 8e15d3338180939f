# mock_exam/services/scoring.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from ..core.config import config
from ..core.models import AnswerValue, Guidance, Question, QuestionType, is_number
from ..core.utils import render_value, to_number

logger = logging.getLogger(__name__)

BLANK = "blank"

STUDY_STRATEGIES = [
    "Review basics first: definitions, standard formulas, and canonical properties.",
    "Practice 10 targeted problems per weak topic and redo similar questions.",
    "Reattempt a shorter mock to validate improvements.",
]


@dataclass
class TopicStats:
    attempted: int = 0
    missed: int = 0


@dataclass
class Mistake:
    id: int
    topic: str
    correct: str
    yours: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "topic": self.topic, "correct": self.correct, "yours": self.yours}


@dataclass
class GradingResult:
    score: int
    total: int
    mistakes: List[Mistake] = field(default_factory=list)
    topic_stats: Dict[str, TopicStats] = field(default_factory=dict)


def is_correct(question: Question, submitted: Any) -> bool:
    """Grade one answer; unanswered or non-coercible answers are incorrect"""
    if submitted is None:
        return False

    if question.type == QuestionType.MCQ:
        return is_number(submitted) and is_number(question.answer) and submitted == question.answer

    expected = to_number(question.answer)
    given = to_number(submitted)
    if expected is None or given is None:
        return False
    return abs(given - expected) < config.NUMERIC_TOLERANCE


def grade_attempt(questions: List[Question], answers: Mapping[str, AnswerValue]) -> GradingResult:
    """Grade every question against the submitted answers, keyed by question id text"""
    result = GradingResult(score=0, total=len(questions))

    for question in questions:
        topic = question.topic or config.FALLBACK_TOPIC
        stats = result.topic_stats.setdefault(topic, TopicStats())
        stats.attempted += 1

        submitted = answers.get(str(question.id))
        if is_correct(question, submitted):
            result.score += 1
            continue

        stats.missed += 1
        result.mistakes.append(Mistake(
            id=question.id,
            topic=topic,
            correct=render_value(question.answer if question.answer is not None else ""),
            yours=BLANK if submitted is None else render_value(submitted),
        ))

    logger.debug(f"Graded {result.total} questions: {result.score} correct")
    return result


def rank_weak_topics(topic_stats: Dict[str, TopicStats], limit: int = None) -> List[str]:
    """Topics with misses, most missed first; ties keep first-encounter order"""
    if limit is None:
        limit = config.WEAK_TOPIC_LIMIT
    missed = [(topic, stats.missed) for topic, stats in topic_stats.items() if stats.missed > 0]
    # sorted() is stable, so equal counts stay in encounter order
    missed = sorted(missed, key=lambda item: item[1], reverse=True)
    return [topic for topic, _ in missed[:limit]]


def build_suggestions(weak_topics: List[str]) -> List[str]:
    suggestions = []
    if weak_topics:
        readable = ", ".join(topic.replace("_", " ") for topic in weak_topics)
        suggestions.append(f"Focus next: {readable}")
    suggestions.extend(STUDY_STRATEGIES)
    return suggestions


def build_guidance(result: GradingResult) -> Guidance:
    weak_topics = rank_weak_topics(result.topic_stats)
    return Guidance(weak_topics=weak_topics, suggestions=build_suggestions(weak_topics))
