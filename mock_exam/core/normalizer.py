# mock_exam/core/normalizer.py
import json
import logging
from typing import Any, Dict, List, Optional

from .config import config
from .exceptions import MalformedProviderOutput
from .models import MCQ_OPTION_COUNT, Question, QuestionType, is_finite_number, is_number

logger = logging.getLogger(__name__)

PLACEHOLDER_OPTIONS = ["A", "B", "C", "D"]

_decoder = json.JSONDecoder()


def extract_json_array(raw_text: str) -> List[Any]:
    """Return the first JSON array embedded in provider text"""
    if not isinstance(raw_text, str):
        raise MalformedProviderOutput("Provider output is not text")

    start = raw_text.find("[")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(raw_text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list):
            return value
        start = raw_text.find("[", start + 1)

    raise MalformedProviderOutput("No JSON array found in provider output")


def normalize_questions(raw_text: str, expected_count: int, topic_pool: List[str],
                        include_explanations: bool = True) -> List[Question]:
    """Parse raw provider text into canonical questions, repairing bad fields"""
    items = extract_json_array(raw_text)
    pool = topic_pool or [config.FALLBACK_TOPIC]

    questions = []
    for index, item in enumerate(items[:expected_count]):
        if not isinstance(item, dict):
            item = {}
        questions.append(_normalize_item(item, index, pool, include_explanations))

    if len(items) > expected_count:
        logger.debug(f"Dropped {len(items) - expected_count} surplus questions")

    return questions


def _normalize_item(item: Dict[str, Any], index: int, pool: List[str],
                    include_explanations: bool) -> Question:
    question_type = QuestionType.NAT if item.get("type") == "nat" else QuestionType.MCQ
    marks = 2 if _is_two(item.get("marks")) else 1

    text = item.get("question")
    topic = item.get("topic")

    explanation: Optional[str] = None
    if include_explanations and item.get("explanation"):
        explanation = str(item["explanation"])

    if question_type == QuestionType.MCQ:
        options = item.get("options")
        if isinstance(options, list) and len(options) == MCQ_OPTION_COUNT:
            options = [str(option) for option in options]
        else:
            options = list(PLACEHOLDER_OPTIONS)
        answer = _option_index(item.get("answer"))
    else:
        options = None
        answer = item.get("answer")
        # json decodes NaN and Infinity as floats
        if not (is_finite_number(answer) or isinstance(answer, str)):
            answer = "0"

    return Question(
        id=index + 1,
        type=question_type,
        question=str(text) if text is not None else "Untitled",
        answer=answer,
        marks=marks,
        topic=str(topic) if topic is not None else pool[index % len(pool)],
        options=options,
        explanation=explanation,
    )


def _is_two(value: Any) -> bool:
    return is_number(value) and value == 2


def _option_index(value: Any) -> int:
    if is_number(value) and 0 <= value < MCQ_OPTION_COUNT and value == int(value):
        return int(value)
    return 0
