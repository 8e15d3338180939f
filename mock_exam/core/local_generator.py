# mock_exam/core/local_generator.py
import logging
from typing import List, Optional

from .config import config
from .models import Question, QuestionType
from .question_bank import MCQ_TEMPLATES, NAT_TEMPLATES, MCQ_EXPLANATION, NAT_EXPLANATION
from .utils import clamp_question_count

logger = logging.getLogger(__name__)


class LocalQuestionGenerator:
    """Deterministic, provider-free question synthesis from the template bank"""

    def __init__(self, mcq_templates=None, nat_templates=None):
        self.mcq_templates = mcq_templates or MCQ_TEMPLATES
        self.nat_templates = nat_templates or NAT_TEMPLATES

    def generate(self, count: int, topic_pool: Optional[List[str]] = None,
                 include_explanations: bool = True) -> List[Question]:
        """Build `count` questions (clamped), alternating mcq and nat by position"""
        total = clamp_question_count(count)
        pool = topic_pool or config.DEFAULT_TOPICS

        logger.info(f"🔧 Generating {total} local questions")

        questions = []
        for i in range(total):
            marks = 2 if i % 3 == 0 else 1
            fallback_topic = pool[i % len(pool)] or config.FALLBACK_TOPIC

            if i % 2 == 0:
                template = self.mcq_templates[(i // 2) % len(self.mcq_templates)]
                question = Question(
                    id=i + 1,
                    type=QuestionType.MCQ,
                    question=template["question"],
                    options=list(template["options"]),
                    answer=template["answer"],
                    marks=marks,
                    topic=template.get("topic") or fallback_topic,
                    explanation=MCQ_EXPLANATION if include_explanations else None,
                )
            else:
                template = self.nat_templates[(i // 2) % len(self.nat_templates)]
                question = Question(
                    id=i + 1,
                    type=QuestionType.NAT,
                    question=template["question"],
                    answer=template["answer"],
                    marks=marks,
                    topic=template.get("topic") or fallback_topic,
                    explanation=NAT_EXPLANATION if include_explanations else None,
                )
            questions.append(question)

        return questions
