# mock_exam/core/ai_services.py
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from .config import config
from .exceptions import MalformedProviderOutput, ProviderError
from .local_generator import LocalQuestionGenerator
from .models import Question
from .normalizer import normalize_questions
from .prompts import GenerationParams, PromptTemplates
from .providers import ProviderClient, build_configured_providers
from .utils import clamp_question_count

logger = logging.getLogger(__name__)

Candidate = Tuple[ProviderClient, str]


class ShortProviderOutput(MalformedProviderOutput):
    """Provider returned fewer usable questions than requested"""


class ExamGenerationService:
    """Sole entry point for producing an exam question set.

    Providers are tried one (provider, model) candidate at a time, in order.
    A candidate's output is accepted wholesale after normalization or discarded
    wholesale; the local generator is the terminal fallback and never fails.
    """

    def __init__(self, providers: Optional[List[ProviderClient]] = None,
                 local_generator: Optional[LocalQuestionGenerator] = None):
        self.providers = providers if providers is not None else build_configured_providers()
        self.local_generator = local_generator or LocalQuestionGenerator()

    def candidates(self) -> List[Candidate]:
        """Ordered (provider, model) pairs; primary provider first"""
        return [(provider, model) for provider in self.providers for model in provider.models]

    def describe_candidates(self) -> List[str]:
        return [f"{provider.name}:{model}" for provider, model in self.candidates()]

    def generate_exam(self, num_questions: Optional[int] = None,
                      difficulty: Optional[str] = None,
                      topic_hints: Optional[List[str]] = None,
                      include_explanations: bool = True) -> List[Question]:
        """Produce exactly clamp(num_questions, 5, 65) canonical questions"""
        count = clamp_question_count(num_questions)
        difficulty = difficulty or config.DEFAULT_DIFFICULTY
        topics = list(topic_hints) if topic_hints else list(config.DEFAULT_TOPICS)

        logger.info(f"🤖 Generating {count} {difficulty} questions over {len(topics)} topics")

        system = PromptTemplates.create_system_prompt(include_explanations)
        user = PromptTemplates.create_user_prompt(count, difficulty, topics)
        params = GenerationParams(count)

        for provider, model in self.candidates():
            try:
                questions = self._attempt_generate(
                    provider, model, system, user, params, count, topics, include_explanations
                )
            except (ProviderError, MalformedProviderOutput) as e:
                logger.warning(f"⚠️ {provider.name}:{model} discarded: {e}")
                continue
            except Exception as e:
                logger.error(f"❌ {provider.name}:{model} failed unexpectedly: {e}", exc_info=True)
                continue

            logger.info(f"✅ Generated {len(questions)} questions via {provider.name}:{model}")
            return questions

        if self.providers:
            logger.warning("All providers exhausted - falling back to local generation")

        return self.local_generator.generate(count, topics, include_explanations)

    def _attempt_generate(self, provider: ProviderClient, model: str, system: str, user: str,
                          params: GenerationParams, count: int, topics: List[str],
                          include_explanations: bool) -> List[Question]:
        """One provider call, normalized; raises when the output is unusable"""
        logger.debug(f"Trying {provider.name}:{model} with {params}")
        started = time.time()

        raw_text = provider.complete(
            system=system,
            user=user,
            model=model,
            max_tokens=params.max_tokens,
            temperature=params.temperature,
        )

        questions = normalize_questions(raw_text, count, topics, include_explanations)
        logger.debug(f"{provider.name}:{model} answered in {time.time() - started:.2f}s")

        if len(questions) < count:
            raise ShortProviderOutput(
                f"{provider.name}:{model} returned {len(questions)} usable questions, expected {count}"
            )

        return questions

    def health_check(self) -> Dict[str, Any]:
        """Report the generation chain; local generation keeps it always available"""
        return {
            "status": "healthy",
            "mode": "providers" if self.providers else "local",
            "candidates": self.describe_candidates(),
            "local_fallback": True,
        }


# Singleton pattern for AI service
_ai_service = None


def get_ai_service() -> ExamGenerationService:
    """Get AI service instance (singleton)"""
    global _ai_service
    if _ai_service is None:
        _ai_service = ExamGenerationService()
    return _ai_service


def close_ai_service():
    """Close AI service instance"""
    global _ai_service
    _ai_service = None
