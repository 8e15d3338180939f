# mock_exam/core/prompts.py
from typing import List
from .config import config


class PromptTemplates:
    """Centralized prompt template management"""

    @staticmethod
    def create_system_prompt(include_explanations: bool = True) -> str:
        """System instruction describing the JSON array every provider must return"""
        explanation_field = "\n- explanation (string; concise, 1-3 lines)" if include_explanations else ""

        return f"""You are a GATE CS exam compiler. Generate questions strictly following GATE CSE style.
Output ONLY valid JSON (no backticks, no explanations outside JSON).
Format: an array of question objects with fields:
- id (number, incremental starting at 1)
- type ("mcq" | "nat")
- question (string)
- options (array of 4 strings; ONLY for "mcq")
- answer (number for "mcq" representing index [0..3], or string/number for "nat")
- marks (1 or 2)
- topic (string; one of the provided topics){explanation_field}

Constraints:
- Mix MCQ and NAT.
- Mix 1-mark and 2-mark.
- Cover a spread of topics from the provided list.
- Questions must be unambiguous, error-free, and solvable.
- NAT answers must be a short numeric (integer or decimal).
- If generating a full mock ({config.MAX_QUESTIONS} questions): ~10 "general_aptitude" (1 mark each) + ~55 core questions with roughly 25 one-mark and 30 two-mark questions; keep a balanced mix of MCQ and NAT; ensure topic coverage across core CS subjects."""

    @staticmethod
    def create_user_prompt(question_count: int, difficulty: str, topics: List[str]) -> str:
        """User instruction carrying count, difficulty and topic spread"""
        return f"""Generate {question_count} questions.
Difficulty: {difficulty}.
Topics to cover (spread): {", ".join(topics)}.

Return ONLY a JSON array as described."""


class GenerationParams:
    """Sampling parameters shared by every provider call"""

    def __init__(self, question_count: int):
        self.temperature = config.GENERATION_TEMPERATURE
        if question_count >= config.FULL_LENGTH_THRESHOLD:
            self.max_tokens = config.FULL_LENGTH_MAX_TOKENS
        else:
            self.max_tokens = config.DEFAULT_MAX_TOKENS

    def __repr__(self) -> str:
        return f"GenerationParams(max_tokens={self.max_tokens}, temperature={self.temperature})"
