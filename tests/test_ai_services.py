import pytest

from mock_exam.core.ai_services import ExamGenerationService
from mock_exam.core.config import config
from mock_exam.core.local_generator import LocalQuestionGenerator
from mock_exam.core.models import QuestionType
from mock_exam.core.question_bank import MCQ_TEMPLATES


def local_questions(count, include_explanations=True):
    return [q.to_dict() for q in LocalQuestionGenerator().generate(count, None, include_explanations)]


class TestProviderFallback:

    def test_no_providers_uses_local_generation(self, local_ai_service):
        questions = local_ai_service.generate_exam(num_questions=7)

        assert len(questions) == 7
        assert questions[0].question == MCQ_TEMPLATES[0]["question"]

    def test_first_successful_candidate_wins(self, stub_provider_factory, provider_payload):
        primary = stub_provider_factory("anthropic", {"claude": provider_payload(10)})
        secondary = stub_provider_factory("openrouter", {"m1": provider_payload(10)})
        service = ExamGenerationService(providers=[primary, secondary])

        questions = service.generate_exam(num_questions=10)

        assert len(questions) == 10
        assert questions[0].question == "Provider MCQ 0"
        assert len(primary.calls) == 1
        assert secondary.calls == []

    def test_falls_through_errors_in_order(self, stub_provider_factory, failing_error, provider_payload):
        primary = stub_provider_factory("anthropic", {"claude": failing_error})
        secondary = stub_provider_factory("openrouter", {
            "m1": "sorry, I cannot help",
            "m2": provider_payload(3),
            "m3": provider_payload(5),
        })
        service = ExamGenerationService(providers=[primary, secondary])

        questions = service.generate_exam(num_questions=5)

        assert [q.question for q in questions][:2] == ["Provider MCQ 0", "Provider NAT 1"]
        assert [c["model"] for c in primary.calls] == ["claude"]
        assert [c["model"] for c in secondary.calls] == ["m1", "m2", "m3"]

    def test_each_candidate_is_tried_once(self, stub_provider_factory, failing_error):
        provider = stub_provider_factory("openrouter", {"m1": failing_error, "m2": failing_error})
        service = ExamGenerationService(providers=[provider])

        questions = service.generate_exam(num_questions=5, include_explanations=False)

        assert [c["model"] for c in provider.calls] == ["m1", "m2"]
        assert [q.to_dict() for q in questions] == local_questions(5, include_explanations=False)

    def test_unexpected_exception_is_absorbed(self, stub_provider_factory):
        provider = stub_provider_factory("groq", {"llama": RuntimeError("boom")})
        service = ExamGenerationService(providers=[provider])

        assert len(service.generate_exam(num_questions=6)) == 6

    def test_empty_array_discards_candidate(self, stub_provider_factory, provider_payload):
        provider = stub_provider_factory("openrouter", {"m1": "[]", "m2": provider_payload(5)})
        service = ExamGenerationService(providers=[provider])

        questions = service.generate_exam(num_questions=5)

        assert questions[0].question == "Provider MCQ 0"
        assert len(provider.calls) == 2

    def test_short_output_is_not_merged(self, stub_provider_factory, provider_payload):
        primary = stub_provider_factory("anthropic", {"claude": provider_payload(4)})
        secondary = stub_provider_factory("openrouter", {"m1": provider_payload(4)})
        service = ExamGenerationService(providers=[primary, secondary])

        questions = service.generate_exam(num_questions=8)

        assert [q.to_dict() for q in questions] == local_questions(8)


class TestGenerationRequest:

    @pytest.mark.parametrize("requested, expected", [(None, 10), (1, 5), (5, 5), (42, 42), (65, 65), (100, 65)])
    def test_result_length_is_clamped(self, local_ai_service, requested, expected):
        questions = local_ai_service.generate_exam(num_questions=requested)

        assert len(questions) == expected
        for question in questions:
            question.validate()

    def test_provider_receives_request_parameters(self, stub_provider_factory, provider_payload):
        provider = stub_provider_factory("anthropic", {"claude": provider_payload(10)})
        service = ExamGenerationService(providers=[provider])

        service.generate_exam(num_questions=10, difficulty="hard",
                              topic_hints=["compiler_design", "linear_algebra"],
                              include_explanations=False)

        call = provider.calls[0]
        assert "Generate 10 questions." in call["user"]
        assert "Difficulty: hard." in call["user"]
        assert "compiler_design, linear_algebra" in call["user"]
        assert "- explanation (string" not in call["system"]
        assert call["temperature"] == config.GENERATION_TEMPERATURE
        assert call["max_tokens"] == config.DEFAULT_MAX_TOKENS

    def test_full_length_exam_raises_token_limit(self, stub_provider_factory, provider_payload):
        provider = stub_provider_factory("anthropic", {"claude": provider_payload(50)})
        service = ExamGenerationService(providers=[provider])

        service.generate_exam(num_questions=50)

        assert provider.calls[0]["max_tokens"] == config.FULL_LENGTH_MAX_TOKENS

    def test_topic_hints_fill_missing_provider_topics(self, stub_provider_factory):
        raw = "[" + ", ".join(['{"type": "nat", "answer": 1}'] * 5) + "]"
        provider = stub_provider_factory("anthropic", {"claude": raw})
        service = ExamGenerationService(providers=[provider])

        questions = service.generate_exam(num_questions=5, topic_hints=["graphs", "sets"])

        assert [q.topic for q in questions] == ["graphs", "sets", "graphs", "sets", "graphs"]
        assert all(q.type == QuestionType.NAT for q in questions)

    def test_explanations_are_stripped_when_not_requested(self, stub_provider_factory, provider_payload):
        provider = stub_provider_factory("anthropic", {"claude": provider_payload(6)})
        service = ExamGenerationService(providers=[provider])

        questions = service.generate_exam(num_questions=6, include_explanations=False)

        assert all(q.explanation is None for q in questions)


def test_candidates_keep_provider_then_model_order(stub_provider_factory):
    primary = stub_provider_factory("anthropic", {"claude": ""})
    secondary = stub_provider_factory("openrouter", {"m1": "", "m2": ""})
    service = ExamGenerationService(providers=[primary, secondary])

    assert service.describe_candidates() == ["anthropic:claude", "openrouter:m1", "openrouter:m2"]
    assert service.health_check()["mode"] == "providers"
