import json

import pytest
from fastapi.testclient import TestClient

from mock_exam.core.ai_services import ExamGenerationService
from mock_exam.core.database import InMemoryAttemptRepository
from mock_exam.core.exceptions import ProviderError
from mock_exam.core.models import Question, QuestionType
from mock_exam.core.providers import ProviderClient
from mock_exam.main import app
from mock_exam.services.exam_service import ExamService, get_exam_service


class StubProvider(ProviderClient):
    """Scripted provider: maps model -> raw text or exception"""

    def __init__(self, name, responses):
        super().__init__(api_key="test-key", models=list(responses))
        self.name = name
        self.responses = responses
        self.calls = []

    def complete(self, system, user, model, max_tokens, temperature):
        self.calls.append({
            "model": model,
            "system": system,
            "user": user,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        response = self.responses[model]
        if isinstance(response, Exception):
            raise response
        return response


def build_provider_payload(count, topic="operating_systems"):
    """A well-formed provider answer with `count` alternating questions"""
    items = []
    for i in range(count):
        if i % 2 == 0:
            items.append({
                "id": 100 + i,
                "type": "mcq",
                "question": f"Provider MCQ {i}",
                "options": ["w", "x", "y", "z"],
                "answer": 1,
                "marks": 2,
                "topic": topic,
                "explanation": "because",
            })
        else:
            items.append({
                "id": 100 + i,
                "type": "nat",
                "question": f"Provider NAT {i}",
                "answer": 4.5,
                "marks": 1,
                "topic": topic,
            })
    return "Here is your exam:\n" + json.dumps(items) + "\nGood luck!"


@pytest.fixture
def stub_provider_factory():
    return StubProvider


@pytest.fixture
def failing_error():
    return ProviderError("stub", "stub-model", "service unavailable", status_code=503)


@pytest.fixture
def repository():
    return InMemoryAttemptRepository()


@pytest.fixture
def local_ai_service():
    return ExamGenerationService(providers=[])


@pytest.fixture
def exam_service(repository, local_ai_service):
    return ExamService(repository=repository, ai_service=local_ai_service)


@pytest.fixture
def two_questions():
    return [
        Question(id=1, type=QuestionType.MCQ, question="Pick C", options=["a", "b", "c", "d"],
                 answer=2, marks=1, topic="operating_systems"),
        Question(id=2, type=QuestionType.NAT, question="3 * 4 = ?", answer=12, marks=2,
                 topic="linear_algebra"),
    ]


@pytest.fixture
def client(exam_service):
    app.dependency_overrides[get_exam_service] = lambda: exam_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def provider_payload():
    return build_provider_payload
