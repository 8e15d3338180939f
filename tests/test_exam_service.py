import threading

import pytest

from mock_exam.core.exceptions import AlreadySubmitted, AttemptNotFound, AuthenticationRequired, NotAuthorized
from mock_exam.core.models import AttemptState, Question, QuestionType
from mock_exam.services.exam_service import ExamService


class TestCreateAttempt:

    def test_creates_open_attempt(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)

        attempt = exam_service.get_attempt("alice", attempt_id)
        assert attempt.state == AttemptState.OPEN
        assert attempt.score == 0
        assert attempt.total == 2
        assert attempt.answers == {}
        assert attempt.submitted_at is None
        assert attempt.guidance.weak_topics == []
        assert [q.to_dict() for q in attempt.questions] == [q.to_dict() for q in two_questions]

    def test_requires_identity(self, exam_service, two_questions):
        with pytest.raises(AuthenticationRequired):
            exam_service.create_attempt(None, two_questions)
        with pytest.raises(AuthenticationRequired):
            exam_service.create_attempt("", two_questions)

    def test_rejects_empty_question_set(self, exam_service):
        with pytest.raises(ValueError):
            exam_service.create_attempt("alice", [])

    def test_rejects_questions_breaking_invariants(self, exam_service):
        broken = Question(id=1, type=QuestionType.MCQ, question="?", options=["a", "b"], answer=0)
        with pytest.raises(ValueError):
            exam_service.create_attempt("alice", [broken])

        nat_with_options = Question(id=1, type=QuestionType.NAT, question="?", options=["a", "b", "c", "d"], answer=1)
        with pytest.raises(ValueError):
            exam_service.create_attempt("alice", [nat_with_options])

    def test_accepts_generated_exam(self, exam_service):
        questions = exam_service.generate_exam(num_questions=65)
        attempt_id = exam_service.create_attempt("alice", questions)

        assert exam_service.get_attempt("alice", attempt_id).total == 65


class TestSubmitAttempt:

    def test_all_correct(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)

        result = exam_service.submit_attempt("alice", attempt_id, {"1": 2, "2": 11.995}, 30)

        assert result.score == 2
        assert result.total == 2
        assert result.mistakes == []
        assert result.weak_topics == []
        assert len(result.suggestions) == 3

    def test_partial_submission(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)

        result = exam_service.submit_attempt("alice", attempt_id, {"1": 0}, 30)

        assert result.score == 0
        assert [m.id for m in result.mistakes] == [1, 2]
        assert result.mistakes[1].yours == "blank"
        assert result.weak_topics == ["operating_systems", "linear_algebra"]
        assert result.suggestions[0] == "Focus next: operating systems, linear algebra"

    def test_persists_results(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)
        exam_service.submit_attempt("alice", attempt_id, {"1": 2}, 42.9)

        attempt = exam_service.get_attempt("alice", attempt_id)
        assert attempt.state == AttemptState.SUBMITTED
        assert attempt.completed
        assert attempt.score == 1
        assert attempt.answers == {"1": 2}
        assert attempt.duration_sec == 42
        assert attempt.submitted_at is not None
        assert attempt.guidance.weak_topics == ["linear_algebra"]

    @pytest.mark.parametrize("duration, expected", [(-5, 0), (0, 0), (12.7, 12), ("30", 30), (None, 0)])
    def test_duration_is_floored_and_non_negative(self, exam_service, two_questions, duration, expected):
        attempt_id = exam_service.create_attempt("alice", two_questions)
        exam_service.submit_attempt("alice", attempt_id, {}, duration)

        assert exam_service.get_attempt("alice", attempt_id).duration_sec == expected

    def test_resubmission_conflicts_and_changes_nothing(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)
        exam_service.submit_attempt("alice", attempt_id, {"1": 2}, 10)

        with pytest.raises(AlreadySubmitted):
            exam_service.submit_attempt("alice", attempt_id, {"1": 2, "2": 12}, 99)

        attempt = exam_service.get_attempt("alice", attempt_id)
        assert attempt.score == 1
        assert attempt.duration_sec == 10
        assert attempt.answers == {"1": 2}

    def test_unknown_attempt(self, exam_service):
        with pytest.raises(AttemptNotFound):
            exam_service.submit_attempt("alice", "00000000-0000-0000-0000-000000000000", {}, 0)
        with pytest.raises(AttemptNotFound):
            exam_service.submit_attempt("alice", "not-a-uuid", {}, 0)

    def test_other_owner_is_rejected(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)

        with pytest.raises(NotAuthorized):
            exam_service.submit_attempt("mallory", attempt_id, {"1": 2}, 10)

        assert exam_service.get_attempt("alice", attempt_id).state == AttemptState.OPEN

    def test_ownership_checked_before_state(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)
        exam_service.submit_attempt("alice", attempt_id, {}, 0)

        with pytest.raises(NotAuthorized):
            exam_service.submit_attempt("mallory", attempt_id, {}, 0)

    def test_requires_identity(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)
        with pytest.raises(AuthenticationRequired):
            exam_service.submit_attempt(None, attempt_id, {}, 0)

    def test_concurrent_submissions_have_one_winner(self, exam_service, two_questions):
        attempt_id = exam_service.create_attempt("alice", two_questions)
        barrier = threading.Barrier(8)
        outcomes = []
        lock = threading.Lock()

        def submit():
            barrier.wait()
            try:
                exam_service.submit_attempt("alice", attempt_id, {"1": 2, "2": 12}, 5)
                outcome = "ok"
            except AlreadySubmitted:
                outcome = "conflict"
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=submit) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("conflict") == 7

    def test_lost_race_reports_conflict(self, two_questions, repository, local_ai_service):
        """A submission that read `open` but lost the write reports AlreadySubmitted"""
        service = ExamService(repository=repository, ai_service=local_ai_service)
        attempt_id = service.create_attempt("alice", two_questions)
        stale = repository.get_attempt(attempt_id)

        service.submit_attempt("alice", attempt_id, {"1": 2}, 1)
        repository.get_attempt = lambda _id: dict(stale)

        with pytest.raises(AlreadySubmitted):
            service.submit_attempt("alice", attempt_id, {"1": 0}, 1)


class TestListAttempts:

    def test_newest_first_and_limited(self, exam_service, two_questions):
        ids = [exam_service.create_attempt("alice", two_questions) for _ in range(12)]
        exam_service.create_attempt("bob", two_questions)

        attempts = exam_service.list_attempts("alice")

        assert [a.attempt_id for a in attempts] == list(reversed(ids))[:10]
        assert all(a.owner == "alice" for a in attempts)

    def test_requires_identity(self, exam_service):
        with pytest.raises(AuthenticationRequired):
            exam_service.list_attempts(None)


def test_get_attempt_checks_existence_then_owner(exam_service, two_questions):
    attempt_id = exam_service.create_attempt("alice", two_questions)

    with pytest.raises(NotAuthorized):
        exam_service.get_attempt("bob", attempt_id)
    with pytest.raises(AttemptNotFound):
        exam_service.get_attempt("bob", "11111111-1111-1111-1111-111111111111")


def test_generate_rejects_unknown_difficulty(exam_service):
    with pytest.raises(ValueError):
        exam_service.generate_exam(num_questions=5, difficulty="impossible")


def test_health_check(exam_service):
    health = exam_service.health_check()

    assert health["status"] == "healthy"
    assert health["generation"]["mode"] == "local"


def test_create_rejects_duplicate_question_ids(exam_service, two_questions):
    two_questions[1].id = two_questions[0].id

    with pytest.raises(ValueError, match="unique"):
        exam_service.create_attempt("alice", two_questions)


@pytest.mark.parametrize("answer", [float("nan"), float("inf"), float("-inf")])
def test_create_rejects_non_finite_nat_answer(exam_service, two_questions, answer):
    two_questions[1].answer = answer

    with pytest.raises(ValueError):
        exam_service.create_attempt("alice", two_questions)
