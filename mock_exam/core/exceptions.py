# mock_exam/core/exceptions.py
from typing import Optional


class MockExamError(Exception):
    """Base class for all service errors"""

    status_code = 500
    error_type = "server_error"


# ==================== Lifecycle errors (surfaced to callers) ====================

class AuthenticationRequired(MockExamError):
    status_code = 401
    error_type = "authentication_required"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotAuthorized(MockExamError):
    status_code = 403
    error_type = "not_authorized"

    def __init__(self, message: str = "Not authorized to access this attempt"):
        super().__init__(message)


class AttemptNotFound(MockExamError):
    status_code = 404
    error_type = "not_found"

    def __init__(self, attempt_id: str):
        self.attempt_id = attempt_id
        super().__init__(f"Attempt not found: {attempt_id}")


class AlreadySubmitted(MockExamError):
    status_code = 409
    error_type = "already_submitted"

    def __init__(self, attempt_id: str):
        self.attempt_id = attempt_id
        super().__init__(f"Attempt already submitted: {attempt_id}")


# ==================== Provider errors (absorbed by the orchestrator) ====================

class ProviderError(MockExamError):
    """Non-2xx response, transport failure or empty completion from one provider"""

    error_type = "provider_error"

    def __init__(self, provider: str, model: str, message: str,
                 status_code: Optional[int] = None):
        self.provider = provider
        self.model = model
        self.http_status = status_code
        status = f" {status_code}" if status_code is not None else ""
        super().__init__(f"{provider} model {model} error{status}: {message}")


class MalformedProviderOutput(MockExamError):
    """Provider text holds no parseable JSON array"""

    error_type = "malformed_provider_output"
