# mock_exam/core/config.py
import os
from typing import Dict, Any, List
from urllib.parse import quote_plus
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def first_env(*names: str) -> str:
    """Return the first non-empty (trimmed) value among the given env vars"""
    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return ""


class Config:
    """Centralized configuration management"""

    # ==================== API Configuration ====================
    API_TITLE = "Mock Exam API"
    API_DESCRIPTION = "GATE-style mock exam generation and grading"
    API_VERSION = "1.0.0"

    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8070"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")

    # ==================== Storage Configuration ====================
    USE_MEMORY_STORE = os.getenv("USE_MEMORY_STORE", "true").lower() == "true"

    MONGO_USER = os.getenv("MONGO_USER", "")
    MONGO_PASS = os.getenv("MONGO_PASS", "")
    MONGO_HOST = os.getenv("MONGO_HOST", "localhost:27017")
    MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "mock_exam")
    MONGO_AUTH_SOURCE = os.getenv("MONGO_AUTH_SOURCE", "admin")

    @property
    def MONGO_CONNECTION_STRING(self) -> str:
        if not self.MONGO_USER:
            return f"mongodb://{self.MONGO_HOST}/{self.MONGO_DB_NAME}"
        return (
            f"mongodb://{quote_plus(self.MONGO_USER)}:"
            f"{quote_plus(self.MONGO_PASS)}@{self.MONGO_HOST}/"
            f"{self.MONGO_DB_NAME}?authSource={self.MONGO_AUTH_SOURCE}"
        )

    # Collections
    ATTEMPTS_COLLECTION = os.getenv("ATTEMPTS_COLLECTION", "exam_attempts")

    # ==================== Provider Configuration ====================
    # Checked in this precedence; first non-empty variable wins
    ANTHROPIC_API_KEY = first_env("ANTHROPIC_API_KEY", "VITE_ANTHROPIC_API_KEY")
    OPENROUTER_API_KEY = first_env("OPENROUTER_API_KEY", "VITE_OPENROUTER_API_KEY", "OPENAI_API_KEY")
    GROQ_API_KEY = first_env("GROQ_API_KEY")

    ANTHROPIC_BASE_URL = os.getenv("ANTHROPIC_BASE_URL", "https://api.anthropic.com")
    ANTHROPIC_VERSION = "2023-06-01"
    ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307")

    OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    OPENROUTER_REFERER = os.getenv("OPENROUTER_REFERER", "https://vly.ai")
    OPENROUTER_TITLE = os.getenv("OPENROUTER_TITLE", "GATE CS Domination")
    OPENROUTER_MODELS = [
        "anthropic/claude-3-haiku",
        "mistralai/mixtral-8x7b-instruct",
        "openai/gpt-4o-mini",
    ]

    GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")

    PROVIDER_TIMEOUT = int(os.getenv("PROVIDER_TIMEOUT", "60"))

    # ==================== Generation Configuration ====================
    GENERATION_TEMPERATURE = 0.6
    DEFAULT_MAX_TOKENS = 3500
    FULL_LENGTH_MAX_TOKENS = 8000
    FULL_LENGTH_THRESHOLD = 50

    DEFAULT_QUESTION_COUNT = 10
    MIN_QUESTIONS = 5
    MAX_QUESTIONS = 65

    DIFFICULTIES = ["easy", "medium", "hard", "mixed"]
    DEFAULT_DIFFICULTY = "mixed"

    DEFAULT_TOPICS = [
        "programming_and_dsa",
        "database_management",
        "operating_systems",
        "computer_networks",
        "computer_organization",
        "theory_of_computation",
        "compiler_design",
        "discrete_mathematics",
        "linear_algebra",
        "probability_statistics",
        "general_aptitude",
    ]
    FALLBACK_TOPIC = "general_aptitude"

    # ==================== Grading Configuration ====================
    NUMERIC_TOLERANCE = 0.01
    WEAK_TOPIC_LIMIT = 4
    RECENT_ATTEMPTS_LIMIT = 10

    # ==================== Environment Overrides ====================
    @classmethod
    def from_env(cls) -> 'Config':
        """Create config with environment variable overrides"""
        return cls()

    @property
    def configured_providers(self) -> List[str]:
        """Names of providers with credentials, in fallback order"""
        providers = []
        if self.ANTHROPIC_API_KEY:
            providers.append("anthropic")
        if self.OPENROUTER_API_KEY:
            providers.append("openrouter")
        if self.GROQ_API_KEY:
            providers.append("groq")
        return providers

    # ==================== Validation ====================
    def validate(self) -> Dict[str, Any]:
        """Validate configuration and return status"""
        issues = []

        if not (0 < self.MIN_QUESTIONS <= self.DEFAULT_QUESTION_COUNT <= self.MAX_QUESTIONS):
            issues.append("Question count bounds must satisfy 0 < MIN <= DEFAULT <= MAX")

        if self.PROVIDER_TIMEOUT < 1:
            issues.append("PROVIDER_TIMEOUT must be at least 1 second")

        if not self.USE_MEMORY_STORE and not self.MONGO_HOST:
            issues.append("MONGO_HOST is required when not using the memory store")

        return {
            "valid": len(issues) == 0,
            "issues": issues,
            "config_loaded": True,
            "using_memory_store": self.USE_MEMORY_STORE,
            "providers": self.configured_providers,
        }


# Global configuration instance
config = Config.from_env()

# Validate on import
validation_result = config.validate()
if not validation_result["valid"]:
    import logging
    logger = logging.getLogger(__name__)
    logger.warning(f"Configuration issues: {validation_result['issues']}")
