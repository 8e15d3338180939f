"""
Core module containing configuration, providers, generation, persistence, and utilities
"""

from .config import config
from .database import get_attempt_repository
from .ai_services import get_ai_service

__all__ = [
    "config",
    "get_attempt_repository",
    "get_ai_service"
]
