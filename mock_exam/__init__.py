# mock_exam/__init__.py
"""
Mock Exam Module
GATE-style mock exam generation with provider fallback, plus attempt grading
"""

__version__ = "1.0.0"
__description__ = "Mock exam generation and grading service"

# Core module exports
from .core.config import config
from .main import app

__all__ = ["app", "config"]
