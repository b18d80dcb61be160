# app/utils/__init__.py
"""
Инициализация вспомогательных утилит
Объединение всех утилит в одном месте
"""
from .errors import AttestationError, ValidationError, RemoteError
from .access_gate import validate_access_code, normalize_access_code
from .scoring import score_options, is_valid_score, calculate_percentage, summarize, result_status
from .test_runner import TestRun, select_presented_questions

__all__ = [
    'AttestationError', 'ValidationError', 'RemoteError',
    'validate_access_code', 'normalize_access_code',
    'score_options', 'is_valid_score', 'calculate_percentage', 'summarize', 'result_status',
    'TestRun', 'select_presented_questions',
]
