"""
Инициализация моделей данных приложения
Объединение всех моделей в одном месте
"""
from .branch import Branch
from .user import SiteUser
from .member import Member
from .test import Test
from .question import Question
from .result import TestResult, AnswerComment

__all__ = ['Branch', 'SiteUser', 'Member', 'Test', 'Question', 'TestResult', 'AnswerComment']
