"""
Модель вопроса приложения переаттестации
Вопрос принадлежит тесту уровня и относится к общей части или к одной из веток
"""
from app import db
from app.models.branch import Branch
from datetime import datetime
from sqlalchemy import String, Integer, Float, Text, DateTime, ForeignKey
from sqlalchemy.orm import validates


class Question(db.Model):
    """
    Модель вопроса

    Attributes:
        id (int): Уникальный идентификатор вопроса
        test_id (int): ID теста-владельца
        question_text (str): Текст вопроса
        max_score (float): Максимальный балл за вопрос (по умолчанию 1.0)
        order_index (int): Порядковый номер вопроса внутри теста
        branch (str): Ветка вопроса ('general', 'karaoke', 'lit_club', 'kinoshka')
        created_at (datetime): Дата создания вопроса
        test (relationship): Связь с тестом
        comments (relationship): Комментарии к ответам на вопрос
    """

    __tablename__ = 'questions'

    # Основные поля
    id = db.Column(Integer, primary_key=True)
    test_id = db.Column(Integer, ForeignKey('tests.id', ondelete='CASCADE'), nullable=False)
    question_text = db.Column(Text, nullable=False)
    max_score = db.Column(Float, nullable=False, default=1.0)
    order_index = db.Column(Integer, nullable=False, default=1)
    branch = db.Column(String(20), nullable=False, default=Branch.GENERAL.value)
    created_at = db.Column(DateTime, default=datetime.utcnow)

    test = db.relationship('Test', back_populates='questions')
    comments = db.relationship('AnswerComment', back_populates='question', lazy=True,
                               passive_deletes=True)

    def __repr__(self):
        """
        Строковое представление объекта вопроса

        Returns:
            str: Строковое представление вопроса
        """
        return f'<Question {self.branch}#{self.order_index}: {self.question_text[:50]}...>'

    @validates('branch')
    def validate_branch(self, key, value):
        # Хранится строковое значение перечисления
        return Branch.parse(value).value

    @validates('max_score')
    def validate_max_score(self, key, value):
        value = float(value)
        if value < 0:
            raise ValueError('max_score must not be negative')
        return value

    @property
    def branch_enum(self):
        return Branch.parse(self.branch or Branch.GENERAL.value)

    @property
    def is_general(self):
        """
        Проверяет, является ли вопрос общим для всех веток

        Returns:
            bool: True для вопросов ветки 'general'
        """
        return self.branch_enum is Branch.GENERAL
