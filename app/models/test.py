"""
Модель теста приложения переаттестации
Один тест на каждый уровень переаттестации
"""
from app import db
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, CheckConstraint
from flask_babel import gettext


class Test(db.Model):
    """
    Модель теста

    Attributes:
        id (int): Уникальный идентификатор теста
        name (str): Название теста
        level (int): Уровень переаттестации (уникальный, положительный)
        created_at (datetime): Дата создания теста
        updated_at (datetime): Дата последнего изменения
        questions (relationship): Вопросы теста
        results (relationship): Результаты прохождения теста
    """

    __tablename__ = 'tests'
    __table_args__ = (
        CheckConstraint('level > 0', name='ck_tests_level_positive'),
    )

    # Основные поля
    id = db.Column(Integer, primary_key=True)
    name = db.Column(String(200), nullable=False)
    level = db.Column(Integer, unique=True, nullable=False)
    created_at = db.Column(DateTime, default=datetime.utcnow)
    updated_at = db.Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Связи с другими моделями
    questions = db.relationship('Question', back_populates='test', lazy=True,
                                order_by='Question.order_index', cascade='all, delete-orphan')
    results = db.relationship('TestResult', back_populates='test', lazy=True)

    def __repr__(self):
        """
        Строковое представление объекта теста

        Returns:
            str: Строковое представление теста
        """
        return f'<Test {self.level}: {self.name}>'

    @property
    def question_count(self):
        """
        Количество вопросов в тесте

        Returns:
            int: Количество вопросов
        """
        return len(self.questions)

    @staticmethod
    def default_name(level):
        return gettext('Тест уровня %(level)s', level=level)
