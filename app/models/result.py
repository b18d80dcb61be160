"""
Модели результатов переаттестации
Содержат итог прохождения теста и комментарии к неполным ответам
"""
from app import db
from datetime import datetime
from sqlalchemy import String, Integer, Float, Text, DateTime, ForeignKey, JSON


class TestResult(db.Model):
    """
    Модель результата теста

    Attributes:
        id (int): Уникальный идентификатор результата
        test_id (int): ID теста
        user_name (str): Имя участника
        access_code (str): Код доступа, введённый перед началом теста
        branch (str): Выбранная ветка
        answers (dict): Баллы по вопросам: {"<question_id>": score}
        earned_score (float): Набранные баллы
        max_possible_score (float): Максимально возможные баллы
        percentage_score (int): Процент (0-100, округлённый)
        started_at (datetime): Время начала теста
        completed_at (datetime): Время завершения теста
        test (relationship): Связь с тестом
        comments (relationship): Комментарии к ответам (удаляются вместе с результатом)
    """

    __tablename__ = 'test_results'

    # Основные поля
    id = db.Column(Integer, primary_key=True)
    test_id = db.Column(Integer, ForeignKey('tests.id'), nullable=False)
    user_name = db.Column(String(200), nullable=False)
    access_code = db.Column(String(64), nullable=False, index=True)
    branch = db.Column(String(20))
    answers = db.Column(JSON, nullable=False, default=dict)
    earned_score = db.Column(Float, nullable=False, default=0.0)
    max_possible_score = db.Column(Float, nullable=False, default=0.0)
    percentage_score = db.Column(Integer, nullable=False, default=0)
    started_at = db.Column(DateTime, default=datetime.utcnow)
    completed_at = db.Column(DateTime, default=datetime.utcnow)

    # Связи с другими моделями
    test = db.relationship('Test', back_populates='results')
    comments = db.relationship('AnswerComment', back_populates='test_result', lazy=True,
                               cascade='all, delete-orphan')

    def __repr__(self):
        """
        Строковое представление объекта результата теста

        Returns:
            str: Строковое представление результата теста
        """
        return (f'<TestResult code={self.access_code}, test_id={self.test_id}, '
                f'score={self.earned_score}/{self.max_possible_score}>')

    def score_for(self, question_id):
        """
        Балл за вопрос (0, если ответа нет)

        Args:
            question_id (int): ID вопроса

        Returns:
            float: Балл участника
        """
        answers = self.answers or {}
        return float(answers.get(str(question_id), 0) or 0)


class AnswerComment(db.Model):
    """
    Модель комментария к ответу

    Создаётся только для вопросов, за которые участник получил
    меньше максимального балла.

    Attributes:
        id (int): Уникальный идентификатор комментария
        question_id (int): ID вопроса
        test_result_id (int): ID результата теста
        comment (str): Текст комментария
        created_at (datetime): Дата создания
    """

    __tablename__ = 'answer_comments'

    id = db.Column(Integer, primary_key=True)
    question_id = db.Column(Integer, ForeignKey('questions.id', ondelete='SET NULL'))
    test_result_id = db.Column(Integer, ForeignKey('test_results.id', ondelete='CASCADE'))
    comment = db.Column(Text, nullable=False)
    created_at = db.Column(DateTime, default=datetime.utcnow)

    question = db.relationship('Question', back_populates='comments')
    test_result = db.relationship('TestResult', back_populates='comments')

    def __repr__(self):
        return f'<AnswerComment result={self.test_result_id} question={self.question_id}>'
