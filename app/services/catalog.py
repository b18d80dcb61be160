"""
Каталог тестов и вопросов
Тест создаётся по запросу для уровня, вопросы редактируются независимо
"""
import logging
from collections import OrderedDict

from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models.branch import Branch
from app.models.question import Question
from app.models.test import Test
from app.utils.errors import RemoteError, ValidationError

logger = logging.getLogger(__name__)


def get_test_by_level(level):
    return Test.query.filter_by(level=level).first()


def get_or_create_test(level):
    """
    Тест уровня; создаётся, если его ещё нет

    Args:
        level (int): Уровень переаттестации

    Returns:
        Test: Существующий или созданный тест

    Raises:
        ValidationError: уровень не положительный
        RemoteError: ошибка записи в базу
    """
    level = int(level)
    if level <= 0:
        raise ValidationError(_('Уровень должен быть положительным числом'), field='level')

    test = get_test_by_level(level)
    if test is not None:
        return test

    test = Test(name=Test.default_name(level), level=level)
    try:
        db.session.add(test)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error creating test for level %s", level)
        raise RemoteError(_('Не удалось создать тест')) from e
    logger.info("Created test %s for level %s", test.id, level)
    return test


def get_questions(test):
    """Все вопросы теста по возрастанию order_index"""
    return (Question.query
            .filter_by(test_id=test.id)
            .order_by(Question.order_index, Question.id)
            .all())


def group_questions_by_branch(questions):
    """
    Группировка вопросов по веткам

    Returns:
        OrderedDict: {Branch: [Question, ...]}; общие вопросы первыми
    """
    groups = OrderedDict((branch, []) for branch in Branch)
    for question in questions:
        groups[question.branch_enum].append(question)
    return OrderedDict((branch, items) for branch, items in groups.items() if items)


def parse_question_form(form):
    """
    Разбор и проверка полей формы вопроса

    Args:
        form (Mapping): Данные формы (request.form)

    Returns:
        dict: question_text, branch, max_score, order_index

    Raises:
        ValidationError: если поле заполнено неверно
    """
    question_text = (form.get('question_text') or '').strip()
    if not question_text:
        raise ValidationError(_('Введите текст вопроса'), field='question_text')

    try:
        branch = Branch.parse(form.get('branch') or Branch.GENERAL.value)
    except ValueError:
        raise ValidationError(_('Неизвестная ветка'), field='branch')

    raw_max_score = (form.get('max_score') or '').strip().replace(',', '.')
    try:
        max_score = float(raw_max_score) if raw_max_score else 1.0
    except ValueError:
        raise ValidationError(_('Максимальный балл должен быть числом'), field='max_score')
    if max_score < 0:
        raise ValidationError(_('Максимальный балл не может быть отрицательным'), field='max_score')

    raw_order = (form.get('order_index') or '').strip()
    try:
        order_index = int(raw_order) if raw_order else 1
    except ValueError:
        raise ValidationError(_('Порядковый номер должен быть целым числом'), field='order_index')
    if order_index < 1:
        raise ValidationError(_('Порядковый номер должен быть не меньше 1'), field='order_index')

    return {
        'question_text': question_text,
        'branch': branch.value,
        'max_score': max_score,
        'order_index': order_index,
    }


def create_question(test, data):
    question = Question(test_id=test.id, **data)
    try:
        db.session.add(question)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error creating question for test %s", test.id)
        raise RemoteError(_('Не удалось сохранить вопрос')) from e
    return question


def update_question(question, data):
    try:
        for field, value in data.items():
            setattr(question, field, value)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error updating question %s", question.id)
        raise RemoteError(_('Не удалось сохранить вопрос')) from e
    return question


def delete_question(question):
    """Удаление вопроса; комментарии к нему остаются без ссылки на вопрос"""
    try:
        db.session.delete(question)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error deleting question %s", question.id)
        raise RemoteError(_('Не удалось удалить вопрос')) from e
